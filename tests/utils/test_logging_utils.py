"""
Unit Tests for Logging Utilities
"""

import logging
from queue import Queue

from feedback_helper.assignment import EventBus
from feedback_helper.utils.logging_utils import (
    QueueLogHandler,
    attach_queue_handler,
    configure_logging,
    detach_queue_handler,
)


class TestQueueLogHandler:
    """Tests for queue log capture."""
    
    def test_attach_when_info_logged_then_message_queued(self):
        log_queue = Queue()
        handler = attach_queue_handler(log_queue, "feedback_helper")
        logger = logging.getLogger("feedback_helper")
        previous = logger.level
        logger.setLevel(logging.INFO)
        try:
            EventBus().info("Saved to /tmp/x.fht")
        finally:
            detach_queue_handler(handler, "feedback_helper")
            logger.setLevel(previous)
        
        assert log_queue.get_nowait() == ("Saved to /tmp/x.fht", "INFO")
    
    def test_emit_when_debug_record_then_mapped_to_info(self):
        log_queue = Queue()
        handler = QueueLogHandler(log_queue, level=logging.DEBUG)
        record = logging.LogRecord("x", logging.DEBUG, __file__, 1, "detail", None, None)
        
        handler.emit(record)
        
        assert log_queue.get_nowait() == ("detail", "INFO")
    
    def test_detach_when_removed_then_nothing_queued(self):
        log_queue = Queue()
        handler = attach_queue_handler(log_queue, "feedback_helper.test")
        detach_queue_handler(handler, "feedback_helper.test")
        
        logging.getLogger("feedback_helper.test").warning("ignored")
        
        assert log_queue.empty()


class TestConfigureLogging:
    """Tests for configure_logging."""
    
    def test_configure_when_called_twice_then_no_duplicate_handlers(self, tmp_path):
        root = logging.getLogger()
        before = list(root.handlers)
        level = root.level
        try:
            configure_logging(logging.DEBUG)
            configure_logging(logging.INFO, log_file=tmp_path / "logs" / "app.log")
            
            added = [h for h in root.handlers if h not in before]
            assert len(added) == 2
            assert root.level == logging.INFO
            
            logging.getLogger("feedback_helper.test").info("written to file")
            for handler in added:
                handler.flush()
            assert "written to file" in (tmp_path / "logs" / "app.log").read_text(encoding="utf-8")
        finally:
            for handler in root.handlers[:]:
                if handler not in before:
                    root.removeHandler(handler)
                    handler.close()
            root.setLevel(level)
