"""
Unit Tests for the Event Channel

Tests for EventBus delivery order, failure isolation and subscriptions.
"""

import logging

from feedback_helper.assignment import AssignmentListener, EventBus


class OrderListener(AssignmentListener):
    def __init__(self, name, calls):
        self.name = name
        self.calls = calls

    def handle_info(self, message):
        self.calls.append((self.name, message))


class FailingListener(AssignmentListener):
    def handle_info(self, message):
        raise RuntimeError("listener broke")


class TestEventBus:
    """Tests for EventBus."""
    
    def test_emit_when_several_listeners_then_registration_order(self):
        calls = []
        bus = EventBus()
        bus.subscribe(OrderListener("first", calls))
        bus.subscribe(OrderListener("second", calls))
        
        bus.emit("info", "hello")
        
        assert calls == [("first", "hello"), ("second", "hello")]
    
    def test_emit_when_listener_raises_then_later_listeners_still_called(self, caplog):
        calls = []
        bus = EventBus()
        bus.subscribe(FailingListener())
        bus.subscribe(OrderListener("after", calls))
        
        with caplog.at_level(logging.ERROR):
            bus.emit("info", "hello")
        
        assert calls == [("after", "hello")]
        assert "failed handling info" in caplog.text
    
    def test_emit_when_handler_not_overridden_then_ignored(self):
        bus = EventBus()
        bus.subscribe(AssignmentListener())
        
        bus.emit("grade_update", "Janey", 15.5)
    
    def test_unsubscribe_when_removed_then_not_called(self, listener):
        bus = EventBus()
        bus.subscribe(listener)
        bus.unsubscribe(listener)
        
        bus.emit("info", "hello")
        
        assert listener.events == []
        assert bus.listener_count == 0
    
    def test_info_when_called_then_logged_and_emitted(self, listener, caplog):
        bus = EventBus()
        bus.subscribe(listener)
        
        with caplog.at_level(logging.INFO):
            bus.info("Saved to somewhere")
        
        assert listener.events == [("info", ("Saved to somewhere",))]
        assert "Saved to somewhere" in caplog.text
    
    def test_error_when_called_then_cause_passed_through(self, listener):
        bus = EventBus()
        bus.subscribe(listener)
        cause = OSError("disk full")
        
        bus.error("Could not save", cause)
        
        assert listener.events == [("error", ("Could not save", cause))]
