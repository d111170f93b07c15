"""
Module: assignment.events

Purpose:
    The event channel between the assignment (and its persistence) and
    whatever presents it. Listeners subclass AssignmentListener and
    override the handlers they care about; EventBus delivers each event
    synchronously to every subscriber in registration order.

Key Classes:
    - AssignmentListener: Callback interface with no-op defaults
    - EventBus: Ordered subscriber list with thread-safe fan-out

Used By:
    - assignment.aggregate.Assignment
    - assignment.phrase_index / assignment.custom_phrases
    - persistence.save_queue (save completion on the worker thread)
    - session.controller.Session
"""

from __future__ import annotations

import logging
from pathlib import Path
from threading import Lock
from typing import TYPE_CHECKING, Any, List, Optional

if TYPE_CHECKING:
    from feedback_helper.core.models import Phrase, StudentId
    from feedback_helper.persistence.save_queue import SaveHandle

logger = logging.getLogger(__name__)


class AssignmentListener:
    """
    Receives notifications about changes to an assignment.
    
    Every handler defaults to doing nothing. Handlers are called on the
    thread that made the change, except the info/error reports of a
    background save, which arrive on the save worker thread.
    """
    
    def handle_headings_updated(self, headings: List[str]) -> None:
        pass
    
    def handle_new_student(self, student_id: StudentId) -> None:
        pass
    
    def handle_grade_update(self, student_id: StudentId, grade: float) -> None:
        pass
    
    def handle_phrase_added(self, heading: str, phrase: Phrase) -> None:
        pass
    
    def handle_phrase_deleted(self, heading: str, phrase: Phrase) -> None:
        pass
    
    def handle_phrase_counter_updated(self, heading: str, phrase: Phrase) -> None:
        pass
    
    def handle_custom_phrase_added(self, heading: str, phrase: str) -> None:
        pass
    
    def handle_custom_phrase_deleted(self, heading: str, phrase: str) -> None:
        pass
    
    def handle_custom_phrase_reordered(self, heading: str, old_position: int, new_position: int) -> None:
        pass
    
    def handle_exported(self, output_directory: Path) -> None:
        pass
    
    def handle_save_worker(self, handle: SaveHandle) -> None:
        pass
    
    def handle_info(self, message: str) -> None:
        pass
    
    def handle_error(self, description: str, cause: Optional[BaseException]) -> None:
        pass


class EventBus:
    """
    Fan-out of assignment events to subscribed listeners.
    
    Subscription changes and deliveries may come from different threads
    (a save finishing while the user edits), so the subscriber list is
    copied under a lock before each delivery.
    
    Example:
        >>> bus = EventBus()
        >>> bus.subscribe(my_listener)
        >>> bus.emit("grade_update", student_id, 15.5)
        # calls my_listener.handle_grade_update(student_id, 15.5)
    """
    
    def __init__(self) -> None:
        self._listeners: List[AssignmentListener] = []
        self._lock = Lock()
    
    def subscribe(self, listener: AssignmentListener) -> None:
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)
    
    def unsubscribe(self, listener: AssignmentListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)
    
    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)
    
    def emit(self, event: str, *args: Any) -> None:
        """
        Deliver one event to every listener.
        
        A listener that raises is logged and skipped; delivery continues
        with the next listener.
        
        Args:
            event: Event name without the "handle_" prefix
            *args: Handler arguments
        """
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            handler = getattr(listener, f"handle_{event}")
            try:
                handler(*args)
            except Exception:
                logger.exception(f"Listener {listener!r} failed handling {event}")
    
    def info(self, message: str) -> None:
        """Log and broadcast an informational message."""
        logger.info(message)
        self.emit("info", message)
    
    def error(self, description: str, cause: Optional[BaseException] = None) -> None:
        """Log and broadcast an error report."""
        logger.error(description, exc_info=cause)
        self.emit("error", description, cause)
