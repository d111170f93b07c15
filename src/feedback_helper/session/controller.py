"""
Module: session.controller

Purpose:
    The session a user works in: holds at most one open assignment,
    forwards user intents to it, saves after every change on the
    background worker and relays every event to subscribed listeners.

Key Classes:
    - Session: Entry point for hosts (GUI, scripts, tests)

Dependencies:
    - assignment: Aggregate and event channel
    - persistence: Save queue, snapshot loading, export
    - config.settings.SettingsStore: Last opened assignment, default
      style, backup interval

Example:
    >>> with Session() as session:
    ...     session.create_assignment("CS2101-P2", "Code\\nOverall", None, Path("marking"))
    ...     session.add_student("Janey")
    ...     session.update_section("Janey", "Code", "- Nicely structured.")
    ...     session.export()
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, Optional, Tuple, Union

from feedback_helper.assignment import Assignment, AssignmentListener, EventBus
from feedback_helper.config.settings import SettingsStore
from feedback_helper.core.errors import AssignmentAlreadyOpen, NoAssignmentOpen
from feedback_helper.core.models import FeedbackStyle, StudentId
from feedback_helper.persistence.export import (
    GRADE_DISTRIBUTION_FILE,
    export_all,
    export_directory,
    write_grade_distribution,
)
from feedback_helper.persistence.save_queue import DEFAULT_BACKUP_INTERVAL, SaveHandle, SaveQueue
from feedback_helper.persistence.snapshot import load_snapshot, snapshot_path

logger = logging.getLogger(__name__)

StudentKey = Union[StudentId, str]


class Session:
    """
    Single-assignment editing session.

    Mutations are expected from one thread; only snapshot writing runs
    in the background.

    Attributes:
        settings: Preferences store, or None to run without one
        events: Event channel shared with the open assignment
    """

    def __init__(
        self,
        settings: Optional[SettingsStore] = None,
        backup_interval: Optional[float] = None,
    ):
        """
        Initialize session.

        Args:
            settings: Preferences store
            backup_interval: Seconds between timed backups; defaults to the
                stored preference (15 minutes if there is none)
        """
        self.settings = settings
        if backup_interval is None:
            backup_interval = (
                settings.get_backup_interval_minutes() * 60.0
                if settings is not None
                else DEFAULT_BACKUP_INTERVAL
            )
        self.events = EventBus()
        self._saves = SaveQueue(backup_interval)
        self._assignment: Optional[Assignment] = None

    # ─────────────────────────────────────────────────────────────────────────
    # Listeners
    # ─────────────────────────────────────────────────────────────────────────

    def subscribe(self, listener: AssignmentListener) -> None:
        self.events.subscribe(listener)

    def unsubscribe(self, listener: AssignmentListener) -> None:
        self.events.unsubscribe(listener)

    # ─────────────────────────────────────────────────────────────────────────
    # Opening
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def has_assignment(self) -> bool:
        return self._assignment is not None

    @property
    def assignment(self) -> Assignment:
        """
        The open assignment.

        Raises:
            NoAssignmentOpen: If nothing has been created or loaded
        """
        if self._assignment is None:
            raise NoAssignmentOpen("No assignment is open")
        return self._assignment

    def _check_can_open(self) -> None:
        if self._assignment is not None:
            raise AssignmentAlreadyOpen(
                f"Assignment {self._assignment.title!r} is already open"
            )

    def _remember(self, path: Path) -> None:
        if self.settings is not None:
            self.settings.set_last_opened_assignment(path)

    def create_assignment(
        self,
        title: str,
        headings_text: str,
        student_list: Optional[Path],
        directory: Path,
        style: Optional[FeedbackStyle] = None,
    ) -> Assignment:
        """
        Create a new assignment, then save it.

        Args:
            title: Assignment title
            headings_text: Newline-separated headings
            student_list: Student list file (may be None or missing)
            directory: Assignment directory, created if absent
            style: Export style; defaults to the stored default style

        Raises:
            AssignmentAlreadyOpen: If an assignment is already open
            NotADirectory: If `directory` exists and is not a directory
            IOFailure: If `directory` cannot be created
        """
        self._check_can_open()
        if style is None and self.settings is not None:
            style = self.settings.get_default_style()

        assignment = Assignment.create(
            title, headings_text, student_list, directory, style=style, events=self.events
        )
        self._assignment = assignment
        self._saves.clear_backup_timer()
        self._remember(snapshot_path(assignment))
        self.save()
        return assignment

    def load_assignment(self, path: Path) -> Assignment:
        """
        Open a saved assignment.

        Raises:
            AssignmentAlreadyOpen: If an assignment is already open
            LoadFailure: If the snapshot cannot be read
        """
        self._check_can_open()
        assignment = load_snapshot(Path(path), self.events)
        self._assignment = assignment
        self._saves.reset_backup_timer()
        self._remember(snapshot_path(assignment))
        self.events.info(f"Loaded {assignment.title} from {path}")
        return assignment

    def reopen_last_assignment(self) -> Optional[Assignment]:
        """Load the last created or loaded assignment, if it still exists."""
        if self.settings is None:
            return None
        path = self.settings.get_last_opened_assignment()
        if path is None or not path.is_file():
            logger.debug(f"No assignment to reopen (last opened: {path})")
            return None
        return self.load_assignment(path)

    # ─────────────────────────────────────────────────────────────────────────
    # Editing (each change is saved in the background)
    # ─────────────────────────────────────────────────────────────────────────

    def update_section(self, student_id: StudentKey, heading: str, text: str) -> None:
        self.assignment.update_section(student_id, heading, text)
        self.save()

    def update_feedback(self, student_id: StudentKey, sections: Mapping[str, str]) -> None:
        self.assignment.update_feedback(student_id, sections)
        self.save()

    def update_grade(self, student_id: StudentKey, grade: float) -> None:
        self.assignment.update_grade(student_id, grade)
        self.save()

    def add_student(self, raw_id: StudentKey) -> StudentId:
        student_id = self.assignment.add_student(raw_id)
        self.save()
        return student_id

    def rename_heading(self, old: str, new: str) -> None:
        self.assignment.rename_heading(old, new)
        self.save()

    def add_custom_phrase(self, heading: str, text: str) -> bool:
        added = self.assignment.add_custom_phrase(heading, text)
        if added:
            self.save()
        return added

    def delete_custom_phrase(self, heading: str, text: str) -> bool:
        deleted = self.assignment.delete_custom_phrase(heading, text)
        if deleted:
            self.save()
        return deleted

    def reorder_custom_phrase(self, heading: str, text: str, delta: int) -> Tuple[int, int]:
        positions = self.assignment.reorder_custom_phrase(heading, text, delta)
        self.save()
        return positions

    # ─────────────────────────────────────────────────────────────────────────
    # Saving and export
    # ─────────────────────────────────────────────────────────────────────────

    def save(self) -> SaveHandle:
        """Queue a background save of the open assignment."""
        return self._saves.save(self.assignment)

    def wait_for_saves(self, timeout: Optional[float] = None) -> int:
        """Block until queued saves finish; returns how many succeeded."""
        return self._saves.wait_all(timeout)

    def export(self) -> Path:
        """
        Export every student's feedback and `grades.csv`.

        Raises:
            IOFailure: If the export cannot be written
        """
        return export_all(self.assignment)

    def export_grade_distribution(self) -> Path:
        """Write `grade-distribution.csv` into the export directory."""
        assignment = self.assignment
        return write_grade_distribution(
            assignment, export_directory(assignment) / GRADE_DISTRIBUTION_FILE
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────────────────

    def close(self) -> None:
        """Finish pending saves and stop the save worker."""
        self._saves.shutdown()
        logger.debug("Session closed")

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, *args) -> None:
        self.close()
