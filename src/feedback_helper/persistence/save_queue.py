"""
Module: persistence.save_queue

Purpose:
    Background snapshot saving. The snapshot is encoded on the caller's
    thread, then written by a single worker thread so saves land on disk
    in the order they were requested while editing carries on.

Key Classes:
    - SaveHandle: Awaitable result of one save
    - SaveQueue: Single-worker thread pool that writes snapshots and
      timed backups

Dependencies:
    - concurrent.futures: Thread pool execution
    - persistence.snapshot: Atomic snapshot and backup writes

Used By:
    - session.controller.Session
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional

from feedback_helper.assignment import Assignment
from feedback_helper.core.errors import IOFailure
from feedback_helper.core.utils.serialization import encode_snapshot

from .snapshot import snapshot_path, write_backup, write_snapshot

logger = logging.getLogger(__name__)

DEFAULT_BACKUP_INTERVAL = 15 * 60.0


class SaveHandle:
    """
    Handle on one queued save.

    Attributes:
        path: Snapshot file being written

    Example:
        >>> handle = queue.save(assignment)
        >>> handle.wait()
        PosixPath('/marking/CS2101-P2.fht')
    """

    def __init__(self, future: Future, path: Path):
        self._future = future
        self.path = path

    def wait(self, timeout: Optional[float] = None) -> Path:
        """
        Block until the save finishes.

        Returns:
            Path of the written snapshot

        Raises:
            IOFailure: If the save failed
            TimeoutError: If `timeout` seconds pass first
        """
        return self._future.result(timeout=timeout)

    def done(self) -> bool:
        return self._future.done()

    def exception(self, timeout: Optional[float] = None) -> Optional[BaseException]:
        return self._future.exception(timeout=timeout)

    def __repr__(self) -> str:
        state = "done" if self.done() else "pending"
        return f"SaveHandle({self.path.name}, {state})"


class SaveQueue:
    """
    Single-worker save queue.

    Usage:
        with SaveQueue() as queue:
            queue.save(assignment)
            ...
            queue.wait_all()

    Attributes:
        backup_interval: Seconds between timed backups; None or a
            non-positive value disables backups.
    """

    def __init__(self, backup_interval: Optional[float] = DEFAULT_BACKUP_INTERVAL):
        """
        Initialize save queue.

        Args:
            backup_interval: Seconds between backups (default 15 minutes)
        """
        self.backup_interval = backup_interval
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="feedback-save")
        self._futures: List[Future] = []
        self._succeeded = 0
        self._last_backup: Optional[float] = None

    @property
    def backups_enabled(self) -> bool:
        return bool(self.backup_interval and self.backup_interval > 0)

    def reset_backup_timer(self) -> None:
        """Start the backup interval now (used when an assignment is loaded)."""
        self._last_backup = time.monotonic()

    def clear_backup_timer(self) -> None:
        """Make the next successful save also write a backup."""
        self._last_backup = None

    def save(self, assignment: Assignment) -> SaveHandle:
        """
        Queue a save of the assignment's current state.

        The snapshot is captured before this returns, so later edits
        are never part of this save. Emits `save_worker(handle)`; the
        worker later emits `info("Saved to ...")` or `error(...)`.

        Raises:
            IOFailure: If the assignment has no directory
        """
        raw = encode_snapshot(assignment)
        path = snapshot_path(assignment)
        assignment.dirty = False

        self._prune()
        future = self._executor.submit(self._write, raw, path, assignment)
        self._futures.append(future)
        handle = SaveHandle(future, path)
        assignment.events.emit("save_worker", handle)
        return handle

    def _backup_due(self) -> bool:
        if not self.backups_enabled:
            return False
        if self._last_backup is None:
            return True
        return time.monotonic() - self._last_backup >= self.backup_interval

    def _prune(self) -> None:
        """Drop finished saves, keeping their outcome for `wait_all`."""
        pending = []
        for future in self._futures:
            if not future.done():
                pending.append(future)
            elif future.exception() is None:
                self._succeeded += 1
            else:
                logger.error(f"Save failed: {future.exception()}")
        self._futures = pending

    def _write(self, raw: bytes, path: Path, assignment: Assignment) -> Path:
        """Runs on the worker thread."""
        events = assignment.events
        try:
            write_snapshot(raw, path)
        except IOFailure as e:
            # Nothing reached disk, so the assignment still has unsaved changes.
            assignment.dirty = True
            events.error(f"Could not save to {path}", e)
            raise

        if self._backup_due():
            try:
                write_backup(raw, path.parent, assignment.file_safe_title)
                self._last_backup = time.monotonic()
            except IOFailure as e:
                events.error("Could not write backup", e)

        events.info(f"Saved to {path}")
        return path

    def wait_all(self, timeout: Optional[float] = None) -> int:
        """
        Wait for all queued saves to complete.

        Counts every save made since the previous call, including those
        that finished earlier.

        Args:
            timeout: Max seconds to wait per save (None = indefinite).

        Returns:
            Number of successful saves.
        """
        completed, self._succeeded = self._succeeded, 0
        futures, self._futures = self._futures, []
        for future in futures:
            try:
                future.result(timeout=timeout)
                completed += 1
            except Exception as e:
                logger.error(f"Save failed: {e}")
        return completed

    def shutdown(self) -> None:
        """Finish pending saves and stop the worker."""
        self.wait_all()
        self._executor.shutdown(wait=True)

    def __enter__(self) -> "SaveQueue":
        return self

    def __exit__(self, *args) -> None:
        self.shutdown()
