"""
Module: persistence.snapshot

Purpose:
    Reading and writing assignment snapshots (`<slug>.fht`) and their
    timed backups.

Key Functions:
    - snapshot_path: Where an assignment's snapshot lives
    - write_snapshot: Atomically replace a snapshot with new bytes
    - load_snapshot: Rebuild an Assignment from a snapshot file
    - write_backup: Copy snapshot bytes into the backups directory

Dependencies:
    - core.utils.serialization: Snapshot encoding
    - persistence.file_locking: Sidecar lock around reads and writes

Used By:
    - persistence.save_queue: Background saves
    - session.controller: Loading
"""

from __future__ import annotations

import logging
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Optional

from feedback_helper.assignment import Assignment, EventBus
from feedback_helper.core.errors import FeedbackHelperError, IOFailure, LoadFailure
from feedback_helper.core.utils.serialization import decode_snapshot

from .file_locking import snapshot_lock

logger = logging.getLogger(__name__)

SNAPSHOT_SUFFIX = ".fht"
BACKUP_DIRECTORY = "backups"


def snapshot_path(assignment: Assignment) -> Path:
    """`<directory>/<slug>.fht` for the assignment."""
    if assignment.directory is None:
        raise IOFailure(f"Assignment {assignment.title!r} has no directory")
    return assignment.directory / f"{assignment.file_safe_title}{SNAPSHOT_SUFFIX}"


def _atomic_write(raw: bytes, path: Path) -> None:
    """Write bytes to a temporary file beside `path`, then replace it."""
    with tempfile.NamedTemporaryFile(
        mode="wb",
        suffix=".tmp",
        prefix=f".{path.stem}-",
        dir=path.parent,
        delete=False,
    ) as f:
        f.write(raw)
        temp_path = Path(f.name)
    try:
        temp_path.replace(path)
    except OSError:
        temp_path.unlink(missing_ok=True)
        raise


def write_snapshot(raw: bytes, path: Path) -> Path:
    """
    Replace the snapshot at `path` with `raw`.

    Holds the exclusive snapshot lock while writing. Readers never see
    a partially written file.

    Raises:
        IOFailure: If the snapshot cannot be written
    """
    try:
        with snapshot_lock(path, exclusive=True):
            _atomic_write(raw, path)
    except OSError as e:
        raise IOFailure(f"Could not save to {path}: {e}") from e
    logger.debug(f"Wrote {len(raw)} bytes to {path}")
    return path


def load_snapshot(path: Path, events: Optional[EventBus] = None) -> Assignment:
    """
    Load an assignment from a snapshot file.

    The assignment's directory becomes the snapshot's parent directory
    and its phrase counts are recomputed from the loaded documents.

    Args:
        path: Snapshot file
        events: Event channel for the loaded assignment

    Raises:
        LoadFailure: If the file cannot be read or is not a valid snapshot
    """
    path = Path(path).resolve()
    # The sidecar lock is only taken for a file that exists, so a failed
    # load leaves nothing behind.
    if not path.is_file():
        raise LoadFailure(f"Could not load {path}: no such snapshot file")
    try:
        with snapshot_lock(path, exclusive=False):
            raw = path.read_bytes()
        assignment = decode_snapshot(raw, directory=path.parent, events=events)
    except (OSError, FeedbackHelperError, ValueError) as e:
        raise LoadFailure(f"Could not load {path}: {e}") from e
    logger.info(
        f"Loaded assignment {assignment.title!r} from {path} "
        f"({len(assignment.student_ids)} students)"
    )
    return assignment


def backup_path(directory: Path, slug: str, when: Optional[datetime] = None) -> Path:
    """`<directory>/backups/<slug>-backup-<YYYY-MM-DDTHH-MM-SS>.fht`."""
    stamp = (when or datetime.now()).strftime("%Y-%m-%dT%H-%M-%S")
    return directory / BACKUP_DIRECTORY / f"{slug}-backup-{stamp}{SNAPSHOT_SUFFIX}"


def write_backup(raw: bytes, directory: Path, slug: str, when: Optional[datetime] = None) -> Path:
    """
    Write snapshot bytes as a timestamped backup.

    Raises:
        IOFailure: If the backup cannot be written
    """
    path = backup_path(directory, slug, when)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        _atomic_write(raw, path)
    except OSError as e:
        raise IOFailure(f"Could not write backup {path}: {e}") from e
    logger.info(f"Backed up to {path}")
    return path
