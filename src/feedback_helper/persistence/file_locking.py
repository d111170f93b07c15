"""
Module: persistence.file_locking

Purpose:
    Cross-platform file locking so that a snapshot is never read while it
    is being replaced. Uses portalocker for Mac, Windows, and Linux
    compatibility.

Key Functions:
    - locked_file: Context manager for locked file access
    - snapshot_lock: Hold the lock guarding a snapshot file

Dependencies:
    - portalocker: Cross-platform file locking

Used By:
    - persistence.snapshot: Snapshot writes (exclusive) and loads (shared)
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, IO

import portalocker

logger = logging.getLogger(__name__)


@contextmanager
def locked_file(
    path: Path,
    mode: str = 'r',
    lock_type: int = portalocker.LOCK_EX,
) -> Generator[IO, None, None]:
    """
    Context manager for cross-platform locked file access.
    
    Args:
        path: Path to file.
        mode: File open mode ('r', 'w', 'a', etc.).
        lock_type: Lock type (LOCK_EX for exclusive, LOCK_SH for shared).
        
    Yields:
        Open file handle with lock held.
        
    Example:
        >>> with locked_file(path, 'a') as f:
        ...     f.write('data')
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    
    # Ensure file exists for read modes
    if 'r' in mode and not path.exists():
        path.touch()
    
    with open(path, mode, encoding='utf-8') as f:
        portalocker.lock(f, lock_type)
        try:
            yield f
        finally:
            portalocker.unlock(f)


def lock_path_for(snapshot_path: Path) -> Path:
    """Sidecar lock file for a snapshot: `<name>.fht` -> `<name>.fht.lock`."""
    return snapshot_path.with_name(snapshot_path.name + ".lock")


@contextmanager
def snapshot_lock(snapshot_path: Path, *, exclusive: bool = True) -> Generator[Path, None, None]:
    """
    Hold the sidecar lock for a snapshot file.
    
    The snapshot itself is replaced atomically while writing, so the lock
    lives on a separate file that is never replaced.
    
    Args:
        snapshot_path: Snapshot being written or read
        exclusive: True for writers, False for readers (shared lock)
        
    Yields:
        Path of the lock file
    """
    lock_path = lock_path_for(snapshot_path)
    lock_type = portalocker.LOCK_EX if exclusive else portalocker.LOCK_SH
    with locked_file(lock_path, 'a', lock_type):
        logger.debug(f"Locked {lock_path.name} ({'exclusive' if exclusive else 'shared'})")
        yield lock_path
