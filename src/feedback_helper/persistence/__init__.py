"""
Persistence Package

Snapshot files, background saving, timed backups and plain-text export.
"""

from .export import export_all, export_directory, write_grade_distribution, write_grades
from .save_queue import SaveHandle, SaveQueue
from .snapshot import load_snapshot, snapshot_path, write_backup, write_snapshot

__all__ = [
    "SaveHandle",
    "SaveQueue",
    "export_all",
    "export_directory",
    "load_snapshot",
    "snapshot_path",
    "write_backup",
    "write_grade_distribution",
    "write_grades",
    "write_snapshot",
]
