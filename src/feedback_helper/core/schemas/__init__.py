"""
Schemas Package

JSON schema definitions and validation for assignment snapshots.
"""

from .validator import (
    validate_snapshot,
    SnapshotValidationError,
    SNAPSHOT_FORMAT,
    SNAPSHOT_SCHEMA_VERSION,
)

__all__ = [
    "validate_snapshot",
    "SnapshotValidationError",
    "SNAPSHOT_FORMAT",
    "SNAPSHOT_SCHEMA_VERSION",
]
