"""
Serialization Utilities

Converts an Assignment to and from its snapshot form.

The snapshot is a versioned JSON object holding everything the user
edits: title, headings, export style, every document (sections and
grade) and the custom phrase lists. Phrase usage counts are derived
data and are never written; they are rebuilt when the assignment is
constructed from a snapshot.

Encoding happens entirely on the caller's thread, so a snapshot handed
to a background writer can never observe later edits.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from feedback_helper.assignment import Assignment, EventBus

from ..models import FeedbackDocument, FeedbackStyle
from ..schemas.validator import (
    SNAPSHOT_FORMAT,
    SNAPSHOT_SCHEMA_VERSION,
    SnapshotValidationError,
    validate_snapshot,
)


# ─────────────────────────────────────────────────────────────────────────────
# Dictionary Form
# ─────────────────────────────────────────────────────────────────────────────

def serialize_assignment(assignment: Assignment) -> dict[str, Any]:
    """
    Serialize an Assignment to a dictionary.
    
    Documents are listed in student id order. The output passes
    `validate_snapshot`.
    """
    return {
        "format": SNAPSHOT_FORMAT,
        "schema_version": SNAPSHOT_SCHEMA_VERSION,
        "title": assignment.title,
        "headings": assignment.headings,
        "style": assignment.style.to_dict(),
        "documents": [document.to_dict() for document in assignment.documents],
        "custom_phrases": assignment.custom_phrases_by_heading(),
    }


def deserialize_assignment(
    data: dict[str, Any],
    *,
    directory: Path | None = None,
    events: EventBus | None = None,
    validate: bool = True,
) -> Assignment:
    """
    Deserialize an Assignment from a dictionary.
    
    Args:
        data: Dictionary from JSON
        directory: Assignment directory to attach
        events: Event channel for the rebuilt assignment
        validate: Whether to validate against the schema first
        
    Returns:
        Assignment with phrase counts recomputed from its documents
        
    Raises:
        SnapshotValidationError: If validate=True and data is invalid
        InvalidIdentifier: If a stored student id is malformed
    """
    if validate:
        validate_snapshot(data, strict=True)
    
    headings = list(data["headings"])
    return Assignment(
        title=data["title"],
        headings=headings,
        directory=directory,
        style=FeedbackStyle.from_dict(data["style"]),
        documents=[FeedbackDocument.from_dict(doc, headings) for doc in data["documents"]],
        custom_phrases=data["custom_phrases"],
        events=events,
    )


# ─────────────────────────────────────────────────────────────────────────────
# Byte Form
# ─────────────────────────────────────────────────────────────────────────────

def encode_snapshot(assignment: Assignment) -> bytes:
    """Encode an Assignment as UTF-8 JSON snapshot bytes."""
    data = serialize_assignment(assignment)
    return json.dumps(data, indent=2, ensure_ascii=False).encode("utf-8")


def decode_snapshot(
    raw: bytes,
    *,
    directory: Path | None = None,
    events: EventBus | None = None,
) -> Assignment:
    """
    Decode snapshot bytes into an Assignment.
    
    Raises:
        SnapshotValidationError: If the bytes are not a valid snapshot
        InvalidIdentifier: If a stored student id is malformed
    """
    try:
        data = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise SnapshotValidationError(
            f"Snapshot is not valid UTF-8 JSON: {e}",
            errors=[str(e)]
        ) from e
    return deserialize_assignment(data, directory=directory, events=events)
