"""
Schema Validation Utilities

Validates assignment snapshot data before it is turned back into objects.

Validation runs in two passes:
- Structural checks that need to look across fields (section keys match
  the headings, no repeated students) and give precise error paths
- JSON Schema validation against `snapshot.schema.json` when strict
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema

from ..errors import FeedbackHelperError


# Schema constants
SNAPSHOT_FORMAT = "feedback-helper"
SNAPSHOT_SCHEMA_VERSION = 1


# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class SnapshotValidationError(FeedbackHelperError, ValueError):
    """Raised when snapshot data fails validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def validate_snapshot(data: Any, *, strict: bool = True) -> None:
    """
    Validate snapshot data.

    Args:
        data: Decoded JSON snapshot
        strict: If True, also validate against the JSON schema

    Raises:
        SnapshotValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise SnapshotValidationError(
            f"Snapshot must be a JSON object, got {type(data).__name__}"
        )

    required = ["format", "schema_version", "title", "headings", "style", "documents", "custom_phrases"]
    missing = [f for f in required if f not in data]
    if missing:
        raise SnapshotValidationError(
            f"Missing required fields: {missing}",
            path="",
            errors=[f"Missing field: {f}" for f in missing]
        )

    if data["format"] != SNAPSHOT_FORMAT:
        raise SnapshotValidationError(
            f"Not a feedback helper snapshot: format {data['format']!r}",
            path="format"
        )

    version = data["schema_version"]
    if version != SNAPSHOT_SCHEMA_VERSION:
        raise SnapshotValidationError(
            f"Unsupported snapshot schema version: {version} (expected {SNAPSHOT_SCHEMA_VERSION})",
            path="schema_version"
        )

    headings = data["headings"]
    if not isinstance(headings, list) or not all(isinstance(h, str) for h in headings):
        raise SnapshotValidationError("headings must be a list of strings", path="headings")
    untrimmed = [h for h in headings if not h.strip() or h != h.strip() or "\n" in h]
    if untrimmed:
        raise SnapshotValidationError(
            f"Headings must be non-blank, trimmed single lines: {untrimmed!r}",
            path="headings",
            errors=[f"Invalid heading: {h!r}" for h in untrimmed]
        )
    if len(set(headings)) != len(headings):
        duplicates = sorted({h for h in headings if headings.count(h) > 1})
        raise SnapshotValidationError(
            f"Duplicate headings: {duplicates}",
            path="headings",
            errors=[f"Duplicate heading: {h}" for h in duplicates]
        )

    _validate_documents(data["documents"], headings)
    _validate_custom_phrases(data["custom_phrases"], headings)

    if strict:
        schema = _load_schema("snapshot")
        try:
            jsonschema.validate(data, schema)
        except jsonschema.ValidationError as e:
            raise SnapshotValidationError(
                f"Schema validation failed: {e.message}",
                path=".".join(str(p) for p in e.absolute_path),
                errors=[e.message]
            ) from e


def _validate_documents(documents: Any, headings: list[str]) -> None:
    """Every document must have a unique id and exactly the snapshot's headings."""
    if not isinstance(documents, list):
        raise SnapshotValidationError("documents must be a list", path="documents")

    expected = set(headings)
    seen: set[str] = set()
    for i, document in enumerate(documents):
        path = f"documents[{i}]"
        if not isinstance(document, dict) or "student_id" not in document:
            raise SnapshotValidationError("Document must have a student_id", path=path)

        student_id = document["student_id"]
        if student_id in seen:
            raise SnapshotValidationError(
                f"Duplicate student id: {student_id!r}",
                path=f"{path}.student_id"
            )
        seen.add(student_id)

        sections = document.get("sections")
        if not isinstance(sections, dict):
            raise SnapshotValidationError("sections must be a dict", path=f"{path}.sections")
        if set(sections) != expected:
            errors = [f"Missing section: {h}" for h in headings if h not in sections]
            errors += [f"Unknown section: {h}" for h in sections if h not in expected]
            raise SnapshotValidationError(
                f"Sections of {student_id!r} do not match the headings",
                path=f"{path}.sections",
                errors=errors
            )


def _validate_custom_phrases(custom_phrases: Any, headings: list[str]) -> None:
    """Custom phrase lists must be keyed by exactly the snapshot's headings."""
    if not isinstance(custom_phrases, dict):
        raise SnapshotValidationError("custom_phrases must be a dict", path="custom_phrases")
    if set(custom_phrases) != set(headings):
        raise SnapshotValidationError(
            "custom_phrases keys do not match the headings",
            path="custom_phrases",
            errors=[f"Unexpected key: {k}" for k in custom_phrases if k not in headings]
            + [f"Missing key: {h}" for h in headings if h not in custom_phrases]
        )
