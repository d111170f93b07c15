"""
Module: core.errors

Purpose:
    Project-specific exception hierarchy. Every error derives from
    FeedbackHelperError and from the closest built-in exception, so callers
    can catch either the domain type or the familiar built-in one.

Used By:
    - core.models: identifier and heading validation
    - assignment: aggregate protocol violations
    - persistence: snapshot and export I/O
    - session: single-assignment rule
"""

from __future__ import annotations


class FeedbackHelperError(Exception):
    """Base class for all Feedback Helper exceptions."""


# -----------------------------
# Validation errors (state is never changed)
# -----------------------------

class InvalidIdentifier(FeedbackHelperError, ValueError):
    """Raised when a student id is empty or uses characters outside the allowed set."""


class DuplicateStudent(FeedbackHelperError, ValueError):
    """Raised when adding a student id that already has a feedback document."""


class DuplicateHeading(FeedbackHelperError, ValueError):
    """Raised when renaming a heading to a name that is already in use."""


class BlankHeading(FeedbackHelperError, ValueError):
    """Raised when renaming a heading to an empty or whitespace-only name."""


# -----------------------------
# Lookup errors (stale caller state)
# -----------------------------

class UnknownHeading(FeedbackHelperError, LookupError):
    """Raised when a heading is not part of the assignment."""


class UnknownStudent(FeedbackHelperError, LookupError):
    """Raised when a student id has no feedback document."""


class UnknownPhrase(FeedbackHelperError, LookupError):
    """Raised when a custom phrase is not in the list for its heading."""


# -----------------------------
# Session errors
# -----------------------------

class AssignmentAlreadyOpen(FeedbackHelperError, RuntimeError):
    """Raised when creating or loading while another assignment is open."""


class NoAssignmentOpen(FeedbackHelperError, RuntimeError):
    """Raised when an operation needs an open assignment and there is none."""


# -----------------------------
# I/O errors
# -----------------------------

class NotADirectory(FeedbackHelperError, NotADirectoryError):
    """Raised when the assignment directory exists but is not a directory."""


class LoadFailure(FeedbackHelperError, OSError):
    """Raised when a snapshot cannot be read, decoded or validated."""


class IOFailure(FeedbackHelperError, OSError):
    """Raised when a snapshot, backup or export file cannot be written."""
