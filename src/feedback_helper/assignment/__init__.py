"""
Assignment Package

The Assignment aggregate and the views it keeps consistent with its
feedback documents: phrase usage counts, custom phrase lists, the
student roster and grade aggregation. Changes are announced through
an EventBus.
"""

from .aggregate import Assignment, file_safe_title, parse_headings
from .custom_phrases import CustomPhraseStore
from .events import AssignmentListener, EventBus
from .grades import GradeStatistics, grade_histogram, grade_statistics
from .phrase_index import PhraseUsageIndex
from .roster import resolve_student_ids

__all__ = [
    "Assignment",
    "AssignmentListener",
    "CustomPhraseStore",
    "EventBus",
    "GradeStatistics",
    "PhraseUsageIndex",
    "file_safe_title",
    "grade_histogram",
    "grade_statistics",
    "parse_headings",
    "resolve_student_ids",
]
