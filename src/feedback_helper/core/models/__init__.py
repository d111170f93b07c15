"""
Core Models Package

Value types and the per-student feedback document.

| Type | Mutability | Notes |
|------|------------|-------|
| `StudentId` | frozen | validated on construction, ordered by text |
| `Phrase` | count only | equality and hash by text, usage-count ordering |
| `FeedbackStyle` | frozen | export formatting, normalised from raw input |
| `FeedbackDocument` | mutable | one student's section texts and grade |
"""

from .student_id import StudentId
from .phrase import Phrase
from .style import FeedbackStyle
from .document import FeedbackDocument

__all__ = [
    "StudentId",
    "Phrase",
    "FeedbackStyle",
    "FeedbackDocument",
]
