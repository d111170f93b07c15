"""
Feedback Helper Core Package

Value types and documents shared by the assignment aggregate, persistence
and the session controller.

**DESIGN NOTES:**

1. **Validated Value Types**
   - `StudentId` and `FeedbackStyle` are frozen dataclasses validated on
     construction; an invalid instance can never be stored.

2. **Derived Data Is Never Stored**
   - Phrase usage counts are recomputed from document text on load,
     never read back from a snapshot.

3. **No Shared Mutable Heading Lists**
   - A `FeedbackDocument` keeps only its heading -> text mapping; the
     owning assignment is the single source of truth for heading order.
"""

from .errors import FeedbackHelperError
from .models import StudentId, Phrase, FeedbackStyle, FeedbackDocument

__all__ = [
    "FeedbackHelperError",
    "StudentId",
    "Phrase",
    "FeedbackStyle",
    "FeedbackDocument",
]
