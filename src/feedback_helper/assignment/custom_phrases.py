"""
Module: assignment.custom_phrases

Purpose:
    User-curated phrase lists, one per heading. Order is whatever the
    user chose (insertion, then explicit moves); usage counts play no part.

Key Classes:
    - CustomPhraseStore

Used By:
    - assignment.aggregate.Assignment
    - core.utils.serialization (persisted with the snapshot)
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from feedback_helper.core.errors import UnknownHeading, UnknownPhrase

from .events import EventBus

logger = logging.getLogger(__name__)


class CustomPhraseStore:
    """
    Ordered custom phrase lists keyed by heading.
    
    A phrase appears at most once in a heading's list.
    
    Example:
        >>> store = CustomPhraseStore(["Code"])
        >>> store.add("Code", "  Well commented. ", "- ")
        True
        >>> store.get("Code")
        ['Well commented.']
    """
    
    def __init__(
        self,
        headings: Iterable[str] = (),
        events: Optional[EventBus] = None,
        phrases: Optional[Mapping[str, Iterable[str]]] = None,
    ) -> None:
        self._events = events or EventBus()
        phrases = phrases or {}
        self._lists: Dict[str, List[str]] = {
            heading: list(phrases.get(heading, [])) for heading in headings
        }
    
    def _list(self, heading: str) -> List[str]:
        try:
            return self._lists[heading]
        except KeyError:
            raise UnknownHeading(f"No custom phrases for heading {heading!r}") from None
    
    def get(self, heading: str) -> List[str]:
        return list(self._list(heading))
    
    def as_dict(self) -> Dict[str, List[str]]:
        return {heading: list(items) for heading, items in self._lists.items()}
    
    def add(self, heading: str, text: str, line_marker: str) -> bool:
        """
        Append a phrase to the end of the heading's list.
        
        The text is trimmed first. Nothing happens if it is empty, is just
        the bullet marker, or is already in the list.
        
        Returns:
            True if the phrase was added
        """
        items = self._list(heading)
        text = text.strip()
        if not text or text in (line_marker, line_marker.strip()):
            return False
        if text in items:
            logger.debug(f"Custom phrase {text!r} already listed under {heading!r}")
            return False
        items.append(text)
        self._events.emit("custom_phrase_added", heading, text)
        return True
    
    def delete(self, heading: str, text: str) -> bool:
        """
        Remove a phrase from the heading's list.
        
        Returns:
            True if the phrase was present and removed
        """
        items = self._list(heading)
        if text not in items:
            return False
        items.remove(text)
        self._events.emit("custom_phrase_deleted", heading, text)
        return True
    
    def reorder(self, heading: str, text: str, delta: int) -> Tuple[int, int]:
        """
        Move a phrase `delta` places (negative is towards the top).
        
        The target position is clamped to the list, so moving the first
        phrase up or the last phrase down leaves it where it is. The
        reordered event is sent even when the position does not change.
        
        Returns:
            (old_position, new_position)
            
        Raises:
            UnknownPhrase: If the phrase is not in the heading's list
        """
        items = self._list(heading)
        try:
            old_position = items.index(text)
        except ValueError:
            raise UnknownPhrase(f"Custom phrase {text!r} not listed under {heading!r}") from None
        new_position = min(max(old_position + delta, 0), len(items) - 1)
        items.insert(new_position, items.pop(old_position))
        self._events.emit("custom_phrase_reordered", heading, old_position, new_position)
        return old_position, new_position
    
    def rename_heading(self, old: str, new: str, headings: Iterable[str]) -> None:
        """Move the list stored under `old` to `new`, keys ordered as `headings`."""
        moved = self._list(old)
        lists = dict(self._lists)
        del lists[old]
        lists[new] = moved
        self._lists = {heading: lists[heading] for heading in headings}
