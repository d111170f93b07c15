"""
Module: assignment.phrase_index

Purpose:
    Per-heading frequency table of the bullet-marked phrases used across
    all feedback documents. Rebuilt from scratch on load and after a
    heading rename; updated incrementally on every section edit.

Key Classes:
    - PhraseUsageIndex: heading -> (phrase text -> Phrase)

Dependencies:
    - collections.Counter (std)
    - assignment.extraction: phrase extraction and diffing

Used By:
    - assignment.aggregate.Assignment

Counting:
    Counts are multisets of lines. A phrase written twice in one section
    counts twice, and removing one of the two copies removes one use.
    The incremental update and the full rebuild agree on this.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from feedback_helper.core.errors import UnknownHeading
from feedback_helper.core.models import Phrase

from .events import EventBus
from .extraction import count_phrases, phrase_changes

logger = logging.getLogger(__name__)


class PhraseUsageIndex:
    """
    Usage counts of phrases, per heading.
    
    The key set always equals the owning assignment's headings. Counts
    are derived data and are never persisted.
    
    Example:
        >>> index = PhraseUsageIndex(["Code"])
        >>> index.apply_diff("Code", "", "- Neat.\\n- Tested.", "- ")
        >>> [p.text for p in index.for_heading("Code")]
        ['Tested.', 'Neat.']
    """
    
    def __init__(self, headings: Iterable[str] = (), events: Optional[EventBus] = None) -> None:
        self._events = events or EventBus()
        self._entries: Dict[str, Dict[str, Phrase]] = {heading: {} for heading in headings}
    
    @property
    def headings(self) -> List[str]:
        return list(self._entries)
    
    def _table(self, heading: str) -> Dict[str, Phrase]:
        try:
            return self._entries[heading]
        except KeyError:
            raise UnknownHeading(f"No phrase index for heading {heading!r}") from None
    
    def recompute(self, texts: Iterable[str], heading: str, line_marker: str) -> None:
        """
        Replace the heading's table with counts taken from `texts`.
        
        Args:
            texts: The section text for this heading from every document
            heading: Heading to rebuild; created if not yet indexed
            line_marker: Bullet marker identifying phrase lines
        """
        counts = count_phrases(texts, line_marker)
        self._entries[heading] = {text: Phrase(text, n) for text, n in counts.items()}
        logger.debug(f"Recomputed {len(counts)} phrases for heading {heading!r}")
    
    def apply_diff(self, heading: str, old_text: str, new_text: str, line_marker: str) -> None:
        """
        Update counts after one section changed from `old_text` to `new_text`.
        
        Each phrase whose count changes produces exactly one event:
        phrase_deleted when its last use goes, phrase_added when it is
        new to the heading, phrase_counter_updated otherwise.
        """
        table = self._table(heading)
        removed, added = phrase_changes(old_text, new_text, line_marker)
        
        for text, uses in removed.items():
            phrase = table.get(text)
            if phrase is None:
                continue
            phrase.set_count(max(0, phrase.count - uses))
            if phrase.is_unused():
                del table[text]
                self._events.emit("phrase_deleted", heading, phrase)
            else:
                self._events.emit("phrase_counter_updated", heading, phrase)
        
        for text, uses in added.items():
            phrase = table.get(text)
            if phrase is not None:
                phrase.set_count(phrase.count + uses)
                self._events.emit("phrase_counter_updated", heading, phrase)
            else:
                phrase = Phrase(text, uses)
                table[text] = phrase
                self._events.emit("phrase_added", heading, phrase)
    
    def for_heading(self, heading: str) -> List[Phrase]:
        """Phrases for a heading, most used first."""
        return sorted(self._table(heading).values())
    
    def usage(self, heading: str, text: str) -> int:
        """Current usage count of `text` under `heading` (0 if unused)."""
        phrase = self._table(heading).get(text)
        return phrase.count if phrase is not None else 0
    
    def drop_heading(self, heading: str) -> None:
        self._table(heading)
        del self._entries[heading]
    
    def reorder_headings(self, headings: Iterable[str]) -> None:
        """Put the heading keys in the given order."""
        self._entries = {heading: self._table(heading) for heading in headings}
