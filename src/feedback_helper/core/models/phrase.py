"""
Module: phrase

Purpose:
    Provides the Phrase class: the text of a bullet-marked line together
    with the number of times it is used under one heading.

Ordering:
    Phrases sort by descending usage count. Equal counts sort by
    *descending* text, so at equal counts "zebra" comes before "apple".

Used By:
    - assignment.phrase_index.PhraseUsageIndex
    - assignment.aggregate.Assignment
"""

from __future__ import annotations

from functools import total_ordering


@total_ordering
class Phrase:
    """
    A phrase and its usage count.
    
    Equality and hashing use the text only, so a Phrase can be looked up
    regardless of its current count. The count never goes below zero.
    
    Example:
        >>> sorted([Phrase("apple", 2), Phrase("zebra", 2), Phrase("pear", 5)])
        [Phrase('pear', 5), Phrase('zebra', 2), Phrase('apple', 2)]
    """
    
    __slots__ = ("_text", "_count")
    
    def __init__(self, text: str, count: int = 1) -> None:
        if count < 0:
            raise ValueError(f"Usage count cannot be negative: {count}")
        self._text = text
        self._count = count
    
    @property
    def text(self) -> str:
        return self._text
    
    @property
    def count(self) -> int:
        return self._count
    
    def increment(self) -> None:
        self._count += 1
    
    def decrement(self) -> None:
        """Decrease the count by one, stopping at zero."""
        if self._count > 0:
            self._count -= 1
    
    def set_count(self, count: int) -> None:
        if count < 0:
            raise ValueError(f"Usage count cannot be negative: {count}")
        self._count = count
    
    def is_unused(self) -> bool:
        return self._count == 0
    
    # ─────────────────────────────────────────────────────────────────────────
    # Operators
    # ─────────────────────────────────────────────────────────────────────────
    
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Phrase):
            return NotImplemented
        return self._text == other._text
    
    def __hash__(self) -> int:
        return hash(self._text)
    
    def __lt__(self, other: Phrase) -> bool:
        if not isinstance(other, Phrase):
            return NotImplemented
        if self._count != other._count:
            return self._count > other._count
        return self._text > other._text
    
    def __str__(self) -> str:
        return self._text
    
    def __repr__(self) -> str:
        return f"Phrase({self._text!r}, {self._count})"
