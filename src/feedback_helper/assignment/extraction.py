"""
Phrase extraction from section text.

A phrase is a line that, once trimmed, starts with the bullet marker; its
text is whatever follows the marker. Extraction keeps duplicates, so the
result can be counted as a multiset.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, List, Tuple


def extract_phrases(text: str, line_marker: str) -> List[str]:
    """
    Get the bullet-marked phrases in a section, in order of appearance.
    
    Example:
        >>> extract_phrases("Intro\\n- Good.\\n  - Tidy.  \\n-", "- ")
        ['Good.', 'Tidy.']
    """
    phrases = []
    for line in text.split("\n"):
        line = line.strip()
        if line.startswith(line_marker):
            phrase = line[len(line_marker):].strip()
            if phrase:
                phrases.append(phrase)
    return phrases


def count_phrases(texts: Iterable[str], line_marker: str) -> Counter:
    """Count phrase uses across several section texts."""
    counts: Counter = Counter()
    for text in texts:
        counts.update(extract_phrases(text, line_marker))
    return counts


def phrase_changes(old_text: str, new_text: str, line_marker: str) -> Tuple[Counter, Counter]:
    """
    Compare the phrases of two versions of a section.
    
    Returns:
        (removed, added) multisets: how many uses of each phrase
        disappeared and appeared
    """
    old_counts = Counter(extract_phrases(old_text, line_marker))
    new_counts = Counter(extract_phrases(new_text, line_marker))
    return old_counts - new_counts, new_counts - old_counts
