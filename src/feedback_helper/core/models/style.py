"""
Module: style

Purpose:
    Provides FeedbackStyle - the formatting used when feedback documents
    are exported, plus the bullet marker that identifies countable phrases.

Key Functions:
    - FeedbackStyle.normalized(...): Build a valid style from raw UI values
    - FeedbackStyle.to_dict() / FeedbackStyle.from_dict(): Serialization

Used By:
    - core.models.document.FeedbackDocument.export
    - assignment.aggregate.Assignment
    - config.settings.SettingsStore (default style)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

DEFAULT_LINE_MARKER = "- "


@dataclass(frozen=True)
class FeedbackStyle:
    """
    Export formatting for feedback documents (immutable).
    
    Attributes:
        heading_prefix: Text written before each heading ("" or e.g. "# ")
        underline: Single character used to underline headings, or ""
        blank_lines: Number of blank lines after each section
        line_marker: Bullet that starts a feedback phrase, e.g. "- "
    
    Invariants:
        - underline is at most one character
        - blank_lines >= 0
        - line_marker is not blank
    
    Example:
        >>> FeedbackStyle.normalized(" #   ", "-=", -42, "")
        FeedbackStyle(heading_prefix='# ', underline='', blank_lines=0, line_marker='- ')
    """
    
    heading_prefix: str = ""
    underline: str = ""
    blank_lines: int = 1
    line_marker: str = DEFAULT_LINE_MARKER
    
    def __post_init__(self) -> None:
        """Validate style on construction."""
        if len(self.underline) > 1:
            raise ValueError(f"Underline must be a single character: {self.underline!r}")
        if self.blank_lines < 0:
            raise ValueError(f"blank_lines must be non-negative: {self.blank_lines}")
        if not self.line_marker.strip():
            raise ValueError(f"line_marker cannot be blank: {self.line_marker!r}")
    
    @classmethod
    def normalized(
        cls,
        heading_prefix: str = "",
        underline: str = "",
        blank_lines: int = 1,
        line_marker: str = DEFAULT_LINE_MARKER,
    ) -> FeedbackStyle:
        """
        Create a style from raw user input, repairing anything invalid.
        
        - heading prefix and line marker are trimmed and get one trailing space
        - an underline longer than one character is dropped
        - negative blank line counts become zero
        - a blank line marker falls back to "- "
        """
        prefix = heading_prefix.strip()
        marker = line_marker.strip()
        return cls(
            heading_prefix=f"{prefix} " if prefix else "",
            underline=underline if len(underline) <= 1 else "",
            blank_lines=max(0, int(blank_lines)),
            line_marker=f"{marker} " if marker else DEFAULT_LINE_MARKER,
        )
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "heading_prefix": self.heading_prefix,
            "underline": self.underline,
            "blank_lines": self.blank_lines,
            "line_marker": self.line_marker,
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> FeedbackStyle:
        return cls(
            heading_prefix=data.get("heading_prefix", ""),
            underline=data.get("underline", ""),
            blank_lines=data.get("blank_lines", 1),
            line_marker=data.get("line_marker", DEFAULT_LINE_MARKER),
        )
