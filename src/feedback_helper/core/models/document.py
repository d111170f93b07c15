"""
Module: document

Purpose:
    Provides FeedbackDocument - one student's feedback, organised into
    named sections, plus their grade.

Key Functions:
    - FeedbackDocument.section(heading) / set_section(heading, text)
    - FeedbackDocument.rename_heading(old, new)
    - FeedbackDocument.render(style) / export(directory, style)

Dependencies:
    - pathlib (std)
    - .student_id.StudentId
    - .style.FeedbackStyle

Used By:
    - assignment.aggregate.Assignment
    - persistence.export
    - core.utils.serialization

Design Note:
    The document keeps only a heading -> text mapping. Its insertion order
    is the heading order; the owning assignment keeps it in step when
    headings are renamed, so no heading list is shared between objects.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from ..errors import UnknownHeading
from .student_id import StudentId
from .style import FeedbackStyle


class FeedbackDocument:
    """
    Feedback for a single student.
    
    Attributes:
        student_id: Whose feedback this is
        grade: Current grade; nominally 0.0-20.0 in steps of 0.5, not clamped
    
    Example:
        >>> doc = FeedbackDocument(StudentId("Janey"), ["Code", "Overall"])
        >>> doc.set_section("Code", "- Tidy.")
        >>> doc.section("Code")
        '- Tidy.'
    """
    
    def __init__(
        self,
        student_id: StudentId,
        headings: Iterable[str],
        sections: Optional[Dict[str, str]] = None,
        grade: float = 0.0,
    ) -> None:
        self.student_id = student_id
        self.grade = float(grade)
        sections = sections or {}
        self._sections: Dict[str, str] = {
            heading: sections.get(heading, "") for heading in headings
        }
    
    @property
    def headings(self) -> List[str]:
        return list(self._sections)
    
    @property
    def sections(self) -> Dict[str, str]:
        """Copy of the heading -> text mapping, in heading order."""
        return dict(self._sections)
    
    def section(self, heading: str) -> str:
        try:
            return self._sections[heading]
        except KeyError:
            raise UnknownHeading(f"Heading {heading!r} not in document for {self.student_id}") from None
    
    def set_section(self, heading: str, text: str) -> None:
        if heading not in self._sections:
            raise UnknownHeading(f"Heading {heading!r} not in document for {self.student_id}")
        self._sections[heading] = text
    
    def set_grade(self, grade: float) -> None:
        self.grade = float(grade)
    
    def rename_heading(self, old: str, new: str) -> None:
        """
        Move the text stored under `old` to `new`, keeping its position.
        
        No uniqueness checks are made here; Assignment.rename_heading
        validates the new name first.
        """
        if old not in self._sections:
            raise UnknownHeading(f"Heading {old!r} not in document for {self.student_id}")
        self._sections = {
            (new if heading == old else heading): text
            for heading, text in self._sections.items()
        }
    
    def length(self) -> int:
        """Total number of characters of feedback across all sections."""
        return sum(len(text) for text in self._sections.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "student_id": str(self.student_id),
            "grade": self.grade,
            "sections": dict(self._sections),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], headings: Iterable[str]) -> FeedbackDocument:
        """Rebuild a document; sections missing from `data` start empty."""
        return cls(
            student_id=StudentId(data["student_id"]),
            headings=headings,
            sections=data.get("sections") or {},
            grade=data.get("grade", 0.0),
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Export
    # ─────────────────────────────────────────────────────────────────────────
    
    def render(self, style: FeedbackStyle) -> str:
        """
        Render the document as plain text in the given style.
        
        Each section is written as the prefixed heading, an optional
        underline as long as the rendered heading, the section lines
        (lines consisting only of the bullet marker are dropped), and
        `style.blank_lines` empty lines.
        """
        marker = style.line_marker.strip()
        out: List[str] = []
        for heading, text in self._sections.items():
            full_heading = style.heading_prefix + heading
            out.append(full_heading)
            if style.underline:
                out.append(style.underline * len(full_heading))
            out.extend(line for line in _section_lines(text) if line.strip() != marker)
            out.extend([""] * style.blank_lines)
        return "".join(f"{line}\n" for line in out)
    
    def export(self, directory: Path, style: FeedbackStyle) -> Path:
        """
        Write the rendered document to `<directory>/<student_id>.txt`.
        
        Returns:
            Path of the written file
            
        Raises:
            OSError: If the file cannot be written
        """
        out_file = directory / f"{self.student_id}.txt"
        out_file.write_text(self.render(style), encoding="utf-8")
        return out_file
    
    # ─────────────────────────────────────────────────────────────────────────
    # Operators
    # ─────────────────────────────────────────────────────────────────────────
    
    def __lt__(self, other: FeedbackDocument) -> bool:
        if not isinstance(other, FeedbackDocument):
            return NotImplemented
        return self.student_id < other.student_id
    
    def __repr__(self) -> str:
        return f"FeedbackDocument({self.student_id})"


def _section_lines(text: str) -> List[str]:
    """Split section text into lines, ignoring trailing empty lines."""
    lines = [line.rstrip("\r") for line in text.split("\n")]
    while lines and lines[-1] == "":
        lines.pop()
    return lines
