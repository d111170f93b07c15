"""
Module: assignment.aggregate

Purpose:
    The Assignment aggregate: title, ordered headings, one feedback
    document per student, per-heading custom phrase lists and phrase usage
    counts, and the export style. All changes to feedback go through here
    so that the derived views stay consistent with the documents.

Key Functions:
    - Assignment.create(...): Start a new assignment in a directory
    - Assignment.update_section(...): Edit text, keeping phrase counts current
    - Assignment.rename_heading(...): Rename across documents and phrase stores
    - Assignment.add_student(...): Add a blank document for a late student

Dependencies:
    - feedback_helper.core.models: StudentId, FeedbackDocument, FeedbackStyle, Phrase
    - .phrase_index.PhraseUsageIndex
    - .custom_phrases.CustomPhraseStore
    - .events.EventBus
    - .roster: initial student ids
    - .grades: histogram and statistics

Used By:
    - core.utils.serialization: snapshot encode/decode
    - persistence: saving and export
    - session.controller.Session

Invariants:
    - Headings are unique, trimmed and non-blank
    - Every document, the custom phrase store and the phrase index hold
      exactly the current headings, in heading order
    - Validation failures raise before anything is changed
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from feedback_helper.core.errors import (
    BlankHeading,
    DuplicateHeading,
    DuplicateStudent,
    IOFailure,
    NotADirectory,
    UnknownHeading,
    UnknownStudent,
)
from feedback_helper.core.models import FeedbackDocument, FeedbackStyle, Phrase, StudentId

from .custom_phrases import CustomPhraseStore
from .events import EventBus
from .grades import GradeStatistics, grade_histogram, grade_statistics
from .phrase_index import PhraseUsageIndex
from .roster import resolve_student_ids

logger = logging.getLogger(__name__)

StudentKey = Union[StudentId, str]

# Characters allowed in file names derived from the title
_UNSAFE_TITLE_CHARACTERS = re.compile(r"[^-a-zA-Z_0-9!#$%&+=^{}~]+")


def file_safe_title(title: str) -> str:
    """
    Normalise a title for use in file names.

    Example:
        >>> file_safe_title("  CS2101 P2: Report ")
        'CS2101-P2-Report'
    """
    slug = _UNSAFE_TITLE_CHARACTERS.sub("-", title.strip())
    return slug or "assignment"


def parse_headings(headings: Union[str, Iterable[str]]) -> List[str]:
    """
    Turn newline-separated heading text into a clean heading list.

    Headings are trimmed; blank lines and repeats are dropped, keeping
    the first occurrence.

    Example:
        >>> parse_headings("Code\\nReport quality\\n\\n Overall \\nCode")
        ['Code', 'Report quality', 'Overall']
    """
    if isinstance(headings, str):
        headings = headings.split("\n")
    cleaned = (heading.strip() for heading in headings)
    return list(dict.fromkeys(heading for heading in cleaned if heading))


class Assignment:
    """
    One grading task: per-student feedback documents and the views
    derived from them.

    Attributes:
        title: Assignment title
        directory: Where the snapshot and exports are written
        style: Export formatting and bullet marker
        events: Event channel notified of every change
        dirty: True when there are changes not yet captured by a save

    Example:
        >>> a = Assignment.create("CS2101-P2", "Code\\nOverall", None, tmp_dir)
        >>> a.add_student("Janey")
        >>> a.update_section("Janey", "Code", "- Nicely structured.")
        >>> [p.text for p in a.phrases_for_heading("Code")]
        ['Nicely structured.']
    """

    def __init__(
        self,
        title: str,
        headings: Iterable[str],
        directory: Optional[Path] = None,
        style: Optional[FeedbackStyle] = None,
        documents: Iterable[FeedbackDocument] = (),
        custom_phrases: Optional[Mapping[str, Iterable[str]]] = None,
        events: Optional[EventBus] = None,
    ) -> None:
        self.title = title
        self.directory = Path(directory) if directory is not None else None
        self.style = style or FeedbackStyle()
        self.events = events or EventBus()
        self._headings = parse_headings(list(headings))

        self._documents: Dict[StudentId, FeedbackDocument] = {}
        for document in documents:
            if document.student_id in self._documents:
                raise DuplicateStudent(f"Student {document.student_id} appears twice")
            if document.headings != self._headings:
                document = FeedbackDocument(
                    document.student_id, self._headings, document.sections, document.grade
                )
            self._documents[document.student_id] = document

        self._custom_phrases = CustomPhraseStore(self._headings, self.events, custom_phrases)
        self._phrase_index = PhraseUsageIndex(self._headings, self.events)
        self._recompute_all()
        self.dirty = False

    @classmethod
    def create(
        cls,
        title: str,
        headings: Union[str, Iterable[str]],
        student_list: Optional[Path],
        directory: Path,
        style: Optional[FeedbackStyle] = None,
        events: Optional[EventBus] = None,
    ) -> Assignment:
        """
        Create a new assignment, making its directory if needed.

        Args:
            title: Assignment title
            headings: Newline-separated headings (or a list of them)
            student_list: Student list file; if missing or unreadable the
                directory is scanned for matriculation-number names
            directory: Assignment directory
            style: Export style (default FeedbackStyle())
            events: Event channel to report on

        Raises:
            NotADirectory: If `directory` exists but is not a directory
            IOFailure: If the directory cannot be created
        """
        directory = Path(directory)
        if directory.exists() and not directory.is_dir():
            raise NotADirectory(str(directory))

        heading_list = parse_headings(headings)
        student_ids = resolve_student_ids(student_list, directory)

        try:
            directory.mkdir(parents=True, exist_ok=True)
        except FileExistsError:
            raise NotADirectory(str(directory)) from None
        except OSError as e:
            raise IOFailure(f"Cannot create assignment directory {directory}: {e}") from e

        assignment = cls(
            title=title,
            headings=heading_list,
            directory=directory,
            style=style,
            documents=[FeedbackDocument(sid, heading_list) for sid in student_ids],
            events=events,
        )
        assignment.dirty = True
        logger.info(
            f"Created assignment {title!r} with {len(heading_list)} headings "
            f"and {len(student_ids)} students in {directory}"
        )
        return assignment

    # ─────────────────────────────────────────────────────────────────────────
    # Lookups
    # ─────────────────────────────────────────────────────────────────────────

    def _document(self, student_id: StudentKey) -> FeedbackDocument:
        key = student_id if isinstance(student_id, StudentId) else StudentId(student_id)
        try:
            return self._documents[key]
        except KeyError:
            raise UnknownStudent(f"No feedback document for student {key}") from None

    def _check_heading(self, heading: str) -> None:
        if heading not in self._headings:
            raise UnknownHeading(f"Heading {heading!r} not in assignment {self.title!r}")

    @property
    def headings(self) -> List[str]:
        return list(self._headings)

    @property
    def student_ids(self) -> List[StudentId]:
        return sorted(self._documents)

    @property
    def documents(self) -> List[FeedbackDocument]:
        """Documents sorted by student id."""
        return sorted(self._documents.values())

    @property
    def line_marker(self) -> str:
        return self.style.line_marker

    @property
    def file_safe_title(self) -> str:
        return file_safe_title(self.title)

    def has_student(self, student_id: StudentKey) -> bool:
        key = student_id if isinstance(student_id, StudentId) else StudentId(student_id)
        return key in self._documents

    def section(self, student_id: StudentKey, heading: str) -> str:
        return self._document(student_id).section(heading)

    def grade(self, student_id: StudentKey) -> float:
        return self._document(student_id).grade

    def feedback_length(self, student_id: StudentKey) -> int:
        return self._document(student_id).length()

    def grades_list(self) -> List[float]:
        return [document.grade for document in self.documents]

    def section_summary(self) -> Dict[str, List[str]]:
        """Non-empty section texts per heading, in student order."""
        return {
            heading: [
                text for text in (doc.section(heading) for doc in self.documents) if text.strip()
            ]
            for heading in self._headings
        }

    # ─────────────────────────────────────────────────────────────────────────
    # Mutations
    # ─────────────────────────────────────────────────────────────────────────

    def add_student(self, student_id: StudentKey) -> StudentId:
        """
        Add a blank feedback document for a new student.

        Raises:
            InvalidIdentifier: If `student_id` is not a valid id
            DuplicateStudent: If the student already has a document
        """
        key = student_id if isinstance(student_id, StudentId) else StudentId(student_id)
        if key in self._documents:
            raise DuplicateStudent(f"Student '{key}' already exists.")
        self._documents[key] = FeedbackDocument(key, self._headings)
        self.dirty = True
        self.events.emit("new_student", key)
        self.events.info(f"New student '{key}' added.")
        return key

    def update_section(self, student_id: StudentKey, heading: str, text: str) -> None:
        """Replace one section's text and update the heading's phrase counts."""
        document = self._document(student_id)
        old_text = document.section(heading)
        document.set_section(heading, text)
        self._phrase_index.apply_diff(heading, old_text, text, self.line_marker)
        self.dirty = True

    def update_feedback(self, student_id: StudentKey, sections: Mapping[str, str]) -> None:
        """
        Replace several sections of one student's feedback.

        All headings are checked before any section is changed.
        """
        document = self._document(student_id)
        for heading in sections:
            self._check_heading(heading)
        for heading, text in sections.items():
            self.update_section(document.student_id, heading, text)

    def update_grade(self, student_id: StudentKey, grade: float) -> None:
        document = self._document(student_id)
        document.set_grade(grade)
        self.dirty = True
        self.events.emit("grade_update", document.student_id, document.grade)

    def rename_heading(self, old: str, new: str) -> None:
        """
        Rename a heading everywhere it is used.

        Document text moves to the new name unchanged and the heading keeps
        its position. The phrase counts for the heading are rebuilt rather
        than carried across.

        Raises:
            BlankHeading: If `new` is empty or whitespace
            DuplicateHeading: If `new` is already a heading
            UnknownHeading: If `old` is not a heading
        """
        new = new.strip()
        if not new:
            raise BlankHeading("New heading cannot be blank.")
        if new in self._headings:
            raise DuplicateHeading(f"The heading {new} already exists.")
        self._check_heading(old)

        self._headings[self._headings.index(old)] = new
        for document in self._documents.values():
            document.rename_heading(old, new)
        self._custom_phrases.rename_heading(old, new, self._headings)
        self._phrase_index.drop_heading(old)
        self._phrase_index.recompute(
            (document.section(new) for document in self._documents.values()),
            new,
            self.line_marker,
        )
        self._phrase_index.reorder_headings(self._headings)
        self.dirty = True
        logger.info(f"Renamed heading {old!r} to {new!r}")
        self.events.emit("headings_updated", self.headings)

    # ─────────────────────────────────────────────────────────────────────────
    # Phrases
    # ─────────────────────────────────────────────────────────────────────────

    def recompute_phrase_counts(self) -> None:
        """Rebuild every heading's phrase counts from the documents."""
        self._recompute_all()
        self.events.info("Computed phrase counts.")

    def _recompute_all(self) -> None:
        for heading in self._headings:
            self._phrase_index.recompute(
                (document.section(heading) for document in self._documents.values()),
                heading,
                self.line_marker,
            )
        logger.debug(f"Computed phrase counts for {len(self._headings)} headings")

    def phrases_for_heading(self, heading: str) -> List[Phrase]:
        """Used phrases for a heading, most used first."""
        return self._phrase_index.for_heading(heading)

    def custom_phrases(self, heading: str) -> List[str]:
        """Custom phrases for a heading in the user's order."""
        return self._custom_phrases.get(heading)

    def custom_phrases_by_heading(self) -> Dict[str, List[str]]:
        return self._custom_phrases.as_dict()

    def custom_phrase_usage(self, heading: str) -> List[Phrase]:
        """Custom phrases paired with how often each is currently used."""
        return [
            Phrase(text, self._phrase_index.usage(heading, text))
            for text in self._custom_phrases.get(heading)
        ]

    def add_custom_phrase(self, heading: str, text: str) -> bool:
        added = self._custom_phrases.add(heading, text, self.line_marker)
        self.dirty = self.dirty or added
        return added

    def delete_custom_phrase(self, heading: str, text: str) -> bool:
        deleted = self._custom_phrases.delete(heading, text)
        self.dirty = self.dirty or deleted
        return deleted

    def reorder_custom_phrase(self, heading: str, text: str, delta: int) -> Tuple[int, int]:
        positions = self._custom_phrases.reorder(heading, text, delta)
        self.dirty = True
        return positions

    # ─────────────────────────────────────────────────────────────────────────
    # Grades
    # ─────────────────────────────────────────────────────────────────────────

    def grade_histogram(self) -> List[int]:
        """Students per 0.5 grade bucket from 0.0 to 20.0 (41 buckets)."""
        return grade_histogram(self.grades_list())

    def grade_statistics(self) -> GradeStatistics:
        return grade_statistics(self.grades_list())

    def __repr__(self) -> str:
        return f"Assignment({self.title!r}, {len(self._headings)} headings, {len(self._documents)} students)"
