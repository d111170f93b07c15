"""
Module: persistence.export

Purpose:
    Writes the plain-text feedback for every student, the grade list and
    the grade distribution. Runs on the caller's thread so failures
    reach the caller immediately.

Key Functions:
    - export_directory: `<directory>/<slug>-feedback`
    - export_all: One `<student_id>.txt` per student plus `grades.csv`
    - write_grades: `student_id,grade` lines sorted by student id
    - write_grade_distribution: `grade,count` line per 0.5 bucket

Used By:
    - session.controller.Session
"""

from __future__ import annotations

import logging
from pathlib import Path

from feedback_helper.assignment import Assignment
from feedback_helper.assignment.grades import grade_buckets
from feedback_helper.core.errors import IOFailure

logger = logging.getLogger(__name__)

GRADES_FILE = "grades.csv"
GRADE_DISTRIBUTION_FILE = "grade-distribution.csv"


def export_directory(assignment: Assignment) -> Path:
    if assignment.directory is None:
        raise IOFailure(f"Assignment {assignment.title!r} has no directory")
    return assignment.directory / f"{assignment.file_safe_title}-feedback"


def write_grades(assignment: Assignment, path: Path) -> Path:
    """Write `student_id,grade` lines, newline-terminated, no header."""
    lines = [f"{document.student_id},{float(document.grade)}\n" for document in assignment.documents]
    path.write_text("".join(lines), encoding="utf-8")
    return path


def write_grade_distribution(assignment: Assignment, path: Path) -> Path:
    """
    Write the grade histogram as `grade,count` lines (41 buckets, no header).

    Raises:
        IOFailure: If the file cannot be written
    """
    rows = zip(grade_buckets(), assignment.grade_histogram())
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("".join(f"{grade},{count}\n" for grade, count in rows), encoding="utf-8")
    except OSError as e:
        raise IOFailure(f"Could not write grade distribution to {path}: {e}") from e
    logger.info(f"Wrote grade distribution to {path}")
    return path


def export_all(assignment: Assignment) -> Path:
    """
    Export every student's feedback and the grade list.

    Emits `exported(output_directory)` and an info message on success.

    Returns:
        The export directory

    Raises:
        IOFailure: If any file cannot be written
    """
    output_directory = export_directory(assignment)
    try:
        output_directory.mkdir(parents=True, exist_ok=True)
        for document in assignment.documents:
            document.export(output_directory, assignment.style)
        write_grades(assignment, output_directory / GRADES_FILE)
    except OSError as e:
        raise IOFailure(f"Could not export to {output_directory}: {e}") from e

    assignment.events.emit("exported", output_directory)
    assignment.events.info(f"Exported feedback and grades to {output_directory}")
    return output_directory
