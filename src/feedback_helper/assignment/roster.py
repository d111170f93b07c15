"""
Student roster resolution for new assignments.

The initial students come from a student list file when one is given
and readable; otherwise they are guessed from the assignment directory,
where submissions are often named after matriculation numbers.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from feedback_helper.core.errors import InvalidIdentifier
from feedback_helper.core.models import StudentId
from feedback_helper.core.models.student_id import MATRICULATION_PATTERN

logger = logging.getLogger(__name__)


def read_student_list(path: Path) -> List[StudentId]:
    """
    Read student ids from a list file.
    
    Ids may be separated by any characters that cannot appear in an id
    (commas, whitespace, newlines...). Duplicates keep their first position.
    
    Raises:
        OSError: If the path is not a readable regular file
    """
    if not path.is_file():
        raise FileNotFoundError(f"Student list is not a regular file: {path}")
    text = path.read_text(encoding="utf-8", errors="replace")
    return list(dict.fromkeys(StudentId.split(text)))


def scan_directory(directory: Path) -> List[StudentId]:
    """
    Guess student ids from entries named like a matriculation number.
    
    "090003554", "090003554.zip" and "090003554.tar.gz" all give the id
    090003554. Returns an empty list if the directory cannot be listed.
    """
    try:
        names = sorted(entry.name for entry in directory.iterdir())
    except OSError:
        return []
    
    student_ids = []
    for name in names:
        stem = name.split(".")[0]
        if MATRICULATION_PATTERN.fullmatch(stem):
            student_ids.append(StudentId(stem))
    return list(dict.fromkeys(student_ids))


def resolve_student_ids(student_list: Optional[Path], directory: Optional[Path]) -> List[StudentId]:
    """
    Work out the initial students for a new assignment.
    
    Args:
        student_list: Student list file, or None
        directory: Assignment directory to scan as a fallback, or None
        
    Returns:
        Student ids from the list file, else from the directory, else []
    """
    if student_list is not None:
        try:
            student_ids = read_student_list(Path(student_list))
            logger.info(f"Read {len(student_ids)} students from {student_list}")
            return student_ids
        except (OSError, InvalidIdentifier) as e:
            logger.warning(f"Could not read student list {student_list}: {e}")
    
    if directory is None:
        return []
    student_ids = scan_directory(Path(directory))
    logger.info(f"Found {len(student_ids)} students in {directory}")
    return student_ids
