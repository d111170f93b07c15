"""
Module: student_id

Purpose:
    Provides the StudentId value type. A student id is a non-empty string
    made only of ASCII letters, digits and a small set of punctuation
    characters, so it is always safe to use as a file name.

Key Functions:
    - StudentId(value): Validate and wrap an id
    - StudentId.split(text): Pull every valid id out of free text

Dependencies:
    - re (std)
    - core.errors.InvalidIdentifier

Used By:
    - core.models.document.FeedbackDocument
    - assignment.roster
    - assignment.aggregate.Assignment
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List

from ..errors import InvalidIdentifier


ALLOWED_CHARACTERS = r"\-a-zA-Z_0-9!#$%&*+/=?^{}~"
ALLOWED_PATTERN = re.compile(f"[{ALLOWED_CHARACTERS}]+")
DELIMITER_PATTERN = re.compile(f"[^{ALLOWED_CHARACTERS}]+")

# St Andrews matriculation numbers, used when guessing ids from file names
MATRICULATION_PATTERN = re.compile(r"\d{9}")


@dataclass(frozen=True, order=True)
class StudentId:
    """
    Validated student identifier.
    
    Ordering and equality are those of the underlying string.
    
    Example:
        >>> StudentId("090003554")
        StudentId('090003554')
        >>> str(StudentId("mike_york12"))
        'mike_york12'
    """
    
    value: str
    
    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not ALLOWED_PATTERN.fullmatch(self.value):
            raise InvalidIdentifier(f"Illegal student id {self.value!r}")
    
    @classmethod
    def split(cls, text: str) -> List[StudentId]:
        """
        Split free text into student ids.
        
        Any run of characters outside the allowed set acts as a delimiter,
        so commas, whitespace and newlines all separate ids.
        
        Args:
            text: Raw text, e.g. the contents of a student list file
            
        Returns:
            Ids in order of appearance (duplicates kept)
        """
        return [cls(token) for token in DELIMITER_PATTERN.split(text) if token]
    
    def __str__(self) -> str:
        return self.value
    
    def __repr__(self) -> str:
        return f"StudentId({self.value!r})"
