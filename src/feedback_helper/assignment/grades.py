"""
Module: assignment.grades

Purpose:
    Grade aggregation over an assignment: the fixed 41-bucket histogram
    (0.0 to 20.0 in steps of 0.5) used by the grade chart and the grade
    distribution export, plus summary statistics.

Key Functions:
    - grade_buckets(): Bucket labels 0.0, 0.5, ... 20.0
    - grade_histogram(grades): Counts per bucket
    - grade_statistics(grades): count/mean/median/min/max/std

Dependencies:
    - numpy: vectorised rounding and bin counting
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence

import numpy as np

MIN_GRADE = 0.0
MAX_GRADE = 20.0
GRADE_STEP = 0.5
BUCKET_COUNT = int((MAX_GRADE - MIN_GRADE) / GRADE_STEP) + 1  # 41


def grade_buckets() -> List[float]:
    """Lower-to-upper grade values, one per histogram bucket."""
    return [float(g) for g in np.linspace(MIN_GRADE, MAX_GRADE, BUCKET_COUNT)]


def grade_histogram(grades: Sequence[float]) -> List[int]:
    """
    Count grades per 0.5 bucket.
    
    Each grade is rounded half-up to the nearest 0.5; grades outside
    0.0-20.0 are counted in the first or last bucket.
    
    Example:
        >>> counts = grade_histogram([15.5, 15.6, 0.24, 21])
        >>> counts[31], counts[0], counts[40]
        (2, 1, 1)
    """
    if len(grades) == 0:
        return [0] * BUCKET_COUNT
    values = np.asarray(grades, dtype=float)
    indices = np.floor((values - MIN_GRADE) / GRADE_STEP + 0.5).astype(int)
    indices = np.clip(indices, 0, BUCKET_COUNT - 1)
    return [int(n) for n in np.bincount(indices, minlength=BUCKET_COUNT)]


@dataclass(frozen=True)
class GradeStatistics:
    """
    Summary of an assignment's grades (immutable).
    
    All values are 0.0 when there are no students.
    """
    count: int
    mean: float
    median: float
    minimum: float
    maximum: float
    std: float
    
    def to_dict(self) -> Dict[str, float]:
        return {
            "count": self.count,
            "mean": self.mean,
            "median": self.median,
            "minimum": self.minimum,
            "maximum": self.maximum,
            "std": self.std,
        }


def grade_statistics(grades: Sequence[float]) -> GradeStatistics:
    if len(grades) == 0:
        return GradeStatistics(0, 0.0, 0.0, 0.0, 0.0, 0.0)
    values = np.asarray(grades, dtype=float)
    return GradeStatistics(
        count=int(values.size),
        mean=float(values.mean()),
        median=float(np.median(values)),
        minimum=float(values.min()),
        maximum=float(values.max()),
        std=float(values.std()),
    )
