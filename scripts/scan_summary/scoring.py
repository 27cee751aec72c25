"""
Security score and letter grade.

Each finding costs points by severity and the summed penalty, times a
fixed multiplier, is subtracted from 100. Weights and multiplier are
constants so scores stay comparable with stored history.
"""

from typing import Mapping

SEVERITY_WEIGHTS: dict[str, int] = {
    "critical": 4,
    "high": 3,
    "medium": 2,
    "low": 1,
}
PENALTY_MULTIPLIER = 3
MAX_SCORE = 100
MIN_SCORE = 0

# (inclusive lower bound, grade), highest first
GRADE_THRESHOLDS: list[tuple[int, str]] = [
    (90, "A"),
    (80, "B"),
    (70, "C"),
    (60, "D"),
]
LOWEST_GRADE = "E"
GRADES = frozenset(grade for _, grade in GRADE_THRESHOLDS) | {LOWEST_GRADE}


def compute_score(severity_counts: Mapping[str, int]) -> int:
    """0-100 score; 100 when there are no findings"""
    total = sum(severity_counts.get(level, 0) for level in SEVERITY_WEIGHTS)
    if total == 0:
        return MAX_SCORE
    penalty = sum(severity_counts.get(level, 0) * weight for level, weight in SEVERITY_WEIGHTS.items())
    return clamp_score(MAX_SCORE - penalty * PENALTY_MULTIPLIER)


def clamp_score(value: float) -> int:
    """Round and clamp any score into [0, 100]"""
    return int(min(MAX_SCORE, max(MIN_SCORE, round(value))))


def grade_for_score(score: float) -> str:
    """Letter grade A-E for a score"""
    for lower_bound, grade in GRADE_THRESHOLDS:
        if score >= lower_bound:
            return grade
    return LOWEST_GRADE


__all__ = [
    "GRADES",
    "GRADE_THRESHOLDS",
    "PENALTY_MULTIPLIER",
    "SEVERITY_WEIGHTS",
    "clamp_score",
    "compute_score",
    "grade_for_score",
]
