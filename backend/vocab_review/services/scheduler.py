"""
SM-2 outcome calculator.

Maps a word's current SRS fields and a 1–5 recall grade to its next
SRS fields. Pure: no I/O, no randomness; "now" is passed in.
"""
from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone

from vocab_review.models.review import MAX_GRADE, MIN_GRADE, PASSING_GRADE
from vocab_review.models.vocabulary import (
    DEFAULT_EASINESS,
    MIN_EASINESS,
    SrsState,
    as_utc,
)


class InvalidGradeError(ValueError):
    """Raised when a grade is not an integer in 1..5."""


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def validate_grade(grade: object) -> int:
    # bool is an int subclass; True/False are not grades
    if isinstance(grade, bool) or not isinstance(grade, int):
        raise InvalidGradeError(f"grade must be an integer, got {grade!r}")
    if not MIN_GRADE <= grade <= MAX_GRADE:
        raise InvalidGradeError(
            f"grade must be between {MIN_GRADE} and {MAX_GRADE}, got {grade}"
        )
    return grade


def _round_half_up(value: float) -> int:
    # 12.5 -> 13; builtin round() would give 12
    return math.floor(value + 0.5)


def next_easiness(easiness: float, grade: int) -> float:
    """Standard SM-2 EF update, floored at 1.3. Applied on pass and fail alike."""
    miss = 5 - grade
    return max(MIN_EASINESS, easiness + (0.1 - miss * (0.08 + miss * 0.02)))


def compute_next_state(
    current: SrsState,
    grade: int,
    now: datetime | None = None,
) -> SrsState:
    """
    Compute the SRS fields that follow a graded review.

    Returns a new SrsState; ``current`` is not modified. A VocabularyItem is
    accepted too, since it carries the same four fields.
    """
    grade = validate_grade(grade)
    now = as_utc(now) if now is not None else utcnow()

    interval = current.interval or 0
    repetitions = current.repetitions or 0
    easiness = current.easiness_factor or DEFAULT_EASINESS

    if grade >= PASSING_GRADE:
        if repetitions == 0:
            new_interval = 1
        elif repetitions == 1:
            new_interval = 6
        else:
            new_interval = max(1, _round_half_up(interval * easiness))
        new_reps = repetitions + 1
    else:
        # Lapse: full reset, no partial credit
        new_reps = 0
        new_interval = 1

    return SrsState(
        interval=new_interval,
        repetitions=new_reps,
        easiness_factor=next_easiness(easiness, grade),
        next_review_date=now + timedelta(days=new_interval),
    )
