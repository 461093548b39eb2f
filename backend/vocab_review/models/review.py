from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from vocab_review.models.vocabulary import SrsState, VocabularyItem, as_utc

MIN_GRADE = 1
MAX_GRADE = 5
PASSING_GRADE = 3     # grades >= 3 count as a successful recall
STRUGGLING_GRADE = 2  # last grade <= 2 marks a word as struggling
DEFAULT_SESSION_SIZE = 20


class ReviewHistoryEntry(BaseModel):
    """Last outcome for one word on this device (overwritten, never appended)."""

    word_id: str
    grade: int = Field(ge=MIN_GRADE, le=MAX_GRADE)
    reviewed_at: datetime

    @field_validator("reviewed_at")
    @classmethod
    def _utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class SessionState(str, Enum):
    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"
    EMPTY = "empty"
    EXITED = "exited"


class ReviewOutcome(BaseModel):
    word_id: str
    grade: int
    state: SrsState


class SessionSnapshot(BaseModel):
    session_id: str | None = None
    state: SessionState
    position: int      # 0-based cursor
    total: int
    revealed: bool
    current: VocabularyItem | None
    results: list[ReviewOutcome]


class StartSessionRequest(BaseModel):
    max_size: int | None = Field(default=None, ge=0)


class GradeRequest(BaseModel):
    # Range is checked by the scheduler so bad grades surface as InvalidGradeError
    grade: int
