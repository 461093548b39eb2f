from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, field_validator

DEFAULT_EASINESS = 2.5
MIN_EASINESS = 1.3


class Difficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


def as_utc(value: datetime | None) -> datetime | None:
    """Treat naive datetimes as UTC; convert aware ones to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class SrsState(BaseModel):
    """Scheduling fields of a word. Absent values mean "never reviewed"."""

    interval: int | None = None           # days until next review
    repetitions: int | None = None        # consecutive passing grades since last lapse
    easiness_factor: float | None = None  # interval multiplier, >= 1.3
    next_review_date: datetime | None = None  # None = new, due immediately

    @field_validator("next_review_date")
    @classmethod
    def _utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)


class VocabularyItem(SrsState):
    id: str
    finnish: str = ""
    english: str = ""
    part_of_speech: str | None = None
    categories: list[str] = []
    difficulty: Difficulty | None = None

    @field_validator("difficulty", mode="before")
    @classmethod
    def _known_difficulty(cls, value: object) -> object:
        # Unknown tiers from imported data fall back to None (ranked as beginner)
        if isinstance(value, str) and value not in {d.value for d in Difficulty}:
            return None
        return value

    def srs_state(self) -> SrsState:
        return SrsState(
            interval=self.interval,
            repetitions=self.repetitions,
            easiness_factor=self.easiness_factor,
            next_review_date=self.next_review_date,
        )

    def with_srs(self, state: SrsState) -> VocabularyItem:
        return self.model_copy(update=state.model_dump())


class VocabularyList(BaseModel):
    items: list[VocabularyItem]
    total: int


class WordStats(BaseModel):
    total: int
    due: int
    struggling: int
    unseen: int
