from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from vocab_review.models.vocabulary import Difficulty, VocabularyItem, as_utc
from vocab_review.services.scheduler import utcnow

_DIFFICULTY_RANK = {
    Difficulty.BEGINNER: 0,
    Difficulty.INTERMEDIATE: 1,
    Difficulty.ADVANCED: 2,
}


def difficulty_rank(item: VocabularyItem) -> int:
    """Rank by difficulty tier; missing difficulty ranks as beginner."""
    if item.difficulty is None:
        return 0
    return _DIFFICULTY_RANK[item.difficulty]


def is_due(item: VocabularyItem, now: datetime) -> bool:
    return item.next_review_date is None or item.next_review_date <= now


def select_due(
    pool: Iterable[VocabularyItem], now: datetime | None = None
) -> list[VocabularyItem]:
    """Return due words, beginner first. sorted() is stable so ties keep pool order."""
    now = as_utc(now) if now is not None else utcnow()
    return sorted(
        (item for item in pool if is_due(item, now)),
        key=difficulty_rank,
    )
