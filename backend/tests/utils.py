from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

from vocab_review.models.review import ReviewHistoryEntry
from vocab_review.models.vocabulary import SrsState, VocabularyItem

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_word(word_id: str, due_in_days: float | None = None, **fields) -> VocabularyItem:
    """Build a word; ``due_in_days`` is relative to NOW (negative = overdue)."""
    if due_in_days is not None:
        fields["next_review_date"] = NOW + timedelta(days=due_in_days)
    fields.setdefault("finnish", f"fi-{word_id}")
    fields.setdefault("english", f"en-{word_id}")
    return VocabularyItem(id=word_id, **fields)


def make_entry(word_id: str, grade: int, days_ago: float = 1) -> ReviewHistoryEntry:
    return ReviewHistoryEntry(
        word_id=word_id, grade=grade, reviewed_at=NOW - timedelta(days=days_ago)
    )


class FailingWordStore:
    """Word store double whose writes fail until ``fail`` is switched off."""

    def __init__(self, items: list[VocabularyItem]) -> None:
        self.items = {i.id: i for i in items}
        self.fail = True
        self.writes: list[tuple[str, SrsState]] = []

    async def list_all(self) -> list[VocabularyItem]:
        return list(self.items.values())

    async def get(self, word_id: str) -> VocabularyItem | None:
        return self.items.get(word_id)

    async def update_srs(self, word_id: str, state: SrsState) -> None:
        if self.fail:
            raise OSError("disk unavailable")
        self.writes.append((word_id, state))
        self.items[word_id] = self.items[word_id].with_srs(state)


class FailingHistoryStore:
    def __init__(self) -> None:
        self.entries: dict[str, ReviewHistoryEntry] = {}
        self.fail = True

    async def get(self, word_id: str) -> ReviewHistoryEntry | None:
        return self.entries.get(word_id)

    async def put(self, word_id: str, entry: ReviewHistoryEntry) -> None:
        if self.fail:
            raise OSError("history blob locked")
        self.entries[word_id] = entry

    async def snapshot(self) -> dict[str, ReviewHistoryEntry]:
        return dict(self.entries)


class SlowWordStore:
    """Word store double that yields to the event loop before each write."""

    def __init__(self, items: list[VocabularyItem], delay: float = 0.01) -> None:
        self.items = {i.id: i for i in items}
        self.delay = delay
        self.writes: list[tuple[str, SrsState]] = []

    async def list_all(self) -> list[VocabularyItem]:
        return list(self.items.values())

    async def get(self, word_id: str) -> VocabularyItem | None:
        return self.items.get(word_id)

    async def update_srs(self, word_id: str, state: SrsState) -> None:
        await asyncio.sleep(self.delay)
        self.writes.append((word_id, state))
        self.items[word_id] = self.items[word_id].with_srs(state)
