"""Storage seams used by the review session, with in-memory implementations."""
from __future__ import annotations

from typing import Protocol

from vocab_review.models.review import ReviewHistoryEntry
from vocab_review.models.vocabulary import SrsState, VocabularyItem


class WordStore(Protocol):
    async def list_all(self) -> list[VocabularyItem]: ...

    async def get(self, word_id: str) -> VocabularyItem | None: ...

    async def update_srs(self, word_id: str, state: SrsState) -> None: ...

    async def upsert(self, item: VocabularyItem) -> None: ...


class HistoryStore(Protocol):
    async def get(self, word_id: str) -> ReviewHistoryEntry | None: ...

    async def put(self, word_id: str, entry: ReviewHistoryEntry) -> None: ...

    async def snapshot(self) -> dict[str, ReviewHistoryEntry]: ...


class InMemoryWordStore:
    def __init__(self, items: list[VocabularyItem] | None = None) -> None:
        self._items: dict[str, VocabularyItem] = {i.id: i for i in items or []}

    async def list_all(self) -> list[VocabularyItem]:
        return list(self._items.values())

    async def get(self, word_id: str) -> VocabularyItem | None:
        return self._items.get(word_id)

    async def update_srs(self, word_id: str, state: SrsState) -> None:
        if word_id not in self._items:
            raise KeyError(word_id)
        self._items[word_id] = self._items[word_id].with_srs(state)

    async def upsert(self, item: VocabularyItem) -> None:
        self._items[item.id] = item


class InMemoryHistoryStore:
    def __init__(self, entries: dict[str, ReviewHistoryEntry] | None = None) -> None:
        self._entries: dict[str, ReviewHistoryEntry] = dict(entries or {})

    async def get(self, word_id: str) -> ReviewHistoryEntry | None:
        return self._entries.get(word_id)

    async def put(self, word_id: str, entry: ReviewHistoryEntry) -> None:
        self._entries[word_id] = entry

    async def snapshot(self) -> dict[str, ReviewHistoryEntry]:
        return dict(self._entries)
