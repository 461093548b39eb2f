"""
Session composition.

A session is drawn from the word pool in three tiers, concatenated and
then cut to ``max_size``:

  1. struggling - due, and the last grade on this device was 1 or 2
  2. unseen     - no history entry on this device
  3. fill       - due words already seen with a passing grade, only used
                  when tiers 1 and 2 leave room

Tiers 1 and 2 are shuffled with the injected ``rng``; tier 3 keeps the
due-set order (beginner words first).
"""
from __future__ import annotations

import logging
import random
from collections.abc import Iterable
from datetime import datetime
from typing import Protocol

from vocab_review.models.review import (
    DEFAULT_SESSION_SIZE,
    STRUGGLING_GRADE,
    ReviewHistoryEntry,
)
from vocab_review.models.vocabulary import VocabularyItem
from vocab_review.services.due import select_due

logger = logging.getLogger(__name__)


class HistoryLookup(Protocol):
    def get(self, word_id: str, /) -> ReviewHistoryEntry | None: ...


class Shuffler(Protocol):
    def shuffle(self, x: list, /) -> None: ...


def _unique(pool: Iterable[VocabularyItem]) -> list[VocabularyItem]:
    seen: set[str] = set()
    out: list[VocabularyItem] = []
    for item in pool:
        if item.id not in seen:
            seen.add(item.id)
            out.append(item)
    return out


def compose_session(
    pool: Iterable[VocabularyItem],
    history: HistoryLookup,
    max_size: int = DEFAULT_SESSION_SIZE,
    rng: Shuffler | None = None,
    now: datetime | None = None,
) -> list[VocabularyItem]:
    """Build one bounded, duplicate-free practice batch. May return []."""
    if max_size < 0:
        raise ValueError(f"max_size must be >= 0, got {max_size}")
    if max_size == 0:
        return []
    rng = rng if rng is not None else random.Random()
    words = _unique(pool)

    due = select_due(words, now)
    due_ids = {item.id for item in due}

    struggling: list[VocabularyItem] = []
    unseen: list[VocabularyItem] = []
    for item in words:
        entry = history.get(item.id)
        if entry is None:
            unseen.append(item)
        elif entry.grade <= STRUGGLING_GRADE and item.id in due_ids:
            struggling.append(item)

    rng.shuffle(struggling)
    rng.shuffle(unseen)
    session = struggling + unseen

    fill: list[VocabularyItem] = []
    if len(session) < max_size:
        # select_due already covers new words; only seen-and-passed ones are left
        taken = {item.id for item in session}
        fill = [item for item in due if item.id not in taken]
        session += fill

    logger.debug(
        "Composed session: struggling=%d unseen=%d fill=%d max_size=%d",
        len(struggling), len(unseen), len(fill), max_size,
    )
    return session[:max_size]
