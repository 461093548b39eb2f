"""
Read-only views over the word pool.

Endpoints:
  GET /words          - every word with its SRS fields
  GET /words/due      - words due now, beginner tier first
  GET /words/stats    - total / due / struggling / unseen counts
  GET /words/{id}     - single word
"""
from __future__ import annotations

import aiosqlite
from fastapi import APIRouter, Depends, HTTPException

from vocab_review.config import settings
from vocab_review.db.sqlite import get_db, get_review_stats, get_word_store
from vocab_review.models.vocabulary import VocabularyItem, VocabularyList, WordStats
from vocab_review.services.due import select_due
from vocab_review.services.scheduler import utcnow
from vocab_review.services.stores import WordStore

router = APIRouter()


@router.get("/", response_model=VocabularyList)
async def list_all_words(store: WordStore = Depends(get_word_store)) -> VocabularyList:
    items = await store.list_all()
    return VocabularyList(items=items, total=len(items))


@router.get("/due", response_model=VocabularyList)
async def list_due_words(store: WordStore = Depends(get_word_store)) -> VocabularyList:
    items = select_due(await store.list_all(), utcnow())
    return VocabularyList(items=items, total=len(items))


@router.get("/stats", response_model=WordStats)
async def word_stats(db: aiosqlite.Connection = Depends(get_db)) -> WordStats:
    return WordStats(**await get_review_stats(db, settings.device_id, utcnow()))


@router.get("/{word_id}", response_model=VocabularyItem)
async def get_one_word(
    word_id: str, store: WordStore = Depends(get_word_store)
) -> VocabularyItem:
    item = await store.get(word_id)
    if not item:
        raise HTTPException(status_code=404, detail="Word not found")
    return item
