"""
Review session router. Drives ReviewSession on behalf of the UI.

Endpoints:
  POST   /review/sessions             - compose and start a session
  GET    /review/sessions/{id}        - current snapshot
  POST   /review/sessions/{id}/reveal - show the answer
  POST   /review/sessions/{id}/grade  - commit a 1–5 grade and advance
  DELETE /review/sessions/{id}        - leave the session

Sessions that reach complete or empty are dropped from the registry once
their final snapshot has been returned.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from vocab_review.config import settings
from vocab_review.db.sqlite import get_history_store, get_word_store
from vocab_review.models.review import GradeRequest, SessionSnapshot, StartSessionRequest
from vocab_review.services.review_session import (
    ReviewPersistenceError,
    ReviewSession,
    SessionStateError,
)
from vocab_review.services.scheduler import InvalidGradeError
from vocab_review.services.session_registry import (
    discard_session,
    get_session,
    register_session,
    release_if_finished,
)
from vocab_review.services.stores import HistoryStore, WordStore

logger = logging.getLogger(__name__)
router = APIRouter()


def _lookup(session_id: str) -> ReviewSession:
    session = get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Review session not found")
    return session


@router.post("/sessions", response_model=SessionSnapshot, status_code=201)
async def start_session(
    body: StartSessionRequest | None = None,
    word_store: WordStore = Depends(get_word_store),
    history_store: HistoryStore = Depends(get_history_store),
) -> SessionSnapshot:
    max_size = settings.session_max_size
    if body is not None and body.max_size is not None:
        max_size = body.max_size
    session = ReviewSession(word_store, history_store, max_size=max_size)
    await session.start()
    session_id = register_session(session)
    snapshot = session.snapshot(session_id)
    release_if_finished(session_id)
    return snapshot


@router.get("/sessions/{session_id}", response_model=SessionSnapshot)
async def read_session(session_id: str) -> SessionSnapshot:
    return _lookup(session_id).snapshot(session_id)


@router.post("/sessions/{session_id}/reveal", response_model=SessionSnapshot)
async def reveal_answer(session_id: str) -> SessionSnapshot:
    session = _lookup(session_id)
    try:
        session.reveal()
    except SessionStateError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return session.snapshot(session_id)


@router.post("/sessions/{session_id}/grade", response_model=SessionSnapshot)
async def grade_word(session_id: str, body: GradeRequest) -> SessionSnapshot:
    session = _lookup(session_id)
    try:
        await session.grade(body.grade)
    except InvalidGradeError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except SessionStateError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except ReviewPersistenceError as exc:
        logger.error("Review for %s not saved in session %s", exc.word_id, session_id)
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    snapshot = session.snapshot(session_id)
    release_if_finished(session_id)
    return snapshot


@router.delete("/sessions/{session_id}", response_model=SessionSnapshot)
async def leave_session(session_id: str) -> SessionSnapshot:
    session = _lookup(session_id)
    session.back()
    discard_session(session_id)
    return session.snapshot(session_id)
