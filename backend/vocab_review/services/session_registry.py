from __future__ import annotations

import logging
import uuid

from vocab_review.config import settings
from vocab_review.services.review_session import ReviewSession

logger = logging.getLogger(__name__)

_live_sessions: dict[str, ReviewSession] = {}


def register_session(session: ReviewSession) -> str:
    """Keep a session alive between requests and return its ID.

    When the registry is full the oldest session is dropped to make room.
    """
    while len(_live_sessions) >= max(settings.max_live_sessions, 1):
        oldest = next(iter(_live_sessions))
        logger.warning("Evicting review session %s, registry full", oldest)
        _live_sessions.pop(oldest).back()
    session_id = str(uuid.uuid4())
    _live_sessions[session_id] = session
    return session_id


def get_session(session_id: str) -> ReviewSession | None:
    return _live_sessions.get(session_id)


def discard_session(session_id: str) -> ReviewSession | None:
    session = _live_sessions.pop(session_id, None)
    if session is not None:
        logger.info("Discarded review session %s", session_id)
    return session


def release_if_finished(session_id: str) -> bool:
    """Drop a session that has reached a terminal state. Returns True if dropped."""
    session = _live_sessions.get(session_id)
    if session is None or not session.finished:
        return False
    discard_session(session_id)
    return True


def live_session_count() -> int:
    return len(_live_sessions)


def clear_sessions() -> None:
    _live_sessions.clear()
