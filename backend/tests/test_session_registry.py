"""Tests for the in-process registry of live review sessions."""

from __future__ import annotations

import pytest

from tests.utils import NOW, make_word
from vocab_review.config import settings
from vocab_review.models.review import SessionState
from vocab_review.services.review_session import ReviewSession
from vocab_review.services.session_registry import (
    get_session,
    live_session_count,
    register_session,
    release_if_finished,
)
from vocab_review.services.stores import InMemoryHistoryStore, InMemoryWordStore


def _session(words=(), rng=None) -> ReviewSession:
    return ReviewSession(
        InMemoryWordStore(list(words)), InMemoryHistoryStore(), rng=rng, clock=lambda: NOW
    )


@pytest.mark.asyncio
async def test_unfinished_session_is_kept(rng):
    session = _session([make_word("a")], rng)
    await session.start()
    sid = register_session(session)

    assert release_if_finished(sid) is False
    assert get_session(sid) is session


@pytest.mark.asyncio
async def test_completed_and_empty_sessions_are_released(rng):
    done = _session([make_word("a")], rng)
    await done.start()
    done.reveal()
    await done.grade(4)
    empty = _session(rng=rng)
    await empty.start()
    assert empty.state is SessionState.EMPTY

    done_id = register_session(done)
    empty_id = register_session(empty)

    assert release_if_finished(done_id) is True
    assert release_if_finished(empty_id) is True
    assert get_session(done_id) is None
    assert get_session(empty_id) is None
    assert live_session_count() == 0


def test_release_unknown_session_is_noop():
    assert release_if_finished("missing") is False


def test_full_registry_evicts_oldest(monkeypatch):
    monkeypatch.setattr(settings, "max_live_sessions", 2)
    first = _session()
    ids = [register_session(first), register_session(_session())]

    newest = register_session(_session())

    assert live_session_count() == 2
    assert get_session(ids[0]) is None
    assert first.state is SessionState.EXITED
    assert get_session(ids[1]) is not None
    assert get_session(newest) is not None
