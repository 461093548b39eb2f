"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import random

import pytest

from vocab_review.services.session_registry import clear_sessions


@pytest.fixture()
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture(autouse=True)
def _clear_live_sessions():
    yield
    clear_sessions()
