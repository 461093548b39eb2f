from datetime import datetime, timedelta, timezone

import pytest

from tests.utils import NOW, make_word
from vocab_review.models.vocabulary import SrsState
from vocab_review.services.scheduler import (
    InvalidGradeError,
    compute_next_state,
    next_easiness,
)


@pytest.mark.parametrize("grade", [3, 4, 5])
def test_first_passing_review_schedules_one_day(grade):
    result = compute_next_state(SrsState(), grade, NOW)

    assert result.interval == 1
    assert result.repetitions == 1
    assert result.next_review_date == NOW + timedelta(days=1)


def test_second_passing_review_schedules_six_days():
    result = compute_next_state(SrsState(interval=1, repetitions=1, easiness_factor=2.5), 4, NOW)

    assert result.interval == 6
    assert result.repetitions == 2


def test_mature_review_multiplies_interval_by_easiness():
    current = SrsState(interval=6, repetitions=2, easiness_factor=2.5)

    result = compute_next_state(current, 3, NOW)

    assert result.interval == 15
    assert result.repetitions == 3
    assert result.next_review_date == NOW + timedelta(days=15)


def test_interval_rounds_half_up():
    # 5 * 2.5 = 12.5
    result = compute_next_state(SrsState(interval=5, repetitions=2, easiness_factor=2.5), 4, NOW)

    assert result.interval == 13


@pytest.mark.parametrize("grade", [1, 2])
def test_failing_grade_resets_mature_word(grade):
    current = SrsState(interval=40, repetitions=7, easiness_factor=2.8)

    result = compute_next_state(current, grade, NOW)

    assert result.interval == 1
    assert result.repetitions == 0
    assert result.next_review_date == NOW + timedelta(days=1)


def test_fresh_word_graded_easy_gains_easiness():
    result = compute_next_state(SrsState(), 5, NOW)

    assert result.interval == 1
    assert result.repetitions == 1
    assert result.easiness_factor > 2.5
    assert result.easiness_factor == pytest.approx(2.6)


@pytest.mark.parametrize(
    "grade, expected",
    [(1, 1.96), (2, 2.18), (3, 2.36), (4, 2.5), (5, 2.6)],
)
def test_easiness_formula_applies_to_every_grade(grade, expected):
    assert next_easiness(2.5, grade) == pytest.approx(expected)
    assert compute_next_state(SrsState(), grade, NOW).easiness_factor == pytest.approx(expected)


@pytest.mark.parametrize("grade", [1, 2, 3, 4, 5])
def test_easiness_never_drops_below_floor(grade):
    state = SrsState(easiness_factor=1.3)
    for _ in range(10):
        state = compute_next_state(state, grade, NOW)
        assert state.easiness_factor >= 1.3


def test_missing_fields_use_defaults():
    explicit = compute_next_state(SrsState(interval=0, repetitions=0, easiness_factor=2.5), 3, NOW)
    implicit = compute_next_state(SrsState(), 3, NOW)

    assert explicit == implicit


@pytest.mark.parametrize("grade", [0, 6, -1, 3.0, "3", True, None])
def test_invalid_grade_is_rejected(grade):
    with pytest.raises(InvalidGradeError):
        compute_next_state(SrsState(), grade, NOW)


def test_input_state_is_not_modified():
    word = make_word("w1", interval=6, repetitions=2, easiness_factor=2.5)
    before = word.model_dump()

    result = compute_next_state(word, 5, NOW)

    assert word.model_dump() == before
    assert set(result.model_dump()) == {
        "interval", "repetitions", "easiness_factor", "next_review_date",
    }


def test_default_clock_schedules_roughly_one_day_ahead():
    before = datetime.now(timezone.utc)

    result = compute_next_state(SrsState(), 3)

    hours = (result.next_review_date - before).total_seconds() / 3600
    assert 23 < hours < 25


def test_naive_now_is_treated_as_utc():
    naive = datetime(2025, 3, 1, 12, 0)

    result = compute_next_state(SrsState(), 3, naive)

    assert result.next_review_date == NOW + timedelta(days=1)
    assert result.next_review_date.tzinfo is not None


def test_successive_passes_never_move_due_date_backwards():
    state = SrsState()
    now = NOW
    previous_interval = 0
    previous_due = now
    for grade in [3, 4, 5, 3, 3, 3, 3]:
        state = compute_next_state(state, grade, now)
        assert state.interval >= previous_interval
        assert state.next_review_date > previous_due
        previous_interval = state.interval
        previous_due = state.next_review_date
        now = state.next_review_date
