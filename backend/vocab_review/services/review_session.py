"""
Review session state machine.

    idle ──start()──> in_progress ──last grade──> complete
      │                   │
      └──start()──> empty │      back() from any state ──> exited

Inside in_progress each word goes prompt -> reveal() -> grade(g). A grade is
committed (word store, then history store) before the cursor moves; a
failed commit leaves the cursor on the same word so it can be graded again.
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from vocab_review.models.review import (
    DEFAULT_SESSION_SIZE,
    ReviewHistoryEntry,
    ReviewOutcome,
    SessionSnapshot,
    SessionState,
)
from vocab_review.models.vocabulary import VocabularyItem
from vocab_review.services.composer import Shuffler, compose_session
from vocab_review.services.scheduler import compute_next_state, utcnow, validate_grade
from vocab_review.services.stores import HistoryStore, WordStore

logger = logging.getLogger(__name__)

_TERMINAL = {SessionState.COMPLETE, SessionState.EMPTY, SessionState.EXITED}


class SessionStateError(RuntimeError):
    """An action was attempted in a state that does not allow it."""


class ReviewPersistenceError(RuntimeError):
    """A store failed while committing a grade. The review was not recorded."""

    def __init__(self, word_id: str, cause: Exception) -> None:
        super().__init__(f"failed to commit review for word {word_id}: {cause}")
        self.word_id = word_id


class ReviewSession:
    def __init__(
        self,
        word_store: WordStore,
        history_store: HistoryStore,
        max_size: int = DEFAULT_SESSION_SIZE,
        rng: Shuffler | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.word_store = word_store
        self.history_store = history_store
        self.max_size = max_size
        self.rng = rng
        self.clock = clock

        self.state = SessionState.IDLE
        self.words: tuple[VocabularyItem, ...] = ()
        self.position = 0
        self.revealed = False
        self.results: list[ReviewOutcome] = []
        self._committing = False

    @property
    def total(self) -> int:
        return len(self.words)

    @property
    def current(self) -> VocabularyItem | None:
        if self.state is not SessionState.IN_PROGRESS:
            return None
        return self.words[self.position]

    def _require(self, state: SessionState, action: str) -> None:
        if self.state is not state:
            raise SessionStateError(f"cannot {action} while session is {self.state.value}")

    async def start(self) -> SessionState:
        self._require(SessionState.IDLE, "start")
        pool = await self.word_store.list_all()
        history = await self.history_store.snapshot()
        self.words = tuple(
            compose_session(pool, history, self.max_size, self.rng, self.clock())
        )
        if not self.words:
            self.state = SessionState.EMPTY
            logger.info("No words to review; session is empty")
        else:
            self.state = SessionState.IN_PROGRESS
            logger.info("Review session started with %d words", len(self.words))
        return self.state

    def reveal(self) -> None:
        """Show the answer for the current word. Calling it again changes nothing."""
        self._require(SessionState.IN_PROGRESS, "reveal")
        self.revealed = True

    async def grade(self, grade: int) -> ReviewOutcome:
        grade = validate_grade(grade)
        self._require(SessionState.IN_PROGRESS, "grade")
        if not self.revealed:
            raise SessionStateError("cannot grade before the answer is revealed")
        if self._committing:
            raise SessionStateError("a grade for this word is already being saved")

        item = self.words[self.position]
        now = self.clock()
        new_state = compute_next_state(item, grade, now)
        entry = ReviewHistoryEntry(word_id=item.id, grade=grade, reviewed_at=now)
        self._committing = True
        try:
            await self.word_store.update_srs(item.id, new_state)
            await self.history_store.put(item.id, entry)
        except Exception as exc:
            logger.warning("Commit failed for word %s (grade %d): %s", item.id, grade, exc)
            raise ReviewPersistenceError(item.id, exc) from exc
        finally:
            self._committing = False

        outcome = ReviewOutcome(word_id=item.id, grade=grade, state=new_state)
        self.results.append(outcome)
        logger.info(
            "Graded %s: grade=%d interval=%d ef=%.2f",
            item.id, grade, new_state.interval, new_state.easiness_factor,
        )
        # back() may have run while the writes were in flight
        if self.state is SessionState.IN_PROGRESS:
            self._advance()
        return outcome

    def _advance(self) -> None:
        self.revealed = False
        if self.position + 1 < len(self.words):
            self.position += 1
        else:
            self.position = len(self.words)
            self.state = SessionState.COMPLETE
            logger.info("Review session complete (%d graded)", len(self.results))

    def back(self) -> None:
        """Leave the session. Grades already committed are kept."""
        if self.state is not SessionState.EXITED:
            logger.info(
                "Review session exited at %d/%d", len(self.results), len(self.words)
            )
        self.state = SessionState.EXITED
        self.revealed = False

    @property
    def finished(self) -> bool:
        return self.state in _TERMINAL

    def snapshot(self, session_id: str | None = None) -> SessionSnapshot:
        return SessionSnapshot(
            session_id=session_id,
            state=self.state,
            position=self.position,
            total=self.total,
            revealed=self.revealed,
            current=self.current,
            results=list(self.results),
        )
