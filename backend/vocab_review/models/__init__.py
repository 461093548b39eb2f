from vocab_review.models.review import (
    DEFAULT_SESSION_SIZE,
    MAX_GRADE,
    MIN_GRADE,
    PASSING_GRADE,
    STRUGGLING_GRADE,
    GradeRequest,
    ReviewHistoryEntry,
    ReviewOutcome,
    SessionSnapshot,
    SessionState,
    StartSessionRequest,
)
from vocab_review.models.vocabulary import (
    DEFAULT_EASINESS,
    MIN_EASINESS,
    Difficulty,
    SrsState,
    VocabularyItem,
    VocabularyList,
    WordStats,
)

__all__ = [
    "DEFAULT_EASINESS",
    "DEFAULT_SESSION_SIZE",
    "Difficulty",
    "GradeRequest",
    "MAX_GRADE",
    "MIN_EASINESS",
    "MIN_GRADE",
    "PASSING_GRADE",
    "ReviewHistoryEntry",
    "ReviewOutcome",
    "STRUGGLING_GRADE",
    "SessionSnapshot",
    "SessionState",
    "SrsState",
    "StartSessionRequest",
    "VocabularyItem",
    "VocabularyList",
    "WordStats",
]
