import json
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import AsyncIterator

import aiosqlite

from vocab_review.config import settings
from vocab_review.models.review import STRUGGLING_GRADE, ReviewHistoryEntry
from vocab_review.models.vocabulary import SrsState, VocabularyItem

_db_path: Path | None = None

SCHEMA_SQL = """
PRAGMA journal_mode=WAL;

CREATE TABLE IF NOT EXISTS words (
    id              TEXT PRIMARY KEY,
    finnish         TEXT NOT NULL DEFAULT '',
    english         TEXT NOT NULL DEFAULT '',
    part_of_speech  TEXT,
    categories      TEXT NOT NULL DEFAULT '[]',
    difficulty      TEXT,
    interval        INTEGER,
    repetitions     INTEGER,
    easiness_factor REAL,
    next_review_date TEXT,
    created_at      TEXT NOT NULL DEFAULT (datetime('now')),
    updated_at      TEXT NOT NULL DEFAULT (datetime('now'))
);
CREATE INDEX IF NOT EXISTS idx_words_review ON words(next_review_date);

CREATE TABLE IF NOT EXISTS review_history (
    device_id   TEXT NOT NULL,
    word_id     TEXT NOT NULL,
    grade       INTEGER NOT NULL,
    reviewed_at TEXT NOT NULL,
    PRIMARY KEY (device_id, word_id)
);

CREATE TABLE IF NOT EXISTS schema_version (
    version    INTEGER PRIMARY KEY,
    applied_at TEXT NOT NULL DEFAULT (datetime('now'))
);
INSERT OR IGNORE INTO schema_version(version) VALUES (1);
"""


async def init_sqlite(data_dir: Path) -> Path:
    global _db_path
    _db_path = data_dir / settings.sqlite_filename
    async with aiosqlite.connect(_db_path) as db:
        await db.executescript(SCHEMA_SQL)
        await db.commit()
    return _db_path


@asynccontextmanager
async def connect(db_path: Path) -> AsyncIterator[aiosqlite.Connection]:
    async with aiosqlite.connect(db_path) as db:
        db.row_factory = aiosqlite.Row
        yield db


async def get_db() -> AsyncIterator[aiosqlite.Connection]:
    assert _db_path is not None, "SQLite not initialized"
    async with connect(_db_path) as db:
        yield db


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


# --- Words ---


def _row_to_word(row: aiosqlite.Row) -> VocabularyItem:
    d = dict(row)
    d["categories"] = json.loads(d["categories"] or "[]")
    d.pop("created_at", None)
    d.pop("updated_at", None)
    return VocabularyItem(**d)


async def list_words(db: aiosqlite.Connection) -> list[VocabularyItem]:
    cursor = await db.execute("SELECT * FROM words ORDER BY created_at ASC, id ASC")
    rows = await cursor.fetchall()
    return [_row_to_word(r) for r in rows]


async def get_word(db: aiosqlite.Connection, word_id: str) -> VocabularyItem | None:
    cursor = await db.execute("SELECT * FROM words WHERE id = ?", (word_id,))
    row = await cursor.fetchone()
    return _row_to_word(row) if row else None


async def upsert_word(db: aiosqlite.Connection, item: VocabularyItem) -> VocabularyItem:
    now = _now()
    await db.execute(
        """INSERT INTO words
           (id, finnish, english, part_of_speech, categories, difficulty,
            interval, repetitions, easiness_factor, next_review_date,
            created_at, updated_at)
           VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
           ON CONFLICT(id) DO UPDATE SET
               finnish = excluded.finnish,
               english = excluded.english,
               part_of_speech = excluded.part_of_speech,
               categories = excluded.categories,
               difficulty = excluded.difficulty,
               interval = excluded.interval,
               repetitions = excluded.repetitions,
               easiness_factor = excluded.easiness_factor,
               next_review_date = excluded.next_review_date,
               updated_at = excluded.updated_at""",
        (
            item.id,
            item.finnish,
            item.english,
            item.part_of_speech,
            json.dumps(item.categories),
            item.difficulty.value if item.difficulty else None,
            item.interval,
            item.repetitions,
            item.easiness_factor,
            _iso(item.next_review_date),
            now,
            now,
        ),
    )
    await db.commit()
    return await get_word(db, item.id)  # type: ignore[return-value]


async def update_word_srs(
    db: aiosqlite.Connection, word_id: str, state: SrsState
) -> bool:
    cursor = await db.execute(
        """UPDATE words
           SET interval = ?, repetitions = ?, easiness_factor = ?,
               next_review_date = ?, updated_at = ?
           WHERE id = ?""",
        (
            state.interval,
            state.repetitions,
            state.easiness_factor,
            _iso(state.next_review_date),
            _now(),
            word_id,
        ),
    )
    await db.commit()
    return (cursor.rowcount or 0) > 0


# --- Review history (last outcome per word, per device) ---


def _row_to_entry(row: aiosqlite.Row) -> ReviewHistoryEntry:
    return ReviewHistoryEntry(
        word_id=row["word_id"], grade=row["grade"], reviewed_at=row["reviewed_at"]
    )


async def get_history_entry(
    db: aiosqlite.Connection, device_id: str, word_id: str
) -> ReviewHistoryEntry | None:
    cursor = await db.execute(
        "SELECT * FROM review_history WHERE device_id = ? AND word_id = ?",
        (device_id, word_id),
    )
    row = await cursor.fetchone()
    return _row_to_entry(row) if row else None


async def put_history_entry(
    db: aiosqlite.Connection, device_id: str, entry: ReviewHistoryEntry
) -> None:
    await db.execute(
        "INSERT INTO review_history(device_id, word_id, grade, reviewed_at) VALUES (?, ?, ?, ?) "
        "ON CONFLICT(device_id, word_id) DO UPDATE SET "
        "grade = excluded.grade, reviewed_at = excluded.reviewed_at",
        (device_id, entry.word_id, entry.grade, entry.reviewed_at.isoformat()),
    )
    await db.commit()


async def get_history_map(
    db: aiosqlite.Connection, device_id: str
) -> dict[str, ReviewHistoryEntry]:
    cursor = await db.execute(
        "SELECT * FROM review_history WHERE device_id = ?", (device_id,)
    )
    rows = await cursor.fetchall()
    return {row["word_id"]: _row_to_entry(row) for row in rows}


async def get_review_stats(
    db: aiosqlite.Connection, device_id: str, now: datetime
) -> dict:
    """Return total words, due now, struggling and unseen counts for one device."""
    cursor = await db.execute(
        """SELECT COUNT(*) AS total,
                  SUM(CASE WHEN w.next_review_date IS NULL
                            OR julianday(w.next_review_date) <= julianday(?)
                      THEN 1 ELSE 0 END) AS due,
                  SUM(CASE WHEN h.grade <= ? THEN 1 ELSE 0 END) AS struggling,
                  SUM(CASE WHEN h.word_id IS NULL THEN 1 ELSE 0 END) AS unseen
           FROM words w
           LEFT JOIN review_history h
                  ON h.word_id = w.id AND h.device_id = ?""",
        (now.isoformat(), STRUGGLING_GRADE, device_id),
    )
    row = await cursor.fetchone()
    return {
        "total": row[0] or 0,
        "due": row[1] or 0,
        "struggling": row[2] or 0,
        "unseen": row[3] or 0,
    }


# --- Store adapters (one connection per operation) ---


class SqliteWordStore:
    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path

    async def list_all(self) -> list[VocabularyItem]:
        async with connect(self.db_path) as db:
            return await list_words(db)

    async def get(self, word_id: str) -> VocabularyItem | None:
        async with connect(self.db_path) as db:
            return await get_word(db, word_id)

    async def update_srs(self, word_id: str, state: SrsState) -> None:
        async with connect(self.db_path) as db:
            if not await update_word_srs(db, word_id, state):
                raise KeyError(word_id)

    async def upsert(self, item: VocabularyItem) -> None:
        async with connect(self.db_path) as db:
            await upsert_word(db, item)


class SqliteHistoryStore:
    def __init__(self, db_path: Path, device_id: str) -> None:
        self.db_path = db_path
        self.device_id = device_id

    async def get(self, word_id: str) -> ReviewHistoryEntry | None:
        async with connect(self.db_path) as db:
            return await get_history_entry(db, self.device_id, word_id)

    async def put(self, word_id: str, entry: ReviewHistoryEntry) -> None:
        if entry.word_id != word_id:
            raise ValueError(f"entry is for {entry.word_id}, not {word_id}")
        async with connect(self.db_path) as db:
            await put_history_entry(db, self.device_id, entry)

    async def snapshot(self) -> dict[str, ReviewHistoryEntry]:
        async with connect(self.db_path) as db:
            return await get_history_map(db, self.device_id)


def current_db_path() -> Path:
    assert _db_path is not None, "SQLite not initialized"
    return _db_path


def get_word_store() -> SqliteWordStore:
    return SqliteWordStore(current_db_path())


def get_history_store() -> SqliteHistoryStore:
    return SqliteHistoryStore(current_db_path(), settings.device_id)
