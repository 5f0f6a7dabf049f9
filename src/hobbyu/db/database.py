"""SQLite database connection and schema management.

Provides connection management and schema initialization for Hobby University.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

import structlog

logger = structlog.get_logger(__name__)

# Default database location
DEFAULT_DB_PATH = Path("data/db/hobbyu.db")


class Database:
    """Handle on a SQLite database file.

    Passed explicitly to the repository functions so that no module keeps
    a global connection around.
    """

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or DEFAULT_DB_PATH

    def init(self) -> None:
        """Create the database file and all tables if they don't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        with self.connect() as conn:
            _create_schema(conn)

        logger.info("database.initialized", path=str(self.db_path))

    @contextmanager
    def connect(self) -> Generator[sqlite3.Connection, None, None]:
        """Get database connection as context manager.

        Yields:
            SQLite connection with row factory set to sqlite3.Row

        Example:
            with db.connect() as conn:
                rows = conn.execute("SELECT * FROM learners").fetchall()
        """
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")

        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()


def init_db(db_path: Path | None = None) -> Database:
    """Initialize a database and return its handle.

    Args:
        db_path: Path to database file. Defaults to data/db/hobbyu.db
    """
    db = Database(db_path)
    db.init()
    return db


def _create_schema(conn: sqlite3.Connection) -> None:
    """Create database schema.

    Uses IF NOT EXISTS for idempotency.
    """
    conn.executescript(
        """
        -- Learner profiles. Lifecycle flags are only written by the
        -- enrollment/grading collaborator through update_learner_status.
        CREATE TABLE IF NOT EXISTS learners (
            learner_id TEXT PRIMARY KEY,
            email TEXT NOT NULL UNIQUE,
            full_name TEXT NOT NULL,
            age INTEGER NOT NULL,
            location TEXT NOT NULL,
            chosen_hobby TEXT NOT NULL,
            motivation TEXT NOT NULL DEFAULT '',
            trial_start_date TEXT NOT NULL,
            trial_completed INTEGER NOT NULL DEFAULT 0,
            certificate_earned INTEGER NOT NULL DEFAULT 0,
            current_course_id TEXT,
            created_at TEXT NOT NULL DEFAULT (datetime('now'))
        );

        -- One row per learner per calendar day
        CREATE TABLE IF NOT EXISTS attendance (
            learner_id TEXT NOT NULL REFERENCES learners(learner_id),
            date TEXT NOT NULL,
            logged_in INTEGER NOT NULL DEFAULT 1,
            lesson_completed INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL DEFAULT (datetime('now')),
            UNIQUE (learner_id, date)
        );

        -- Quiz scores, append-only
        CREATE TABLE IF NOT EXISTS lesson_results (
            result_id INTEGER PRIMARY KEY AUTOINCREMENT,
            learner_id TEXT NOT NULL REFERENCES learners(learner_id),
            lesson_id TEXT NOT NULL REFERENCES lessons(lesson_id),
            score INTEGER NOT NULL CHECK(score BETWEEN 0 AND 100),
            completed_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS lessons (
            lesson_id TEXT PRIMARY KEY,
            course_key TEXT NOT NULL,
            day_number INTEGER NOT NULL CHECK(day_number >= 1),
            title TEXT NOT NULL,
            video_url TEXT NOT NULL,
            duration_minutes INTEGER NOT NULL DEFAULT 15,
            UNIQUE (course_key, day_number)
        );

        CREATE TABLE IF NOT EXISTS questions (
            question_id TEXT PRIMARY KEY,
            lesson_id TEXT NOT NULL REFERENCES lessons(lesson_id) ON DELETE CASCADE,
            position INTEGER NOT NULL,
            question_text TEXT NOT NULL,
            options TEXT NOT NULL,
            correct_answer INTEGER NOT NULL
        );

        -- Indexes
        CREATE INDEX IF NOT EXISTS idx_attendance_learner ON attendance(learner_id, date);
        CREATE INDEX IF NOT EXISTS idx_results_learner ON lesson_results(learner_id);
        CREATE INDEX IF NOT EXISTS idx_questions_lesson ON questions(lesson_id, position);
        """
    )
