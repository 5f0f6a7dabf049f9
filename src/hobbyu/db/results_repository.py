"""Repository functions for lesson_results table."""

from __future__ import annotations

import sqlite3

import structlog

from hobbyu.core.models import LessonResult, decode_lesson_result
from hobbyu.db.database import Database

logger = structlog.get_logger(__name__)


def insert_result(conn: sqlite3.Connection, result: LessonResult) -> None:
    """Append a lesson result.

    Runs on the caller's connection so the result commits together with
    the attendance row for the same lesson-day.

    Raises:
        sqlite3.IntegrityError: If the learner or lesson doesn't exist,
            or the score is outside [0, 100]
    """
    conn.execute(
        """
        INSERT INTO lesson_results (learner_id, lesson_id, score, completed_at)
        VALUES (?, ?, ?, ?)
        """,
        (result.learner_id, result.lesson_id, result.score, result.completed_at),
    )

    logger.debug(
        "lesson_results.inserted",
        learner_id=result.learner_id,
        lesson_id=result.lesson_id,
        score=result.score,
    )


def get_results(db: Database, learner_id: str) -> list[LessonResult]:
    """Get every lesson result for a learner in completion order."""
    with db.connect() as conn:
        rows = conn.execute(
            """
            SELECT * FROM lesson_results
            WHERE learner_id = ?
            ORDER BY completed_at, result_id
            """,
            (learner_id,),
        ).fetchall()

    return [decode_lesson_result(row) for row in rows]
