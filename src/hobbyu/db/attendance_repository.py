"""Repository functions for attendance table.

Uniqueness on (learner_id, date) is enforced by the table; recording the
same day twice updates the existing row instead of adding a second one.
"""

from __future__ import annotations

import sqlite3
from datetime import date

import structlog

from hobbyu.core.models import AttendanceRecord, decode_attendance
from hobbyu.db.database import Database

logger = structlog.get_logger(__name__)


def record_attendance(
    db: Database,
    learner_id: str,
    day: date,
    lesson_completed: bool = True,
    logged_in: bool = True,
) -> bool:
    """Record attendance for a learner on a day.

    A completed lesson is never downgraded to not completed by a later
    login-only record.

    Args:
        db: Database handle
        learner_id: Learner identifier
        day: Calendar day
        lesson_completed: Whether the day's lesson was completed
        logged_in: Whether the learner logged in

    Returns:
        True if a new row was created, False if the day was already recorded
    """
    with db.connect() as conn:
        return upsert_attendance(conn, learner_id, day, lesson_completed, logged_in)


def upsert_attendance(
    conn: sqlite3.Connection,
    learner_id: str,
    day: date,
    lesson_completed: bool = True,
    logged_in: bool = True,
) -> bool:
    """Write an attendance row on an open connection.

    The caller owns the transaction, so this can be combined with other
    writes that must commit or roll back together.
    """
    existing = conn.execute(
        "SELECT 1 FROM attendance WHERE learner_id = ? AND date = ?",
        (learner_id, day.isoformat()),
    ).fetchone()

    conn.execute(
        """
        INSERT INTO attendance (learner_id, date, logged_in, lesson_completed)
        VALUES (?, ?, ?, ?)
        ON CONFLICT (learner_id, date) DO UPDATE SET
            logged_in = MAX(logged_in, excluded.logged_in),
            lesson_completed = MAX(lesson_completed, excluded.lesson_completed)
        """,
        (learner_id, day.isoformat(), int(logged_in), int(lesson_completed)),
    )

    created = existing is None
    logger.debug(
        "attendance.recorded",
        learner_id=learner_id,
        date=day.isoformat(),
        created=created,
    )
    return created


def get_attendance(
    db: Database,
    learner_id: str,
    start: date | None = None,
    end: date | None = None,
) -> list[AttendanceRecord]:
    """Get attendance records for a learner, optionally within [start, end]."""
    query = "SELECT * FROM attendance WHERE learner_id = ?"
    params: list[str] = [learner_id]
    if start is not None:
        query += " AND date >= ?"
        params.append(start.isoformat())
    if end is not None:
        query += " AND date <= ?"
        params.append(end.isoformat())
    query += " ORDER BY date"

    with db.connect() as conn:
        rows = conn.execute(query, params).fetchall()

    return [decode_attendance(row) for row in rows]


def get_completed_dates(
    db: Database,
    learner_id: str,
    start: date | None = None,
    end: date | None = None,
) -> set[date]:
    """Get the set of days on which the learner completed the lesson."""
    return {
        record.date
        for record in get_attendance(db, learner_id, start, end)
        if record.lesson_completed
    }
