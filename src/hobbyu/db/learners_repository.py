"""Repository functions for learners table.

Provides create/read operations for learner profiles and the status update
used by the enrollment/grading collaborator.
"""

from __future__ import annotations

import sqlite3
from dataclasses import replace
from datetime import date

import structlog

from hobbyu.config.catalog import Catalog
from hobbyu.core.models import Hobby, LearnerProfile, decode_learner
from hobbyu.core.progress_tracker import determine_phase
from hobbyu.db.database import Database

logger = structlog.get_logger(__name__)


class LearnerNotFoundError(Exception):
    """Raised when no learner has the given ID."""

    def __init__(self, learner_id: str):
        self.learner_id = learner_id
        super().__init__(f"Learner '{learner_id}' not found")


class DuplicateLearnerError(Exception):
    """Raised when the email is already registered."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"A learner with email '{email}' already exists")


class InvalidTransitionError(Exception):
    """Raised when a status change would move a learner backwards."""

    pass


def _generate_learner_id(conn: sqlite3.Connection) -> str:
    """Generate next available learner ID (lrn01, lrn02, ...)."""
    existing_nums = []
    for row in conn.execute("SELECT learner_id FROM learners"):
        learner_id = row["learner_id"]
        if learner_id.startswith("lrn"):
            try:
                existing_nums.append(int(learner_id[3:]))
            except ValueError:
                pass
    next_num = max(existing_nums, default=0) + 1
    return f"lrn{next_num:02d}"


def insert_learner(
    db: Database,
    email: str,
    full_name: str,
    age: int,
    location: str,
    chosen_hobby: Hobby,
    motivation: str,
    trial_start_date: date,
) -> LearnerProfile:
    """Insert a new learner at the start of the trial.

    Returns:
        The stored LearnerProfile

    Raises:
        DuplicateLearnerError: If the email is already registered
    """
    with db.connect() as conn:
        existing = conn.execute(
            "SELECT 1 FROM learners WHERE lower(email) = lower(?)", (email,)
        ).fetchone()
        if existing is not None:
            raise DuplicateLearnerError(email)

        learner_id = _generate_learner_id(conn)
        conn.execute(
            """
            INSERT INTO learners (
                learner_id, email, full_name, age, location,
                chosen_hobby, motivation, trial_start_date
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                learner_id,
                email,
                full_name,
                age,
                location,
                chosen_hobby.value,
                motivation,
                trial_start_date.isoformat(),
            ),
        )
        row = conn.execute(
            "SELECT * FROM learners WHERE learner_id = ?", (learner_id,)
        ).fetchone()

    logger.debug("learners.inserted", learner_id=learner_id)
    return decode_learner(row)


def get_learner(db: Database, learner_id: str) -> LearnerProfile | None:
    """Get learner by ID.

    Returns:
        LearnerProfile if found, None otherwise

    Raises:
        RecordDecodeError: If the stored row is malformed
    """
    with db.connect() as conn:
        row = conn.execute(
            "SELECT * FROM learners WHERE learner_id = ?", (learner_id,)
        ).fetchone()

    if row is None:
        return None

    return decode_learner(row)


def require_learner(db: Database, learner_id: str) -> LearnerProfile:
    """Get learner by ID or raise LearnerNotFoundError."""
    learner = get_learner(db, learner_id)
    if learner is None:
        raise LearnerNotFoundError(learner_id)
    return learner


def get_all_learners(db: Database) -> list[LearnerProfile]:
    """Get all learners, oldest first."""
    with db.connect() as conn:
        rows = conn.execute(
            "SELECT * FROM learners ORDER BY created_at, learner_id"
        ).fetchall()

    return [decode_learner(row) for row in rows]


def _check_transition(current: LearnerProfile, updated: LearnerProfile) -> None:
    """Reject status changes that move the learner backwards."""
    if current.trial_completed and not updated.trial_completed:
        raise InvalidTransitionError("trial_completed cannot be reset")
    if current.certificate_earned and not updated.certificate_earned:
        raise InvalidTransitionError("certificate_earned cannot be revoked")
    if updated.certificate_earned and not updated.trial_completed:
        raise InvalidTransitionError("certificate requires a completed trial")
    if updated.current_course_id and not updated.trial_completed:
        raise InvalidTransitionError("advanced course requires a completed trial")
    if current.current_course_id and not updated.current_course_id:
        raise InvalidTransitionError("current_course_id cannot be cleared")


def _check_course(catalog: Catalog, learner: LearnerProfile, course_id: str) -> None:
    hobby = learner.chosen_hobby
    if catalog.course_by_id(course_id, hobby) is None:
        offered = ", ".join(c.course_id for c in catalog.courses_for(hobby))
        raise InvalidTransitionError(
            f"unknown course '{course_id}' for {hobby.value} (offered: {offered})"
        )


def update_learner_status(
    db: Database,
    learner_id: str,
    trial_completed: bool | None = None,
    certificate_earned: bool | None = None,
    current_course_id: str | None = None,
    catalog: Catalog | None = None,
) -> LearnerProfile:
    """Update lifecycle flags for a learner.

    Only arguments that are not None are changed. Flags are one-way: once
    set they stay set, and a course assignment can be changed but not
    cleared. Passing an empty current_course_id means "clear".

    When a catalog is given, a new current_course_id must name one of the
    catalog's courses for the learner's hobby.

    Raises:
        LearnerNotFoundError: If learner doesn't exist
        InvalidTransitionError: If the change would move the learner backwards
            or the course is not offered for the learner's hobby
    """
    current = require_learner(db, learner_id)

    if current_course_id and catalog is not None:
        _check_course(catalog, current, current_course_id)

    updated = replace(
        current,
        trial_completed=(
            current.trial_completed if trial_completed is None else trial_completed
        ),
        certificate_earned=(
            current.certificate_earned
            if certificate_earned is None
            else certificate_earned
        ),
        current_course_id=(
            current.current_course_id
            if current_course_id is None
            else (current_course_id or None)
        ),
    )

    _check_transition(current, updated)

    with db.connect() as conn:
        conn.execute(
            """
            UPDATE learners SET
                trial_completed = ?,
                certificate_earned = ?,
                current_course_id = ?
            WHERE learner_id = ?
            """,
            (
                int(updated.trial_completed),
                int(updated.certificate_earned),
                updated.current_course_id,
                learner_id,
            ),
        )

    logger.info(
        "learners.status_updated",
        learner_id=learner_id,
        phase=determine_phase(updated).value,
    )
    return updated
