"""Daily lesson flow.

Responsibilities:
- Pick today's lesson from the learner's progress
- Gate the quiz on the lesson video having been watched
- Record a completed lesson: grade the quiz, append the result and mark
  the day's attendance
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any, Sequence

import structlog

from hobbyu.config.catalog import Catalog
from hobbyu.core.models import LearnerProfile, Lesson, LessonResult
from hobbyu.core.progress_tracker import (
    TRIAL_LENGTH_DAYS,
    InvalidRangeError,
    ProgressSnapshot,
)
from hobbyu.core.quiz_grader import QuizGrade, grade_quiz
from hobbyu.db.attendance_repository import upsert_attendance
from hobbyu.db.database import Database
from hobbyu.db.learners_repository import require_learner
from hobbyu.db.lessons_repository import get_lesson, get_lesson_for_day
from hobbyu.db.results_repository import insert_result

logger = structlog.get_logger(__name__)

# Percentage of the video that counts as watched
VIDEO_WATCHED_THRESHOLD = 90


class LessonNotFoundError(Exception):
    """Raised when a lesson doesn't exist."""

    def __init__(self, lesson_id: str):
        self.lesson_id = lesson_id
        super().__init__(f"Lesson '{lesson_id}' not found")


class LessonNotInCourseError(Exception):
    """Raised when a lesson belongs to a course the learner isn't taking."""

    def __init__(self, lesson_id: str, course_id: str):
        self.lesson_id = lesson_id
        self.course_id = course_id
        super().__init__(f"Lesson '{lesson_id}' is not part of course '{course_id}'")


class LessonDayError(ValueError):
    """Raised when a lesson-day is in the future or after the trial."""

    def __init__(self, day: date, reason: str):
        self.day = day
        self.reason = reason
        super().__init__(f"{day.isoformat()} {reason}")


@dataclass
class LessonCompletion:
    """Outcome of completing a lesson."""

    lesson_id: str
    grade: QuizGrade
    result: LessonResult
    attendance_created: bool

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "lesson_id": self.lesson_id,
            "grade": self.grade.to_dict(),
            "result": self.result.to_dict(),
            "attendance_created": self.attendance_created,
        }


def next_lesson_day(snapshot: ProgressSnapshot) -> int:
    """Day number of the next lesson ("Day N of M")."""
    if snapshot.total_days <= 0:
        return 1
    return min(snapshot.completed_days + 1, snapshot.total_days)


def video_watched(progress_percent: float) -> bool:
    """Whether enough of the video was watched to unlock the quiz."""
    return progress_percent >= VIDEO_WATCHED_THRESHOLD


def check_lesson_day(
    trial_start_date: date,
    day: date,
    current_day: date | None = None,
    trial_length_days: int = TRIAL_LENGTH_DAYS,
) -> None:
    """Check that a lesson-day can be recorded.

    The day must fall inside the trial window and must not be later than
    current_day (the server's calendar day).

    Raises:
        InvalidRangeError: If day is before the trial start
        LessonDayError: If day is in the future or after the last trial day
    """
    if day < trial_start_date:
        raise InvalidRangeError(trial_start_date, day)

    if current_day is None:
        current_day = date.today()
    if day > current_day:
        raise LessonDayError(day, f"is in the future (today is {current_day.isoformat()})")

    last_day = trial_start_date + timedelta(days=trial_length_days - 1)
    if day > last_day:
        raise LessonDayError(day, f"is after the trial ended on {last_day.isoformat()}")


def _course_keys(catalog: Catalog, learner: LearnerProfile) -> tuple[str, str]:
    # Hobby-specific course first, then the shared one
    course = catalog.trial_course_for(learner.chosen_hobby)
    return course.course_id, course.key


def get_todays_lesson(
    db: Database,
    catalog: Catalog,
    learner_id: str,
    snapshot: ProgressSnapshot,
) -> Lesson | None:
    """Find the lesson for the learner's next lesson day.

    Hobby-specific lessons (course key "cooking-trial") take precedence over
    the shared trial lessons (course key "trial").
    """
    learner = require_learner(db, learner_id)
    day = next_lesson_day(snapshot)

    for course_key in _course_keys(catalog, learner):
        lesson = get_lesson_for_day(db, course_key, day)
        if lesson is not None:
            return lesson

    logger.info("lesson_not_available", learner_id=learner_id, day=day)
    return None


def complete_lesson(
    db: Database,
    catalog: Catalog,
    learner_id: str,
    lesson_id: str,
    answers: Sequence[int | None],
    today: date,
    now: datetime | None = None,
    current_day: date | None = None,
    trial_length_days: int = TRIAL_LENGTH_DAYS,
) -> LessonCompletion:
    """Grade a quiz and record the completed lesson-day.

    The result and the attendance row are written in one transaction.

    Args:
        db: Database handle
        catalog: Course catalog, used to check the lesson's course
        learner_id: Learner identifier
        lesson_id: Lesson identifier
        answers: Selected option index per question
        today: Calendar day the lesson counts for
        now: Completion timestamp (defaults to current UTC time)
        current_day: Latest day that can be recorded (defaults to date.today())
        trial_length_days: Trial length

    Returns:
        LessonCompletion

    Raises:
        LearnerNotFoundError: If the learner doesn't exist
        LessonNotFoundError: If the lesson doesn't exist
        LessonNotInCourseError: If the lesson isn't part of the learner's trial
        InvalidRangeError: If today is before the learner's trial start
        LessonDayError: If today is in the future or after the trial
        QuizSubmissionError: If the answers are incomplete or invalid
    """
    learner = require_learner(db, learner_id)
    check_lesson_day(learner.trial_start_date, today, current_day, trial_length_days)

    lesson = get_lesson(db, lesson_id)
    if lesson is None:
        raise LessonNotFoundError(lesson_id)

    course_keys = _course_keys(catalog, learner)
    if lesson.course_key not in course_keys:
        raise LessonNotInCourseError(lesson_id, course_keys[0])

    grade = grade_quiz(lesson.questions, answers)

    if now is None:
        now = datetime.now(timezone.utc)

    result = LessonResult(
        learner_id=learner_id,
        lesson_id=lesson_id,
        score=grade.score,
        completed_at=now.isoformat(),
    )
    with db.connect() as conn:
        insert_result(conn, result)
        created = upsert_attendance(conn, learner_id, today, lesson_completed=True)

    logger.info(
        "lesson_completed",
        learner_id=learner_id,
        lesson_id=lesson_id,
        score=grade.score,
        date=today.isoformat(),
    )

    return LessonCompletion(
        lesson_id=lesson_id,
        grade=grade,
        result=result,
        attendance_created=created,
    )
