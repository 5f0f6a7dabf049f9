"""Repository functions for lessons and questions tables.

Lessons are imported from a YAML file with this structure:

    course: trial
    lessons:
      - day: 1
        title: Introduction to Professional Techniques
        video_url: https://...
        duration_minutes: 15
        questions:
          - text: What is the most important aspect of professional development?
            options: [Consistency in practice, Natural talent, ...]
            correct_answer: 0
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import structlog
import yaml

from hobbyu.core.models import Lesson, Question, RecordDecodeError
from hobbyu.db.database import Database

logger = structlog.get_logger(__name__)


class LessonImportError(Exception):
    """Error importing lessons from a file."""

    pass


def _lesson_id(course_key: str, day_number: int) -> str:
    return f"{course_key}-d{day_number:02d}"


def upsert_lesson(db: Database, lesson: Lesson) -> None:
    """Insert or replace a lesson and its questions."""
    with db.connect() as conn:
        conn.execute("DELETE FROM questions WHERE lesson_id = ?", (lesson.lesson_id,))
        conn.execute(
            """
            INSERT INTO lessons (
                lesson_id, course_key, day_number, title, video_url, duration_minutes
            ) VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT (lesson_id) DO UPDATE SET
                title = excluded.title,
                video_url = excluded.video_url,
                duration_minutes = excluded.duration_minutes
            """,
            (
                lesson.lesson_id,
                lesson.course_key,
                lesson.day_number,
                lesson.title,
                lesson.video_url,
                lesson.duration_minutes,
            ),
        )
        for position, question in enumerate(lesson.questions):
            conn.execute(
                """
                INSERT INTO questions (
                    question_id, lesson_id, position, question_text, options, correct_answer
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    question.question_id,
                    lesson.lesson_id,
                    position,
                    question.question_text,
                    json.dumps(question.options, ensure_ascii=False),
                    question.correct_answer,
                ),
            )

    logger.debug("lessons.upserted", lesson_id=lesson.lesson_id)


def get_lesson(db: Database, lesson_id: str) -> Lesson | None:
    """Get lesson by ID with its questions in order."""
    with db.connect() as conn:
        row = conn.execute(
            "SELECT * FROM lessons WHERE lesson_id = ?", (lesson_id,)
        ).fetchone()
        if row is None:
            return None
        question_rows = conn.execute(
            "SELECT * FROM questions WHERE lesson_id = ? ORDER BY position",
            (lesson_id,),
        ).fetchall()

    return _row_to_lesson(row, question_rows)


def get_lesson_for_day(db: Database, course_key: str, day_number: int) -> Lesson | None:
    """Get the lesson scheduled for a day.

    Falls back to the latest lesson at or before that day, so a course
    with fewer lessons than days keeps showing its last lesson.
    """
    with db.connect() as conn:
        row = conn.execute(
            """
            SELECT lesson_id FROM lessons
            WHERE course_key = ? AND day_number <= ?
            ORDER BY day_number DESC
            LIMIT 1
            """,
            (course_key, day_number),
        ).fetchone()

    if row is None:
        return None

    return get_lesson(db, row["lesson_id"])


def _parse_question(
    data: dict[str, Any], lesson_id: str, number: int
) -> Question:
    text = data.get("text") or data.get("question_text")
    options = data.get("options")
    correct = data.get("correct_answer")

    if not text:
        raise RecordDecodeError("question", f"{lesson_id} q{number}: missing text")
    if not isinstance(options, list) or len(options) < 2:
        raise RecordDecodeError(
            "question", f"{lesson_id} q{number}: needs at least two options"
        )
    if isinstance(correct, bool) or not isinstance(correct, int):
        raise RecordDecodeError(
            "question", f"{lesson_id} q{number}: correct_answer must be an index"
        )
    if not 0 <= correct < len(options):
        raise RecordDecodeError(
            "question", f"{lesson_id} q{number}: correct_answer out of range"
        )

    return Question(
        question_id=f"{lesson_id}-q{number:02d}",
        question_text=str(text),
        options=[str(o) for o in options],
        correct_answer=correct,
    )


def parse_lessons(data: dict[str, Any]) -> list[Lesson]:
    """Parse a lessons document into Lesson objects.

    Raises:
        RecordDecodeError: If a lesson or question is malformed
    """
    course_key = str(data.get("course", "trial"))
    lessons: list[Lesson] = []

    for entry in data.get("lessons", []) or []:
        day = entry.get("day")
        if isinstance(day, bool) or not isinstance(day, int) or day < 1:
            raise RecordDecodeError("lesson", f"invalid day: {day!r}")
        if not entry.get("title"):
            raise RecordDecodeError("lesson", f"day {day}: missing title")

        lesson_id = _lesson_id(course_key, day)
        questions = [
            _parse_question(q, lesson_id, i)
            for i, q in enumerate(entry.get("questions", []) or [], start=1)
        ]
        lessons.append(
            Lesson(
                lesson_id=lesson_id,
                course_key=course_key,
                day_number=day,
                title=str(entry["title"]),
                video_url=str(entry.get("video_url", "")),
                duration_minutes=int(entry.get("duration_minutes", 15)),
                questions=questions,
            )
        )

    return lessons


def import_lessons_yaml(db: Database, path: Path) -> list[Lesson]:
    """Import lessons from a YAML file.

    Returns:
        The imported lessons

    Raises:
        LessonImportError: If the file can't be read or is malformed
    """
    if not path.exists():
        raise LessonImportError(f"Lessons file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise LessonImportError(f"Invalid YAML in {path}: {e}") from e

    try:
        lessons = parse_lessons(data)
    except RecordDecodeError as e:
        raise LessonImportError(str(e)) from e

    for lesson in lessons:
        upsert_lesson(db, lesson)

    logger.info("lessons.imported", path=str(path), count=len(lessons))
    return lessons


def _row_to_lesson(row, question_rows) -> Lesson:
    """Convert database rows to Lesson."""
    return Lesson(
        lesson_id=row["lesson_id"],
        course_key=row["course_key"],
        day_number=row["day_number"],
        title=row["title"],
        video_url=row["video_url"],
        duration_minutes=row["duration_minutes"],
        questions=[
            Question(
                question_id=q["question_id"],
                question_text=q["question_text"],
                options=json.loads(q["options"]),
                correct_answer=q["correct_answer"],
            )
            for q in question_rows
        ],
    )
