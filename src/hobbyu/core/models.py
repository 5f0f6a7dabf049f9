"""Domain records for learners, attendance and lesson results.

Rows coming back from storage (or JSON bodies coming in from clients) are
decoded here against a strict shape. Anything malformed raises
RecordDecodeError instead of leaking None values into the progress rules.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping


class RecordDecodeError(ValueError):
    """Raised when a record does not match its expected shape."""

    def __init__(self, record_type: str, reason: str):
        self.record_type = record_type
        self.reason = reason
        super().__init__(f"Invalid {record_type} record: {reason}")


class Hobby(str, Enum):
    """Hobbies a learner can enrol in."""

    PHOTOGRAPHY = "Photography"
    COOKING = "Cooking"
    GARDENING = "Gardening"
    WRITING = "Writing"
    PAINTING = "Painting"
    MUSIC = "Music"
    FITNESS = "Fitness"
    TECHNOLOGY = "Technology"
    CRAFTS = "Crafts"
    TRAVEL = "Travel"
    OTHER = "Other"

    @classmethod
    def parse(cls, value: str) -> Hobby:
        """Parse a hobby name case-insensitively.

        Raises:
            ValueError: If the name is not a known hobby
        """
        normalized = value.strip().lower()
        for hobby in cls:
            if hobby.value.lower() == normalized:
                return hobby
        raise ValueError(f"Unknown hobby: {value!r}")


# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass
class LearnerProfile:
    """A learner enrolled in the trial course."""

    learner_id: str
    email: str
    full_name: str
    age: int
    location: str
    chosen_hobby: Hobby
    motivation: str
    trial_start_date: date
    trial_completed: bool = False
    certificate_earned: bool = False
    current_course_id: str | None = None
    created_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "learner_id": self.learner_id,
            "email": self.email,
            "full_name": self.full_name,
            "age": self.age,
            "location": self.location,
            "chosen_hobby": self.chosen_hobby.value,
            "motivation": self.motivation,
            "trial_start_date": self.trial_start_date.isoformat(),
            "trial_completed": self.trial_completed,
            "certificate_earned": self.certificate_earned,
            "current_course_id": self.current_course_id,
            "created_at": self.created_at,
        }


@dataclass
class AttendanceRecord:
    """Attendance for one learner on one calendar day."""

    learner_id: str
    date: date
    logged_in: bool = True
    lesson_completed: bool = False


@dataclass
class LessonResult:
    """Quiz score for a completed lesson."""

    learner_id: str
    lesson_id: str
    score: int
    completed_at: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "learner_id": self.learner_id,
            "lesson_id": self.lesson_id,
            "score": self.score,
            "completed_at": self.completed_at,
        }


@dataclass
class Question:
    """Multiple-choice question attached to a lesson."""

    question_id: str
    question_text: str
    options: list[str]
    correct_answer: int


@dataclass
class Lesson:
    """A daily video lesson with its quiz."""

    lesson_id: str
    course_key: str
    day_number: int
    title: str
    video_url: str
    duration_minutes: int = 15
    questions: list[Question] = field(default_factory=list)


# =============================================================================
# DECODERS
# =============================================================================


def _require(row: Mapping[str, Any], key: str, record_type: str) -> Any:
    if key not in row or row[key] is None:
        raise RecordDecodeError(record_type, f"missing field '{key}'")
    return row[key]


def _as_bool(value: Any, key: str, record_type: str) -> bool:
    # SQLite hands booleans back as 0/1
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise RecordDecodeError(record_type, f"field '{key}' is not a boolean")


def _as_date(value: Any, key: str, record_type: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            # A bare date or a full ISO timestamp; timestamps keep the calendar day
            return datetime.fromisoformat(value).date()
        except ValueError:
            pass
    raise RecordDecodeError(record_type, f"field '{key}' is not a date: {value!r}")


def _as_int(value: Any, key: str, record_type: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise RecordDecodeError(record_type, f"field '{key}' is not an integer")
    return value


def decode_learner(row: Mapping[str, Any]) -> LearnerProfile:
    """Decode a learner row into a LearnerProfile.

    Args:
        row: Mapping with learner columns (sqlite3.Row or dict)

    Returns:
        LearnerProfile

    Raises:
        RecordDecodeError: If a field is missing or has the wrong shape
    """
    record_type = "learner"
    row = dict(row)

    hobby_raw = _require(row, "chosen_hobby", record_type)
    try:
        hobby = Hobby.parse(str(hobby_raw))
    except ValueError as e:
        raise RecordDecodeError(record_type, str(e)) from e

    current_course_id = row.get("current_course_id") or None

    return LearnerProfile(
        learner_id=str(_require(row, "learner_id", record_type)),
        email=str(_require(row, "email", record_type)),
        full_name=str(_require(row, "full_name", record_type)),
        age=_as_int(_require(row, "age", record_type), "age", record_type),
        location=str(_require(row, "location", record_type)),
        chosen_hobby=hobby,
        motivation=str(row.get("motivation") or ""),
        trial_start_date=_as_date(
            _require(row, "trial_start_date", record_type), "trial_start_date", record_type
        ),
        trial_completed=_as_bool(
            row.get("trial_completed", False), "trial_completed", record_type
        ),
        certificate_earned=_as_bool(
            row.get("certificate_earned", False), "certificate_earned", record_type
        ),
        current_course_id=current_course_id,
        created_at=str(row.get("created_at") or ""),
    )


def decode_attendance(row: Mapping[str, Any]) -> AttendanceRecord:
    """Decode an attendance row."""
    record_type = "attendance"
    row = dict(row)
    return AttendanceRecord(
        learner_id=str(_require(row, "learner_id", record_type)),
        date=_as_date(_require(row, "date", record_type), "date", record_type),
        logged_in=_as_bool(row.get("logged_in", True), "logged_in", record_type),
        lesson_completed=_as_bool(
            row.get("lesson_completed", False), "lesson_completed", record_type
        ),
    )


def decode_lesson_result(row: Mapping[str, Any]) -> LessonResult:
    """Decode a lesson result row. Scores must lie in [0, 100]."""
    record_type = "lesson_result"
    row = dict(row)
    score = _as_int(_require(row, "score", record_type), "score", record_type)
    if not 0 <= score <= 100:
        raise RecordDecodeError(record_type, f"score out of range: {score}")
    return LessonResult(
        learner_id=str(_require(row, "learner_id", record_type)),
        lesson_id=str(_require(row, "lesson_id", record_type)),
        score=score,
        completed_at=str(_require(row, "completed_at", record_type)),
    )
