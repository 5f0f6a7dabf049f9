"""Pydantic schemas for Web API.

Serialization models for learners, progress, lessons and certificates.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


# =============================================================================
# LEARNER SCHEMAS
# =============================================================================


class LearnerCreate(BaseModel):
    """Request body for the student application form."""

    full_name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., min_length=1, max_length=200)
    password: str = Field(..., max_length=200)
    confirm_password: str = Field(..., max_length=200)
    age: int
    location: str = Field(..., min_length=1, max_length=200)
    chosen_hobby: str = Field(..., min_length=1, max_length=50)
    motivation: str = Field(..., min_length=1, max_length=4000)


class LearnerResponse(BaseModel):
    """Response for a learner."""

    learner_id: str
    email: str
    full_name: str
    age: int
    location: str
    chosen_hobby: str
    motivation: str
    trial_start_date: str
    trial_completed: bool
    certificate_earned: bool
    current_course_id: str | None = None
    created_at: str


class LearnerListResponse(BaseModel):
    """Response for list of learners."""

    learners: list[LearnerResponse]
    count: int


class StatusUpdate(BaseModel):
    """Lifecycle flags set by the enrollment/grading collaborator.

    Omitted fields are left unchanged.
    """

    trial_completed: bool | None = None
    certificate_earned: bool | None = None
    current_course_id: str | None = None


# =============================================================================
# PROGRESS SCHEMAS
# =============================================================================


class SnapshotResponse(BaseModel):
    """Derived progress figures."""

    total_days: int
    completed_days: int
    current_streak: int
    attendance_rate: int


class ProgressResponse(BaseModel):
    """Progress, phase and eligibility for a learner."""

    learner_id: str
    today: str
    phase: str
    phase_label: str
    progress: SnapshotResponse
    certificate_eligible: bool


class AchievementResponse(BaseModel):
    """A dashboard milestone."""

    key: str
    title: str
    description: str


class DashboardResponse(BaseModel):
    """Everything the dashboard shows."""

    learner_id: str
    full_name: str
    chosen_hobby: str
    course_title: str
    phase: str
    phase_label: str
    progress: SnapshotResponse
    trial_progress_percent: int
    next_lesson_day: int
    certificate_eligible: bool
    achievements: list[AchievementResponse]


# =============================================================================
# LESSON SCHEMAS
# =============================================================================


class QuestionResponse(BaseModel):
    """A quiz question without its answer."""

    question_id: str
    question_text: str
    options: list[str]


class LessonResponse(BaseModel):
    """Today's lesson."""

    lesson_id: str
    day_number: int
    title: str
    video_url: str
    duration_minutes: int
    questions: list[QuestionResponse]


class QuizSubmission(BaseModel):
    """Selected option index per question, in question order."""

    answers: list[int | None] = Field(..., max_length=100)
    today: date | None = None
    video_progress: float | None = Field(default=None, ge=0, le=100)


class QuestionGradeResponse(BaseModel):
    """Grade for one question."""

    question_id: str
    given_answer: int
    correct_answer: int
    is_correct: bool


class QuizResultResponse(BaseModel):
    """Outcome of a quiz submission."""

    lesson_id: str
    total_questions: int
    correct_count: int
    score: int
    band: str
    results: list[QuestionGradeResponse]
    attendance_created: bool


# =============================================================================
# CERTIFICATE SCHEMAS
# =============================================================================


class CertificateResponse(BaseModel):
    """Certificate payload."""

    certificate_id: str
    institution: str
    student_name: str
    course_name: str
    completion_date: str
    location: str
    grade: str
    credit_hours: int


# =============================================================================
# HEALTH SCHEMAS
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    database: str = "ok"
    version: str = "0.1.0"
    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )


def learner_response(data: dict[str, Any]) -> LearnerResponse:
    """Build a LearnerResponse from LearnerProfile.to_dict()."""
    return LearnerResponse(**data)
