"""Daily lesson endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status

from hobbyu.config.app_config import AppConfig
from hobbyu.config.catalog import Catalog
from hobbyu.core.lesson_plan import (
    VIDEO_WATCHED_THRESHOLD,
    LessonDayError,
    LessonNotFoundError,
    LessonNotInCourseError,
    complete_lesson,
    get_todays_lesson,
    video_watched,
)
from hobbyu.core.progress_tracker import InvalidRangeError, compute_snapshot
from hobbyu.core.quiz_grader import QuizSubmissionError
from hobbyu.db.attendance_repository import get_completed_dates
from hobbyu.db.database import Database
from hobbyu.web.deps import (
    get_catalog,
    get_config,
    get_database,
    load_learner_or_404,
    resolve_today,
)
from hobbyu.web.schemas import (
    LessonResponse,
    QuestionResponse,
    QuizResultResponse,
    QuizSubmission,
)

router = APIRouter(prefix="/api/learners", tags=["lessons"])


@router.get("/{learner_id}/lessons/today", response_model=LessonResponse)
async def todays_lesson(
    learner_id: str,
    today: date | None = None,
    db: Database = Depends(get_database),
    config: AppConfig = Depends(get_config),
    catalog: Catalog = Depends(get_catalog),
) -> LessonResponse:
    """Get today's lesson. Answers are not included."""
    learner = load_learner_or_404(db, learner_id)
    today = resolve_today(today)

    try:
        snapshot = compute_snapshot(
            learner.trial_start_date,
            today,
            get_completed_dates(db, learner_id, end=today),
            config.trial.length_days,
        )
    except InvalidRangeError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Progress unavailable: {e}",
        )

    lesson = get_todays_lesson(db, catalog, learner_id, snapshot)
    if lesson is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No lesson available. Check back tomorrow for your next lesson.",
        )

    return LessonResponse(
        lesson_id=lesson.lesson_id,
        day_number=lesson.day_number,
        title=lesson.title,
        video_url=lesson.video_url,
        duration_minutes=lesson.duration_minutes,
        questions=[
            QuestionResponse(
                question_id=q.question_id,
                question_text=q.question_text,
                options=q.options,
            )
            for q in lesson.questions
        ],
    )


@router.post(
    "/{learner_id}/lessons/{lesson_id}/quiz",
    response_model=QuizResultResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_quiz(
    learner_id: str,
    lesson_id: str,
    body: QuizSubmission,
    db: Database = Depends(get_database),
    config: AppConfig = Depends(get_config),
    catalog: Catalog = Depends(get_catalog),
) -> QuizResultResponse:
    """Grade a quiz and record the completed lesson-day.

    The day defaults to the server's date; a client-supplied day may not
    be in the future or outside the trial.
    """
    load_learner_or_404(db, learner_id)

    if body.video_progress is not None and not video_watched(body.video_progress):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Watch at least {VIDEO_WATCHED_THRESHOLD}% of the video before taking the quiz",
        )

    try:
        completion = complete_lesson(
            db,
            catalog,
            learner_id,
            lesson_id,
            body.answers,
            resolve_today(body.today),
            trial_length_days=config.trial.length_days,
        )
    except LessonNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )
    except QuizSubmissionError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except (InvalidRangeError, LessonDayError, LessonNotInCourseError) as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        )

    grade = completion.grade
    return QuizResultResponse(
        lesson_id=completion.lesson_id,
        total_questions=grade.total_questions,
        correct_count=grade.correct_count,
        score=grade.score,
        band=grade.band,
        results=[r.to_dict() for r in grade.results],
        attendance_created=completion.attendance_created,
    )
