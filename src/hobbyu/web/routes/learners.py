"""Learner endpoints: sign-up, lookup and lifecycle status."""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status

from hobbyu.config.app_config import AppConfig
from hobbyu.config.catalog import Catalog
from hobbyu.core.signup import SignUpApplication, SignUpError, register_learner
from hobbyu.db.database import Database
from hobbyu.db.learners_repository import (
    DuplicateLearnerError,
    InvalidTransitionError,
    LearnerNotFoundError,
    get_all_learners,
    update_learner_status,
)
from hobbyu.web.deps import get_catalog, get_config, get_database, load_learner_or_404
from hobbyu.web.schemas import (
    LearnerCreate,
    LearnerListResponse,
    LearnerResponse,
    StatusUpdate,
    learner_response,
)

router = APIRouter(prefix="/api/learners", tags=["learners"])


@router.get("", response_model=LearnerListResponse)
async def list_learners(db: Database = Depends(get_database)) -> LearnerListResponse:
    """List all learners."""
    learners = [learner_response(s.to_dict()) for s in get_all_learners(db)]
    return LearnerListResponse(learners=learners, count=len(learners))


@router.get("/{learner_id}", response_model=LearnerResponse)
async def get_learner(
    learner_id: str,
    db: Database = Depends(get_database),
) -> LearnerResponse:
    """Get a specific learner by ID."""
    learner = load_learner_or_404(db, learner_id)
    return learner_response(learner.to_dict())


@router.post("", response_model=LearnerResponse, status_code=status.HTTP_201_CREATED)
async def sign_up(
    body: LearnerCreate,
    db: Database = Depends(get_database),
    config: AppConfig = Depends(get_config),
) -> LearnerResponse:
    """Submit a student application and start the trial today."""
    application = SignUpApplication(
        full_name=body.full_name,
        email=body.email,
        password=body.password,
        confirm_password=body.confirm_password,
        age=body.age,
        location=body.location,
        chosen_hobby=body.chosen_hobby,
        motivation=body.motivation,
    )

    try:
        learner = register_learner(db, application, date.today(), config.signup)
    except SignUpError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except DuplicateLearnerError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        )

    return learner_response(learner.to_dict())


@router.put("/{learner_id}/status", response_model=LearnerResponse)
async def set_status(
    learner_id: str,
    body: StatusUpdate,
    db: Database = Depends(get_database),
    catalog: Catalog = Depends(get_catalog),
) -> LearnerResponse:
    """Set lifecycle flags (trial completion, certificate, advanced course)."""
    try:
        learner = update_learner_status(
            db,
            learner_id,
            trial_completed=body.trial_completed,
            certificate_earned=body.certificate_earned,
            current_course_id=body.current_course_id,
            catalog=catalog,
        )
    except LearnerNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )
    except InvalidTransitionError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        )

    return learner_response(learner.to_dict())
