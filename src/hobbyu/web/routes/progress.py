"""Progress and dashboard endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status

from hobbyu.config.app_config import AppConfig
from hobbyu.config.catalog import Catalog
from hobbyu.core.dashboard import build_dashboard
from hobbyu.core.progress_tracker import (
    InvalidRangeError,
    compute_snapshot,
    determine_phase,
    evaluate_certificate_eligibility,
)
from hobbyu.db.attendance_repository import get_completed_dates
from hobbyu.db.database import Database
from hobbyu.web.deps import (
    get_catalog,
    get_config,
    get_database,
    load_learner_or_404,
    resolve_today,
)
from hobbyu.web.schemas import DashboardResponse, ProgressResponse

router = APIRouter(prefix="/api/learners", tags=["progress"])


def _progress_unavailable(e: InvalidRangeError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=f"Progress unavailable: {e}",
    )


@router.get("/{learner_id}/progress", response_model=ProgressResponse)
async def get_progress(
    learner_id: str,
    today: date | None = None,
    db: Database = Depends(get_database),
    config: AppConfig = Depends(get_config),
) -> ProgressResponse:
    """Progress snapshot, phase and certificate eligibility."""
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
        raise _progress_unavailable(e)

    phase = determine_phase(learner)
    return ProgressResponse(
        learner_id=learner_id,
        today=today.isoformat(),
        phase=phase.value,
        phase_label=phase.label,
        progress=snapshot.to_dict(),
        certificate_eligible=evaluate_certificate_eligibility(learner, snapshot),
    )


@router.get("/{learner_id}/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    learner_id: str,
    today: date | None = None,
    db: Database = Depends(get_database),
    config: AppConfig = Depends(get_config),
    catalog: Catalog = Depends(get_catalog),
) -> DashboardResponse:
    """Dashboard view for a learner."""
    learner = load_learner_or_404(db, learner_id)
    today = resolve_today(today)

    try:
        dashboard = build_dashboard(
            learner,
            get_completed_dates(db, learner_id, end=today),
            today,
            catalog,
            config.trial.length_days,
        )
    except InvalidRangeError as e:
        raise _progress_unavailable(e)

    return DashboardResponse(**dashboard.to_dict())
