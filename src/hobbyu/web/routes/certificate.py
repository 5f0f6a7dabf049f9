"""Certificate endpoint."""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status

from hobbyu.config.app_config import AppConfig
from hobbyu.config.catalog import Catalog
from hobbyu.core.certificate import CertificateUnavailableError, build_certificate
from hobbyu.db.database import Database
from hobbyu.db.results_repository import get_results
from hobbyu.web.deps import (
    get_catalog,
    get_config,
    get_database,
    load_learner_or_404,
    resolve_today,
)
from hobbyu.web.schemas import CertificateResponse

router = APIRouter(prefix="/api/learners", tags=["certificate"])


@router.get("/{learner_id}/certificate", response_model=CertificateResponse)
async def get_certificate(
    learner_id: str,
    issued_on: date | None = None,
    db: Database = Depends(get_database),
    config: AppConfig = Depends(get_config),
    catalog: Catalog = Depends(get_catalog),
) -> CertificateResponse:
    """Certificate payload for a learner who earned it."""
    learner = load_learner_or_404(db, learner_id)

    try:
        payload = build_certificate(
            learner,
            get_results(db, learner_id),
            resolve_today(issued_on),
            catalog,
            config.certificate,
        )
    except CertificateUnavailableError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e),
        )

    return CertificateResponse(**payload.to_dict())
