"""Request dependencies shared by the route handlers."""

from datetime import date

from fastapi import HTTPException, Request, status

from hobbyu.config.app_config import AppConfig
from hobbyu.config.catalog import Catalog
from hobbyu.core.models import LearnerProfile
from hobbyu.db.database import Database
from hobbyu.db.learners_repository import get_learner


def get_config(request: Request) -> AppConfig:
    return request.app.state.config


def get_database(request: Request) -> Database:
    return request.app.state.db


def get_catalog(request: Request) -> Catalog:
    return request.app.state.catalog


def resolve_today(today: date | None) -> date:
    """Use the client's calendar day when given, else the server's."""
    return today or date.today()


def load_learner_or_404(db: Database, learner_id: str) -> LearnerProfile:
    """Load a learner or raise 404."""
    learner = get_learner(db, learner_id)
    if learner is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Learner '{learner_id}' not found",
        )
    return learner
