"""Learner sign-up.

Validates the student application form and creates the learner profile
that starts the trial. Credentials are checked for the form rules only and
then dropped; storing them is the auth provider's job.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date

import structlog

from hobbyu.config.app_config import SignupConfig
from hobbyu.core.models import Hobby, LearnerProfile
from hobbyu.db.database import Database
from hobbyu.db.learners_repository import insert_learner

logger = structlog.get_logger(__name__)

# Email validation pattern
EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+$")


class SignUpError(Exception):
    """Raised when a sign-up application is invalid."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


@dataclass
class SignUpApplication:
    """Student application form."""

    full_name: str
    email: str
    password: str
    confirm_password: str
    age: int
    location: str
    chosen_hobby: str
    motivation: str


def validate_email(email: str) -> bool:
    """Validate email format."""
    return bool(EMAIL_PATTERN.match(email))


def validate_application(
    application: SignUpApplication,
    config: SignupConfig | None = None,
) -> list[str]:
    """Check an application against the form rules.

    Returns:
        List of error messages (empty when valid)
    """
    if config is None:
        config = SignupConfig()

    errors: list[str] = []

    required = {
        "Full name": application.full_name,
        "Email": application.email,
        "Location": application.location,
        "Hobby": application.chosen_hobby,
        "Motivation": application.motivation,
    }
    for label, value in required.items():
        if not value or not value.strip():
            errors.append(f"{label} is required")

    if application.email and not validate_email(application.email.strip()):
        errors.append("Invalid email format")

    if application.password != application.confirm_password:
        errors.append("Passwords do not match")

    if len(application.password) < config.min_password_length:
        errors.append(
            f"Password must be at least {config.min_password_length} characters"
        )

    if not config.min_age <= application.age <= config.max_age:
        errors.append(f"Age must be between {config.min_age} and {config.max_age}")

    if application.chosen_hobby and application.chosen_hobby.strip():
        try:
            Hobby.parse(application.chosen_hobby)
        except ValueError:
            errors.append(f"Unknown hobby: {application.chosen_hobby}")

    return errors


def register_learner(
    db: Database,
    application: SignUpApplication,
    today: date,
    config: SignupConfig | None = None,
) -> LearnerProfile:
    """Validate an application and create the learner profile.

    The trial starts on `today`.

    Raises:
        SignUpError: If the application is invalid
        DuplicateLearnerError: If the email is already registered
    """
    errors = validate_application(application, config)
    if errors:
        logger.info("signup_rejected", email=application.email, errors=errors)
        raise SignUpError(errors)

    learner = insert_learner(
        db,
        email=application.email.strip(),
        full_name=application.full_name.strip(),
        age=application.age,
        location=application.location.strip(),
        chosen_hobby=Hobby.parse(application.chosen_hobby),
        motivation=application.motivation.strip(),
        trial_start_date=today,
    )

    logger.info(
        "learner.registered",
        learner_id=learner.learner_id,
        hobby=learner.chosen_hobby.value,
        trial_start_date=today.isoformat(),
    )
    return learner
