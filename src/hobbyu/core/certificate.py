"""Certificate payload.

Builds the data printed on a learner's completion certificate. Turning the
payload into a PDF or image happens client-side.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from datetime import date
from typing import Any, Sequence

import structlog

from hobbyu.config.app_config import CertificateConfig
from hobbyu.config.catalog import Catalog
from hobbyu.core.models import LearnerProfile, LessonResult
from hobbyu.core.progress_tracker import evaluate_certificate_eligibility

logger = structlog.get_logger(__name__)

# Lower bound of each letter grade, highest first
GRADE_THRESHOLDS: list[tuple[int, str]] = [
    (97, "A+"),
    (93, "A"),
    (90, "A-"),
    (87, "B+"),
    (83, "B"),
    (80, "B-"),
    (77, "C+"),
    (73, "C"),
    (70, "C-"),
    (60, "D"),
]


class CertificateUnavailableError(Exception):
    """Raised when the learner has not earned a certificate."""

    def __init__(self, learner_id: str):
        self.learner_id = learner_id
        super().__init__(
            f"Learner '{learner_id}' has not earned a certificate yet. "
            "Complete the 3-month trial course to earn it."
        )


@dataclass
class CertificatePayload:
    """Display data for a certificate of completion."""

    certificate_id: str
    institution: str
    student_name: str
    course_name: str
    completion_date: str
    location: str
    grade: str
    credit_hours: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "certificate_id": self.certificate_id,
            "institution": self.institution,
            "student_name": self.student_name,
            "course_name": self.course_name,
            "completion_date": self.completion_date,
            "location": self.location,
            "grade": self.grade,
            "credit_hours": self.credit_hours,
        }


def letter_grade(results: Sequence[LessonResult]) -> str:
    """Letter grade from the mean quiz score.

    A learner with no recorded quiz results gets "A+".
    """
    if not results:
        return "A+"
    mean = sum(r.score for r in results) / len(results)
    for threshold, letter in GRADE_THRESHOLDS:
        if mean >= threshold:
            return letter
    return "F"


def certificate_id_for(learner_id: str, course_id: str) -> str:
    """Stable certificate ID, e.g. CERT-1A2B3C4D."""
    digest = hashlib.sha256(f"{learner_id}:{course_id}".encode("utf-8")).hexdigest()
    return f"CERT-{digest[:8].upper()}"


def build_certificate(
    profile: LearnerProfile,
    results: Sequence[LessonResult],
    issued_on: date,
    catalog: Catalog,
    config: CertificateConfig | None = None,
) -> CertificatePayload:
    """Build the certificate payload for a learner.

    Raises:
        CertificateUnavailableError: If the learner is not eligible or the
            certificate has not been awarded
    """
    if config is None:
        config = CertificateConfig()

    if not evaluate_certificate_eligibility(profile) or not profile.certificate_earned:
        raise CertificateUnavailableError(profile.learner_id)

    course = catalog.trial_course_for(profile.chosen_hobby)

    payload = CertificatePayload(
        certificate_id=certificate_id_for(profile.learner_id, course.course_id),
        institution=config.institution,
        student_name=profile.full_name,
        course_name=course.title,
        completion_date=issued_on.strftime(config.date_format),
        location=profile.location,
        grade=letter_grade(results),
        credit_hours=config.credit_hours,
    )

    logger.info(
        "certificate_built",
        learner_id=profile.learner_id,
        certificate_id=payload.certificate_id,
    )
    return payload
