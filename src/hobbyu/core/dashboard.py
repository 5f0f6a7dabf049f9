"""Learner dashboard view model."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable

from hobbyu.config.catalog import Catalog
from hobbyu.core.lesson_plan import next_lesson_day
from hobbyu.core.models import LearnerProfile
from hobbyu.core.progress_tracker import (
    TRIAL_LENGTH_DAYS,
    Phase,
    ProgressSnapshot,
    compute_snapshot,
    determine_phase,
    evaluate_certificate_eligibility,
    round_half_up,
)


@dataclass
class Achievement:
    """A milestone shown on the dashboard."""

    key: str
    title: str
    description: str

    def to_dict(self) -> dict[str, str]:
        return {"key": self.key, "title": self.title, "description": self.description}


@dataclass
class Dashboard:
    """Everything the dashboard page shows for a learner."""

    learner_id: str
    full_name: str
    chosen_hobby: str
    course_title: str
    phase: Phase
    snapshot: ProgressSnapshot
    trial_progress_percent: int
    next_lesson_day: int
    certificate_eligible: bool
    achievements: list[Achievement] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "learner_id": self.learner_id,
            "full_name": self.full_name,
            "chosen_hobby": self.chosen_hobby,
            "course_title": self.course_title,
            "phase": self.phase.value,
            "phase_label": self.phase.label,
            "progress": self.snapshot.to_dict(),
            "trial_progress_percent": self.trial_progress_percent,
            "next_lesson_day": self.next_lesson_day,
            "certificate_eligible": self.certificate_eligible,
            "achievements": [a.to_dict() for a in self.achievements],
        }


def earned_achievements(
    profile: LearnerProfile, snapshot: ProgressSnapshot
) -> list[Achievement]:
    """List the milestones the learner has reached."""
    achievements: list[Achievement] = []
    if snapshot.current_streak >= 7:
        achievements.append(
            Achievement(
                key="first_week",
                title="First Week Complete",
                description="Completed 7 consecutive days",
            )
        )
    if snapshot.completed_days >= 30:
        achievements.append(
            Achievement(
                key="one_month",
                title="One Month Milestone",
                description="Consistent learning for 30 days",
            )
        )
    if profile.trial_completed:
        achievements.append(
            Achievement(
                key="trial_complete",
                title="Trial Course Complete",
                description="Ready for advanced courses",
            )
        )
    return achievements


def build_dashboard(
    profile: LearnerProfile,
    attendance_dates: Iterable[date],
    today: date,
    catalog: Catalog,
    trial_length_days: int = TRIAL_LENGTH_DAYS,
) -> Dashboard:
    """Build the dashboard for a learner.

    Raises:
        InvalidRangeError: If the learner's trial starts after today
    """
    snapshot = compute_snapshot(
        profile.trial_start_date, today, attendance_dates, trial_length_days
    )

    if snapshot.total_days > 0:
        percent = min(snapshot.completed_days / snapshot.total_days * 100, 100)
    else:
        percent = 0

    return Dashboard(
        learner_id=profile.learner_id,
        full_name=profile.full_name,
        chosen_hobby=profile.chosen_hobby.value,
        course_title=catalog.trial_course_for(profile.chosen_hobby).title,
        phase=determine_phase(profile),
        snapshot=snapshot,
        trial_progress_percent=round_half_up(percent),
        next_lesson_day=next_lesson_day(snapshot),
        certificate_eligible=evaluate_certificate_eligibility(profile, snapshot),
        achievements=earned_achievements(profile, snapshot),
    )
