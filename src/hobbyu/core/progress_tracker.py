"""Progress and certification rules.

Responsibilities:
- Derive the progress snapshot (day count, completed days, streak,
  attendance rate) from the trial start date and completed lesson-days
- Determine the learner's phase from the persisted lifecycle flags
- Decide certificate eligibility

Everything here is pure: callers fetch the profile and attendance dates,
pass in `today`, and get plain values back.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Any, Iterable

from hobbyu.core.models import LearnerProfile

TRIAL_LENGTH_DAYS = 90


class InvalidRangeError(ValueError):
    """Raised when the trial start date lies after `today`."""

    def __init__(self, trial_start_date: date, today: date):
        self.trial_start_date = trial_start_date
        self.today = today
        super().__init__(
            f"Trial start date {trial_start_date.isoformat()} is after {today.isoformat()}"
        )


class Phase(str, Enum):
    """Learner lifecycle phase."""

    TRIAL = "trial"
    CERTIFIED = "certified"
    ADVANCED = "advanced"

    @property
    def label(self) -> str:
        """Human-readable label shown on the dashboard."""
        return PHASE_LABELS[self]


PHASE_LABELS = {
    Phase.TRIAL: "Trial Course",
    Phase.CERTIFIED: "Certified Graduate",
    Phase.ADVANCED: "Advanced Course",
}


@dataclass(frozen=True)
class ProgressSnapshot:
    """Derived progress figures. Never persisted."""

    total_days: int
    completed_days: int
    current_streak: int
    attendance_rate: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "total_days": self.total_days,
            "completed_days": self.completed_days,
            "current_streak": self.current_streak,
            "attendance_rate": self.attendance_rate,
        }


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives.

    Python's round() uses banker's rounding (round(12.5) == 12); scores
    and rates are rounded the way learners expect (12.5 -> 13).
    """
    return int(math.floor(value + 0.5))


def _longest_run(days: list[date]) -> int:
    """Length of the longest run of consecutive days in a sorted list."""
    longest = 0
    run = 0
    previous: date | None = None
    for day in days:
        if previous is not None and day - previous == timedelta(days=1):
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        previous = day
    return longest


def compute_snapshot(
    trial_start_date: date,
    today: date,
    attendance_history: Iterable[date],
    trial_length_days: int = TRIAL_LENGTH_DAYS,
) -> ProgressSnapshot:
    """Compute the progress snapshot for a learner.

    Args:
        trial_start_date: First day of the trial
        today: Reference day (inclusive)
        attendance_history: Distinct days on which the lesson was completed
        trial_length_days: Trial length cap (90 unless configured otherwise)

    Returns:
        ProgressSnapshot

    Raises:
        InvalidRangeError: If trial_start_date is after today
        ValueError: If trial_length_days is outside 1..TRIAL_LENGTH_DAYS
    """
    if not 1 <= trial_length_days <= TRIAL_LENGTH_DAYS:
        raise ValueError(
            f"trial_length_days must be between 1 and {TRIAL_LENGTH_DAYS}, "
            f"got {trial_length_days}"
        )
    if trial_start_date > today:
        raise InvalidRangeError(trial_start_date, today)

    total_days = min((today - trial_start_date).days + 1, trial_length_days)

    # Only days inside the trial window up to today count
    days = sorted(
        {d for d in attendance_history if trial_start_date <= d <= today}
    )

    completed_days = min(len(days), total_days)
    current_streak = min(_longest_run(days), total_days)

    if total_days > 0:
        attendance_rate = round_half_up(completed_days / total_days * 100)
        attendance_rate = max(0, min(attendance_rate, 100))
    else:
        attendance_rate = 0

    return ProgressSnapshot(
        total_days=total_days,
        completed_days=completed_days,
        current_streak=current_streak,
        attendance_rate=attendance_rate,
    )


def determine_phase(profile: LearnerProfile) -> Phase:
    """Determine the lifecycle phase from the persisted flags."""
    if not profile.trial_completed:
        return Phase.TRIAL
    if profile.certificate_earned and not profile.current_course_id:
        return Phase.CERTIFIED
    return Phase.ADVANCED


def evaluate_certificate_eligibility(
    profile: LearnerProfile,
    snapshot: ProgressSnapshot | None = None,
) -> bool:
    """Return True when the learner may receive a certificate.

    Completion is asserted externally through `trial_completed`; the
    snapshot is accepted for callers that have one but is not consulted.
    """
    return profile.trial_completed is True
