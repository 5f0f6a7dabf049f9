"""Tests for the dashboard view model (F1)."""

from datetime import date, timedelta

import pytest

from hobbyu.config.catalog import load_catalog
from hobbyu.core.dashboard import build_dashboard, earned_achievements
from hobbyu.core.lesson_plan import next_lesson_day, video_watched
from hobbyu.core.models import Hobby, LearnerProfile
from hobbyu.core.progress_tracker import InvalidRangeError, Phase, ProgressSnapshot

START = date(2024, 3, 1)


@pytest.fixture
def learner():
    return LearnerProfile(
        learner_id="lrn01",
        email="ana@example.com",
        full_name="Ana García",
        age=30,
        location="Madrid, Spain",
        chosen_hobby=Hobby.PHOTOGRAPHY,
        motivation="Weddings",
        trial_start_date=START,
    )


def _days(n: int) -> set[date]:
    return {START + timedelta(days=i) for i in range(n)}


class TestBuildDashboard:
    """Tests for build_dashboard."""

    def test_new_learner(self, learner):
        dashboard = build_dashboard(learner, set(), START, load_catalog())

        assert dashboard.course_title == "Photography Professional Development"
        assert dashboard.phase == Phase.TRIAL
        assert dashboard.snapshot.total_days == 1
        assert dashboard.trial_progress_percent == 0
        assert dashboard.next_lesson_day == 1
        assert dashboard.certificate_eligible is False
        assert dashboard.achievements == []

    def test_progress_percent_and_next_day(self, learner):
        """Nine of ten days done: 90%, lesson 10 next."""
        today = START + timedelta(days=9)
        dashboard = build_dashboard(learner, _days(9), today, load_catalog())

        assert dashboard.snapshot.completed_days == 9
        assert dashboard.trial_progress_percent == 90
        assert dashboard.next_lesson_day == 10

    def test_to_dict(self, learner):
        data = build_dashboard(learner, _days(1), START, load_catalog()).to_dict()

        assert data["phase"] == "trial"
        assert data["phase_label"] == "Trial Course"
        assert data["progress"]["attendance_rate"] == 100
        assert data["chosen_hobby"] == "Photography"

    def test_start_after_today(self, learner):
        with pytest.raises(InvalidRangeError):
            build_dashboard(learner, set(), START - timedelta(days=1), load_catalog())


class TestAchievements:
    """Tests for earned_achievements."""

    def test_first_week(self, learner):
        snapshot = ProgressSnapshot(
            total_days=7, completed_days=7, current_streak=7, attendance_rate=100
        )
        keys = [a.key for a in earned_achievements(learner, snapshot)]
        assert keys == ["first_week"]

    def test_one_month_without_streak(self, learner):
        snapshot = ProgressSnapshot(
            total_days=60, completed_days=30, current_streak=2, attendance_rate=50
        )
        keys = [a.key for a in earned_achievements(learner, snapshot)]
        assert keys == ["one_month"]

    def test_trial_complete(self, learner):
        learner.trial_completed = True
        snapshot = ProgressSnapshot(
            total_days=90, completed_days=80, current_streak=40, attendance_rate=89
        )
        keys = [a.key for a in earned_achievements(learner, snapshot)]
        assert keys == ["first_week", "one_month", "trial_complete"]


class TestLessonDay:
    """Tests for next_lesson_day and video_watched."""

    def test_next_day_capped_at_total(self):
        snapshot = ProgressSnapshot(
            total_days=90, completed_days=90, current_streak=90, attendance_rate=100
        )
        assert next_lesson_day(snapshot) == 90

    def test_next_day_after_missed_days(self):
        """Lessons are sequential: missed days don't skip lessons."""
        snapshot = ProgressSnapshot(
            total_days=10, completed_days=4, current_streak=2, attendance_rate=40
        )
        assert next_lesson_day(snapshot) == 5

    @pytest.mark.parametrize("percent,watched", [(0, False), (89.9, False), (90, True), (100, True)])
    def test_video_watched(self, percent, watched):
        assert video_watched(percent) is watched
