"""Fixtures for F2 tests - Persistence and services."""

from datetime import date
from pathlib import Path

import pytest

from hobbyu.core.models import Hobby, LearnerProfile
from hobbyu.db.database import Database, init_db
from hobbyu.db.learners_repository import insert_learner

TRIAL_START = date(2024, 3, 1)

LESSONS_YAML = """\
course: trial
lessons:
  - day: 1
    title: Introduction to Professional Techniques
    video_url: https://videos.example.com/trial/day-01.mp4
    duration_minutes: 15
    questions:
      - text: What is the most important aspect of professional development?
        options:
          - Consistency in practice
          - Natural talent
          - Expensive equipment
          - Formal education
        correct_answer: 0
      - text: How often should you practice to see improvement?
        options: [Once a week, Daily, Monthly, When inspired]
        correct_answer: 1
      - text: What mindset is crucial for turning a hobby into a profession?
        options: [Perfectionism, Growth mindset, Competitive mindset, Casual approach]
        correct_answer: 1
  - day: 2
    title: Building a Daily Practice
    video_url: https://videos.example.com/trial/day-02.mp4
    duration_minutes: 20
    questions:
      - text: When is the best time to practice?
        options: [Same time every day, Only weekends]
        correct_answer: 0
"""


@pytest.fixture
def db(tmp_path) -> Database:
    """Fresh database in a temp directory."""
    return init_db(tmp_path / "db" / "hobbyu.db")


@pytest.fixture
def learner(db) -> LearnerProfile:
    """A cooking learner starting the trial on 2024-03-01."""
    return insert_learner(
        db,
        email="ana@example.com",
        full_name="Ana García",
        age=30,
        location="Madrid, Spain",
        chosen_hobby=Hobby.COOKING,
        motivation="Open a bakery",
        trial_start_date=TRIAL_START,
    )


@pytest.fixture
def lessons_file(tmp_path) -> Path:
    """Two shared trial lessons in YAML."""
    path = tmp_path / "lessons_trial.yaml"
    path.write_text(LESSONS_YAML, encoding="utf-8")
    return path
