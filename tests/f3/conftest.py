"""Fixtures for F3 tests - Web API."""

from datetime import date
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from hobbyu.config.app_config import clear_config_cache, load_app_config
from hobbyu.db.lessons_repository import import_lessons_yaml
from hobbyu.web.api import create_app

LESSONS_YAML = """\
course: trial
lessons:
  - day: 1
    title: Introduction to Professional Techniques
    video_url: https://videos.example.com/trial/day-01.mp4
    questions:
      - text: What is the most important aspect of professional development?
        options: [Consistency in practice, Natural talent, Expensive equipment, Formal education]
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
    questions:
      - text: When is the best time to practice?
        options: [Same time every day, Only weekends]
        correct_answer: 0
"""


@pytest.fixture
def client(tmp_path):
    """Create test client with an isolated data directory."""
    clear_config_cache()
    config = load_app_config(tmp_path, force_reload=True)
    yield TestClient(create_app(config))
    clear_config_cache()


@pytest.fixture
def application() -> dict:
    """A valid student application body."""
    return {
        "full_name": "Ana García",
        "email": "ana@example.com",
        "password": "s3cret!",
        "confirm_password": "s3cret!",
        "age": 30,
        "location": "Madrid, Spain",
        "chosen_hobby": "Cooking",
        "motivation": "I want to open my own bakery.",
    }


@pytest.fixture
def learner_id(client, application) -> str:
    """Sign up a learner whose trial starts today."""
    response = client.post("/api/learners", json=application)
    assert response.status_code == 201
    return response.json()["learner_id"]


@pytest.fixture
def lessons(client, tmp_path: Path):
    """Import the shared trial lessons into the app database."""
    path = tmp_path / "lessons_trial.yaml"
    path.write_text(LESSONS_YAML, encoding="utf-8")
    return import_lessons_yaml(client.app.state.db, path)


@pytest.fixture
def today() -> date:
    return date.today()
