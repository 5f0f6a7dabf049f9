"""Tests for CLI commands (F4)."""

from datetime import date, timedelta

import pytest
from typer.testing import CliRunner

from hobbyu.cli.commands import app
from hobbyu.config.app_config import clear_config_cache
from hobbyu.core.models import Hobby
from hobbyu.db.attendance_repository import get_completed_dates
from hobbyu.db.database import Database, init_db
from hobbyu.db.learners_repository import insert_learner

runner = CliRunner()

SIGNUP_ARGS = [
    "signup",
    "--name", "Ana García",
    "--email", "ana@example.com",
    "--age", "30",
    "--location", "Madrid, Spain",
    "--hobby", "cooking",
    "--motivation", "Open a bakery",
    "--password", "s3cret!",
    "--confirm-password", "s3cret!",
]


@pytest.fixture
def data_dir(tmp_path):
    clear_config_cache()
    yield tmp_path
    clear_config_cache()


@pytest.fixture
def invoke(data_dir):
    """Run a CLI command against the temp data directory."""

    def _invoke(*args: str):
        return runner.invoke(app, list(args), env={"HOBBYU_DATA_DIR": str(data_dir)})

    return _invoke


@pytest.fixture
def signed_up(invoke):
    result = invoke(*SIGNUP_ARGS)
    assert result.exit_code == 0, result.stdout
    return "lrn01"


class TestInitAndSignup:
    """Tests for hobby init-db, signup and list."""

    def test_init_db(self, invoke, data_dir):
        result = invoke("init-db")

        assert result.exit_code == 0
        assert "Database ready" in result.stdout
        assert (data_dir / "db" / "hobbyu.db").exists()

    def test_signup(self, invoke):
        result = invoke(*SIGNUP_ARGS)

        assert result.exit_code == 0
        assert "Welcome, Ana García" in result.stdout
        assert "lrn01" in result.stdout
        assert "Cooking Professional Development" in result.stdout

    def test_signup_rejected(self, invoke):
        args = list(SIGNUP_ARGS)
        args[args.index("30")] = "12"

        result = invoke(*args)

        assert result.exit_code == 1
        assert "Age must be between 13 and 100" in result.stdout

    def test_signup_duplicate(self, invoke, signed_up):
        result = invoke(*SIGNUP_ARGS)

        assert result.exit_code == 1
        assert "already exists" in result.stdout

    def test_list(self, invoke, signed_up):
        result = invoke("list")

        assert result.exit_code == 0
        assert "lrn01" in result.stdout
        assert "Ana García" in result.stdout

    def test_list_empty(self, invoke):
        result = invoke("list")

        assert result.exit_code == 0
        assert "No learners yet" in result.stdout


class TestProgressAndAttendance:
    """Tests for hobby progress and attend."""

    def test_progress(self, invoke, signed_up):
        result = invoke("progress", signed_up)

        assert result.exit_code == 0
        assert "Trial Course" in result.stdout
        assert "Day 1 of 1" in result.stdout

    def test_progress_unknown_learner(self, invoke, signed_up):
        result = invoke("progress", "lrn99")

        assert result.exit_code == 1
        assert "not found" in result.stdout

    def test_progress_before_start(self, invoke, signed_up):
        yesterday = (date.today() - timedelta(days=1)).isoformat()

        result = invoke("progress", signed_up, "--today", yesterday)

        assert result.exit_code == 1
        assert "Progress unavailable" in result.stdout

    def test_attend(self, invoke, signed_up, data_dir):
        today = date.today().isoformat()

        first = invoke("attend", signed_up, "--date", today)
        second = invoke("attend", signed_up, "--date", today)

        assert first.exit_code == 0
        assert "Attendance recorded" in first.stdout
        assert "already recorded" in second.stdout

        db = Database(data_dir / "db" / "hobbyu.db")
        assert get_completed_dates(db, signed_up) == {date.today()}

    def test_attend_before_start(self, invoke, signed_up):
        yesterday = (date.today() - timedelta(days=1)).isoformat()

        result = invoke("attend", signed_up, "--date", yesterday)

        assert result.exit_code == 1
        assert "before the trial start" in result.stdout

    def test_attend_future_date(self, invoke, signed_up, data_dir):
        tomorrow = (date.today() + timedelta(days=1)).isoformat()

        result = invoke("attend", signed_up, "--date", tomorrow)

        assert result.exit_code == 1
        assert "in the future" in result.stdout
        db = Database(data_dir / "db" / "hobbyu.db")
        assert get_completed_dates(db, signed_up) == set()

    def test_attend_after_trial(self, invoke, data_dir):
        db = init_db(data_dir / "db" / "hobbyu.db")
        insert_learner(
            db,
            email="ana@example.com",
            full_name="Ana García",
            age=30,
            location="Madrid, Spain",
            chosen_hobby=Hobby.COOKING,
            motivation="Open a bakery",
            trial_start_date=date(2024, 3, 1),
        )

        last_day = invoke("attend", "lrn01", "--date", "2024-05-29")
        result = invoke("attend", "lrn01", "--date", "2024-05-30")

        assert last_day.exit_code == 0
        assert result.exit_code == 1
        assert "after the trial ended on 2024-05-29" in result.stdout
        assert get_completed_dates(db, "lrn01") == {date(2024, 5, 29)}

    def test_invalid_date(self, invoke, signed_up):
        result = invoke("attend", signed_up, "--date", "03/01/2024")

        assert result.exit_code == 1
        assert "Invalid date" in result.stdout


class TestStatusAndCertificate:
    """Tests for hobby set-status and certificate."""

    def test_certificate_not_earned(self, invoke, signed_up):
        result = invoke("certificate", signed_up)

        assert result.exit_code == 1
        assert "has not earned a certificate" in result.stdout

    def test_certificate_after_status(self, invoke, signed_up):
        status = invoke("set-status", signed_up, "--trial-completed", "--certificate-earned")
        assert status.exit_code == 0
        assert "Status updated" in status.stdout

        result = invoke("certificate", signed_up, "--issued-on", "2024-05-30")

        assert result.exit_code == 0
        assert "University of Hobby Excellence" in result.stdout
        assert "May 30, 2024" in result.stdout
        assert "CERT-" in result.stdout

    def test_backwards_status(self, invoke, signed_up):
        invoke("set-status", signed_up, "--trial-completed")

        result = invoke("set-status", signed_up, "--no-trial-completed")

        assert result.exit_code == 1
        assert "Invalid status change" in result.stdout

    def test_set_course(self, invoke, signed_up, data_dir):
        catalog = data_dir / "config" / "catalog_v1.yaml"
        catalog.parent.mkdir(parents=True, exist_ok=True)
        catalog.write_text(
            "courses:\n"
            "  trial:\n"
            "    title: \"{hobby} Professional Development\"\n"
            "    is_trial: true\n"
            "  advanced:\n"
            "    title: \"Advanced {hobby} Mastery\"\n"
            "    price: 199.0\n",
            encoding="utf-8",
        )

        result = invoke(
            "set-status", signed_up, "--trial-completed", "--course", "cooking-advanced"
        )

        assert result.exit_code == 0
        assert "Advanced Cooking Mastery ($199.00)" in result.stdout

    def test_set_unknown_course(self, invoke, signed_up):
        result = invoke(
            "set-status", signed_up, "--trial-completed", "--course", "cooking-yoga"
        )

        assert result.exit_code == 1
        assert "unknown course" in result.stdout

    def test_set_status_unknown_learner(self, invoke):
        result = invoke("set-status", "lrn99", "--trial-completed")

        assert result.exit_code == 1
        assert "not found" in result.stdout


class TestImportLessons:
    """Tests for hobby import-lessons."""

    def test_import(self, invoke, tmp_path):
        path = tmp_path / "lessons.yaml"
        path.write_text(
            "course: trial\n"
            "lessons:\n"
            "  - day: 1\n"
            "    title: Introduction\n"
            "    video_url: https://videos.example.com/trial/day-01.mp4\n"
            "    questions:\n"
            "      - text: How often should you practice?\n"
            "        options: [Once a week, Daily]\n"
            "        correct_answer: 1\n",
            encoding="utf-8",
        )

        result = invoke("import-lessons", str(path))

        assert result.exit_code == 0
        assert "Imported 1 lessons" in result.stdout

    def test_import_missing_file(self, invoke, tmp_path):
        result = invoke("import-lessons", str(tmp_path / "missing.yaml"))

        assert result.exit_code == 1
        assert "not found" in result.stdout


class TestConfigErrors:
    """Tests for invalid configuration files."""

    def test_trial_length_over_limit(self, invoke, data_dir):
        config_file = data_dir / "config" / "app_config_v1.yaml"
        config_file.parent.mkdir(parents=True)
        config_file.write_text("trial:\n  length_days: 120\n", encoding="utf-8")

        result = invoke("list")

        assert result.exit_code == 1
        assert "trial.length_days" in result.stdout
