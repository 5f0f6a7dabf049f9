"""Tests for attendance repository (F2)."""

import sqlite3
from datetime import date, timedelta

import pytest

from hobbyu.db.attendance_repository import (
    get_attendance,
    get_completed_dates,
    record_attendance,
)

DAY = date(2024, 3, 1)


class TestRecordAttendance:
    """Tests for record_attendance."""

    def test_first_record_creates_row(self, db, learner):
        assert record_attendance(db, "lrn01", DAY) is True

        records = get_attendance(db, "lrn01")
        assert len(records) == 1
        assert records[0].date == DAY
        assert records[0].lesson_completed is True

    def test_same_day_is_not_duplicated(self, db, learner):
        record_attendance(db, "lrn01", DAY)

        assert record_attendance(db, "lrn01", DAY) is False
        assert len(get_attendance(db, "lrn01")) == 1

    def test_login_then_lesson_upgrades_row(self, db, learner):
        record_attendance(db, "lrn01", DAY, lesson_completed=False)
        assert get_completed_dates(db, "lrn01") == set()

        record_attendance(db, "lrn01", DAY, lesson_completed=True)

        assert get_completed_dates(db, "lrn01") == {DAY}

    def test_completed_day_not_downgraded(self, db, learner):
        record_attendance(db, "lrn01", DAY, lesson_completed=True)
        record_attendance(db, "lrn01", DAY, lesson_completed=False)

        assert get_completed_dates(db, "lrn01") == {DAY}

    def test_table_enforces_one_row_per_day(self, db, learner):
        """A raw duplicate insert is rejected by the schema."""
        record_attendance(db, "lrn01", DAY)

        with pytest.raises(sqlite3.IntegrityError):
            with db.connect() as conn:
                conn.execute(
                    "INSERT INTO attendance (learner_id, date) VALUES (?, ?)",
                    ("lrn01", DAY.isoformat()),
                )

    def test_unknown_learner_rejected(self, db):
        with pytest.raises(sqlite3.IntegrityError):
            record_attendance(db, "lrn99", DAY)


class TestGetAttendance:
    """Tests for get_attendance and get_completed_dates."""

    def test_range_filter(self, db, learner):
        for n in range(5):
            record_attendance(db, "lrn01", DAY + timedelta(days=n))

        records = get_attendance(
            db, "lrn01", start=DAY + timedelta(days=1), end=DAY + timedelta(days=3)
        )

        assert [r.date for r in records] == [DAY + timedelta(days=n) for n in (1, 2, 3)]

    def test_completed_dates_skip_login_only(self, db, learner):
        record_attendance(db, "lrn01", DAY)
        record_attendance(db, "lrn01", DAY + timedelta(days=1), lesson_completed=False)

        assert get_completed_dates(db, "lrn01") == {DAY}

    def test_other_learners_not_included(self, db, learner):
        assert get_completed_dates(db, "lrn02") == set()
