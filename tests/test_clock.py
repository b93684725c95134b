"""Tests for the business-calendar today."""

from datetime import UTC, date, datetime

from stageplan.core.clock import business_today


def test_late_utc_evening_is_next_day_in_business_timezone():
    # 20:00 UTC is 01:30 the next morning in Asia/Kolkata
    assert business_today(datetime(2025, 9, 10, 20, 0, tzinfo=UTC)) == date(2025, 9, 11)


def test_utc_morning_is_same_day():
    assert business_today(datetime(2025, 9, 10, 6, 0, tzinfo=UTC)) == date(2025, 9, 10)
