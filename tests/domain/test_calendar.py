"""Tests for working-day arithmetic."""

from datetime import date

from stageplan.domain.calendar import (
    advance_days,
    apply_transition,
    due_from_duration,
    is_weekend,
    roll_weekend,
)
from stageplan.domain.stages import TransitionRule

WEDNESDAY = date(2025, 9, 10)
FRIDAY = date(2025, 9, 12)
SATURDAY = date(2025, 9, 13)
SUNDAY = date(2025, 9, 14)
MONDAY = date(2025, 9, 15)


class TestRollWeekend:
    def test_weekday_unchanged(self):
        assert roll_weekend(WEDNESDAY, skip_weekends=True) == WEDNESDAY

    def test_saturday_rolls_to_monday(self):
        assert roll_weekend(SATURDAY, skip_weekends=True) == MONDAY

    def test_sunday_rolls_to_monday(self):
        assert roll_weekend(SUNDAY, skip_weekends=True) == MONDAY

    def test_no_roll_when_weekends_allowed(self):
        assert roll_weekend(SATURDAY, skip_weekends=False) == SATURDAY

    def test_is_weekend(self):
        assert is_weekend(SATURDAY)
        assert is_weekend(SUNDAY)
        assert not is_weekend(FRIDAY)


class TestApplyTransition:
    def test_next_working_day_adds_one_day(self):
        assert apply_transition(WEDNESDAY, TransitionRule.NEXT_WORKING_DAY, True) == date(2025, 9, 11)

    def test_next_working_day_from_friday_lands_on_monday(self):
        assert apply_transition(FRIDAY, TransitionRule.NEXT_WORKING_DAY, True) == MONDAY

    def test_next_working_day_without_weekend_skip(self):
        assert apply_transition(FRIDAY, TransitionRule.NEXT_WORKING_DAY, False) == SATURDAY

    def test_same_day_keeps_weekday(self):
        assert apply_transition(WEDNESDAY, TransitionRule.SAME_DAY, True) == WEDNESDAY

    def test_same_day_still_rolls_weekend_finish(self):
        assert apply_transition(SATURDAY, TransitionRule.SAME_DAY, True) == MONDAY


class TestDurations:
    def test_one_day_stage_due_on_start(self):
        assert due_from_duration(WEDNESDAY, 1, skip_weekends=True) == WEDNESDAY

    def test_zero_and_negative_durations_floor_to_one(self):
        assert due_from_duration(WEDNESDAY, 0, skip_weekends=True) == WEDNESDAY
        assert due_from_duration(WEDNESDAY, -3, skip_weekends=True) == WEDNESDAY

    def test_duration_spanning_weekend(self):
        # Wed -> Thu, Fri, (Sat->Mon), Tue
        assert due_from_duration(WEDNESDAY, 5, skip_weekends=True) == date(2025, 9, 16)

    def test_duration_without_weekend_skip_is_calendar_days(self):
        assert due_from_duration(WEDNESDAY, 5, skip_weekends=False) == date(2025, 9, 14)

    def test_no_intermediate_step_lands_on_weekend(self):
        for steps in range(0, 15):
            assert not is_weekend(advance_days(FRIDAY, steps, skip_weekends=True))

    def test_advance_zero_steps_returns_start(self):
        assert advance_days(SATURDAY, 0, skip_weekends=True) == SATURDAY
