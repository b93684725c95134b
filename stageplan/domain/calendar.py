"""Working-day arithmetic.

A working day is any day that is not Saturday or Sunday. No holiday calendar
is modelled.
"""

from datetime import date, timedelta

from stageplan.domain.stages import TransitionRule

_SATURDAY = 5
_SUNDAY = 6


def is_weekend(day: date) -> bool:
    return day.weekday() in (_SATURDAY, _SUNDAY)


def roll_weekend(day: date, skip_weekends: bool) -> date:
    """Move a Saturday or Sunday forward to the following Monday.

    Returns the date unchanged when skip_weekends is off.
    """
    if not skip_weekends:
        return day
    if day.weekday() == _SATURDAY:
        return day + timedelta(days=2)
    if day.weekday() == _SUNDAY:
        return day + timedelta(days=1)
    return day


def apply_transition(finish: date, rule: TransitionRule, skip_weekends: bool) -> date:
    """Earliest date a dependent may start after a predecessor finishing on `finish`."""
    ready = finish
    if rule == TransitionRule.NEXT_WORKING_DAY:
        ready = ready + timedelta(days=1)
    return roll_weekend(ready, skip_weekends)


def advance_days(start: date, steps: int, skip_weekends: bool) -> date:
    """Advance `steps` day-steps from `start`, rolling each step off weekends."""
    current = start
    for _ in range(max(steps, 0)):
        current = roll_weekend(current + timedelta(days=1), skip_weekends)
    return current


def due_from_duration(start: date, duration_days: int, skip_weekends: bool) -> date:
    """Due date of a stage starting on `start`; duration counts the start day.

    Duration is floored to 1, so a one-day stage is due the day it starts.
    """
    return advance_days(start, max(1, duration_days) - 1, skip_weekends)
