"""Business-calendar "today".

Forecasts and stage validation work in calendar dates of the organisation's
timezone, not UTC.
"""

from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

from stageplan.core.config import get_settings


def business_today(now: datetime | None = None) -> date:
    """Return today's date in the configured business timezone."""
    tz = ZoneInfo(get_settings().business_timezone)
    current = now or datetime.now(UTC)
    return current.astimezone(tz).date()
