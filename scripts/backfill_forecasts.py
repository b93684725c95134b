"""Seed forecast dates from planned dates on stages that have never been forecast.

Run from repo root:
    python -m scripts.backfill_forecasts
"""

import asyncio

from stageplan.core.config import get_settings
from stageplan.core.logging import configure_structlog
from stageplan.db.base import close_db, get_session_factory, init_db
from stageplan.services.forecast_backfill import ForecastBackfillService


async def main() -> None:
    settings = get_settings()
    configure_structlog(log_level="INFO", json_logs=not settings.debug)

    await init_db()
    try:
        async with get_session_factory()() as session:
            updated = await ForecastBackfillService(session).backfill()
        print(f"Backfilled forecasts on {updated} stage row(s).")
    finally:
        await close_db()


if __name__ == "__main__":
    asyncio.run(main())
