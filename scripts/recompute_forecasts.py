"""Recompute forecasts for every project with an active plan version.

Each project is recomputed and committed on its own session. A failing
project is reported and skipped; the rest of the batch still runs.

Run from repo root:
    python -m scripts.recompute_forecasts
"""

import asyncio

from sqlalchemy import select

from stageplan.core.config import get_settings
from stageplan.core.exceptions import ScheduleIntegrityError
from stageplan.core.logging import configure_structlog
from stageplan.db.base import close_db, get_session_factory, init_db
from stageplan.db.models.project import Project
from stageplan.services.forecast_writer import ForecastWriter

CAUSE_TYPE = "AdminRecompute"


async def main() -> None:
    settings = get_settings()
    configure_structlog(log_level="INFO", json_logs=not settings.debug)

    await init_db()
    factory = get_session_factory()
    try:
        async with factory() as session:
            result = await session.execute(
                select(Project.id).where(Project.active_plan_version_no.is_not(None)).order_by(Project.created_at)
            )
            project_ids = list(result.scalars().all())
        print(f"Found {len(project_ids)} project(s) with an active plan.")

        failed = 0
        for project_id in project_ids:
            async with factory() as session:
                try:
                    outcome = await ForecastWriter(session).recompute(
                        project_id, cause_stage_code=None, cause_type=CAUSE_TYPE
                    )
                except ScheduleIntegrityError as exc:
                    failed += 1
                    print(f"  {project_id} | FAILED (data): {exc}")
                    continue
                except Exception as exc:
                    failed += 1
                    print(f"  {project_id} | FAILED ({type(exc).__name__}): {exc}")
                    continue
            shifts = len(outcome.shifts) if outcome else 0
            print(f"  {project_id} | shifts={shifts}")

        print(f"\nALL DONE ({failed} failure(s))")
    finally:
        await close_db()


if __name__ == "__main__":
    asyncio.run(main())
