"""ForecastBackfillService — seeds forecast dates from planned dates.

Maintenance operation for legacy rows; not part of the steady-state
recompute path.
"""

import structlog
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from stageplan.db.models.project_stage import ProjectStage

logger = structlog.get_logger(__name__)


class ForecastBackfillService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def backfill(self) -> int:
        """Copy planned dates into forecast dates where no forecast exists yet.

        Only stages with both planned dates set and both forecast dates unset
        are touched. Runs as one set-based UPDATE.

        Returns:
            Number of stage rows updated.
        """
        result = await self.session.execute(
            update(ProjectStage)
            .where(
                ProjectStage.planned_start.is_not(None),
                ProjectStage.planned_due.is_not(None),
                ProjectStage.forecast_start.is_(None),
                ProjectStage.forecast_due.is_(None),
            )
            .values(
                forecast_start=ProjectStage.planned_start,
                forecast_due=ProjectStage.planned_due,
            )
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()

        updated = result.rowcount or 0
        logger.info("forecast_backfill_complete", updated=updated)
        return updated
