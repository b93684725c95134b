"""ShiftLogService — read side of the forecast shift audit trail."""

import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from stageplan.db.models.stage_shift_log import StageShiftLog
from stageplan.domain.stages import normalize_code


class ShiftLogService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_entries(
        self,
        project_id: uuid.UUID,
        stage_code: str | None = None,
        limit: int = 100,
    ) -> list[StageShiftLog]:
        """Return a project's shift entries, newest first.

        Args:
            project_id: UUID of the project
            stage_code: Optional stage filter
            limit: Maximum number of entries
        """
        query = select(StageShiftLog).where(StageShiftLog.project_id == project_id)
        if stage_code:
            query = query.where(func.upper(StageShiftLog.stage_code) == normalize_code(stage_code))
        query = query.order_by(StageShiftLog.created_at.desc()).limit(limit)

        result = await self.session.execute(query)
        return list(result.scalars().all())
