"""StageValidationService — validates stage status changes against project data."""

import uuid
from collections.abc import Callable
from datetime import date

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from stageplan.core.clock import business_today
from stageplan.core.config import get_settings
from stageplan.domain.validation import StageValidationResult, validate_stage_change
from stageplan.services.schedule_inputs import (
    load_active_plan_version,
    load_project,
    load_project_stages,
    load_stage_dependencies,
    to_execution,
)

logger = structlog.get_logger(__name__)


class StageValidationService:
    """Loads a project's stages and dependencies and applies validate_stage_change.

    Read-only: never writes or commits.
    """

    def __init__(self, session: AsyncSession, today: Callable[[], date] | None = None):
        self.session = session
        self._today = today or business_today

    async def validate(
        self,
        project_id: uuid.UUID,
        stage_code: str,
        target_status: str,
        target_date: date | None,
        is_hod: bool = False,
    ) -> StageValidationResult:
        stages = await load_project_stages(self.session, project_id)
        dependencies = await load_stage_dependencies(self.session, get_settings().stage_template_version)
        pnc_applicable = await self._resolve_pnc_applicability(project_id)

        result = validate_stage_change(
            {stage.stage_code: to_execution(stage) for stage in stages},
            dependencies,
            stage_code=stage_code,
            target_status=target_status,
            target_date=target_date,
            today=self._today(),
            is_hod=is_hod,
            pnc_applicable=pnc_applicable,
        )

        if not result.is_valid:
            logger.info(
                "stage_change_rejected",
                project_id=str(project_id),
                stage_code=stage_code,
                target_status=target_status,
                errors=result.errors,
                missing_predecessors=result.missing_predecessors,
            )
        return result

    async def _resolve_pnc_applicability(self, project_id: uuid.UUID) -> bool:
        """PNC counts as applicable unless the active plan version says otherwise."""
        project = await load_project(self.session, project_id)
        if project is None:
            return True
        plan = await load_active_plan_version(self.session, project)
        if plan is None:
            return True
        return bool(plan.pnc_applicable)
