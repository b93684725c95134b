"""ForecastWriter — recomputes a project's stage forecasts and records shifts.

This is the integration point where the pure forecast engine meets the
database: load inputs, compute, write forecast dates back, append a
StageShiftLog row for every stage whose forecast due date moved, commit once.
"""

import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from stageplan.core.clock import business_today
from stageplan.core.config import get_settings
from stageplan.db.models.stage_shift_log import StageShiftLog
from stageplan.domain.schedule import compute_forecast
from stageplan.domain.stages import ScheduleOptions, StageWindow, normalize_code
from stageplan.services.schedule_inputs import (
    load_active_plan_version,
    load_durations,
    load_project,
    load_project_stages,
    load_stage_dependencies,
    load_stage_templates,
    to_execution,
    transition_rule_of,
)

logger = structlog.get_logger(__name__)


@dataclass
class RecomputeResult:
    """What a recompute wrote."""

    project_id: uuid.UUID
    forecasts: dict[str, StageWindow] = field(default_factory=dict)
    shifts: list[StageShiftLog] = field(default_factory=list)


class ForecastWriter:
    """Service layer for forecast recomputation.

    Callers are the stage status-change and approval workflows plus
    administrative triggers. Engine errors are not caught here; they reach
    the caller with their original message and nothing is committed.
    """

    def __init__(self, session: AsyncSession, today: Callable[[], date] | None = None):
        """Initialize with dependency-injected session.

        Args:
            session: SQLAlchemy async session (the caller's unit of work)
            today: Business-calendar date provider, defaults to business_today
        """
        self.session = session
        self._today = today or business_today

    async def recompute(
        self,
        project_id: uuid.UUID,
        cause_stage_code: str | None,
        cause_type: str,
        user_id: str | None = None,
    ) -> RecomputeResult | None:
        """Recompute and persist forecasts for every applicable stage of a project.

        Args:
            project_id: UUID of the project
            cause_stage_code: Stage whose change triggered the recompute
            cause_type: What triggered it, e.g. "StageCompleted", "ManualEdit"
            user_id: Actor recorded on shift-log rows

        Returns:
            RecomputeResult, or None when the project has no plan to forecast against.

        Raises:
            ValueError: cause_type is blank
            ScheduleIntegrityError: durations or execution records are missing
        """
        if not cause_type or not cause_type.strip():
            raise ValueError("cause_type is required")
        cause_type = cause_type.strip()

        log = logger.bind(project_id=str(project_id), cause_type=cause_type, cause_stage_code=cause_stage_code)

        project = await load_project(self.session, project_id)
        if project is None:
            log.info("forecast_recompute_skipped", reason="project_not_found")
            return None
        if project.active_plan_version_no is None:
            log.info("forecast_recompute_skipped", reason="no_active_plan_version")
            return None

        plan = await load_active_plan_version(self.session, project)
        if plan is None:
            log.info(
                "forecast_recompute_skipped",
                reason="plan_version_missing",
                version_no=project.active_plan_version_no,
            )
            return None

        template_version = get_settings().stage_template_version
        templates = await load_stage_templates(self.session, template_version)
        dependencies = await load_stage_dependencies(self.session, template_version)
        durations = await load_durations(self.session, plan.id)
        stages = await load_project_stages(self.session, project.id)

        options = ScheduleOptions(
            today=self._today(),
            skip_weekends=bool(plan.skip_weekends),
            transition_rule=transition_rule_of(plan),
            pnc_applicable=bool(plan.pnc_applicable),
        )
        forecasts = compute_forecast(
            templates,
            dependencies,
            durations,
            {stage.stage_code: to_execution(stage) for stage in stages},
            options,
        )

        stage_by_code = {normalize_code(stage.stage_code): stage for stage in stages}
        result = RecomputeResult(project_id=project.id, forecasts=forecasts)

        for code, window in forecasts.items():
            stage = stage_by_code[normalize_code(code)]
            previous_due = stage.forecast_due

            stage.forecast_start = window.start
            stage.forecast_due = window.due

            if previous_due == window.due:
                continue

            shift = StageShiftLog(
                project_id=project.id,
                stage_code=normalize_code(stage.stage_code),
                old_forecast_due=previous_due,
                new_forecast_due=window.due,
                delta_days=(window.due - previous_due).days if previous_due is not None else 0,
                cause_stage_code=cause_stage_code,
                cause_type=cause_type,
                created_by_user_id=user_id,
            )
            self.session.add(shift)
            result.shifts.append(shift)

        await self.session.commit()

        log.info(
            "forecast_recomputed",
            template_version=template_version,
            plan_version_no=plan.version_no,
            stage_count=len(forecasts),
            shift_count=len(result.shifts),
        )
        return result
