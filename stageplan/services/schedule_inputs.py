"""Loaders that turn persisted rows into scheduling domain inputs.

Shared by the forecast writer and stage validation. Every loader takes the
caller's session; none of them commits.
"""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from stageplan.core.exceptions import ScheduleIntegrityError
from stageplan.db.models.plan_version import PlanVersion
from stageplan.db.models.project import Project
from stageplan.db.models.project_stage import ProjectStage
from stageplan.db.models.stage_plan import StagePlan
from stageplan.db.models.stage_template import StageDependencyTemplate, StageTemplate
from stageplan.domain.stages import (
    StageDefinition,
    StageDependency,
    StageExecution,
    StageStatus,
    TransitionRule,
)


def to_execution(stage: ProjectStage) -> StageExecution:
    """Snapshot a ProjectStage row as engine input.

    Raises:
        ScheduleIntegrityError: the stored status is not a known StageStatus
    """
    try:
        status = StageStatus(stage.status)
    except ValueError as exc:
        raise ScheduleIntegrityError(
            f"Stage '{stage.stage_code}' has unknown status '{stage.status}'"
        ) from exc
    return StageExecution(
        status=status,
        actual_start=stage.actual_start,
        completed_on=stage.completed_on,
        planned_start=stage.planned_start,
        planned_due=stage.planned_due,
        forecast_start=stage.forecast_start,
        forecast_due=stage.forecast_due,
    )


def transition_rule_of(plan: PlanVersion) -> TransitionRule:
    return TransitionRule(plan.transition_rule) if plan.transition_rule else TransitionRule.NEXT_WORKING_DAY


async def load_project(session: AsyncSession, project_id: uuid.UUID) -> Project | None:
    result = await session.execute(select(Project).where(Project.id == project_id))
    return result.scalar_one_or_none()


async def load_active_plan_version(session: AsyncSession, project: Project) -> PlanVersion | None:
    """Return the project's active plan version, or None when it has none."""
    if project.active_plan_version_no is None:
        return None
    result = await session.execute(
        select(PlanVersion).where(
            PlanVersion.project_id == project.id,
            PlanVersion.version_no == project.active_plan_version_no,
        )
    )
    return result.scalar_one_or_none()


async def load_project_stages(session: AsyncSession, project_id: uuid.UUID) -> list[ProjectStage]:
    result = await session.execute(
        select(ProjectStage).where(ProjectStage.project_id == project_id).order_by(ProjectStage.sort_order)
    )
    return list(result.scalars().all())


async def load_stage_templates(session: AsyncSession, version: str) -> list[StageDefinition]:
    result = await session.execute(
        select(StageTemplate).where(StageTemplate.version == version).order_by(StageTemplate.sequence)
    )
    return [
        StageDefinition(
            code=t.code,
            sequence=t.sequence,
            name=t.name,
            version=t.version,
            optional=t.optional,
            parallel_group=t.parallel_group,
        )
        for t in result.scalars().all()
    ]


async def load_stage_dependencies(session: AsyncSession, version: str) -> list[StageDependency]:
    result = await session.execute(
        select(StageDependencyTemplate).where(StageDependencyTemplate.version == version)
    )
    return [
        StageDependency(
            from_stage_code=d.from_stage_code,
            depends_on_stage_code=d.depends_on_stage_code,
            version=d.version,
        )
        for d in result.scalars().all()
    ]


async def load_durations(session: AsyncSession, plan_version_id: uuid.UUID) -> dict[str, int]:
    result = await session.execute(
        select(StagePlan.stage_code, StagePlan.duration_days).where(StagePlan.plan_version_id == plan_version_id)
    )
    return {code: days for code, days in result.all()}
