"""Idempotent seed data for the default stage workflow."""

import structlog
from sqlalchemy import select

from stageplan.core.config import get_settings
from stageplan.core.exceptions import ScheduleIntegrityError
from stageplan.db.base import get_session_factory
from stageplan.db.models.stage_template import StageDependencyTemplate, StageTemplate
from stageplan.domain.workflow import (
    default_stage_definitions,
    default_stage_dependencies,
    find_sequence_violations,
)

logger = structlog.get_logger(__name__)


async def seed_stage_templates(version: str | None = None) -> int:
    """Insert the default workflow for a template version if it doesn't already exist.

    Refuses to seed a workflow whose sequence order is not a valid traversal
    order for its dependencies, since the forecast engine relies on it.

    Returns:
        Number of template and dependency rows inserted.
    """
    version = version or get_settings().stage_template_version
    stages = default_stage_definitions(version)
    dependencies = default_stage_dependencies(version)

    violations = find_sequence_violations(stages, dependencies)
    if violations:
        raise ScheduleIntegrityError(
            f"Stage template '{version}' sequence is inconsistent with dependencies: {'; '.join(violations)}"
        )

    factory = get_session_factory()
    inserted = 0

    async with factory() as session:
        result = await session.execute(select(StageTemplate.code).where(StageTemplate.version == version))
        existing_codes = set(result.scalars().all())
        for stage in stages:
            if stage.code in existing_codes:
                continue
            session.add(
                StageTemplate(
                    version=version,
                    code=stage.code,
                    name=stage.name,
                    sequence=stage.sequence,
                    optional=stage.optional,
                    parallel_group=stage.parallel_group,
                )
            )
            inserted += 1

        result = await session.execute(
            select(StageDependencyTemplate.from_stage_code, StageDependencyTemplate.depends_on_stage_code).where(
                StageDependencyTemplate.version == version
            )
        )
        existing_edges = {(row[0], row[1]) for row in result.all()}
        for dep in dependencies:
            if (dep.from_stage_code, dep.depends_on_stage_code) in existing_edges:
                continue
            session.add(
                StageDependencyTemplate(
                    version=version,
                    from_stage_code=dep.from_stage_code,
                    depends_on_stage_code=dep.depends_on_stage_code,
                )
            )
            inserted += 1

        await session.commit()

    logger.info("stage_templates_seeded", version=version, inserted=inserted)
    return inserted
