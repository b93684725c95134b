"""Forecast API endpoints.

POST /api/forecast/preview - What-if forecast over a JSON payload (no persistence)
POST /api/forecast/plan-preview - Anchor-based baseline plan over a JSON payload
POST /api/projects/{project_id}/forecast/recompute - Recompute and persist forecasts
GET  /api/projects/{project_id}/forecast/shifts - Forecast shift history
"""

import uuid

from fastapi import APIRouter, Depends, Header, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from stageplan.core.clock import business_today
from stageplan.core.config import get_settings
from stageplan.core.exceptions import ScheduleIntegrityError
from stageplan.db.base import get_db_session
from stageplan.domain.plan import ManualOverride, PlanOptions, compute_plan
from stageplan.domain.schedule import compute_forecast
from stageplan.domain.stages import (
    ScheduleOptions,
    StageDefinition,
    StageDependency,
    StageExecution,
    StageWindow,
)
from stageplan.domain.workflow import default_stage_definitions, default_stage_dependencies
from stageplan.schemas.forecast import (
    ForecastPreviewRequest,
    PlanPreviewRequest,
    RecomputeRequest,
    RecomputeResponse,
    ScheduleResponse,
    ShiftLogResponse,
    StageDependencyIn,
    StageShiftOut,
    StageTemplateIn,
    StageWindowOut,
)
from stageplan.services.forecast_writer import ForecastWriter
from stageplan.services.shift_log_service import ShiftLogService

router = APIRouter()


def get_forecast_writer(session: AsyncSession = Depends(get_db_session)) -> ForecastWriter:
    return ForecastWriter(session)


def get_shift_log_service(session: AsyncSession = Depends(get_db_session)) -> ShiftLogService:
    return ShiftLogService(session)


def _template_set(
    templates: list[StageTemplateIn] | None,
    dependencies: list[StageDependencyIn] | None,
) -> tuple[list[StageDefinition], list[StageDependency]]:
    """Payload templates/dependencies, falling back to the default workflow."""
    version = get_settings().stage_template_version
    if templates is None:
        definitions = default_stage_definitions(version)
    else:
        definitions = [StageDefinition(code=t.code, sequence=t.sequence, name=t.name) for t in templates]
    if dependencies is None:
        edges = default_stage_dependencies(version)
    else:
        edges = [StageDependency(d.from_stage_code, d.depends_on_stage_code) for d in dependencies]
    return definitions, edges


def _windows(forecasts: dict[str, StageWindow]) -> list[StageWindowOut]:
    return [StageWindowOut(stage_code=code, start=w.start, due=w.due) for code, w in forecasts.items()]


@router.post("/forecast/preview", response_model=ScheduleResponse)
async def preview_forecast(body: ForecastPreviewRequest) -> ScheduleResponse:
    """Compute forecasts for an arbitrary execution state without touching the database.

    Returns 422 when the payload is missing durations or execution records.
    """
    templates, dependencies = _template_set(body.templates, body.dependencies)
    options = ScheduleOptions(
        today=body.today or business_today(),
        skip_weekends=body.skip_weekends,
        transition_rule=body.transition_rule,
        pnc_applicable=body.pnc_applicable,
    )
    executions = {code: StageExecution(**state.model_dump()) for code, state in body.executions.items()}

    try:
        forecasts = compute_forecast(templates, dependencies, body.durations, executions, options)
    except ScheduleIntegrityError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return ScheduleResponse(stages=_windows(forecasts))


@router.post("/forecast/plan-preview", response_model=ScheduleResponse)
async def preview_plan(body: PlanPreviewRequest) -> ScheduleResponse:
    """Lay out a baseline plan from an anchor stage and date."""
    templates, dependencies = _template_set(body.templates, body.dependencies)
    options = PlanOptions(
        anchor_stage_code=body.anchor_stage_code,
        anchor_date=body.anchor_date,
        durations=body.durations,
        skip_weekends=body.skip_weekends,
        transition_rule=body.transition_rule,
        pnc_applicable=body.pnc_applicable,
        manual_overrides={
            code: ManualOverride(start=o.start, due=o.due) for code, o in body.manual_overrides.items()
        },
    )

    try:
        plan = compute_plan(templates, dependencies, options)
    except ScheduleIntegrityError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return ScheduleResponse(stages=_windows(plan))


@router.post("/projects/{project_id}/forecast/recompute", response_model=RecomputeResponse)
async def recompute_forecast(
    project_id: uuid.UUID,
    body: RecomputeRequest,
    x_user_id: str | None = Header(default=None),
    writer: ForecastWriter = Depends(get_forecast_writer),
) -> RecomputeResponse:
    """Recompute a project's forecasts and append shift-log entries for moved due dates.

    Blank cause types are rejected by the request model (422). Projects
    without an active plan return recomputed=false. Data-integrity
    failures surface through the generic 500 handler.
    """
    result = await writer.recompute(
        project_id,
        cause_stage_code=body.cause_stage_code,
        cause_type=body.cause_type,
        user_id=x_user_id,
    )

    if result is None:
        return RecomputeResponse(project_id=project_id, recomputed=False)

    return RecomputeResponse(
        project_id=project_id,
        recomputed=True,
        stages=_windows(result.forecasts),
        shifts=[StageShiftOut.model_validate(shift) for shift in result.shifts],
    )


@router.get("/projects/{project_id}/forecast/shifts", response_model=ShiftLogResponse)
async def list_forecast_shifts(
    project_id: uuid.UUID,
    stage_code: str | None = None,
    limit: int = Query(100, ge=1, le=500),
    service: ShiftLogService = Depends(get_shift_log_service),
) -> ShiftLogResponse:
    """Forecast shift history for a project, newest first."""
    entries = await service.list_entries(project_id, stage_code=stage_code, limit=limit)
    items = [StageShiftOut.model_validate(entry) for entry in entries]
    return ShiftLogResponse(project_id=project_id, items=items, total=len(items))
