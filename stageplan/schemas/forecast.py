"""Pydantic schemas for forecast, plan preview and stage validation endpoints."""

import uuid
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from stageplan.domain.stages import StageStatus, TransitionRule


class StageTemplateIn(BaseModel):
    code: str = Field(min_length=1, max_length=16)
    sequence: int
    name: str = ""


class StageDependencyIn(BaseModel):
    from_stage_code: str = Field(min_length=1, max_length=16)
    depends_on_stage_code: str = Field(min_length=1, max_length=16)


class StageExecutionIn(BaseModel):
    status: StageStatus = StageStatus.NOT_STARTED
    actual_start: date | None = None
    completed_on: date | None = None
    planned_start: date | None = None
    planned_due: date | None = None
    forecast_start: date | None = None
    forecast_due: date | None = None


class StageWindowOut(BaseModel):
    stage_code: str
    start: date
    due: date


class ForecastPreviewRequest(BaseModel):
    """What-if forecast input. Templates and dependencies default to the seeded workflow."""

    templates: list[StageTemplateIn] | None = None
    dependencies: list[StageDependencyIn] | None = None
    durations: dict[str, int]
    executions: dict[str, StageExecutionIn]
    skip_weekends: bool = True
    transition_rule: TransitionRule = TransitionRule.NEXT_WORKING_DAY
    pnc_applicable: bool = True
    today: date | None = None


class ManualOverrideIn(BaseModel):
    start: date | None = None
    due: date | None = None


class PlanPreviewRequest(BaseModel):
    templates: list[StageTemplateIn] | None = None
    dependencies: list[StageDependencyIn] | None = None
    anchor_stage_code: str
    anchor_date: date
    durations: dict[str, int] = Field(default_factory=dict)
    skip_weekends: bool = True
    transition_rule: TransitionRule = TransitionRule.NEXT_WORKING_DAY
    pnc_applicable: bool = True
    manual_overrides: dict[str, ManualOverrideIn] = Field(default_factory=dict)


class ScheduleResponse(BaseModel):
    """Computed windows in template sequence order; stages is never null."""

    stages: list[StageWindowOut] = Field(default_factory=list)


class RecomputeRequest(BaseModel):
    cause_type: str = Field(min_length=1, max_length=32)
    cause_stage_code: str | None = Field(default=None, max_length=16)

    @field_validator("cause_type")
    @classmethod
    def reject_whitespace_only(cls, v: str) -> str:
        """Reject blank cause types; the shift log requires one."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("cause_type is required")
        return stripped


class StageShiftOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    stage_code: str
    old_forecast_due: date | None = None
    new_forecast_due: date
    delta_days: int
    cause_stage_code: str | None = None
    cause_type: str
    created_at: datetime | None = None
    created_by_user_id: str | None = None


class RecomputeResponse(BaseModel):
    project_id: uuid.UUID
    recomputed: bool
    stages: list[StageWindowOut] = Field(default_factory=list)
    shifts: list[StageShiftOut] = Field(default_factory=list)


class ShiftLogResponse(BaseModel):
    project_id: uuid.UUID
    items: list[StageShiftOut] = Field(default_factory=list, description="Shift entries, newest first")
    total: int = 0


class StageValidationRequest(BaseModel):
    target_status: str
    target_date: date | None = None
    is_hod: bool = False


class StageValidationResponse(BaseModel):
    is_valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    missing_predecessors: list[str] = Field(default_factory=list)
    suggested_auto_start: date | None = None


class BackfillResponse(BaseModel):
    updated: int
