"""Stage status-change validation.

Pure domain logic: decides whether a stage may move to a target status on a
target date, given the project's current stage states and the dependency
graph. No DB access.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date

from stageplan.domain.stages import (
    PNC_STAGE_CODE,
    StageDependency,
    StageExecution,
    StageStatus,
    normalize_code,
)
from stageplan.domain.workflow import build_predecessor_map


@dataclass
class StageValidationResult:
    """Outcome of a validation. Valid only with no errors and no missing predecessors."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    missing_predecessors: list[str] = field(default_factory=list)
    suggested_auto_start: date | None = None

    @property
    def is_valid(self) -> bool:
        return not self.errors and not self.missing_predecessors


def parse_status(value: str) -> StageStatus | None:
    """Parse a status name case-insensitively; None when unrecognised."""
    wanted = value.strip().lower()
    for status in StageStatus:
        if status.value.lower() == wanted:
            return status
    return None


def check_transition(current: StageStatus, target: StageStatus, target_date: date | None) -> str | None:
    """Return an error message when current -> target is not allowed, else None."""
    if current == target:
        return "The stage is already in the requested status."

    if target == StageStatus.IN_PROGRESS:
        if current in (StageStatus.NOT_STARTED, StageStatus.BLOCKED, StageStatus.SKIPPED):
            return None
        if current == StageStatus.COMPLETED:
            if target_date is None:
                return "Reopening to InProgress requires an actual start date."
            return None
        return f"Changing from {current} to {target} is not allowed."

    if target == StageStatus.COMPLETED:
        if current in (StageStatus.NOT_STARTED, StageStatus.IN_PROGRESS):
            return None
        return f"Changing from {current} to {target} is not allowed."

    if target == StageStatus.BLOCKED:
        if current == StageStatus.COMPLETED:
            return "Completed stages cannot be blocked."
        return None

    if target == StageStatus.SKIPPED:
        if current != StageStatus.NOT_STARTED:
            return "Only stages that have not started can be skipped."
        return None

    # Reopen to NotStarted
    if current in (StageStatus.COMPLETED, StageStatus.SKIPPED, StageStatus.BLOCKED):
        return None
    return "Only completed, skipped, or blocked stages can be reopened."


def validate_stage_change(
    stages: Mapping[str, StageExecution],
    dependencies: Iterable[StageDependency],
    stage_code: str,
    target_status: str,
    target_date: date | None,
    today: date,
    is_hod: bool = False,
    pnc_applicable: bool = True,
) -> StageValidationResult:
    """Validate a requested stage status change.

    Args:
        stages: Current execution state per stage code for the project
        dependencies: Dependency edges of the project's template version
        stage_code: Stage being changed
        target_status: Requested status name (case-insensitive)
        target_date: Actual start (InProgress) or completion (Completed) date
        today: Business-calendar today; dates after it are rejected
        is_hod: Head-of-department requests may omit the completion date
        pnc_applicable: When False, PNC is not a required predecessor

    Returns:
        StageValidationResult; suggested_auto_start is the latest predecessor
        completion date when predecessors are checked.
    """
    result = StageValidationResult()

    if not stage_code or not stage_code.strip():
        result.errors.append("A stage code is required.")
        return result

    if not target_status or not target_status.strip():
        result.errors.append("A target status is required.")
        return result

    desired = parse_status(target_status)
    if desired is None:
        result.errors.append("The target status is not recognised.")
        return result

    if not stages:
        result.errors.append("No stages were found for this project.")
        return result

    stage_lookup = {normalize_code(code): state for code, state in stages.items()}
    code = normalize_code(stage_code)
    stage = stage_lookup.get(code)
    if stage is None:
        result.errors.append("The requested stage was not found for this project.")
        return result

    current = parse_status(str(stage.status)) or StageStatus.NOT_STARTED
    transition_error = check_transition(current, desired, target_date)
    if transition_error:
        result.errors.append(transition_error)

    if desired == StageStatus.IN_PROGRESS and target_date is not None and target_date > today:
        result.errors.append("Actual start date cannot be in the future.")

    if desired == StageStatus.COMPLETED:
        if target_date is None and not is_hod:
            result.errors.append("A completion date is required when completing a stage.")
        if target_date is not None and target_date > today:
            result.errors.append("Completion date cannot be in the future.")
        if target_date is not None and stage.actual_start is not None and target_date < stage.actual_start:
            result.errors.append("Completion date cannot be before the actual start date.")

    if desired in (StageStatus.IN_PROGRESS, StageStatus.COMPLETED):
        required = [
            predecessor
            for predecessor in build_predecessor_map(dependencies).get(code, [])
            if pnc_applicable or predecessor != PNC_STAGE_CODE
        ]
        completed_dates: list[date] = []
        for predecessor_code in required:
            predecessor = stage_lookup.get(predecessor_code)
            if predecessor is not None and predecessor.status == StageStatus.SKIPPED:
                continue
            if predecessor is None or predecessor.status != StageStatus.COMPLETED:
                result.missing_predecessors.append(predecessor_code)
                continue
            if predecessor.completed_on is not None:
                completed_dates.append(predecessor.completed_on)
        if completed_dates:
            result.suggested_auto_start = max(completed_dates)

    if (
        desired == StageStatus.COMPLETED
        and target_date is not None
        and result.suggested_auto_start is not None
        and target_date < result.suggested_auto_start
    ):
        if is_hod:
            result.warnings.append("Completion before the latest predecessor requires a force override.")
        result.errors.append(
            f"Completion date cannot be earlier than {result.suggested_auto_start.isoformat()}, "
            "when the latest predecessor completed."
        )

    return result
