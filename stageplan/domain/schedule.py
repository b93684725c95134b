"""Stage forecast engine.

Pure function -- no DB access, no clock access. Given the stage template,
its dependency edges, per-stage durations and each stage's execution state,
computes a forecast start/due window for every participating stage.
"""

from collections.abc import Iterable, Mapping
from datetime import date

from stageplan.core.exceptions import ScheduleIntegrityError
from stageplan.domain.calendar import apply_transition, due_from_duration, roll_weekend
from stageplan.domain.stages import (
    PNC_STAGE_CODE,
    ScheduleOptions,
    StageDefinition,
    StageDependency,
    StageExecution,
    StageStatus,
    StageWindow,
    normalize_code,
)
from stageplan.domain.workflow import build_predecessor_map


def compute_forecast(
    templates: Iterable[StageDefinition],
    dependencies: Iterable[StageDependency],
    durations: Mapping[str, int],
    executions: Mapping[str, StageExecution],
    options: ScheduleOptions,
) -> dict[str, StageWindow]:
    """Compute forecast windows for every applicable stage.

    Args:
        templates: Stage definitions of the active template version
        dependencies: Dependency edges of that version
        durations: Duration in days per stage code for the active plan version
        executions: Current execution state per stage code
        options: Scheduling switches and the fallback "today"

    Returns:
        {template stage code: StageWindow}. PNC is absent when not applicable.

    Raises:
        ScheduleIntegrityError: a participating stage has no duration, or a
            stage or one of its predecessors has no execution record.

    Stages are visited in ascending sequence, which must be a topological
    order of the dependency graph (see workflow.find_sequence_violations).
    """
    nodes = sorted(
        (
            t for t in templates
            if options.pnc_applicable or normalize_code(t.code) != PNC_STAGE_CODE
        ),
        key=lambda t: t.sequence,
    )
    node_codes = {normalize_code(t.code) for t in nodes}
    predecessors = build_predecessor_map(dependencies, node_codes)

    duration_by_code = {normalize_code(code): days for code, days in durations.items()}
    execution_by_code = {normalize_code(code): state for code, state in executions.items()}

    computed: dict[str, StageWindow] = {}
    results: dict[str, StageWindow] = {}

    for template in nodes:
        code = normalize_code(template.code)
        if code in computed:
            continue

        if code not in duration_by_code:
            raise ScheduleIntegrityError(f"DurationDays missing for stage '{template.code}'")
        execution = _require_execution(execution_by_code, code)

        ready: date | None = None
        for predecessor_code in predecessors.get(code, ()):
            predecessor = _require_execution(execution_by_code, predecessor_code)
            if predecessor.status == StageStatus.SKIPPED:
                continue

            finish = _predecessor_finish(predecessor, computed.get(predecessor_code), options.today)
            candidate = apply_transition(finish, options.transition_rule, options.skip_weekends)
            if ready is None or candidate > ready:
                ready = candidate

        if execution.actual_start is not None:
            start = execution.actual_start
        elif ready is not None:
            start = ready
        elif execution.planned_start is not None:
            start = roll_weekend(execution.planned_start, options.skip_weekends)
        else:
            start = roll_weekend(options.today, options.skip_weekends)

        if execution.completed_on is not None:
            due = execution.completed_on
            # A stage finished ahead of its forecast start cannot start after it finished
            if execution.actual_start is None and start > due:
                start = due
        else:
            due = due_from_duration(start, duration_by_code[code], options.skip_weekends)

        window = StageWindow(start=start, due=due)
        computed[code] = window
        results[template.code] = window

    return results


def _require_execution(execution_by_code: dict[str, StageExecution], code: str) -> StageExecution:
    execution = execution_by_code.get(code)
    if execution is None:
        raise ScheduleIntegrityError(f"Execution stage '{code}' is missing")
    return execution


def _predecessor_finish(
    predecessor: StageExecution,
    computed: StageWindow | None,
    today: date,
) -> date:
    """First available of: actual completion, this pass's due, stored forecast, plan, today."""
    if predecessor.completed_on is not None:
        return predecessor.completed_on
    if computed is not None:
        return computed.due
    if predecessor.forecast_due is not None:
        return predecessor.forecast_due
    if predecessor.planned_due is not None:
        return predecessor.planned_due
    if predecessor.planned_start is not None:
        return predecessor.planned_start
    return today
