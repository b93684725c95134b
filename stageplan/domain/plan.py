"""Baseline plan calculation from an anchor stage and date.

Pure function used when drafting a plan version: lays out planned windows for
the anchor stage and every stage sequenced after it, honouring dependencies,
the transition rule and optional manual overrides.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date

from stageplan.core.exceptions import ScheduleIntegrityError
from stageplan.domain.calendar import apply_transition, due_from_duration, roll_weekend
from stageplan.domain.stages import (
    PNC_STAGE_CODE,
    StageDefinition,
    StageDependency,
    StageWindow,
    TransitionRule,
    normalize_code,
)
from stageplan.domain.workflow import build_predecessor_map


@dataclass(frozen=True)
class ManualOverride:
    start: date | None = None
    due: date | None = None


@dataclass(frozen=True)
class PlanOptions:
    anchor_stage_code: str
    anchor_date: date
    durations: Mapping[str, int]
    skip_weekends: bool = True
    transition_rule: TransitionRule = TransitionRule.NEXT_WORKING_DAY
    pnc_applicable: bool = True
    manual_overrides: Mapping[str, ManualOverride] = field(default_factory=dict)


def compute_plan(
    templates: Iterable[StageDefinition],
    dependencies: Iterable[StageDependency],
    options: PlanOptions,
) -> dict[str, StageWindow]:
    """Compute planned windows starting at the anchor stage.

    Rules:
        - Stages sequenced before the anchor are omitted
        - PNC is omitted when not applicable
        - The anchor starts on the anchor date (or its manual start), rolled off weekends
        - Other stages start at the latest gap-adjusted predecessor due, or the
          anchor date when no predecessor is planned; a manual start can only
          push a stage later
        - Missing or non-positive durations make a stage due the day it starts
        - A manual due is rolled off weekends and never earlier than the start

    Raises:
        ScheduleIntegrityError: the anchor stage is not in the template set
    """
    ordered = sorted(templates, key=lambda t: t.sequence)
    stage_by_code = {normalize_code(t.code): t for t in ordered}

    anchor_code = normalize_code(options.anchor_stage_code)
    anchor = stage_by_code.get(anchor_code)
    if anchor is None:
        raise ScheduleIntegrityError(
            f"Anchor stage '{options.anchor_stage_code}' was not found in the template set."
        )

    included = set(stage_by_code)
    if not options.pnc_applicable:
        included.discard(PNC_STAGE_CODE)

    predecessors = build_predecessor_map(dependencies, included)
    durations = {normalize_code(code): days for code, days in options.durations.items()}
    overrides = {normalize_code(code): o for code, o in options.manual_overrides.items()}
    skip = options.skip_weekends

    computed: dict[str, StageWindow] = {}
    results: dict[str, StageWindow] = {}

    for stage in ordered:
        code = normalize_code(stage.code)
        if stage.sequence < anchor.sequence or code not in included:
            continue

        override = overrides.get(code)

        if code == anchor_code:
            anchor_start = override.start if override and override.start else options.anchor_date
            start = roll_weekend(anchor_start, skip)
        else:
            earliest = None
            for predecessor_code in predecessors.get(code, ()):
                planned = computed.get(predecessor_code)
                if planned is None:
                    continue
                candidate = apply_transition(planned.due, options.transition_rule, skip)
                if earliest is None or candidate > earliest:
                    earliest = candidate
            if earliest is None:
                earliest = roll_weekend(options.anchor_date, skip)

            start = earliest
            if override and override.start:
                start = max(roll_weekend(override.start, skip), earliest)

        due = due_from_duration(start, durations.get(code, 0), skip)
        if override and override.due:
            due = max(roll_weekend(override.due, skip), start)

        window = StageWindow(start=start, due=due)
        computed[code] = window
        results[stage.code] = window

    return results
