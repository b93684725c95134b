"""Stage enums and value objects shared by the scheduling functions.

Pure domain types with no external dependencies. The engine and calculators
accept these rather than ORM rows so they can run without a database.
"""

from dataclasses import dataclass
from datetime import date
from enum import StrEnum

PNC_STAGE_CODE = "PNC"


class StageStatus(StrEnum):
    """Execution status of a project stage. Values match the stored strings."""

    NOT_STARTED = "NotStarted"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    BLOCKED = "Blocked"
    SKIPPED = "Skipped"


class TransitionRule(StrEnum):
    """Minimum gap between a predecessor's finish and a dependent's start."""

    SAME_DAY = "SameDay"
    NEXT_WORKING_DAY = "NextWorkingDay"


def normalize_code(code: str) -> str:
    """Stage codes compare case-insensitively."""
    return code.strip().upper()


@dataclass(frozen=True)
class StageDefinition:
    """One stage of a template version."""

    code: str
    sequence: int
    name: str = ""
    version: str = ""
    optional: bool = False
    parallel_group: str | None = None


@dataclass(frozen=True)
class StageDependency:
    """Directed edge: from_stage_code cannot start before depends_on_stage_code finishes."""

    from_stage_code: str
    depends_on_stage_code: str
    version: str = ""


@dataclass
class StageExecution:
    """Current execution state of one stage of a project."""

    status: StageStatus = StageStatus.NOT_STARTED
    actual_start: date | None = None
    completed_on: date | None = None
    planned_start: date | None = None
    planned_due: date | None = None
    forecast_start: date | None = None
    forecast_due: date | None = None


@dataclass(frozen=True)
class ScheduleOptions:
    """Plan-version scheduling switches plus the fallback baseline date."""

    today: date
    skip_weekends: bool = True
    transition_rule: TransitionRule = TransitionRule.NEXT_WORKING_DAY
    pnc_applicable: bool = True


@dataclass(frozen=True)
class StageWindow:
    """Computed start/due for one stage."""

    start: date
    due: date
