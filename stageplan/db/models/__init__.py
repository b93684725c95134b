"""Re-export all models so Base.metadata sees them."""

from stageplan.db.models.plan_version import PlanVersion
from stageplan.db.models.project import Project
from stageplan.db.models.project_stage import ProjectStage
from stageplan.db.models.stage_plan import StagePlan
from stageplan.db.models.stage_shift_log import StageShiftLog
from stageplan.db.models.stage_template import StageDependencyTemplate, StageTemplate

__all__ = [
    "PlanVersion",
    "Project",
    "ProjectStage",
    "StageDependencyTemplate",
    "StagePlan",
    "StageShiftLog",
    "StageTemplate",
]
