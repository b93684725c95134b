"""ProjectStage model — execution record of one stage of one project."""

import uuid

from sqlalchemy import Column, Date, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID

from stageplan.db.base import Base


class ProjectStage(Base):
    __tablename__ = "project_stages"
    __table_args__ = (UniqueConstraint("project_id", "stage_code", name="uq_project_stage_code"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    project_id = Column(UUID(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    stage_code = Column(String(16), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    status = Column(String(32), nullable=False, default="NotStarted")  # NotStarted, InProgress, Completed, Blocked, Skipped

    # Baseline from the approved plan
    planned_start = Column(Date, nullable=True)
    planned_due = Column(Date, nullable=True)

    # Engine output, rewritten on every recompute
    forecast_start = Column(Date, nullable=True)
    forecast_due = Column(Date, nullable=True)

    # Ground truth
    actual_start = Column(Date, nullable=True)
    completed_on = Column(Date, nullable=True)
