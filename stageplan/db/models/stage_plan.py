"""StagePlan model — per-plan-version stage duration and planned window."""

import uuid

from sqlalchemy import Column, Date, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID

from stageplan.db.base import Base


class StagePlan(Base):
    __tablename__ = "stage_plans"
    __table_args__ = (UniqueConstraint("plan_version_id", "stage_code", name="uq_stage_plan_version_code"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    plan_version_id = Column(
        UUID(as_uuid=True), ForeignKey("plan_versions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    stage_code = Column(String(16), nullable=False)

    planned_start = Column(Date, nullable=True)
    planned_due = Column(Date, nullable=True)
    duration_days = Column(Integer, nullable=False)
