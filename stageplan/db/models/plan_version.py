"""PlanVersion model — a versioned plan with its scheduling switches."""

import uuid
from datetime import UTC, datetime

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID

from stageplan.db.base import Base


class PlanVersion(Base):
    __tablename__ = "plan_versions"
    __table_args__ = (UniqueConstraint("project_id", "version_no", name="uq_plan_version_project_no"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    project_id = Column(UUID(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    version_no = Column(Integer, nullable=False)
    title = Column(String(64), nullable=False, default="")
    status = Column(String(32), nullable=False, default="Draft")  # Draft, PendingApproval, Approved, Rejected

    anchor_stage_code = Column(String(16), nullable=True)
    anchor_date = Column(Date, nullable=True)

    skip_weekends = Column(Boolean, nullable=False, default=True)
    transition_rule = Column(String(32), nullable=False, default="NextWorkingDay")  # SameDay, NextWorkingDay
    pnc_applicable = Column(Boolean, nullable=False, default=True)

    created_by_user_id = Column(String(450), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC))
