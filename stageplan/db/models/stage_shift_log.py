"""StageShiftLog model — append-only record of forecast due-date moves."""

import uuid
from datetime import UTC, datetime

from sqlalchemy import Column, Date, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.dialects.postgresql import UUID

from stageplan.db.base import Base


class StageShiftLog(Base):
    __tablename__ = "stage_shift_logs"
    __table_args__ = (Index("ix_stage_shift_logs_project_stage_created", "project_id", "stage_code", "created_at"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    project_id = Column(UUID(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    stage_code = Column(String(16), nullable=False)

    old_forecast_due = Column(Date, nullable=True)  # null on the first forecast
    new_forecast_due = Column(Date, nullable=False)
    delta_days = Column(Integer, nullable=False)

    cause_stage_code = Column(String(16), nullable=True)  # null for administrative recomputes
    cause_type = Column(String(32), nullable=False)  # "StageCompleted", "ManualEdit", "StageRequestApproved", ...

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC))
    created_by_user_id = Column(String(450), nullable=True)
    # NO updated_at -- shift entries are immutable (append-only)
