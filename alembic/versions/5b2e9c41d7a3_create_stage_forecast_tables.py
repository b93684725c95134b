"""create stage forecast tables: projects, plan_versions, stage_plans, stage templates, project_stages, stage_shift_logs

Revision ID: 5b2e9c41d7a3
Revises:
Create Date: 2025-09-08 10:12:44.118302

"""

from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "5b2e9c41d7a3"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "projects",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("active_plan_version_no", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "plan_versions",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("project_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("version_no", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=64), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("anchor_stage_code", sa.String(length=16), nullable=True),
        sa.Column("anchor_date", sa.Date(), nullable=True),
        sa.Column("skip_weekends", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("transition_rule", sa.String(length=32), nullable=False, server_default="NextWorkingDay"),
        sa.Column("pnc_applicable", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_by_user_id", sa.String(length=450), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("project_id", "version_no", name="uq_plan_version_project_no"),
    )
    op.create_index(op.f("ix_plan_versions_project_id"), "plan_versions", ["project_id"], unique=False)

    op.create_table(
        "stage_plans",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("plan_version_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("stage_code", sa.String(length=16), nullable=False),
        sa.Column("planned_start", sa.Date(), nullable=True),
        sa.Column("planned_due", sa.Date(), nullable=True),
        sa.Column("duration_days", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["plan_version_id"], ["plan_versions.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("plan_version_id", "stage_code", name="uq_stage_plan_version_code"),
    )
    op.create_index(op.f("ix_stage_plans_plan_version_id"), "stage_plans", ["plan_version_id"], unique=False)

    op.create_table(
        "stage_templates",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("version", sa.String(length=32), nullable=False),
        sa.Column("code", sa.String(length=16), nullable=False),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("sequence", sa.Integer(), nullable=False),
        sa.Column("optional", sa.Boolean(), nullable=False),
        sa.Column("parallel_group", sa.String(length=32), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("version", "code", name="uq_stage_template_version_code"),
    )
    op.create_index(op.f("ix_stage_templates_version"), "stage_templates", ["version"], unique=False)

    op.create_table(
        "stage_dependency_templates",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("version", sa.String(length=32), nullable=False),
        sa.Column("from_stage_code", sa.String(length=16), nullable=False),
        sa.Column("depends_on_stage_code", sa.String(length=16), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "version", "from_stage_code", "depends_on_stage_code", name="uq_stage_dependency_version_edge"
        ),
    )
    op.create_index(
        op.f("ix_stage_dependency_templates_version"), "stage_dependency_templates", ["version"], unique=False
    )

    op.create_table(
        "project_stages",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("project_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("stage_code", sa.String(length=16), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("planned_start", sa.Date(), nullable=True),
        sa.Column("planned_due", sa.Date(), nullable=True),
        sa.Column("forecast_start", sa.Date(), nullable=True),
        sa.Column("forecast_due", sa.Date(), nullable=True),
        sa.Column("actual_start", sa.Date(), nullable=True),
        sa.Column("completed_on", sa.Date(), nullable=True),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("project_id", "stage_code", name="uq_project_stage_code"),
    )
    op.create_index(op.f("ix_project_stages_project_id"), "project_stages", ["project_id"], unique=False)

    op.create_table(
        "stage_shift_logs",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("project_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("stage_code", sa.String(length=16), nullable=False),
        sa.Column("old_forecast_due", sa.Date(), nullable=True),
        sa.Column("new_forecast_due", sa.Date(), nullable=False),
        sa.Column("delta_days", sa.Integer(), nullable=False),
        sa.Column("cause_stage_code", sa.String(length=16), nullable=True),
        sa.Column("cause_type", sa.String(length=32), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_by_user_id", sa.String(length=450), nullable=True),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_stage_shift_logs_project_stage_created",
        "stage_shift_logs",
        ["project_id", "stage_code", "created_at"],
        unique=False,
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_stage_shift_logs_project_stage_created", table_name="stage_shift_logs")
    op.drop_table("stage_shift_logs")
    op.drop_index(op.f("ix_project_stages_project_id"), table_name="project_stages")
    op.drop_table("project_stages")
    op.drop_index(op.f("ix_stage_dependency_templates_version"), table_name="stage_dependency_templates")
    op.drop_table("stage_dependency_templates")
    op.drop_index(op.f("ix_stage_templates_version"), table_name="stage_templates")
    op.drop_table("stage_templates")
    op.drop_index(op.f("ix_stage_plans_plan_version_id"), table_name="stage_plans")
    op.drop_table("stage_plans")
    op.drop_index(op.f("ix_plan_versions_project_id"), table_name="plan_versions")
    op.drop_table("plan_versions")
    op.drop_table("projects")
