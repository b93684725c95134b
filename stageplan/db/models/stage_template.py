"""StageTemplate and StageDependencyTemplate — versioned workflow reference data.

Seeded once per template version (see stageplan.db.seed); never mutated at runtime.
"""

from sqlalchemy import Boolean, Column, Integer, String, UniqueConstraint

from stageplan.db.base import Base


class StageTemplate(Base):
    __tablename__ = "stage_templates"
    __table_args__ = (UniqueConstraint("version", "code", name="uq_stage_template_version_code"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    version = Column(String(32), nullable=False, index=True)
    code = Column(String(16), nullable=False)
    name = Column(String(128), nullable=False)
    sequence = Column(Integer, nullable=False)
    optional = Column(Boolean, nullable=False, default=False)
    parallel_group = Column(String(32), nullable=True)


class StageDependencyTemplate(Base):
    __tablename__ = "stage_dependency_templates"
    __table_args__ = (
        UniqueConstraint(
            "version", "from_stage_code", "depends_on_stage_code", name="uq_stage_dependency_version_edge"
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    version = Column(String(32), nullable=False, index=True)
    from_stage_code = Column(String(16), nullable=False)
    depends_on_stage_code = Column(String(16), nullable=False)
