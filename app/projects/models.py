"""
Project and work-management models.

These tables are owned by the project/work-management services. The scenario
engine only reads them (see app.projects.repository) and never writes back.
"""
from sqlalchemy import (
    Column,
    String,
    DateTime,
    Boolean,
    Integer,
    Numeric,
    Date,
    ForeignKey,
    Index,
)
from sqlalchemy.sql import func
import enum

from app.database import Base
from app.models.base import generate_id


class DependencyType(str, enum.Enum):
    """Task dependency link types."""
    FINISH_TO_START = "FINISH_TO_START"
    START_TO_START = "START_TO_START"
    FINISH_TO_FINISH = "FINISH_TO_FINISH"
    START_TO_FINISH = "START_TO_FINISH"


class Project(Base):
    """A project, optionally grouped into a portfolio."""
    __tablename__ = "projects"

    id = Column(String, primary_key=True, default=lambda: generate_id("proj"))
    organization_id = Column(String, nullable=False, index=True)
    portfolio_id = Column(String, nullable=True, index=True)

    name = Column(String, nullable=False)
    budget = Column(Numeric(15, 2), nullable=True)
    waterfall_enabled = Column(Boolean, default=False, nullable=False)

    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)

    # Metadata
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class WorkTask(Base):
    """A scheduled unit of work inside a project."""
    __tablename__ = "work_tasks"

    id = Column(String, primary_key=True, default=lambda: generate_id("task"))
    organization_id = Column(String, nullable=False, index=True)
    project_id = Column(String, ForeignKey("projects.id"), nullable=False, index=True)

    title = Column(String, nullable=False, default="")
    assignee_user_id = Column(String, nullable=True, index=True)
    is_milestone = Column(Boolean, default=False, nullable=False)

    # Planning
    planned_start_at = Column(DateTime(timezone=True), nullable=True)
    planned_end_at = Column(DateTime(timezone=True), nullable=True)

    # Effort
    estimate_hours = Column(Numeric(10, 2), nullable=True)
    remaining_hours = Column(Numeric(10, 2), nullable=True)
    percent_complete = Column(Integer, default=0, nullable=False)

    # Metadata
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    deleted_at = Column(DateTime(timezone=True), nullable=True)


class WorkTaskDependency(Base):
    """A predecessor -> successor link between two tasks of one project."""
    __tablename__ = "work_task_dependencies"

    id = Column(String, primary_key=True, default=lambda: generate_id("dep"))
    organization_id = Column(String, nullable=False, index=True)
    project_id = Column(String, ForeignKey("projects.id"), nullable=False, index=True)

    predecessor_task_id = Column(String, ForeignKey("work_tasks.id"), nullable=False)
    successor_task_id = Column(String, ForeignKey("work_tasks.id"), nullable=False)
    type = Column(String, nullable=False, default=DependencyType.FINISH_TO_START.value)
    lag_minutes = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())


class EarnedValueSnapshot(Base):
    """Point-in-time earned value figures for a project."""
    __tablename__ = "earned_value_snapshots"

    id = Column(String, primary_key=True, default=lambda: generate_id("evs"))
    organization_id = Column(String, nullable=False)
    project_id = Column(String, ForeignKey("projects.id"), nullable=False)

    bac = Column(Numeric(15, 2), nullable=False, default=0)
    ev = Column(Numeric(15, 2), nullable=False, default=0)
    ac = Column(Numeric(15, 2), nullable=False, default=0)
    pv = Column(Numeric(15, 2), nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_ev_snapshot_project_time", "project_id", "created_at"),
    )
