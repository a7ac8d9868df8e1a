"""Scenario Planning Models - what-if plans, their actions and computed results."""
from sqlalchemy import Column, String, DateTime, ForeignKey, Index
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum

from app.database import Base
from app.models.base import generate_id


class ScopeType(str, enum.Enum):
    """What a scenario plan is evaluated against."""
    PORTFOLIO = "portfolio"
    PROJECT = "project"


class ScenarioStatus(str, enum.Enum):
    """Scenario plan lifecycle status."""
    DRAFT = "draft"
    ACTIVE = "active"


class ActionType(str, enum.Enum):
    """Hypothetical changes a scenario can apply."""
    SHIFT_PROJECT = "shift_project"
    SHIFT_TASK = "shift_task"
    CHANGE_CAPACITY = "change_capacity"
    CHANGE_BUDGET = "change_budget"


class ScenarioPlan(Base):
    """A what-if exercise over a project or a whole portfolio."""
    __tablename__ = "scenario_plans"

    id = Column(String, primary_key=True, default=lambda: generate_id("scenario"))
    organization_id = Column(String, nullable=False, index=True)
    workspace_id = Column(String, nullable=True)

    name = Column(String, nullable=False)
    description = Column(String)

    # Scope: a single project id or a portfolio id
    scope_type = Column(String, nullable=False, default=ScopeType.PROJECT.value)
    scope_id = Column(String, nullable=False)

    status = Column(String, default=ScenarioStatus.DRAFT.value)

    # Metadata
    created_by = Column(String)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    actions = relationship(
        "ScenarioAction",
        back_populates="scenario",
        cascade="all, delete-orphan",
        order_by="ScenarioAction.created_at",
    )
    result = relationship("ScenarioResult", back_populates="scenario", uselist=False)


class ScenarioAction(Base):
    """One declarative change inside a scenario. Immutable once created."""
    __tablename__ = "scenario_actions"

    id = Column(String, primary_key=True, default=lambda: generate_id("scact"))
    organization_id = Column(String, nullable=False)
    scenario_id = Column(String, ForeignKey("scenario_plans.id"), nullable=False, index=True)

    action_type = Column(String, nullable=False)

    # Type-specific payload, e.g. {"projectId": "...", "shiftDays": 7}
    payload = Column(JSONB, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    scenario = relationship("ScenarioPlan", back_populates="actions")


class ScenarioResult(Base):
    """The latest computed before/after outcome for a scenario (one per plan)."""
    __tablename__ = "scenario_results"

    id = Column(String, primary_key=True, default=lambda: generate_id("scres"))
    organization_id = Column(String, nullable=False)
    scenario_id = Column(String, ForeignKey("scenario_plans.id"), nullable=False, unique=True)

    # {"before": {...}, "after": {...}, "deltas": {...}, "impacted_projects": [...]}
    summary = Column(JSONB, nullable=False, default=dict)
    warnings = Column(JSONB, nullable=False, default=list)

    computed_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    scenario = relationship("ScenarioPlan", back_populates="result")

    __table_args__ = (
        Index("ix_scenario_result_org", "organization_id", "scenario_id"),
    )
