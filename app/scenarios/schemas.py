"""Pydantic schemas for scenario compute results."""
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


# ============================================================================
# SUMMARY SCHEMAS
# ============================================================================

class ScenarioState(BaseModel):
    """Derived metrics for one state (before or after actions)."""
    total_capacity_hours: float = 0.0
    total_demand_hours: float = 0.0
    overallocated_days: int = 0
    overallocated_users: int = 0
    aggregate_cpi: Optional[float] = None
    aggregate_spi: Optional[float] = None
    critical_path_slip_minutes: int = 0
    baseline_drift_minutes: int = 0


class ScenarioDeltas(BaseModel):
    """Signed after - before differences."""
    total_capacity_hours_delta: float = 0.0
    total_demand_hours_delta: float = 0.0
    overallocated_days_delta: int = 0
    overallocated_users_delta: int = 0
    cpi_delta: Optional[float] = None  # None unless both sides have a CPI
    spi_delta: Optional[float] = None
    critical_path_slip_delta: int = 0
    baseline_drift_delta: int = 0


class ImpactedProject(BaseModel):
    """A project touched by at least one action."""
    project_id: str
    project_name: str
    impact_summary: str


class ScenarioSummary(BaseModel):
    """Full before/after comparison persisted with a scenario result."""
    before: ScenarioState = Field(default_factory=ScenarioState)
    after: ScenarioState = Field(default_factory=ScenarioState)
    deltas: ScenarioDeltas = Field(default_factory=ScenarioDeltas)
    impacted_projects: List[ImpactedProject] = Field(default_factory=list)


# ============================================================================
# RESPONSE SCHEMAS
# ============================================================================

class ComputeResponse(BaseModel):
    """Returned by a compute run."""
    scenario_id: str
    summary: ScenarioSummary
    warnings: List[str] = Field(default_factory=list)


class ScenarioResultResponse(BaseModel):
    """A persisted scenario result."""
    id: str
    scenario_id: str
    organization_id: str
    summary: ScenarioSummary
    warnings: List[str]
    computed_at: Optional[datetime]

    model_config = {"from_attributes": True}
