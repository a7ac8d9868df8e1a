"""
Scenario Compute Types - plain records the pure engine works on.

The repository converts ORM rows into these records at the I/O boundary, so
the compute code never touches a live session object. Records are ordinary
pydantic models and can be deep-copied into an independent working set.

Also defines the action payload schemas. Payload keys are stored as camelCase
JSON (``{"projectId": "...", "shiftDays": 7}``); both spellings are accepted.
"""

from datetime import date, datetime
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, ConfigDict, Field

from app.projects.models import DependencyType


# =============================================================================
# PROJECT STATE RECORDS
# =============================================================================

class ProjectRecord(BaseModel):
    """A project in scope."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    portfolio_id: Optional[str] = None
    budget: Optional[float] = None
    waterfall_enabled: bool = False
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class TaskRecord(BaseModel):
    """A work task with its planned window and effort fields."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    project_id: str
    assignee_user_id: Optional[str] = None
    is_milestone: bool = False
    planned_start_at: Optional[datetime] = None
    planned_end_at: Optional[datetime] = None
    estimate_hours: Optional[float] = None
    remaining_hours: Optional[float] = None
    percent_complete: float = 0


class DependencyRecord(BaseModel):
    """A predecessor -> successor link."""
    model_config = ConfigDict(from_attributes=True)

    project_id: str
    predecessor_task_id: str
    successor_task_id: str
    type: str = DependencyType.FINISH_TO_START.value  # validated by the critical path engine
    lag_minutes: int = 0


class EarnedValueRecord(BaseModel):
    """Latest earned value snapshot of a project."""
    model_config = ConfigDict(from_attributes=True)

    project_id: str
    bac: float = 0
    ev: float = 0
    ac: float = 0
    pv: float = 0
    created_at: Optional[datetime] = None


class ActionRecord(BaseModel):
    """
    A scenario action as stored.

    ``action_type`` stays a plain string: unknown types must reach the
    applicator so they can be reported, not rejected at load time.
    """
    model_config = ConfigDict(from_attributes=True)

    id: str
    action_type: str
    payload: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None


class WorkingSet(BaseModel):
    """
    The mutable clone actions are applied to.

    ``capacity_overrides`` maps ``"userId:YYYY-MM-DD"`` to hours.
    """
    tasks: List[TaskRecord] = Field(default_factory=list)
    projects: List[ProjectRecord] = Field(default_factory=list)
    capacity_overrides: Dict[str, float] = Field(default_factory=dict)

    def find_task(self, task_id: str) -> Optional[TaskRecord]:
        return next((t for t in self.tasks if t.id == task_id), None)

    def find_project(self, project_id: str) -> Optional[ProjectRecord]:
        return next((p for p in self.projects if p.id == project_id), None)


# =============================================================================
# ACTION PAYLOADS
# =============================================================================

class ActionPayload(BaseModel):
    """Base for action payloads: camelCase keys, unknown keys ignored."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ShiftProjectPayload(ActionPayload):
    project_id: str = Field(..., alias="projectId", min_length=1)
    shift_days: float = Field(..., alias="shiftDays")


class ShiftTaskPayload(ActionPayload):
    task_id: str = Field(..., alias="taskId", min_length=1)
    shift_days: float = Field(..., alias="shiftDays")


class ChangeCapacityPayload(ActionPayload):
    user_id: str = Field(..., alias="userId", min_length=1)
    day: date = Field(..., alias="date")
    capacity_hours: float = Field(..., alias="capacityHours")


class ChangeBudgetPayload(ActionPayload):
    project_id: str = Field(..., alias="projectId", min_length=1)
    new_budget: float = Field(..., alias="newBudget")


def capacity_key(user_id: str, day: str) -> str:
    """Key used by the capacity override map."""
    return f"{user_id}:{day}"
