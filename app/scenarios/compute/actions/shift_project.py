"""Shift Project Handler - moves a project and all of its tasks in time."""

from typing import List

from app.scenarios.compute.actions.base import BaseActionHandler, shift_date
from app.scenarios.compute.types import (
    ActionRecord,
    ShiftProjectPayload,
    WorkingSet,
)
from app.scenarios.models import ActionType


class ShiftProjectHandler(BaseActionHandler):
    """Handler for shift_project actions."""

    action_type = ActionType.SHIFT_PROJECT.value
    payload_model = ShiftProjectPayload

    def required_fields(self) -> List[str]:
        return ["projectId", "shiftDays"]

    def apply_payload(
        self,
        action: ActionRecord,
        payload: ShiftProjectPayload,
        working_set: WorkingSet,
        warnings: List[str],
    ) -> None:
        project = working_set.find_project(payload.project_id)
        if project is None:
            warnings.append(f"Project {payload.project_id} not found in scope")
            return

        for task in working_set.tasks:
            if task.project_id != payload.project_id:
                continue
            task.planned_start_at = shift_date(task.planned_start_at, payload.shift_days)
            task.planned_end_at = shift_date(task.planned_end_at, payload.shift_days)

        project.start_date = shift_date(project.start_date, payload.shift_days)
        project.end_date = shift_date(project.end_date, payload.shift_days)
