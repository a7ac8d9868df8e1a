"""Shift Task Handler - moves a single task's planned window."""

from typing import List

from app.scenarios.compute.actions.base import BaseActionHandler, shift_date
from app.scenarios.compute.types import ActionRecord, ShiftTaskPayload, WorkingSet
from app.scenarios.models import ActionType


class ShiftTaskHandler(BaseActionHandler):
    """Handler for shift_task actions."""

    action_type = ActionType.SHIFT_TASK.value
    payload_model = ShiftTaskPayload

    def required_fields(self) -> List[str]:
        return ["taskId", "shiftDays"]

    def apply_payload(
        self,
        action: ActionRecord,
        payload: ShiftTaskPayload,
        working_set: WorkingSet,
        warnings: List[str],
    ) -> None:
        task = working_set.find_task(payload.task_id)
        if task is None:
            warnings.append(f"Task {payload.task_id} not found in scope")
            return

        task.planned_start_at = shift_date(task.planned_start_at, payload.shift_days)
        task.planned_end_at = shift_date(task.planned_end_at, payload.shift_days)
