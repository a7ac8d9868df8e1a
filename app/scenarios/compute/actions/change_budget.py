"""Change Budget Handler."""

from typing import List

from app.scenarios.compute.actions.base import BaseActionHandler
from app.scenarios.compute.types import ActionRecord, ChangeBudgetPayload, WorkingSet
from app.scenarios.models import ActionType


class ChangeBudgetHandler(BaseActionHandler):
    """Sets a project's budget. Capacity, demand and EV figures are unaffected."""

    action_type = ActionType.CHANGE_BUDGET.value
    payload_model = ChangeBudgetPayload

    def required_fields(self) -> List[str]:
        return ["projectId", "newBudget"]

    def apply_payload(
        self,
        action: ActionRecord,
        payload: ChangeBudgetPayload,
        working_set: WorkingSet,
        warnings: List[str],
    ) -> None:
        project = working_set.find_project(payload.project_id)
        if project is None:
            warnings.append(f"Project {payload.project_id} not found in scope")
            return
        project.budget = payload.new_budget
