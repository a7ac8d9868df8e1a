"""Change Capacity Handler - overrides one user's capacity on one day."""

from typing import List

from app.scenarios.compute.actions.base import BaseActionHandler
from app.scenarios.compute.types import (
    ActionRecord,
    ChangeCapacityPayload,
    WorkingSet,
    capacity_key,
)
from app.scenarios.models import ActionType


class ChangeCapacityHandler(BaseActionHandler):
    """
    Handler for change_capacity actions.

    Only records the override; the capacity model reads it when computing
    the after state. Later actions for the same user/day replace earlier ones.
    """

    action_type = ActionType.CHANGE_CAPACITY.value
    payload_model = ChangeCapacityPayload

    def required_fields(self) -> List[str]:
        return ["userId", "date", "capacityHours"]

    def apply_payload(
        self,
        action: ActionRecord,
        payload: ChangeCapacityPayload,
        working_set: WorkingSet,
        warnings: List[str],
    ) -> None:
        key = capacity_key(payload.user_id, payload.day.isoformat())
        working_set.capacity_overrides[key] = payload.capacity_hours
