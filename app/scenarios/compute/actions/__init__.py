"""
Scenario Action Handlers - Type-specific action processing.

Each handler implements:
- required_fields(): payload keys that must be present
- apply_payload(): mutate the working set for a validated payload

Every ActionType has exactly one handler; anything else is reported as an
unknown action type.
"""

from typing import Dict, List, Optional

from app.scenarios.models import ActionType
from app.scenarios.compute.types import ActionRecord, WorkingSet
from app.scenarios.compute.actions.base import BaseActionHandler
from app.scenarios.compute.actions.shift_project import ShiftProjectHandler
from app.scenarios.compute.actions.shift_task import ShiftTaskHandler
from app.scenarios.compute.actions.change_capacity import ChangeCapacityHandler
from app.scenarios.compute.actions.change_budget import ChangeBudgetHandler


HANDLERS: Dict[ActionType, BaseActionHandler] = {
    ActionType.SHIFT_PROJECT: ShiftProjectHandler(),
    ActionType.SHIFT_TASK: ShiftTaskHandler(),
    ActionType.CHANGE_CAPACITY: ChangeCapacityHandler(),
    ActionType.CHANGE_BUDGET: ChangeBudgetHandler(),
}

_missing = set(ActionType) - set(HANDLERS)
if _missing:
    raise RuntimeError(f"No handler for action types: {sorted(t.value for t in _missing)}")


def get_handler(action_type: str) -> Optional[BaseActionHandler]:
    """Handler for a stored action type string, or None if the type is unknown."""
    try:
        return HANDLERS[ActionType(action_type)]
    except ValueError:
        return None


def apply_action(action: ActionRecord, working_set: WorkingSet, warnings: List[str]) -> None:
    """Apply one action to the working set, appending any warnings."""
    handler = get_handler(action.action_type)
    if handler is None:
        warnings.append(f"Unknown action type: {action.action_type}")
        return
    handler.apply(action, working_set, warnings)


__all__ = [
    "BaseActionHandler",
    "HANDLERS",
    "get_handler",
    "apply_action",
]
