"""
Base Action Handler - Abstract base class for scenario action handlers.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta
from typing import List, Optional, Type, Union
from pydantic import ValidationError

from app.scenarios.compute.types import ActionRecord, ActionPayload, WorkingSet


class BaseActionHandler(ABC):
    """
    Abstract base class for action handlers.

    Each action type has a handler that knows how to:
    1. Validate its payload
    2. Apply the change to the working set (never to loaded originals)

    Problems are reported by appending to ``warnings``; a handler never raises
    for bad input.
    """

    action_type: str
    payload_model: Type[ActionPayload]

    @abstractmethod
    def required_fields(self) -> List[str]:
        """Payload keys (as stored) that must be present."""
        pass

    @abstractmethod
    def apply_payload(
        self,
        action: ActionRecord,
        payload: ActionPayload,
        working_set: WorkingSet,
        warnings: List[str],
    ) -> None:
        """Apply a validated payload to the working set."""
        pass

    def apply(self, action: ActionRecord, working_set: WorkingSet, warnings: List[str]) -> None:
        """Validate the payload, then apply it. Invalid payloads leave the set untouched."""
        payload = self.parse_payload(action)
        if payload is None:
            warnings.append(
                f"Invalid {self.action_type} action {action.id}: "
                f"missing {' or '.join(self.required_fields())}"
            )
            return
        self.apply_payload(action, payload, working_set, warnings)

    def parse_payload(self, action: ActionRecord) -> Optional[ActionPayload]:
        try:
            return self.payload_model.model_validate(action.payload or {})
        except ValidationError:
            return None


def shift_date(value: Union[datetime, date, None], days: float) -> Union[datetime, date, None]:
    """Move a date or timestamp by whole calendar days; fractions are truncated toward zero."""
    if value is None:
        return None
    return value + timedelta(days=int(days))
