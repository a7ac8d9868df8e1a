"""
Capacity & Demand Model.

Spreads task effort across the working days of each task's planned window,
sums it per user per day, and compares it with daily capacity:

- capacity is ``default_capacity_hours`` on weekdays and 0 on weekends
- an explicit override (``"userId:YYYY-MM-DD" -> hours``) always wins
- a day is overallocated when capacity > 0 and demand > capacity
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

from app.scenarios.compute.calendar import CalendarService, is_weekend, to_utc_date
from app.scenarios.compute.types import TaskRecord, capacity_key


@dataclass
class CapacityResult:
    """Capacity/demand totals for one state."""
    total_capacity_hours: float = 0.0
    total_demand_hours: float = 0.0
    overallocated_days: int = 0
    overallocated_users: int = 0


class CapacityDemandModel:
    """Per-user-per-day demand vs capacity."""

    def __init__(self, calendar: CalendarService, default_capacity_hours: float):
        self.calendar = calendar
        self.default_capacity_hours = default_capacity_hours

    def task_hours(self, task: TaskRecord, working_days: int) -> float:
        """
        Total hours a task still needs.

        Remaining hours win when positive, then the unfinished share of the
        estimate, then a full default workday for every working day.
        """
        if task.remaining_hours is not None and task.remaining_hours > 0:
            return float(task.remaining_hours)
        if task.estimate_hours is not None and task.estimate_hours > 0:
            percent_complete = task.percent_complete or 0
            return float(task.estimate_hours) * (100 - percent_complete) / 100
        return working_days * self.default_capacity_hours

    def daily_demand(self, tasks: Iterable[TaskRecord]) -> Dict[Tuple[str, str], float]:
        """Demand hours keyed by (user_id, ISO date), in first-seen order."""
        demand: Dict[Tuple[str, str], float] = {}

        for task in tasks:
            if not task.assignee_user_id or task.is_milestone:
                continue
            if task.planned_start_at is None or task.planned_end_at is None:
                continue

            start = to_utc_date(task.planned_start_at).isoformat()
            end = to_utc_date(task.planned_end_at).isoformat()
            days = [d for d in self.calendar.enumerate_dates(start, end) if not is_weekend(d)]
            if not days:
                continue

            daily = self.task_hours(task, len(days)) / len(days)
            for day in days:
                key = (task.assignee_user_id, day)
                demand[key] = demand.get(key, 0.0) + daily

        return demand

    def capacity_for(
        self,
        user_id: str,
        day: str,
        overrides: Optional[Dict[str, float]] = None,
    ) -> float:
        """Capacity hours of one user on one day."""
        capacity = 0.0 if is_weekend(day) else self.default_capacity_hours
        if overrides:
            key = capacity_key(user_id, day)
            if key in overrides:
                capacity = float(overrides[key])
        return capacity

    def compute(
        self,
        tasks: Iterable[TaskRecord],
        capacity_overrides: Optional[Dict[str, float]] = None,
    ) -> CapacityResult:
        """Aggregate capacity, demand and overallocation over every demanded user-day."""
        total_capacity = 0.0
        total_demand = 0.0
        overallocated_days = 0
        overallocated_users = set()

        for (user_id, day), demand in self.daily_demand(tasks).items():
            capacity = self.capacity_for(user_id, day, capacity_overrides)
            total_capacity += capacity
            total_demand += demand

            if capacity > 0 and demand > capacity:
                overallocated_days += 1
                overallocated_users.add(user_id)

        return CapacityResult(
            total_capacity_hours=round(total_capacity, 2),
            total_demand_hours=round(total_demand, 2),
            overallocated_days=overallocated_days,
            overallocated_users=len(overallocated_users),
        )
