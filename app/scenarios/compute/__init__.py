"""
Scenario Compute Engine - deterministic before/after evaluation of scenarios.

Components:
- CalendarService: date ranges (calendar.py)
- CapacityDemandModel: per-user-per-day demand vs capacity (capacity.py)
- CriticalPathEngine: forward/backward pass per project (critical_path.py)
- aggregate_earned_value: portfolio CPI/SPI (earned_value.py)
- action handlers: apply actions to a cloned working set (actions/)
- ScenarioComputeService: load, clone, apply, diff, persist (service.py)
"""

from app.scenarios.compute.service import ScenarioComputeService

__all__ = ["ScenarioComputeService"]
