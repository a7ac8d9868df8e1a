"""
Scenario Compute Service - evaluates a scenario's actions against live plan data.

Steps:
1. Load the plan, its actions and the project state in scope
2. Compute the BEFORE state from the loaded records
3. Deep-clone the records and apply every action to the clone
4. Compute the AFTER state from the clone and the capacity overrides
5. Diff the two states and list the impacted projects
6. Persist the summary as the scenario's single result row

Only steps 1 and 6 do I/O. The loaded records are never modified, and
nothing is written back to projects or tasks.
"""

import logging
import time
from copy import deepcopy
from typing import Dict, List, Optional, Protocol, Sequence

from app.scenarios.models import ScopeType
from app.scenarios.schemas import (
    ScenarioState,
    ScenarioDeltas,
    ScenarioSummary,
    ImpactedProject,
    ComputeResponse,
)
from app.scenarios.compute.actions import apply_action
from app.scenarios.compute.calendar import CalendarService
from app.scenarios.compute.capacity import CapacityDemandModel
from app.scenarios.compute.critical_path import CriticalPathEngine
from app.scenarios.compute.earned_value import aggregate_earned_value
from app.scenarios.compute.types import (
    ActionRecord,
    DependencyRecord,
    EarnedValueRecord,
    ProjectRecord,
    TaskRecord,
    WorkingSet,
)

logger = logging.getLogger(__name__)

EMPTY_SCOPE_WARNING = "No projects found in scope"


class ScenarioStore(Protocol):
    """What the compute service needs from scenario storage."""

    async def get_scenario(self, scenario_id: str, organization_id: str): ...

    async def get_actions(self, scenario_id: str, organization_id: str) -> List[ActionRecord]: ...

    async def upsert_result(
        self,
        scenario_id: str,
        organization_id: str,
        summary: ScenarioSummary,
        warnings: List[str],
    ): ...


class ProjectDataSource(Protocol):
    """What the compute service needs from project storage."""

    async def find_projects(self, project_ids: List[str], organization_id: str) -> List[ProjectRecord]: ...

    async def find_project_ids_in_portfolio(self, portfolio_id: str, organization_id: str) -> List[str]: ...

    async def find_tasks(self, project_ids: List[str], organization_id: str) -> List[TaskRecord]: ...

    async def find_dependencies(self, project_ids: List[str], organization_id: str) -> List[DependencyRecord]: ...

    async def find_latest_earned_value(
        self, project_id: str, organization_id: str
    ) -> Optional[EarnedValueRecord]: ...


class ScenarioComputeService:
    """
    Deterministic before/after evaluation of a scenario.

    Identical inputs always produce an identical summary; only the stored
    ``computed_at`` differs between runs.
    """

    def __init__(
        self,
        scenarios: ScenarioStore,
        repository: ProjectDataSource,
        default_capacity_hours: float,
        calendar: Optional[CalendarService] = None,
        critical_path_engine: Optional[CriticalPathEngine] = None,
    ):
        self.scenarios = scenarios
        self.repository = repository
        self.capacity_model = CapacityDemandModel(calendar or CalendarService(), default_capacity_hours)
        self.critical_path_engine = critical_path_engine or CriticalPathEngine()

    # =========================================================================
    # ENTRY POINT
    # =========================================================================

    async def compute(self, scenario_id: str, organization_id: str) -> ComputeResponse:
        """
        Compute and persist a scenario result.

        Raises:
            ScenarioNotFoundError: propagated from the scenario store. Every
                other problem is reported in the returned warnings.
        """
        started = time.monotonic()
        plan = await self.scenarios.get_scenario(scenario_id, organization_id)
        actions = await self.scenarios.get_actions(scenario_id, organization_id)
        warnings: List[str] = []

        # ── 1. Load current state ─────────────────────────────────────────
        project_ids = await self.resolve_project_ids(plan, organization_id)
        projects = await self.repository.find_projects(project_ids, organization_id) if project_ids else []

        if not projects:
            return await self._persist_empty(scenario_id, organization_id, warnings)

        project_ids = [p.id for p in projects]
        tasks = await self.repository.find_tasks(project_ids, organization_id)
        dependencies = await self.repository.find_dependencies(project_ids, organization_id)

        ev_snapshots: Dict[str, EarnedValueRecord] = {}
        for project_id in project_ids:
            snapshot = await self.repository.find_latest_earned_value(project_id, organization_id)
            if snapshot is not None:
                ev_snapshots[project_id] = snapshot

        # ── 2. BEFORE state ───────────────────────────────────────────────
        before = self.compute_state(projects, tasks, dependencies, ev_snapshots, warnings=warnings)

        # ── 3. Apply actions to a clone ───────────────────────────────────
        working_set = WorkingSet(tasks=deepcopy(tasks), projects=deepcopy(projects))
        for action in actions:
            apply_action(action, working_set, warnings)

        # ── 4. AFTER state ────────────────────────────────────────────────
        after = self.compute_state(
            working_set.projects,
            working_set.tasks,
            dependencies,
            ev_snapshots,
            capacity_overrides=working_set.capacity_overrides,
            warnings=warnings,
        )

        # ── 5. Diff ───────────────────────────────────────────────────────
        summary = ScenarioSummary(
            before=before,
            after=after,
            deltas=self.compute_deltas(before, after),
            impacted_projects=self.find_impacted_projects(actions, tasks, working_set.projects),
        )

        # ── 6. Persist ────────────────────────────────────────────────────
        await self.scenarios.upsert_result(scenario_id, organization_id, summary, warnings)

        elapsed_ms = int((time.monotonic() - started) * 1000)
        logger.info(
            f"Scenario {scenario_id} computed: {len(actions)} action(s), "
            f"{len(project_ids)} project(s), {len(tasks)} task(s), "
            f"{len(warnings)} warning(s) in {elapsed_ms}ms"
        )
        for warning in warnings:
            logger.debug(f"Scenario {scenario_id} warning: {warning}")

        return ComputeResponse(scenario_id=scenario_id, summary=summary, warnings=warnings)

    # =========================================================================
    # SCOPE
    # =========================================================================

    async def resolve_project_ids(self, plan, organization_id: str) -> List[str]:
        """A project-scoped plan is its scope id; a portfolio expands to its projects."""
        if plan.scope_type == ScopeType.PROJECT.value:
            return [plan.scope_id] if plan.scope_id else []
        return await self.repository.find_project_ids_in_portfolio(plan.scope_id, organization_id)

    async def _persist_empty(
        self,
        scenario_id: str,
        organization_id: str,
        warnings: List[str],
    ) -> ComputeResponse:
        warnings.append(EMPTY_SCOPE_WARNING)
        summary = ScenarioSummary()
        await self.scenarios.upsert_result(scenario_id, organization_id, summary, warnings)
        logger.info(f"Scenario {scenario_id} has no projects in scope; stored empty result")
        return ComputeResponse(scenario_id=scenario_id, summary=summary, warnings=warnings)

    # =========================================================================
    # STATE COMPUTATION
    # =========================================================================

    def compute_state(
        self,
        projects: Sequence[ProjectRecord],
        tasks: Sequence[TaskRecord],
        dependencies: Sequence[DependencyRecord],
        ev_snapshots: Dict[str, EarnedValueRecord],
        capacity_overrides: Optional[Dict[str, float]] = None,
        warnings: Optional[List[str]] = None,
    ) -> ScenarioState:
        """Capacity, earned value and critical-path metrics for one state."""
        capacity = self.capacity_model.compute(tasks, capacity_overrides)
        earned_value = aggregate_earned_value(projects, ev_snapshots)
        slip_minutes = self.critical_path_slip(projects, tasks, dependencies, warnings)

        return ScenarioState(
            total_capacity_hours=capacity.total_capacity_hours,
            total_demand_hours=capacity.total_demand_hours,
            overallocated_days=capacity.overallocated_days,
            overallocated_users=capacity.overallocated_users,
            aggregate_cpi=earned_value.aggregate_cpi,
            aggregate_spi=earned_value.aggregate_spi,
            critical_path_slip_minutes=slip_minutes,
            # No independent baseline yet: drift mirrors the slip sum.
            baseline_drift_minutes=slip_minutes,
        )

    def critical_path_slip(
        self,
        projects: Sequence[ProjectRecord],
        tasks: Sequence[TaskRecord],
        dependencies: Sequence[DependencyRecord],
        warnings: Optional[List[str]] = None,
    ) -> int:
        """Sum of longest-path durations over waterfall projects; failures count as zero."""
        total = 0
        for project in projects:
            if not project.waterfall_enabled:
                continue
            project_tasks = [t for t in tasks if t.project_id == project.id]
            project_deps = [d for d in dependencies if d.project_id == project.id]
            try:
                cpm = self.critical_path_engine.compute_from_data(project_tasks, project_deps, "planned")
            except Exception as e:
                logger.warning(f"Critical path failed for project {project.id}: {e}")
                if warnings is not None:
                    message = f"Critical path computation failed for project {project.id}: {e}"
                    if message not in warnings:
                        warnings.append(message)
                continue
            total += cpm.longest_path_duration_minutes
        return total

    # =========================================================================
    # DIFF
    # =========================================================================

    @staticmethod
    def compute_deltas(before: ScenarioState, after: ScenarioState) -> ScenarioDeltas:
        """after - before for every metric."""
        cpi_delta = None
        if before.aggregate_cpi is not None and after.aggregate_cpi is not None:
            cpi_delta = round(after.aggregate_cpi - before.aggregate_cpi, 3)
        spi_delta = None
        if before.aggregate_spi is not None and after.aggregate_spi is not None:
            spi_delta = round(after.aggregate_spi - before.aggregate_spi, 3)

        return ScenarioDeltas(
            total_capacity_hours_delta=round(after.total_capacity_hours - before.total_capacity_hours, 2),
            total_demand_hours_delta=round(after.total_demand_hours - before.total_demand_hours, 2),
            overallocated_days_delta=after.overallocated_days - before.overallocated_days,
            overallocated_users_delta=after.overallocated_users - before.overallocated_users,
            cpi_delta=cpi_delta,
            spi_delta=spi_delta,
            critical_path_slip_delta=after.critical_path_slip_minutes - before.critical_path_slip_minutes,
            baseline_drift_delta=after.baseline_drift_minutes - before.baseline_drift_minutes,
        )

    @staticmethod
    def find_impacted_projects(
        actions: Sequence[ActionRecord],
        original_tasks: Sequence[TaskRecord],
        projects: Sequence[ProjectRecord],
    ) -> List[ImpactedProject]:
        """
        Projects an action names directly, or through one of its tasks.

        Task ids are resolved against the tasks as loaded, before any action.
        Projects appear in the order they are first touched.
        """
        task_projects = {t.id: t.project_id for t in original_tasks}
        project_names = {p.id: p.name for p in projects}
        action_counts: Dict[str, int] = {}

        for action in actions:
            payload = action.payload or {}
            touched = set()
            project_id = payload.get("projectId") or payload.get("project_id")
            if project_id:
                touched.add(project_id)
            task_id = payload.get("taskId") or payload.get("task_id")
            if task_id and task_id in task_projects:
                touched.add(task_projects[task_id])
            for project_id in sorted(touched):
                action_counts[project_id] = action_counts.get(project_id, 0) + 1

        return [
            ImpactedProject(
                project_id=project_id,
                project_name=project_names[project_id],
                impact_summary=f"Affected by {count} action(s)",
            )
            for project_id, count in action_counts.items()
            if project_id in project_names
        ]
