"""
Critical Path Engine.

Forward/backward pass over one project's task network, built with networkx:
- durations come from each task's planned window (milestones are zero length)
- the forward pass is anchored at each task's planned start, measured in
  minutes from the earliest planned start in the project
- FS/SS/FF/SF links with lag (minutes) constrain successors
- a task is critical when its total float is zero
"""

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

import networkx as nx

from app.projects.models import DependencyType
from app.scenarios.compute.types import TaskRecord, DependencyRecord


SUPPORTED_DATE_BASES = ("planned",)


class CriticalPathError(Exception):
    """The task network cannot be scheduled (cycle, unsupported basis)."""


@dataclass
class CriticalPathNode:
    """Timing of one task, in minutes from the project origin."""
    task_id: str
    duration_minutes: int
    early_start: int = 0
    early_finish: int = 0
    late_start: int = 0
    late_finish: int = 0
    total_float: int = 0
    is_critical: bool = False


@dataclass
class CriticalPathResult:
    nodes: Dict[str, CriticalPathNode] = field(default_factory=dict)
    critical_path_task_ids: List[str] = field(default_factory=list)
    project_finish_minutes: int = 0
    longest_path_duration_minutes: int = 0
    errors: List[str] = field(default_factory=list)


def _minutes(delta) -> int:
    return int(delta.total_seconds() // 60)


class CriticalPathEngine:
    """Stateless CPM calculator for a single project's tasks."""

    def build_graph(
        self,
        tasks: Sequence[TaskRecord],
        dependencies: Sequence[DependencyRecord],
        errors: List[str],
    ) -> nx.DiGraph:
        """
        Nodes carry ``duration`` and ``anchor``; edges carry ``type`` and ``lag``.

        Tasks without a usable planned window, links to tasks outside the
        graph and links of an unknown type are reported in ``errors`` and
        left out.
        """
        scheduled = []
        for task in tasks:
            if task.planned_start_at is None or task.planned_end_at is None:
                errors.append(f"Task {task.id} has no planned dates")
                continue
            if task.planned_end_at < task.planned_start_at:
                errors.append(f"Task {task.id} ends before it starts")
                continue
            scheduled.append(task)

        G = nx.DiGraph()
        if not scheduled:
            return G

        origin = min(t.planned_start_at for t in scheduled)
        for task in scheduled:
            duration = 0 if task.is_milestone else _minutes(task.planned_end_at - task.planned_start_at)
            G.add_node(
                task.id,
                duration=duration,
                anchor=_minutes(task.planned_start_at - origin),
            )

        for dep in dependencies:
            pred, succ = dep.predecessor_task_id, dep.successor_task_id
            if pred not in G or succ not in G:
                errors.append(f"Dependency {pred} -> {succ} references a task outside the schedule")
                continue
            try:
                link = DependencyType(dep.type)
            except ValueError:
                errors.append(f"Dependency {pred} -> {succ} has unknown type {dep.type}")
                continue
            G.add_edge(pred, succ, type=link, lag=int(dep.lag_minutes or 0))

        return G

    def compute_from_data(
        self,
        tasks: Sequence[TaskRecord],
        dependencies: Sequence[DependencyRecord],
        date_basis: str = "planned",
    ) -> CriticalPathResult:
        """
        Run the forward and backward pass.

        Raises:
            CriticalPathError: unsupported date basis or a dependency cycle.
        """
        if date_basis not in SUPPORTED_DATE_BASES:
            raise CriticalPathError(f"Unsupported date basis: {date_basis}")

        result = CriticalPathResult()
        G = self.build_graph(tasks, dependencies, result.errors)
        if G.number_of_nodes() == 0:
            return result

        if not nx.is_directed_acyclic_graph(G):
            cycle = nx.find_cycle(G)
            path = " -> ".join([edge[0] for edge in cycle] + [cycle[-1][1]])
            raise CriticalPathError(f"Dependency cycle detected: {path}")

        order = list(nx.lexicographical_topological_sort(G))

        # Forward pass
        nodes: Dict[str, CriticalPathNode] = {}
        for task_id in order:
            attrs = G.nodes[task_id]
            duration = attrs["duration"]
            early_start = attrs["anchor"]

            for pred in G.predecessors(task_id):
                edge = G.edges[pred, task_id]
                p = nodes[pred]
                early_start = max(early_start, self._successor_start(edge, p, duration))

            nodes[task_id] = CriticalPathNode(
                task_id=task_id,
                duration_minutes=duration,
                early_start=early_start,
                early_finish=early_start + duration,
            )

        project_start = min(n.early_start for n in nodes.values())
        project_finish = max(n.early_finish for n in nodes.values())

        # Backward pass
        for task_id in reversed(order):
            node = nodes[task_id]
            late_finish = project_finish
            for succ in G.successors(task_id):
                edge = G.edges[task_id, succ]
                late_finish = min(late_finish, self._predecessor_finish(edge, node, nodes[succ]))

            node.late_finish = late_finish
            node.late_start = late_finish - node.duration_minutes
            node.total_float = node.late_start - node.early_start
            node.is_critical = node.total_float == 0

        result.nodes = nodes
        result.critical_path_task_ids = [
            n.task_id
            for n in sorted(nodes.values(), key=lambda n: (n.early_start, n.task_id))
            if n.is_critical
        ]
        result.project_finish_minutes = project_finish
        result.longest_path_duration_minutes = project_finish - project_start
        return result

    @staticmethod
    def _successor_start(edge: dict, pred: CriticalPathNode, duration: int) -> int:
        """Earliest start the link allows for a successor of ``duration`` minutes."""
        lag = edge["lag"]
        link = edge["type"]
        if link == DependencyType.START_TO_START:
            return pred.early_start + lag
        if link == DependencyType.FINISH_TO_FINISH:
            return pred.early_finish + lag - duration
        if link == DependencyType.START_TO_FINISH:
            return pred.early_start + lag - duration
        return pred.early_finish + lag

    @staticmethod
    def _predecessor_finish(edge: dict, pred: CriticalPathNode, succ: CriticalPathNode) -> int:
        """Latest finish the link allows for the predecessor."""
        lag = edge["lag"]
        link = edge["type"]
        if link == DependencyType.START_TO_START:
            return succ.late_start - lag + pred.duration_minutes
        if link == DependencyType.FINISH_TO_FINISH:
            return succ.late_finish - lag
        if link == DependencyType.START_TO_FINISH:
            return succ.late_finish - lag + pred.duration_minutes
        return succ.late_start - lag
