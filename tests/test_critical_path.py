"""
Unit Tests for the Critical Path Engine.

Durations are in minutes; one day = 1440.
"""

import pytest
from datetime import datetime

from app.projects.models import DependencyType
from app.scenarios.compute.critical_path import CriticalPathEngine, CriticalPathError
from app.scenarios.compute.types import DependencyRecord
from tests.factories import make_task

DAY = 1440


def task(task_id, start_day, end_day, **overrides):
    """Task planned from Feb <start_day> to Feb <end_day> 2026, midnight to midnight."""
    return make_task(
        id=task_id,
        planned_start_at=datetime(2026, 2, start_day),
        planned_end_at=datetime(2026, 2, end_day),
        **overrides,
    )


def link(pred, succ, dep_type=DependencyType.FINISH_TO_START.value, lag=0):
    return DependencyRecord(
        project_id="p1",
        predecessor_task_id=pred,
        successor_task_id=succ,
        type=dep_type,
        lag_minutes=lag,
    )


@pytest.fixture
def engine():
    return CriticalPathEngine()


class TestForwardBackwardPass:
    """Tests for CPM timing."""

    def test_empty_project(self, engine):
        result = engine.compute_from_data([], [])

        assert result.critical_path_task_ids == []
        assert result.project_finish_minutes == 0
        assert result.longest_path_duration_minutes == 0

    def test_finish_to_start_chain(self, engine):
        tasks = [task("a", 9, 10), task("b", 10, 12)]
        result = engine.compute_from_data(tasks, [link("a", "b")])

        assert result.project_finish_minutes == 3 * DAY
        assert result.longest_path_duration_minutes == 3 * DAY
        assert result.critical_path_task_ids == ["a", "b"]
        assert result.errors == []

    def test_parallel_task_has_float(self, engine):
        tasks = [task("a", 9, 10), task("b", 10, 12), task("c", 9, 10)]
        result = engine.compute_from_data(tasks, [link("a", "b")])

        assert result.critical_path_task_ids == ["a", "b"]
        assert result.nodes["c"].total_float == 2 * DAY
        assert not result.nodes["c"].is_critical

    def test_lag_delays_successor(self, engine):
        tasks = [task("a", 9, 10), task("b", 10, 12)]
        result = engine.compute_from_data(tasks, [link("a", "b", lag=60)])

        assert result.nodes["b"].early_start == DAY + 60
        assert result.project_finish_minutes == 3 * DAY + 60

    def test_start_to_start(self, engine):
        tasks = [task("a", 9, 10), task("b", 9, 10)]
        result = engine.compute_from_data(
            tasks, [link("a", "b", DependencyType.START_TO_START.value, lag=120)]
        )

        assert result.nodes["b"].early_start == 120
        assert result.project_finish_minutes == DAY + 120
        assert result.critical_path_task_ids == ["a", "b"]

    def test_finish_to_finish(self, engine):
        tasks = [task("a", 9, 12), task("b", 9, 10)]
        result = engine.compute_from_data(
            tasks, [link("a", "b", DependencyType.FINISH_TO_FINISH.value)]
        )

        assert result.nodes["b"].early_finish == 3 * DAY
        assert result.nodes["b"].early_start == 2 * DAY

    def test_start_to_finish(self, engine):
        tasks = [task("a", 10, 11), task("b", 9, 10)]
        result = engine.compute_from_data(
            tasks, [link("a", "b", DependencyType.START_TO_FINISH.value, lag=DAY)]
        )

        # b must finish no earlier than a's start (day 1) + 1 day
        assert result.nodes["b"].early_finish == 2 * DAY

    def test_planned_start_anchors_tasks(self, engine):
        tasks = [task("a", 9, 10), task("b", 12, 13)]
        result = engine.compute_from_data(tasks, [link("a", "b")])

        assert result.nodes["b"].early_start == 3 * DAY
        assert result.project_finish_minutes == 4 * DAY

    def test_milestone_has_zero_duration(self, engine):
        tasks = [task("a", 9, 10), task("m", 10, 11, is_milestone=True)]
        result = engine.compute_from_data(tasks, [link("a", "m")])

        assert result.nodes["m"].duration_minutes == 0
        assert result.project_finish_minutes == DAY

    def test_same_inputs_same_result(self, engine):
        tasks = [task("a", 9, 10), task("b", 10, 12), task("c", 9, 11)]
        deps = [link("a", "b"), link("c", "b")]

        first = engine.compute_from_data(tasks, deps)
        second = engine.compute_from_data(tasks, deps)

        assert first == second


class TestGraphProblems:
    """Tests for malformed inputs."""

    def test_tasks_without_dates_are_reported(self, engine):
        tasks = [task("a", 9, 10), make_task(id="x", planned_start_at=None)]
        result = engine.compute_from_data(tasks, [])

        assert "x" not in result.nodes
        assert result.errors == ["Task x has no planned dates"]

    def test_dependency_outside_schedule_is_reported(self, engine):
        result = engine.compute_from_data([task("a", 9, 10)], [link("a", "ghost")])

        assert result.project_finish_minutes == DAY
        assert len(result.errors) == 1
        assert "ghost" in result.errors[0]

    def test_cycle_raises(self, engine):
        tasks = [task("a", 9, 10), task("b", 10, 11)]

        with pytest.raises(CriticalPathError, match="cycle"):
            engine.compute_from_data(tasks, [link("a", "b"), link("b", "a")])

    def test_unsupported_date_basis_raises(self, engine):
        with pytest.raises(CriticalPathError):
            engine.compute_from_data([task("a", 9, 10)], [], date_basis="actual")

    def test_unknown_link_type_is_reported(self, engine):
        tasks = [task("a", 9, 10), task("b", 12, 13)]
        result = engine.compute_from_data(tasks, [link("a", "b", "FS")])

        assert result.errors == ["Dependency a -> b has unknown type FS"]
        # b keeps its planned anchor; the dropped link adds nothing
        assert result.nodes["b"].early_start == 3 * DAY
        assert result.project_finish_minutes == 4 * DAY
