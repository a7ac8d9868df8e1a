"""
Unit Tests for the Capacity & Demand Model and calendar helpers.
"""

import pytest
from datetime import datetime, timedelta, timezone

from app.scenarios.compute.calendar import CalendarService, is_weekend, to_utc_date
from app.scenarios.compute.capacity import CapacityDemandModel
from tests.factories import make_task


@pytest.fixture
def model(calendar):
    return CapacityDemandModel(calendar, default_capacity_hours=8.0)


class TestCalendar:
    """Tests for CalendarService and date helpers."""

    def test_enumerate_dates_is_inclusive(self):
        dates = CalendarService().enumerate_dates("2026-02-09", "2026-02-11")
        assert dates == ["2026-02-09", "2026-02-10", "2026-02-11"]

    def test_enumerate_dates_reversed_range_is_empty(self):
        assert CalendarService().enumerate_dates("2026-02-11", "2026-02-09") == []

    def test_weekend_detection(self):
        assert is_weekend("2026-02-14")  # Saturday
        assert is_weekend("2026-02-15")  # Sunday
        assert not is_weekend("2026-02-16")

    def test_to_utc_date_converts_aware_timestamps(self):
        plus_five = timezone(timedelta(hours=5))
        value = datetime(2026, 2, 10, 2, 0, tzinfo=plus_five)
        assert to_utc_date(value).isoformat() == "2026-02-09"


class TestDemand:
    """Tests for demand spreading."""

    def test_estimate_spread_over_five_weekdays(self, model):
        result = model.compute([make_task()])

        assert result.total_demand_hours == 40
        assert result.total_capacity_hours == 40
        assert result.overallocated_days == 0
        assert result.overallocated_users == 0

    def test_remaining_hours_take_precedence(self, model):
        result = model.compute([make_task(remaining_hours=10)])
        assert result.total_demand_hours == 10

    def test_percent_complete_reduces_estimate(self, model):
        result = model.compute([make_task(percent_complete=50)])
        assert result.total_demand_hours == 20

    def test_falls_back_to_full_days_without_effort(self, model):
        result = model.compute([make_task(estimate_hours=None)])
        assert result.total_demand_hours == 40

    def test_zero_remaining_falls_through_to_estimate(self, model):
        result = model.compute([make_task(remaining_hours=0, estimate_hours=20)])
        assert result.total_demand_hours == 20

    def test_weekends_are_excluded(self, model):
        # Fri 13th .. Mon 16th has two working days
        task = make_task(
            planned_start_at=datetime(2026, 2, 13),
            planned_end_at=datetime(2026, 2, 16),
            estimate_hours=16,
        )
        result = model.compute([task])

        assert result.total_demand_hours == 16
        assert result.total_capacity_hours == 16

    def test_weekend_only_task_is_skipped(self, model):
        task = make_task(
            planned_start_at=datetime(2026, 2, 14),
            planned_end_at=datetime(2026, 2, 15),
        )
        result = model.compute([task])

        assert result.total_demand_hours == 0
        assert result.total_capacity_hours == 0

    @pytest.mark.parametrize("overrides", [
        {"assignee_user_id": None},
        {"is_milestone": True},
        {"planned_start_at": None},
        {"planned_end_at": None},
    ])
    def test_ignored_tasks(self, model, overrides):
        result = model.compute([make_task(**overrides)])
        assert result.total_demand_hours == 0

    def test_totals_are_rounded(self, model):
        task = make_task(
            planned_start_at=datetime(2026, 2, 9),
            planned_end_at=datetime(2026, 2, 11),
            estimate_hours=10,
        )
        result = model.compute([task])
        assert result.total_demand_hours == 10.0


class TestOverallocation:
    """Tests for capacity comparison."""

    def test_same_user_tasks_sum_per_day(self, model):
        tasks = [make_task(id="t1"), make_task(id="t2")]
        result = model.compute(tasks)

        assert result.total_demand_hours == 80
        assert result.total_capacity_hours == 40
        assert result.overallocated_days == 5
        assert result.overallocated_users == 1

    def test_different_users_counted_separately(self, model):
        tasks = [
            make_task(id="t1", estimate_hours=60),
            make_task(id="t2", assignee_user_id="u2", estimate_hours=60),
        ]
        result = model.compute(tasks)

        assert result.overallocated_days == 10
        assert result.overallocated_users == 2

    def test_override_replaces_default_capacity(self, model):
        result = model.compute([make_task()], {"u1:2026-02-10": 12})
        assert result.total_capacity_hours == 44

    def test_override_for_other_user_is_ignored(self, model):
        result = model.compute([make_task()], {"u2:2026-02-10": 12})
        assert result.total_capacity_hours == 40

    def test_zero_capacity_day_is_not_overallocated(self, model):
        result = model.compute([make_task()], {"u1:2026-02-10": 0})

        assert result.total_capacity_hours == 32
        assert result.overallocated_days == 0

    def test_reduced_capacity_day_is_overallocated(self, model):
        result = model.compute([make_task()], {"u1:2026-02-10": 4})

        assert result.overallocated_days == 1
        assert result.overallocated_users == 1

    def test_weekend_capacity_defaults_to_zero(self, model):
        assert model.capacity_for("u1", "2026-02-14") == 0
        assert model.capacity_for("u1", "2026-02-14", {"u1:2026-02-14": 6}) == 6
