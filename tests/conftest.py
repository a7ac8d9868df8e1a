"""Shared test fixtures for the scenario compute tests."""
import pytest
from types import SimpleNamespace
from unittest.mock import AsyncMock

from app.scenarios.compute.calendar import CalendarService
from tests.factories import ORG_ID, make_project, make_task


@pytest.fixture
def calendar():
    return CalendarService()


@pytest.fixture
def mock_scenarios():
    """Scenario store returning a project-scoped plan with no actions."""
    scenarios = AsyncMock()
    scenarios.get_scenario.return_value = SimpleNamespace(
        id="sc-1",
        organization_id=ORG_ID,
        scope_type="project",
        scope_id="p1",
    )
    scenarios.get_actions.return_value = []
    return scenarios


@pytest.fixture
def mock_repository():
    """Project repository holding one non-waterfall project with one task."""
    repository = AsyncMock()
    repository.find_projects.return_value = [make_project()]
    repository.find_project_ids_in_portfolio.return_value = []
    repository.find_tasks.return_value = [make_task()]
    repository.find_dependencies.return_value = []
    repository.find_latest_earned_value.return_value = None
    return repository
