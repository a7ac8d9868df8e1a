"""
Tests for the scenario compute endpoints.

The database dependency is overridden and the services are patched, so no
connection is ever opened.
"""

import asyncio
import pytest
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

from fastapi.testclient import TestClient

from app.database import get_db
from app.main import app
from app.scenarios.schemas import ComputeResponse, ScenarioSummary
from app.scenarios.service import ScenarioNotFoundError
from tests.factories import ORG_ID


async def _fake_db():
    yield MagicMock()


@pytest.fixture
def client():
    app.dependency_overrides[get_db] = _fake_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def compute_service():
    with patch("app.scenarios.routes.ScenarioComputeService") as service_cls:
        yield service_cls.return_value


class TestComputeEndpoint:

    def test_returns_summary(self, client, compute_service):
        compute_service.compute = AsyncMock(return_value=ComputeResponse(
            scenario_id="sc-1",
            summary=ScenarioSummary(),
            warnings=["No projects found in scope"],
        ))

        response = client.post(f"/api/scenarios/sc-1/compute?organization_id={ORG_ID}")

        assert response.status_code == 200
        body = response.json()
        assert body["scenario_id"] == "sc-1"
        assert body["warnings"] == ["No projects found in scope"]
        assert body["summary"]["deltas"]["overallocated_days_delta"] == 0
        compute_service.compute.assert_awaited_once_with("sc-1", ORG_ID)

    def test_missing_scenario_is_404(self, client, compute_service):
        compute_service.compute = AsyncMock(side_effect=ScenarioNotFoundError("sc-x"))

        response = client.post(f"/api/scenarios/sc-x/compute?organization_id={ORG_ID}")

        assert response.status_code == 404

    def test_timeout_is_504(self, client, compute_service):
        compute_service.compute = AsyncMock(side_effect=asyncio.TimeoutError())

        response = client.post(f"/api/scenarios/sc-1/compute?organization_id={ORG_ID}")

        assert response.status_code == 504

    def test_organization_is_required(self, client, compute_service):
        response = client.post("/api/scenarios/sc-1/compute")

        assert response.status_code == 422


class TestResultEndpoint:

    def test_returns_stored_result(self, client):
        stored = SimpleNamespace(
            id="scres_1",
            scenario_id="sc-1",
            organization_id=ORG_ID,
            summary=ScenarioSummary().model_dump(mode="json"),
            warnings=[],
            computed_at=datetime(2026, 2, 9, tzinfo=timezone.utc),
        )
        with patch("app.scenarios.routes.ScenariosService") as service_cls:
            service_cls.return_value.get_result = AsyncMock(return_value=stored)
            response = client.get(f"/api/scenarios/sc-1/result?organization_id={ORG_ID}")

        assert response.status_code == 200
        assert response.json()["id"] == "scres_1"

    def test_no_result_is_404(self, client):
        with patch("app.scenarios.routes.ScenariosService") as service_cls:
            service_cls.return_value.get_result = AsyncMock(return_value=None)
            response = client.get(f"/api/scenarios/sc-1/result?organization_id={ORG_ID}")

        assert response.status_code == 404
