"""
Scenarios Service - the compute-facing side of scenario storage.

Reads plans and their actions, and stores the single result row per plan.
Plan/action create-update-delete lives with the scenario CRUD endpoints.
"""
from datetime import datetime, timezone
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert

from app.audit.services import AuditService
from app.models.base import generate_id
from app.scenarios import models
from app.scenarios.compute.types import ActionRecord
from app.scenarios.schemas import ScenarioSummary


class ScenarioNotFoundError(Exception):
    """Scenario does not exist, is deleted, or belongs to another organization."""

    def __init__(self, scenario_id: str):
        super().__init__(f"Scenario {scenario_id} not found")
        self.scenario_id = scenario_id


class ScenariosService:
    """Loads scenario plans and upserts their results."""

    def __init__(self, db: AsyncSession, user_id: Optional[str] = None):
        self.db = db
        self.user_id = user_id

    async def get_scenario(self, scenario_id: str, organization_id: str) -> models.ScenarioPlan:
        """
        Load a live scenario plan.

        Raises:
            ScenarioNotFoundError: missing, soft-deleted or cross-tenant.
        """
        result = await self.db.execute(
            select(models.ScenarioPlan).where(
                models.ScenarioPlan.id == scenario_id,
                models.ScenarioPlan.organization_id == organization_id,
                models.ScenarioPlan.deleted_at.is_(None),
            )
        )
        scenario = result.scalar_one_or_none()
        if scenario is None:
            raise ScenarioNotFoundError(scenario_id)
        return scenario

    async def get_actions(self, scenario_id: str, organization_id: str) -> List[ActionRecord]:
        """Actions of a scenario in creation order."""
        result = await self.db.execute(
            select(models.ScenarioAction).where(
                models.ScenarioAction.scenario_id == scenario_id,
                models.ScenarioAction.organization_id == organization_id,
            ).order_by(models.ScenarioAction.created_at, models.ScenarioAction.id)
        )
        return [ActionRecord.model_validate(row) for row in result.scalars().all()]

    async def get_result(self, scenario_id: str, organization_id: str) -> Optional[models.ScenarioResult]:
        result = await self.db.execute(
            select(models.ScenarioResult).where(
                models.ScenarioResult.scenario_id == scenario_id,
                models.ScenarioResult.organization_id == organization_id,
            )
        )
        return result.scalar_one_or_none()

    async def upsert_result(
        self,
        scenario_id: str,
        organization_id: str,
        summary: ScenarioSummary,
        warnings: List[str],
    ) -> models.ScenarioResult:
        """
        Create or fully replace the result row of a scenario.

        The write is a single INSERT ... ON CONFLICT (scenario_id) DO UPDATE,
        so concurrent computes of one scenario never collide on the unique
        key; the last commit wins.
        """
        summary_data = summary.model_dump(mode="json")
        warning_list = list(warnings)
        computed_at = datetime.now(timezone.utc)
        audit = AuditService(self.db, user_id=self.user_id, organization_id=organization_id)

        # Read the previous values before the upsert refreshes the loaded row
        existing = await self.get_result(scenario_id, organization_id)
        previous = (existing.summary, existing.warnings) if existing is not None else None

        stmt = (
            insert(models.ScenarioResult)
            .values(
                id=generate_id("scres"),
                organization_id=organization_id,
                scenario_id=scenario_id,
                summary=summary_data,
                warnings=warning_list,
                computed_at=computed_at,
            )
            .on_conflict_do_update(
                index_elements=[models.ScenarioResult.scenario_id],
                set_={
                    "summary": summary_data,
                    "warnings": warning_list,
                    "computed_at": computed_at,
                },
            )
            .returning(models.ScenarioResult)
        )
        result = await self.db.execute(stmt, execution_options={"populate_existing": True})
        scenario_result = result.scalar_one()

        if previous is None:
            audit.log_create(
                "scenario_result",
                scenario_result.id,
                {"scenario_id": scenario_id, "warning_count": len(warning_list)},
            )
        else:
            audit.log_update(
                "scenario_result",
                scenario_result.id,
                {
                    "summary": (previous[0], summary_data),
                    "warnings": (previous[1], warning_list),
                },
                notes=f"Recomputed scenario {scenario_id}",
            )

        await self.db.commit()
        return scenario_result
