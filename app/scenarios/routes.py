"""Scenario compute API routes."""
import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.projects.repository import ProjectDataRepository
from app.scenarios import schemas
from app.scenarios.compute import ScenarioComputeService
from app.scenarios.service import ScenariosService, ScenarioNotFoundError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/{scenario_id}/compute", response_model=schemas.ComputeResponse)
async def compute_scenario(
    scenario_id: str,
    organization_id: str = Query(...),
    actor_user_id: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    """Recompute a scenario's before/after impact and store it as its result."""
    service = ScenarioComputeService(
        scenarios=ScenariosService(db, user_id=actor_user_id),
        repository=ProjectDataRepository(db),
        default_capacity_hours=settings.DEFAULT_CAPACITY_HOURS,
    )
    try:
        return await asyncio.wait_for(
            service.compute(scenario_id, organization_id),
            timeout=settings.SCENARIO_COMPUTE_TIMEOUT_SECONDS,
        )
    except ScenarioNotFoundError:
        raise HTTPException(status_code=404, detail="Scenario not found")
    except asyncio.TimeoutError:
        logger.error(f"Scenario {scenario_id} compute exceeded {settings.SCENARIO_COMPUTE_TIMEOUT_SECONDS}s")
        raise HTTPException(status_code=504, detail="Scenario compute timed out")


@router.get("/{scenario_id}/result", response_model=schemas.ScenarioResultResponse)
async def get_scenario_result(
    scenario_id: str,
    organization_id: str = Query(...),
    db: AsyncSession = Depends(get_db)
):
    """Get the stored result of the last compute."""
    result = await ScenariosService(db).get_result(scenario_id, organization_id)
    if not result:
        raise HTTPException(status_code=404, detail="Scenario result not found")
    return result
