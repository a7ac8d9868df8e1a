"""
Project Data Repository - read-only access to project state for scenario compute.

Every query is scoped to an organization. Rows are converted to plain
compute records before they leave this module.
"""
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc

from app.projects.models import Project, WorkTask, WorkTaskDependency, EarnedValueSnapshot
from app.scenarios.compute.types import (
    ProjectRecord,
    TaskRecord,
    DependencyRecord,
    EarnedValueRecord,
)


class ProjectDataRepository:
    """
    Query interface over projects, tasks, dependencies and EV snapshots.

    Usage:
        repo = ProjectDataRepository(db)
        projects = await repo.find_projects(["proj_1"], organization_id)
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_projects(self, project_ids: List[str], organization_id: str) -> List[ProjectRecord]:
        """Projects by id, ordered by id."""
        if not project_ids:
            return []
        result = await self.db.execute(
            select(Project).where(
                Project.id.in_(project_ids),
                Project.organization_id == organization_id,
            ).order_by(Project.id)
        )
        return [ProjectRecord.model_validate(row) for row in result.scalars().all()]

    async def find_project_ids_in_portfolio(self, portfolio_id: str, organization_id: str) -> List[str]:
        """Ids of every project in a portfolio."""
        result = await self.db.execute(
            select(Project.id).where(
                Project.portfolio_id == portfolio_id,
                Project.organization_id == organization_id,
            ).order_by(Project.id)
        )
        return list(result.scalars().all())

    async def find_tasks(self, project_ids: List[str], organization_id: str) -> List[TaskRecord]:
        """Live (not soft-deleted) tasks of the given projects."""
        if not project_ids:
            return []
        result = await self.db.execute(
            select(WorkTask).where(
                WorkTask.project_id.in_(project_ids),
                WorkTask.organization_id == organization_id,
                WorkTask.deleted_at.is_(None),
            ).order_by(WorkTask.project_id, WorkTask.id)
        )
        return [TaskRecord.model_validate(row) for row in result.scalars().all()]

    async def find_dependencies(self, project_ids: List[str], organization_id: str) -> List[DependencyRecord]:
        """Dependency links of the given projects."""
        if not project_ids:
            return []
        result = await self.db.execute(
            select(WorkTaskDependency).where(
                WorkTaskDependency.project_id.in_(project_ids),
                WorkTaskDependency.organization_id == organization_id,
            ).order_by(WorkTaskDependency.project_id, WorkTaskDependency.id)
        )
        return [DependencyRecord.model_validate(row) for row in result.scalars().all()]

    async def find_latest_earned_value(
        self,
        project_id: str,
        organization_id: str,
    ) -> Optional[EarnedValueRecord]:
        """Most recent EV snapshot of a project, if any."""
        result = await self.db.execute(
            select(EarnedValueSnapshot).where(
                EarnedValueSnapshot.project_id == project_id,
                EarnedValueSnapshot.organization_id == organization_id,
            ).order_by(desc(EarnedValueSnapshot.created_at)).limit(1)
        )
        snapshot = result.scalar_one_or_none()
        if snapshot is None:
            return None
        return EarnedValueRecord.model_validate(snapshot)
