"""Project service — owner-scoped CRUD for drawing documents.

Learn: Service layer separates business logic from HTTP routing.
The service is constructed with the resolved owner id and every query
it issues filters on it, so there is no code path that can read or
write another account's project. A foreign id behaves exactly like a
missing one (None / False).
"""

from typing import Any, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from venus.db.models import Project, default_project_content, utcnow


class ProjectService:
    """Business logic for one account's projects."""

    def __init__(self, db: AsyncSession, owner_id: int):
        self.db = db
        self.owner_id = owner_id

    def _owned(self):
        return select(Project).where(Project.owner_id == self.owner_id)

    async def list_projects(self) -> list[Project]:
        result = await self.db.execute(
            self._owned().order_by(Project.created_at.desc(), Project.id)
        )
        return list(result.scalars().all())

    async def create_project(self, name: str) -> Project:
        project = Project(
            name=name,
            content=default_project_content(),
            owner_id=self.owner_id,
        )
        self.db.add(project)
        await self.db.commit()
        await self.db.refresh(project)
        return project

    async def get_project(self, project_id: str) -> Optional[Project]:
        result = await self.db.execute(
            self._owned().where(Project.id == project_id)
        )
        return result.scalars().first()

    async def update_project(
        self,
        project_id: str,
        content: dict[str, Any],
        name: Optional[str] = None,
    ) -> Optional[Project]:
        """Replace a project's scene content (and optionally rename it)."""
        project = await self.get_project(project_id)
        if project is None:
            return None
        project.content = content
        if name is not None:
            project.name = name
        project.updated_at = utcnow()
        await self.db.commit()
        await self.db.refresh(project)
        return project

    async def delete_project(self, project_id: str) -> bool:
        result = await self.db.execute(
            delete(Project).where(
                Project.id == project_id,
                Project.owner_id == self.owner_id,
            )
        )
        await self.db.commit()
        return result.rowcount > 0
