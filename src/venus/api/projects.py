"""Project API routes.

Learn: routes resolve the identity (router-level dependency), build a
ProjectService scoped to it, and translate "not found for this owner"
into 404. There is no 403 anywhere: another account's project id is
indistinguishable from a random one.
"""

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from venus.auth.dependencies import CurrentIdentity, get_current_user
from venus.db.engine import get_db
from venus.schemas.project import (
    ProjectCreate,
    ProjectRead,
    ProjectSummary,
    ProjectUpdate,
)
from venus.services.project_service import ProjectService

router = APIRouter(prefix="/projects")

PROJECT_NOT_FOUND = "Project not found"


def _svc(
    db: AsyncSession = Depends(get_db),
    identity: CurrentIdentity = Depends(get_current_user),
) -> ProjectService:
    return ProjectService(db, owner_id=identity.user_id)


@router.get("", response_model=list[ProjectSummary])
async def list_projects(svc: ProjectService = Depends(_svc)):
    return await svc.list_projects()


@router.post("", response_model=ProjectRead, status_code=201)
async def create_project(body: ProjectCreate, svc: ProjectService = Depends(_svc)):
    """Create a project with an empty scene."""
    return await svc.create_project(body.name)


@router.get("/{project_id}", response_model=ProjectRead)
async def get_project(project_id: str, svc: ProjectService = Depends(_svc)):
    project = await svc.get_project(project_id)
    if not project:
        raise HTTPException(status_code=404, detail=PROJECT_NOT_FOUND)
    return project


@router.put("/{project_id}", response_model=ProjectRead)
async def update_project(
    project_id: str,
    body: ProjectUpdate,
    svc: ProjectService = Depends(_svc),
):
    """Save the scene content (the client sends the whole scene)."""
    project = await svc.update_project(project_id, body.content, name=body.name)
    if not project:
        raise HTTPException(status_code=404, detail=PROJECT_NOT_FOUND)
    return project


@router.delete("/{project_id}", status_code=204)
async def delete_project(project_id: str, svc: ProjectService = Depends(_svc)):
    if not await svc.delete_project(project_id):
        raise HTTPException(status_code=404, detail=PROJECT_NOT_FOUND)
    return Response(status_code=204)
