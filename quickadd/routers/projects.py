from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from .. import crud
from ..config import settings
from ..db import get_session
from ..schemas import ProjectCreate, ProjectOut

router = APIRouter()


@router.post("", response_model=ProjectOut)
async def create_project(payload: ProjectCreate, db: AsyncSession = Depends(get_session)):
    return await crud.create_project(db, payload)


@router.get("", response_model=list[ProjectOut])
async def list_projects(include_archived: bool = False, db: AsyncSession = Depends(get_session)):
    return await crud.list_projects(db, include_archived=include_archived)


@router.get("/{project_id}", response_model=ProjectOut)
async def get_project(project_id: int, db: AsyncSession = Depends(get_session)):
    project = await crud.get_project(db, project_id)
    if not project:
        raise HTTPException(404, "Project not found")
    return project


@router.delete("/{project_id}")
async def delete_project(project_id: int, db: AsyncSession = Depends(get_session)):
    inbox = await crud.ensure_default_project(db)
    if project_id == inbox.id:
        raise HTTPException(400, f"The {settings.default_project} project cannot be deleted")
    ok = await crud.delete_project(db, project_id)
    if not ok:
        raise HTTPException(404, "Project not found")
    return {"deleted": True}
