from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from .. import crud
from ..db import get_session
from ..deps import get_now
from ..schemas import ReorderIn, TaskCreate, TaskOut, TaskUpdate

router = APIRouter()


async def _require_project(db: AsyncSession, project_id: int | None) -> None:
    if project_id is not None and not await crud.get_project(db, project_id):
        raise HTTPException(404, "Project not found")


@router.post("", response_model=TaskOut)
async def create_task(payload: TaskCreate, db: AsyncSession = Depends(get_session)):
    await _require_project(db, payload.project_id)
    return await crud.create_task(db, payload)


@router.get("", response_model=list[TaskOut])
async def list_tasks(
    project_id: int | None = Query(None, description="Filter by project"),
    label: str | None = Query(None, description="Filter by label name"),
    completed: bool | None = Query(None, description="Filter by completion"),
    limit: int = 100,
    offset: int = 0,
    db: AsyncSession = Depends(get_session),
):
    return await crud.list_tasks(
        db, project_id=project_id, label=label, completed=completed, limit=limit, offset=offset
    )


@router.post("/reorder", response_model=list[TaskOut])
async def reorder_tasks(payload: ReorderIn, db: AsyncSession = Depends(get_session)):
    await _require_project(db, payload.project_id)
    tasks = await crud.reorder_tasks(db, payload.project_id, payload.task_ids)
    if tasks is None:
        raise HTTPException(400, "All task_ids must belong to the project")
    return tasks


@router.get("/{task_id}", response_model=TaskOut)
async def get_task(task_id: int, db: AsyncSession = Depends(get_session)):
    task = await crud.get_task(db, task_id)
    if not task:
        raise HTTPException(404, "Task not found")
    return task


@router.patch("/{task_id}", response_model=TaskOut)
async def update_task(task_id: int, payload: TaskUpdate, db: AsyncSession = Depends(get_session)):
    await _require_project(db, payload.project_id)
    task = await crud.update_task(db, task_id, payload)
    if not task:
        raise HTTPException(404, "Task not found")
    return task


@router.post("/{task_id}/complete", response_model=TaskOut)
async def complete_task(
    task_id: int,
    db: AsyncSession = Depends(get_session),
    now: datetime = Depends(get_now),
):
    task = await crud.complete_task(db, task_id, today=now.date())
    if not task:
        raise HTTPException(404, "Task not found")
    return task


@router.post("/{task_id}/uncomplete", response_model=TaskOut)
async def uncomplete_task(task_id: int, db: AsyncSession = Depends(get_session)):
    task = await crud.uncomplete_task(db, task_id)
    if not task:
        raise HTTPException(404, "Task not found")
    return task


@router.delete("/{task_id}")
async def delete_task(task_id: int, db: AsyncSession = Depends(get_session)):
    ok = await crud.delete_task(db, task_id)
    if not ok:
        raise HTTPException(404, "Task not found")
    return {"deleted": True}
