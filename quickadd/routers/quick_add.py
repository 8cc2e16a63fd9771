from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from .. import crud
from ..db import get_session
from ..deps import get_now
from ..nlp.parser import parse_task_input
from ..schemas import CONTENT_MAX, ParsedTask, QuickAddIn, TaskCreate, TaskOut

router = APIRouter()


@router.post("/preview", response_model=ParsedTask)
async def preview(payload: QuickAddIn, now: datetime = Depends(get_now)):
    return parse_task_input(payload.text, now, default_priority=payload.priority or 4)


@router.post("", response_model=TaskOut)
async def quick_add(
    payload: QuickAddIn,
    db: AsyncSession = Depends(get_session),
    now: datetime = Depends(get_now),
):
    parsed = parse_task_input(payload.text, now, default_priority=payload.priority or 4)
    if not parsed.content:
        raise HTTPException(422, "Task text is empty once dates, tags and priority are removed")
    if len(parsed.content) > CONTENT_MAX:
        raise HTTPException(422, f"Task text is longer than {CONTENT_MAX} characters")
    if payload.project_id is not None and not await crud.get_project(db, payload.project_id):
        raise HTTPException(404, "Project not found")

    task = TaskCreate(
        content=parsed.content,
        project_id=await crud.resolve_project_id(db, parsed.project_hint, payload.project_id),
        priority=parsed.priority,
        due_date=parsed.due_date or payload.due_date,
        due_time=parsed.due_time,
        labels=parsed.labels,
        recurrence=parsed.recurrence,
    )
    return await crud.create_task(db, task)
