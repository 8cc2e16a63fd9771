from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from .. import crud
from ..db import get_session
from ..deps import get_now, resolve_as_of
from ..schemas import TaskOut

router = APIRouter()

AS_OF = Query(None, description="Reference day, e.g. 'yesterday' or '2026-03-01' (default: today)")


@router.get("/today", response_model=list[TaskOut])
async def today(as_of: str | None = AS_OF, db: AsyncSession = Depends(get_session), now: datetime = Depends(get_now)):
    return await crud.today_tasks(db, resolve_as_of(as_of, now))


@router.get("/upcoming", response_model=list[TaskOut])
async def upcoming(
    as_of: str | None = AS_OF, db: AsyncSession = Depends(get_session), now: datetime = Depends(get_now)
):
    return await crud.upcoming_tasks(db, resolve_as_of(as_of, now))


@router.get("/overdue", response_model=list[TaskOut])
async def overdue(
    as_of: str | None = AS_OF, db: AsyncSession = Depends(get_session), now: datetime = Depends(get_now)
):
    return await crud.overdue_tasks(db, resolve_as_of(as_of, now))


@router.get("/inbox", response_model=list[TaskOut])
async def inbox(db: AsyncSession = Depends(get_session)):
    return await crud.inbox_tasks(db)
