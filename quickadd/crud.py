import logging
from datetime import date

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .config import settings
from .models import Project, Task, utcnow
from .nlp.recurrence import next_due_date
from .schemas import ProjectCreate, RecurrenceRule, TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)


def _dump_rule(rule: RecurrenceRule | None):
    if rule is None:
        return None
    return rule.model_dump(mode="json", exclude_none=True)


def _append_history(task: Task, entry: dict) -> None:
    # assign a new list so the JSON column is flagged dirty
    task.history = [*(task.history or []), {**entry, "timestamp": utcnow().isoformat() + "Z"}]


# --- projects ---


async def get_project(db: AsyncSession, project_id: int) -> Project | None:
    res = await db.execute(select(Project).where(Project.id == project_id))
    return res.scalar_one_or_none()


async def list_projects(db: AsyncSession, include_archived: bool = False) -> list[Project]:
    stmt = select(Project).order_by(Project.id)
    if not include_archived:
        stmt = stmt.where(Project.is_archived.is_(False))
    res = await db.execute(stmt)
    return list(res.scalars().all())


async def create_project(db: AsyncSession, payload: ProjectCreate) -> Project:
    project = Project(**payload.model_dump())
    db.add(project)
    await db.commit()
    await db.refresh(project)
    return project


async def ensure_default_project(db: AsyncSession) -> Project:
    res = await db.execute(select(Project).where(Project.name == settings.default_project).order_by(Project.id))
    project = res.scalars().first()
    if project:
        return project
    return await create_project(db, ProjectCreate(name=settings.default_project))


async def delete_project(db: AsyncSession, project_id: int) -> bool:
    project = await get_project(db, project_id)
    if not project:
        return False
    await db.execute(delete(Task).where(Task.project_id == project_id))
    await db.delete(project)
    await db.commit()
    return True


async def resolve_project_id(db: AsyncSession, hint: str | None, fallback_id: int | None = None) -> int:
    """
    Map a "#work" style hint to a project id by case-insensitive name.
    Falls back to ``fallback_id``, then to the default project.
    """
    if hint:
        res = await db.execute(
            select(Project.id).where(func.lower(Project.name) == hint.lower()).order_by(Project.id)
        )
        project_id = res.scalars().first()
        if project_id is not None:
            return project_id
        logger.debug("no project named %r, using fallback", hint)
    if fallback_id is not None:
        return fallback_id
    return (await ensure_default_project(db)).id


# --- tasks ---


async def _next_order(db: AsyncSession, project_id: int) -> int:
    res = await db.execute(select(func.max(Task.order)).where(Task.project_id == project_id))
    current = res.scalar_one_or_none()
    return 0 if current is None else current + 1


async def create_task(db: AsyncSession, payload: TaskCreate) -> Task:
    data = payload.model_dump()
    data["recurrence"] = _dump_rule(payload.recurrence)
    if data["project_id"] is None:
        data["project_id"] = (await ensure_default_project(db)).id
    data["order"] = await _next_order(db, data["project_id"])
    task = Task(**data)
    db.add(task)
    await db.commit()
    await db.refresh(task)
    return task


async def get_task(db: AsyncSession, task_id: int) -> Task | None:
    res = await db.execute(select(Task).where(Task.id == task_id))
    return res.scalar_one_or_none()


async def list_tasks(
    db: AsyncSession,
    project_id: int | None = None,
    label: str | None = None,
    completed: bool | None = None,
    limit: int = 100,
    offset: int = 0,
) -> list[Task]:
    stmt = select(Task).order_by(Task.project_id, Task.order, Task.id)
    if project_id is not None:
        stmt = stmt.where(Task.project_id == project_id)
    if completed is not None:
        stmt = stmt.where(Task.is_completed.is_(completed))
    res = await db.execute(stmt)
    tasks = list(res.scalars().all())
    if label:
        tasks = [t for t in tasks if label in (t.labels or [])]
    return tasks[offset : offset + limit]


async def update_task(db: AsyncSession, task_id: int, payload: TaskUpdate):
    task = await get_task(db, task_id)
    if not task:
        return None
    updates = payload.model_dump(exclude_unset=True)
    # columns that cannot be cleared
    for key in ("content", "project_id", "priority", "labels"):
        if key in updates and updates[key] is None:
            del updates[key]
    if "recurrence" in updates:
        updates["recurrence"] = _dump_rule(payload.recurrence)
    if updates.get("project_id") not in (None, task.project_id):
        updates["order"] = await _next_order(db, updates["project_id"])
    for k, v in updates.items():
        setattr(task, k, v)
    await db.commit()
    await db.refresh(task)
    return task


async def delete_task(db: AsyncSession, task_id: int) -> bool:
    task = await get_task(db, task_id)
    if not task:
        return False
    await db.delete(task)
    await db.commit()
    return True


async def complete_task(db: AsyncSession, task_id: int, today: date):
    """
    Complete a task. A recurring task is not closed: its due date moves to
    the next occurrence after today and the move is recorded in its history.
    """
    task = await get_task(db, task_id)
    if not task:
        return None

    if task.recurrence:
        rule = RecurrenceRule.model_validate(task.recurrence)
        previous = task.due_date
        due = next_due_date(rule, previous or today)
        while due <= today:
            due = next_due_date(rule, due)
        task.due_date = due
        _append_history(
            task,
            {"event": "recurrence_advance", "from": previous.isoformat() if previous else None, "to": due.isoformat()},
        )
        logger.info("recurring task %s advanced %s -> %s", task.id, previous, due)
    else:
        task.is_completed = True
        task.completed_at = utcnow()
        _append_history(task, {"event": "completed"})

    await db.commit()
    await db.refresh(task)
    return task


async def uncomplete_task(db: AsyncSession, task_id: int):
    task = await get_task(db, task_id)
    if not task:
        return None
    task.is_completed = False
    task.completed_at = None
    _append_history(task, {"event": "uncompleted"})
    await db.commit()
    await db.refresh(task)
    return task


async def reorder_tasks(db: AsyncSession, project_id: int, task_ids: list[int]) -> list[Task] | None:
    """Set ``order`` from the position in ``task_ids``; None if an id is not in the project."""
    tasks = await list_tasks(db, project_id=project_id, limit=10_000)
    by_id = {t.id: t for t in tasks}
    if any(tid not in by_id for tid in task_ids):
        return None
    for position, tid in enumerate(task_ids):
        by_id[tid].order = position
    await db.commit()
    return await list_tasks(db, project_id=project_id, limit=10_000)


# --- views ---


async def _open_tasks(db: AsyncSession, *conditions, order_by) -> list[Task]:
    stmt = select(Task).where(Task.is_completed.is_(False), *conditions).order_by(*order_by)
    res = await db.execute(stmt)
    return list(res.scalars().all())


async def today_tasks(db: AsyncSession, today: date) -> list[Task]:
    return await _open_tasks(db, Task.due_date == today, order_by=(Task.priority, Task.order, Task.id))


async def upcoming_tasks(db: AsyncSession, today: date) -> list[Task]:
    return await _open_tasks(db, Task.due_date > today, order_by=(Task.due_date, Task.due_time, Task.id))


async def overdue_tasks(db: AsyncSession, today: date) -> list[Task]:
    return await _open_tasks(db, Task.due_date < today, order_by=(Task.due_date, Task.due_time, Task.id))


async def inbox_tasks(db: AsyncSession) -> list[Task]:
    inbox = await ensure_default_project(db)
    return await _open_tasks(db, Task.project_id == inbox.id, order_by=(Task.order, Task.id))
