from datetime import date, datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

Frequency = Literal["daily", "weekly", "monthly", "yearly"]
Priority = Annotated[int, Field(ge=1, le=4)]  # 1 = most urgent
DayOfWeek = Annotated[int, Field(ge=0, le=6)]  # 0 = Sunday
ClockTime = Annotated[str, Field(pattern=r"^([01]\d|2[0-3]):[0-5]\d$")]
CONTENT_MAX = 500


class RecurrenceRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    frequency: Frequency
    interval: int = Field(1, ge=1)
    days_of_week: tuple[DayOfWeek, ...] | None = None


class ParsedTask(BaseModel):
    """Structured result of parsing one line of quick-add text."""

    content: str
    due_date: date | None = None
    due_time: ClockTime | None = None
    priority: Priority = 4
    project_hint: str | None = None
    labels: list[str] = Field(default_factory=list)
    recurrence: RecurrenceRule | None = None


class TaskBase(BaseModel):
    content: str = Field(..., min_length=1, max_length=CONTENT_MAX)
    description: str | None = None
    project_id: int | None = None
    parent_id: int | None = None
    priority: Priority = 4
    due_date: date | None = None
    due_time: ClockTime | None = None
    labels: list[str] = Field(default_factory=list)
    recurrence: RecurrenceRule | None = None


class TaskCreate(TaskBase):
    pass


class TaskUpdate(BaseModel):
    content: str | None = Field(None, min_length=1, max_length=CONTENT_MAX)
    description: str | None = None
    project_id: int | None = None
    priority: Priority | None = None
    due_date: date | None = None
    due_time: ClockTime | None = None
    labels: list[str] | None = None
    recurrence: RecurrenceRule | None = None


class TaskOut(TaskBase):
    model_config = ConfigDict(from_attributes=True)
    id: int
    project_id: int
    order: int
    is_completed: bool
    completed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
    history: list[dict] | None = None


class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    color: str | None = Field(None, max_length=20)


class ProjectOut(ProjectCreate):
    model_config = ConfigDict(from_attributes=True)
    id: int
    is_archived: bool
    created_at: datetime


class QuickAddIn(BaseModel):
    text: str
    # used when the text names no known project / priority / date
    project_id: int | None = None
    priority: Priority | None = None
    due_date: date | None = None


class ReorderIn(BaseModel):
    project_id: int
    task_ids: list[int]
