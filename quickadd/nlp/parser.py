from __future__ import annotations

import logging
import re
from datetime import date, datetime

from ..schemas import ParsedTask
from ..utils.text import collapse_whitespace, cut
from .dates import extract_date
from .recurrence import extract_recurrence

logger = logging.getLogger(__name__)

# Simple patterns for inline tags
LABEL_PAT = re.compile(r"(?<!\w)@(\w+)")
PROJECT_PAT = re.compile(r"(?<!\w)#(\w+)")
PRIORITY_PAT = re.compile(r"\bp([1-4])\b", re.IGNORECASE)
BANG_PAT = re.compile(r"!+")
TIME_PAT = re.compile(
    r"(?P<at>\bat\s+)?(?<![\w/:.])(?P<hour>\d{1,2})(?::(?P<minute>\d{2}))?"
    r"(?:\s*(?P<meridiem>[ap]m)\b)?(?![\w/:]|\.\d)",
    re.IGNORECASE,
)

# one "!" is p3, "!!" is p2, three or more is p1
BANG_LEVELS = {1: 3, 2: 2}


def extract_labels(text: str) -> tuple[list[str], str]:
    return LABEL_PAT.findall(text), LABEL_PAT.sub(" ", text)


def extract_project(text: str) -> tuple[str | None, str]:
    m = PROJECT_PAT.search(text)
    if not m:
        return None, text
    return m.group(1), PROJECT_PAT.sub(" ", text)


def extract_priority(text: str) -> tuple[int | None, str]:
    """
    "p1".."p4" wins over exclamation marks. Once a priority is found every
    priority marker is stripped so none is left behind in the title.
    """
    m = PRIORITY_PAT.search(text)
    if m:
        level = int(m.group(1))
    else:
        bangs = BANG_PAT.search(text)
        if not bangs:
            return None, text
        level = BANG_LEVELS.get(len(bangs.group()), 1)
    text = PRIORITY_PAT.sub(" ", text)
    return level, BANG_PAT.sub(" ", text)


def _clock(m: re.Match[str]) -> str | None:
    hour = int(m["hour"])
    minute = int(m["minute"] or 0)
    meridiem = (m["meridiem"] or "").lower()
    if minute > 59:
        return None
    if meridiem:
        if hour > 12:
            return None
        if meridiem == "pm" and 1 <= hour < 12:
            hour += 12
        elif meridiem == "am" and hour == 12:
            hour = 0
    elif hour > 23:
        return None
    return f"{hour:02d}:{minute:02d}"


def extract_time(text: str) -> tuple[str | None, str]:
    """
    Find "at 5pm", "17:30", "9am" etc. and return it as HH:MM.
    A bare number needs "at", minutes or am/pm to count as a time, so
    "in 3 days" and "Jan 15" are left for the date stage.
    """
    for m in TIME_PAT.finditer(text):
        if not (m["at"] or m["minute"] or m["meridiem"]):
            continue
        clock = _clock(m)
        if clock:
            return clock, cut(text, m.start(), m.end())
    return None, text


def parse_task_input(text: str, now: datetime | date, default_priority: int = 4) -> ParsedTask:
    """
    Rule-based quick-add parser:
    - labels via @tag, project hint via the first #tag
    - priority p1..p4 or !, !!, !!!
    - recurrence ('every day', 'weekly', 'every 2 weeks', 'every fri')
    - time ('at 5pm', '17:30') and due date ('tomorrow', 'in 3 days', 'Jan 15', '1/15')
    - whatever is left, whitespace-collapsed, is the title

    ``now`` anchors every relative phrase; the parser never reads the clock.
    """
    today = now.date() if isinstance(now, datetime) else now

    labels, work = extract_labels(text)
    project_hint, work = extract_project(work)
    priority, work = extract_priority(work)
    recurrence, due_date, work = extract_recurrence(work, today)
    due_time, work = extract_time(work)
    # a date implied by the recurrence rule is never overridden
    if due_date is None:
        due_date, work = extract_date(work, today)

    parsed = ParsedTask(
        content=collapse_whitespace(work),
        due_date=due_date,
        due_time=due_time,
        priority=priority or default_priority,
        project_hint=project_hint,
        labels=labels,
        recurrence=recurrence,
    )
    logger.debug("parsed %r -> %s", text, parsed.model_dump(exclude_none=True))
    return parsed
