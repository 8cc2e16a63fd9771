from __future__ import annotations

import re
from collections.abc import Callable
from datetime import date, timedelta
from functools import partial

from dateutil.relativedelta import relativedelta

from ..utils.text import cut

# (name, python weekday) with Monday == 0; full names first so they win over abbreviations
WEEKDAY_NAMES: tuple[tuple[str, int], ...] = (
    ("monday", 0),
    ("tuesday", 1),
    ("wednesday", 2),
    ("thursday", 3),
    ("friday", 4),
    ("saturday", 5),
    ("sunday", 6),
)
WEEKDAY_ABBREVIATIONS: tuple[tuple[str, int], ...] = tuple((name[:3], idx) for name, idx in WEEKDAY_NAMES)

MONTH_PREFIXES = ("jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec")

Resolver = Callable[[date], date]


def weekday_index(name: str) -> int:
    """Python weekday for a full or abbreviated day name ("Tue", "tuesday")."""
    prefix = name[:3].lower()
    for abbr, idx in WEEKDAY_ABBREVIATIONS:
        if abbr == prefix:
            return idx
    raise KeyError(name)


def next_weekday(today: date, weekday: int) -> date:
    """Next date on ``weekday`` strictly after ``today`` (never today itself)."""
    return today + timedelta(days=(weekday - today.weekday()) % 7 or 7)


def shift(day: date, amount: int, unit: str) -> date:
    """Move ``day`` forward by ``amount`` units; months and years follow the calendar."""
    if unit == "day":
        return day + timedelta(days=amount)
    if unit == "week":
        return day + timedelta(weeks=amount)
    if unit == "month":
        return day + relativedelta(months=amount)
    if unit == "year":
        return day + relativedelta(years=amount)
    raise ValueError(f"unknown unit: {unit!r}")


def lenient_date(year: int, month: int, day: int) -> date:
    """
    Build a date, rolling out-of-range values over instead of rejecting them.
    Feb 30 becomes Mar 2 (Mar 1 in leap years), month 13 is January of the
    following year and day 0 is the last day of the previous month.
    """
    return date(year, 1, 1) + relativedelta(months=month - 1) + timedelta(days=day - 1)


def _keyword(phrase: str) -> re.Pattern[str]:
    words = r"\s+".join(phrase.split())
    # not followed by an apostrophe: "Today's report" is not a due date
    return re.compile(rf"\b{words}\b(?!['’])", re.IGNORECASE)


def _plus_days(days: int) -> Resolver:
    return lambda today: today + timedelta(days=days)


KEYWORD_DATES: tuple[tuple[re.Pattern[str], Resolver], ...] = (
    (_keyword("today"), _plus_days(0)),
    (_keyword("tomorrow"), _plus_days(1)),
    (_keyword("tod"), _plus_days(0)),
    (_keyword("tom"), _plus_days(1)),
    *((_keyword(name), partial(next_weekday, weekday=idx)) for name, idx in WEEKDAY_NAMES),
    *((_keyword(abbr), partial(next_weekday, weekday=idx)) for abbr, idx in WEEKDAY_ABBREVIATIONS),
    (_keyword("next week"), _plus_days(7)),
    (_keyword("next month"), partial(shift, amount=1, unit="month")),
)

RELATIVE_PAT = re.compile(r"\bin\s+(\d+)\s+(day|week|month)s?\b", re.IGNORECASE)
# a leading "at" or "on" belongs to the date span
LEADING_PREP = r"(?:\b(?:at|on)\s+)?"
MONTH_DAY_PAT = re.compile(
    LEADING_PREP + r"\b(jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?"
    r"|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)\.?"
    r"\s+(\d{1,2})(?:st|nd|rd|th)?\b",
    re.IGNORECASE,
)
SLASH_PAT = re.compile(LEADING_PREP + r"(?<![\d/])(\d{1,2})/(\d{1,2})(?![\d/])", re.IGNORECASE)


def _keyword_date(text: str, today: date):
    for pattern, resolve in KEYWORD_DATES:
        if pattern.search(text):
            return resolve(today), pattern.sub(" ", text)
    return None, text


def _relative_date(text: str, today: date):
    m = RELATIVE_PAT.search(text)
    if not m:
        return None, text
    try:
        due = shift(today, int(m.group(1)), m.group(2).lower())
    except (OverflowError, ValueError):
        # past the end of the calendar
        return None, text
    return due, cut(text, m.start(), m.end())


def _upcoming(today: date, month: int, day: int) -> date:
    candidate = lenient_date(today.year, month, day)
    if candidate < today:
        candidate = lenient_date(today.year + 1, month, day)
    return candidate


def _exact_date(text: str, today: date):
    m = MONTH_DAY_PAT.search(text)
    if m:
        month = MONTH_PREFIXES.index(m.group(1)[:3].lower()) + 1
        return _upcoming(today, month, int(m.group(2))), cut(text, m.start(), m.end())

    m = SLASH_PAT.search(text)
    if m:
        return _upcoming(today, int(m.group(1)), int(m.group(2))), cut(text, m.start(), m.end())

    return None, text


DATE_TIERS = (_keyword_date, _relative_date, _exact_date)


def extract_date(text: str, today: date) -> tuple[date | None, str]:
    """
    Find a due date in ``text``.
    Tiers are tried in order (keyword, "in N units", month/day) and the first
    one that matches wins; its span is removed from the returned text.
    """
    for tier in DATE_TIERS:
        found, remaining = tier(text, today)
        if found is not None:
            return found, remaining
    return None, text
