from __future__ import annotations

import re
from collections.abc import Callable
from datetime import date, datetime, time, timedelta

from dateutil.rrule import DAILY, FR, MO, MONTHLY, SA, SU, TH, TU, WE, WEEKLY, YEARLY, rrule

from ..schemas import RecurrenceRule
from ..utils.text import cut
from .dates import WEEKDAY_ABBREVIATIONS, WEEKDAY_NAMES, next_weekday, shift, weekday_index

FREQUENCY_BY_UNIT = {"day": "daily", "week": "weekly", "month": "monthly", "year": "yearly"}
RRULE_FREQ = {"daily": DAILY, "weekly": WEEKLY, "monthly": MONTHLY, "yearly": YEARLY}
RRULE_DAYS = (MO, TU, WE, TH, FR, SA, SU)  # indexed by python weekday
BUSINESS_DAYS = (1, 2, 3, 4, 5)  # Monday..Friday, Sunday-based

_DAY_NAMES = "|".join(name for name, _ in WEEKDAY_NAMES + WEEKDAY_ABBREVIATIONS)

Resolver = Callable[[re.Match[str], date], tuple[RecurrenceRule, date] | None]


def to_day_of_week(weekday: int) -> int:
    """Python weekday (Monday == 0) -> Sunday-based index stored on rules."""
    return (weekday + 1) % 7


def from_day_of_week(day: int) -> int:
    return (day - 1) % 7


def _fixed(frequency: str, step: Callable[[date], date]) -> Resolver:
    return lambda m, today: (RecurrenceRule(frequency=frequency, interval=1), step(today))


def _every_n(m: re.Match[str], today: date):
    unit = m.group(2).lower()
    try:
        interval = int(m.group(1))
        due = shift(today, interval, unit)
    except (OverflowError, ValueError):
        return None
    if interval == 0:
        return None
    return RecurrenceRule(frequency=FREQUENCY_BY_UNIT[unit], interval=interval), due


def _every_weekday(m: re.Match[str], today: date):
    rule = RecurrenceRule(frequency="weekly", interval=1, days_of_week=BUSINESS_DAYS)
    return rule, next_due_date(rule, today)


def _every_named_day(m: re.Match[str], today: date):
    weekday = weekday_index(m.group(1))
    rule = RecurrenceRule(frequency="weekly", interval=1, days_of_week=(to_day_of_week(weekday),))
    return rule, next_weekday(today, weekday)


RECURRENCE_RULES: tuple[tuple[re.Pattern[str], Resolver], ...] = (
    (re.compile(r"\b(?:every\s+day|daily)\b", re.IGNORECASE), _fixed("daily", lambda d: d + timedelta(days=1))),
    (re.compile(r"\bevery\s+(\d+)\s+(day|week|month|year)s?\b", re.IGNORECASE), _every_n),
    (re.compile(r"\b(?:every\s+week|weekly)\b", re.IGNORECASE), _fixed("weekly", lambda d: d + timedelta(days=7))),
    (re.compile(r"\b(?:every\s+month|monthly)\b", re.IGNORECASE), _fixed("monthly", lambda d: shift(d, 1, "month"))),
    (
        re.compile(r"\b(?:every\s+year|yearly|annually)\b", re.IGNORECASE),
        _fixed("yearly", lambda d: shift(d, 1, "year")),
    ),
    (re.compile(r"\bevery\s+weekday\b", re.IGNORECASE), _every_weekday),
    (re.compile(rf"\bevery\s+({_DAY_NAMES})\b", re.IGNORECASE), _every_named_day),
)


def extract_recurrence(text: str, today: date) -> tuple[RecurrenceRule | None, date | None, str]:
    """
    Find a repeat phrase ("every 2 weeks", "daily", "every friday").
    Returns (rule, implied_due_date, remaining_text); the first rule in
    RECURRENCE_RULES that matches wins.
    """
    for pattern, resolve in RECURRENCE_RULES:
        m = pattern.search(text)
        if not m:
            continue
        found = resolve(m, today)
        if found is None:
            continue
        rule, due = found
        return rule, due, cut(text, m.start(), m.end())
    return None, None, text


def next_due_date(rule: RecurrenceRule, after: date) -> date:
    """Due date one period of ``rule`` after ``after``."""
    start = datetime.combine(after, time())
    return build_rrule(rule, after).after(start).date()


def build_rrule(rule: RecurrenceRule, dtstart: date) -> rrule:
    """dateutil rrule for ``rule``, with weeks starting on Sunday like ``days_of_week``."""
    params = {
        "freq": RRULE_FREQ[rule.frequency],
        "interval": rule.interval,
        "dtstart": datetime.combine(dtstart, time()),
        "wkst": SU,
    }
    if rule.days_of_week:
        params["byweekday"] = tuple(RRULE_DAYS[from_day_of_week(d)] for d in rule.days_of_week)
    elif rule.frequency in ("monthly", "yearly"):
        # short months land on their last day instead of being skipped
        params["bymonthday"] = (dtstart.day, -1)
        params["bysetpos"] = 1
        if rule.frequency == "yearly":
            params["bymonth"] = dtstart.month
    return rrule(**params)
