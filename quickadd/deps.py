from datetime import date, datetime
from zoneinfo import ZoneInfo

import dateparser
from fastapi import HTTPException

from .config import settings


def get_now() -> datetime:
    """Current time in the configured zone; overridden in tests."""
    return datetime.now(ZoneInfo(settings.timezone))


def _parse_phrase(as_of: str, now: datetime) -> datetime | None:
    return dateparser.parse(
        as_of,
        languages=["en"],
        settings={
            "RELATIVE_BASE": now.replace(tzinfo=None),
            "TIMEZONE": settings.timezone,
            "DATE_ORDER": "MDY",
            "PREFER_DATES_FROM": "current_period",
        },
    )


def resolve_as_of(as_of: str | None, now: datetime) -> date:
    """
    Reference day for the agenda views. Accepts ISO dates and natural
    phrases ('yesterday', 'next friday'); defaults to today.
    """
    if not as_of:
        return now.date()
    try:
        return date.fromisoformat(as_of)
    except ValueError:
        found = _parse_phrase(as_of, now)
    if found is None:
        raise HTTPException(422, f"Could not understand as_of={as_of!r}")
    return found.date()
