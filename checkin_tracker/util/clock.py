"""UTC time helpers.

Timestamps are stored as naive UTC datetimes. A response's calendar day
is the UTC date of its submission, so "today" always means the UTC day.
"""
from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def utc_day(moment: Optional[datetime] = None) -> date:
    """Normalise ``moment`` (default: now) to its UTC calendar day."""
    if moment is None:
        moment = utcnow()
    elif moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc).replace(tzinfo=None)
    return moment.date()
