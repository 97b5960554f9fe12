"""Daily trend series.

Responses are grouped by their ``response_date`` and each day is scored
with :func:`score_statuses`. Two policies decide which days appear:

* sparse (``days`` omitted): only days that have at least one response;
* dense (``days`` given): exactly the listed days, with empty days
  reported as ``count=0``, ``average=0`` and status ``none``.

The caller chooses the policy by passing ``days`` or not. The analytics
reports use the sparse policy.
"""
from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta
from typing import Iterable, List, Optional

from ..models import Response
from .scoring import score_statuses


def trailing_days(end: date, count: int) -> List[date]:
    """Return the ``count`` calendar days ending on ``end``, oldest first."""
    return [end - timedelta(days=offset) for offset in range(count - 1, -1, -1)]


def build_trend(responses: Iterable[Response], days: Optional[Iterable[date]] = None) -> List[dict]:
    """Build an ascending-by-date list of per-day summaries.

    Each point is ``{"date", "average", "status", "count"}``. Dates are
    strictly ascending and never repeated. When ``days`` is given,
    responses dated outside it are ignored.
    """
    by_day: dict[date, list] = defaultdict(list)
    for response in responses:
        by_day[response.response_date].append(response.status)

    selected = sorted(set(days)) if days is not None else sorted(by_day)

    trend = []
    for day in selected:
        statuses = by_day.get(day, [])
        point = {"date": day}
        point.update(score_statuses(statuses))
        point["count"] = len(statuses)
        trend.append(point)
    return trend
