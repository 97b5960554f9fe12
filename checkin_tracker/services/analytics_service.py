"""Wellbeing analytics.

The ``build_*`` functions are pure: they aggregate responses, employees
and groups that have already been loaded and never touch the database.
:func:`organization_report` and :func:`group_report` are the entry
points used by the routes; they check the caller's ``AuthContext``,
load one consistent snapshot of the organization's data, narrow it to
the look-back window and hand it to the builders.
"""
from __future__ import annotations

import math
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Sequence

from .. import db
from ..auth import AuthContext
from ..errors import NotFoundError, ValidationError
from ..models import Employee, Group, Organization, Response
from ..util.clock import utc_day
from .response_filter import filter_responses
from .scoring import count_statuses, score_statuses
from .trend import build_trend

UNGROUPED_ID = "ungrouped"
UNGROUPED_NAME = "No Group"


def _summarise(responses: Sequence[Response]) -> dict:
    statuses = [r.status for r in responses]
    stats = score_statuses(statuses)
    return {
        "status": stats["status"],
        "average": stats["average"],
        "status_counts": count_statuses(statuses),
        "total_responses": len(statuses),
    }


def response_rate(responded: int, active_employees: int) -> int:
    """Percentage of active employees who responded, rounded half up.

    Zero active employees gives a rate of ``0``.
    """
    if active_employees <= 0:
        return 0
    return int(math.floor(responded / active_employees * 100 + 0.5))


def build_trend_series(responses: Iterable[Response]) -> List[dict]:
    """Sparse daily trend over ``responses``."""
    return build_trend(responses)


def build_organization_summary(
    responses: Sequence[Response], employees: Iterable[Employee], today: date
) -> dict:
    """Organization-wide summary of an already filtered response pool.

    ``employees`` may include inactive employees; only active ones count
    towards the response rate and ``total_employees``. Today's responses
    from employees deactivated since still count, so the rate can exceed
    100.
    """
    active_count = sum(1 for e in employees if e.is_active)
    summary = _summarise(responses)
    responded_today = sum(1 for r in responses if r.response_date == today)
    return {
        "overall_status": summary["status"],
        "overall_average": summary["average"],
        "total_responses": summary["total_responses"],
        "status_counts": summary["status_counts"],
        "response_rate": response_rate(responded_today, active_count),
        "total_employees": active_count,
        "trend_data": build_trend_series(responses),
    }


def build_group_summaries(
    responses: Sequence[Response], employees: Iterable[Employee], groups: Iterable[Group]
) -> List[dict]:
    """Per-group summaries plus a virtual "No Group" entry.

    Each group covers the responses of its currently active members. The
    "No Group" entry covers active employees without a group and is only
    present when there is at least one such employee, so the employee
    counts add up to the organization's active head count.
    """
    active = [e for e in employees if e.is_active]

    def entry(group_id, group_name, members) -> dict:
        member_ids = {e.id for e in members}
        summary = _summarise([r for r in responses if r.employee_id in member_ids])
        summary.update(
            group_id=group_id,
            group_name=group_name,
            employee_count=len(members),
        )
        return summary

    summaries = [
        entry(group.id, group.name, [e for e in active if e.group_id == group.id])
        for group in groups
    ]

    ungrouped = [e for e in active if e.group_id is None]
    if ungrouped:
        summaries.append(entry(UNGROUPED_ID, UNGROUPED_NAME, ungrouped))
    return summaries


def window_start(today: date, days: int) -> date:
    """First day of a ``days``-long window that ends on ``today``."""
    if days < 1:
        raise ValidationError("days must be a positive integer.", {"days": days})
    return today - timedelta(days=days - 1)


def _load_snapshot(organization_id: int):
    organization = db.session.get(Organization, organization_id)
    if organization is None:
        raise NotFoundError("Organization not found.")
    employees = Employee.query.filter_by(organization_id=organization_id).all()
    groups = Group.query.filter_by(organization_id=organization_id).order_by(Group.name.asc()).all()
    responses = (
        Response.query.filter_by(organization_id=organization_id)
        .order_by(Response.response_date.asc(), Response.id.asc())
        .all()
    )
    return organization, employees, groups, responses


def organization_report(
    auth: AuthContext, organization_id: int, days: int = 30, now: Optional[datetime] = None
) -> dict:
    """Summary and trend for the last ``days`` UTC days of an organization."""
    auth.require_organization(organization_id)
    today = utc_day(now)
    start = window_start(today, days)
    _, employees, _, responses = _load_snapshot(organization_id)
    pool = filter_responses(responses, organization_id, start_date=start, end_date=today)
    report = build_organization_summary(pool, employees, today)
    report.update(organization_id=organization_id, days=days, start_date=start, end_date=today)
    return report


def group_report(
    auth: AuthContext, organization_id: int, days: int = 30, now: Optional[datetime] = None
) -> List[dict]:
    """Per-group summaries over the last ``days`` UTC days of an organization."""
    auth.require_organization(organization_id)
    today = utc_day(now)
    start = window_start(today, days)
    _, employees, groups, responses = _load_snapshot(organization_id)
    pool = filter_responses(responses, organization_id, start_date=start, end_date=today)
    return build_group_summaries(pool, employees, groups)
