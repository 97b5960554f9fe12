"""Daily response submission and retrieval.

An employee has at most one response per UTC day. Submitting again on
the same day overwrites the stored status, comment and anonymity flag.
The unique constraint on ``(employee_id, response_date)`` settles races
between two concurrent first submissions: the loser rolls back its
insert and updates the winner's row instead.
"""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import List, Optional, Union

from sqlalchemy.exc import IntegrityError

from .. import db
from ..auth import AuthContext
from ..errors import NotFoundError, ValidationError
from ..models import Employee, Response, Status
from ..util.clock import utc_day, utcnow
from ..util.sanitization import clean_optional_text
from .response_filter import filter_responses

logger = logging.getLogger(__name__)

ANONYMOUS_PLACEHOLDER = "[Anonymous]"


def _as_status(status: Union[Status, str]) -> Status:
    if isinstance(status, Status):
        return status
    try:
        return Status(status)
    except ValueError:
        raise ValidationError(
            "Invalid status.", {"status": f"Must be one of: {', '.join(s.value for s in Status)}."}
        )


def _same_day(employee_id: int, day: date) -> Optional[Response]:
    return Response.query.filter_by(employee_id=employee_id, response_date=day).first()


def submit_response(
    employee: Employee,
    status: Union[Status, str],
    comment: Optional[str] = None,
    is_anonymous: bool = False,
    now: Optional[datetime] = None,
    commit: bool = True,
) -> dict:
    """Record ``employee``'s response for the UTC day of ``now``.

    Returns ``{"response_id": int, "updated": bool}``. With
    ``commit=False`` the caller owns the transaction.
    """
    if employee is None or not employee.is_active:
        raise NotFoundError("Employee not found or inactive.")
    now = now or utcnow()
    day = utc_day(now)
    employee_id = employee.id
    values = {
        "status": _as_status(status),
        "comment": clean_optional_text(comment),
        "is_anonymous": bool(is_anonymous),
        "submitted_at": now,
    }

    existing = _same_day(employee_id, day)
    if existing is None:
        response = Response(
            employee_id=employee_id,
            organization_id=employee.organization_id,
            group_id=employee.group_id,
            response_date=day,
            **values,
        )
        db.session.add(response)
        try:
            db.session.flush()
        except IntegrityError:
            db.session.rollback()
            logger.info("Concurrent submission for employee %s on %s; updating", employee_id, day)
            existing = _same_day(employee_id, day)
            if existing is None:
                raise

    updated = existing is not None
    if updated:
        for key, value in values.items():
            setattr(existing, key, value)
        response = existing

    if commit:
        db.session.commit()
    else:
        db.session.flush()
    logger.info(
        "%s response %s for employee %s on %s",
        "Updated" if updated else "Created", response.id, employee_id, day,
    )
    return {"response_id": response.id, "updated": updated}


def has_responded_today(employee_id: int, now: Optional[datetime] = None) -> Optional[Response]:
    """Return today's response of the employee, or ``None``."""
    return _same_day(employee_id, utc_day(now))


def employee_history(auth: AuthContext, employee_id: int, limit: int = 30) -> List[Response]:
    """Most recent responses of an employee, newest first."""
    employee = db.session.get(Employee, employee_id)
    if employee is None:
        raise NotFoundError("Employee not found.")
    auth.require_organization(employee.organization_id)
    return (
        Response.query.filter_by(employee_id=employee_id)
        .order_by(Response.response_date.desc())
        .limit(limit)
        .all()
    )


def organization_responses(
    auth: AuthContext,
    organization_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    group_id: Optional[int] = None,
) -> List[Response]:
    """Responses of an organization (optionally one group) in a date range."""
    auth.require_organization(organization_id)
    query = Response.query.filter_by(organization_id=organization_id)
    if group_id is not None:
        query = query.filter_by(group_id=group_id)
    responses = query.order_by(Response.response_date.asc(), Response.id.asc()).all()
    return filter_responses(
        responses, organization_id, group_id=group_id, start_date=start_date, end_date=end_date
    )


def recent_responses(
    auth: AuthContext, organization_id: int, limit: int = 50, include_anonymous: bool = True
) -> List[dict]:
    """Latest responses enriched with employee email and group name.

    Anonymous comments are replaced by ``[Anonymous]`` unless
    ``include_anonymous`` is set.
    """
    auth.require_organization(organization_id)
    responses = (
        Response.query.filter_by(organization_id=organization_id)
        .order_by(Response.submitted_at.desc(), Response.id.desc())
        .limit(limit)
        .all()
    )
    enriched = []
    for response in responses:
        comment = response.comment
        if response.is_anonymous and not include_anonymous:
            comment = ANONYMOUS_PLACEHOLDER
        enriched.append({
            "id": response.id,
            "employee_id": response.employee_id,
            "employee_email": response.employee.email if response.employee else "Unknown",
            "group_id": response.group_id,
            "group_name": response.group.name if response.group else None,
            "status": response.status.value,
            "comment": comment,
            "is_anonymous": response.is_anonymous,
            "response_date": response.response_date.isoformat(),
            "submitted_at": response.submitted_at.isoformat(),
        })
    return enriched
