"""Employee roster management.

Employees are soft-deleted by clearing ``is_active`` so that their past
responses remain part of historical analytics. A permanent delete is
only allowed for employees who never responded.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from .. import db
from ..auth import AuthContext
from ..errors import ConflictError, NotFoundError, ValidationError
from ..models import Employee, Group, Response
from ..util.sanitization import is_valid_email, normalise_email

logger = logging.getLogger(__name__)


def get_employee(auth: AuthContext, employee_id: int) -> Employee:
    """Fetch an employee of one of the caller's organizations."""
    employee = db.session.get(Employee, employee_id)
    if employee is None:
        raise NotFoundError("Employee not found.")
    auth.require_organization(employee.organization_id)
    return employee


def _resolve_group(organization_id: int, group_id: Optional[int]) -> Optional[Group]:
    if group_id is None:
        return None
    group = db.session.get(Group, group_id)
    if group is None or group.organization_id != organization_id:
        raise ValidationError("Group does not belong to this organization.", {"group_id": group_id})
    return group


def _find_by_email(organization_id: int, email: str) -> Optional[Employee]:
    return Employee.query.filter_by(organization_id=organization_id, email=email).first()


def add_employee(
    auth: AuthContext, organization_id: int, email: str, group_id: Optional[int] = None
) -> Employee:
    """Add one active employee. Duplicate emails raise ``ConflictError``."""
    auth.require_organization(organization_id)
    email = normalise_email(email)
    if not is_valid_email(email):
        raise ValidationError("Invalid email format.", {"email": email})
    _resolve_group(organization_id, group_id)
    if _find_by_email(organization_id, email):
        raise ConflictError("Employee already exists in this organization.")
    employee = Employee(email=email, organization_id=organization_id, group_id=group_id, is_active=True)
    db.session.add(employee)
    db.session.commit()
    return employee


def add_employees(
    auth: AuthContext, organization_id: int, emails: Iterable[str], group_id: Optional[int] = None
) -> List[dict]:
    """Bulk import. Returns one result per input email, in input order.

    Each result is ``{"email", "success"}`` plus ``employee_id`` on
    success or ``error`` on failure.
    """
    auth.require_organization(organization_id)
    _resolve_group(organization_id, group_id)
    results = []
    added = {}
    for raw in emails:
        email = normalise_email(raw)
        if not is_valid_email(email):
            results.append({"email": raw, "success": False, "error": "Invalid email format"})
            continue
        if email in added or _find_by_email(organization_id, email):
            results.append({"email": raw, "success": False, "error": "Already exists"})
            continue
        employee = Employee(email=email, organization_id=organization_id, group_id=group_id, is_active=True)
        db.session.add(employee)
        db.session.flush()
        added[email] = employee
        results.append({"email": raw, "success": True, "employee_id": employee.id})
    db.session.commit()
    logger.info("Imported %d of %d employees into organization %s", len(added), len(results), organization_id)
    return results


def list_employees(auth: AuthContext, organization_id: int) -> List[Employee]:
    """Active employees of an organization, ordered by email."""
    auth.require_organization(organization_id)
    return (
        Employee.query.filter_by(organization_id=organization_id, is_active=True)
        .order_by(Employee.email.asc())
        .all()
    )


def find_employee_by_email(auth: AuthContext, organization_id: int, email: str) -> Employee:
    auth.require_organization(organization_id)
    employee = _find_by_email(organization_id, normalise_email(email))
    if employee is None:
        raise NotFoundError("Employee not found.")
    return employee


def assign_group(auth: AuthContext, employee_id: int, group_id: Optional[int]) -> Employee:
    """Move an employee to ``group_id``, or out of any group when ``None``."""
    employee = get_employee(auth, employee_id)
    _resolve_group(employee.organization_id, group_id)
    employee.group_id = group_id
    db.session.commit()
    return employee


def set_active(auth: AuthContext, employee_id: int, active: bool) -> Employee:
    employee = get_employee(auth, employee_id)
    employee.is_active = active
    db.session.commit()
    logger.info("Employee %s %s", employee.id, "reactivated" if active else "deactivated")
    return employee


def delete_employee(auth: AuthContext, employee_id: int) -> None:
    """Permanently remove an employee who has no recorded responses."""
    employee = get_employee(auth, employee_id)
    if Response.query.filter_by(employee_id=employee.id).first() is not None:
        raise ConflictError("Employee has recorded responses; deactivate instead.")
    db.session.delete(employee)
    db.session.commit()
