"""Organization lifecycle."""
from __future__ import annotations

import logging
from typing import Iterable, List, Tuple

from .. import db
from ..auth import AuthContext
from ..errors import NotFoundError, ValidationError
from ..models import Employee, Group, Organization
from ..util.sanitization import is_valid_email, normalise_email, strip_tags

logger = logging.getLogger(__name__)


def get_organization(auth: AuthContext, organization_id: int) -> Organization:
    auth.require_organization(organization_id)
    organization = db.session.get(Organization, organization_id)
    if organization is None:
        raise NotFoundError("Organization not found.")
    return organization


def create_organization(
    auth: AuthContext, name: str, employee_emails: Iterable[str] = ()
) -> Tuple[Organization, int]:
    """Create an organization owned by the caller and import employees.

    Malformed and repeated emails are skipped. Returns the organization
    and the number of employees added.
    """
    name = strip_tags(name)
    if not name:
        raise ValidationError("Organization name is required.", {"name": "Required."})

    organization = Organization(name=name, manager_id=auth.manager_id)
    db.session.add(organization)
    db.session.flush()

    seen = set()
    for raw in employee_emails:
        email = normalise_email(raw)
        if not is_valid_email(email) or email in seen:
            continue
        seen.add(email)
        db.session.add(Employee(email=email, organization_id=organization.id, is_active=True))
    db.session.commit()
    logger.info(
        "Manager %s created organization %s with %d employees",
        auth.manager_id, organization.id, len(seen),
    )
    return organization, len(seen)


def list_organizations(auth: AuthContext) -> List[Organization]:
    return (
        Organization.query.filter_by(manager_id=auth.manager_id)
        .order_by(Organization.created_at.asc())
        .all()
    )


def organization_details(auth: AuthContext, organization_id: int) -> dict:
    """Organization with its active employee and group counts."""
    organization = get_organization(auth, organization_id)
    employee_count = Employee.query.filter_by(organization_id=organization_id, is_active=True).count()
    group_count = Group.query.filter_by(organization_id=organization_id).count()
    return {
        "organization": organization,
        "employee_count": employee_count,
        "group_count": group_count,
    }


def rename_organization(auth: AuthContext, organization_id: int, name: str) -> Organization:
    organization = get_organization(auth, organization_id)
    name = strip_tags(name)
    if not name:
        raise ValidationError("Organization name is required.", {"name": "Required."})
    organization.name = name
    db.session.commit()
    return organization
