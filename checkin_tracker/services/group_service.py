"""Group management.

Deleting a group is an explicit two-step unit of work: every employee
is detached from the group, then the group row is removed. Both steps
commit together or the session is rolled back and nothing changes.
"""
from __future__ import annotations

import logging
from typing import List, Tuple

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from .. import db
from ..auth import AuthContext
from ..errors import ConflictError, NotFoundError, ValidationError
from ..models import Employee, Group, Response
from ..util.sanitization import strip_tags

logger = logging.getLogger(__name__)


def get_group(auth: AuthContext, group_id: int) -> Group:
    group = db.session.get(Group, group_id)
    if group is None:
        raise NotFoundError("Group not found.")
    auth.require_organization(group.organization_id)
    return group


def _clean_name(organization_id: int, name: str, exclude_id: int | None = None) -> str:
    name = strip_tags(name)
    if not name:
        raise ValidationError("Group name is required.", {"name": "Required."})
    query = Group.query.filter(Group.organization_id == organization_id, Group.name == name)
    if exclude_id is not None:
        query = query.filter(Group.id != exclude_id)
    if query.first() is not None:
        raise ConflictError("Group with this name already exists.")
    return name


def create_group(auth: AuthContext, organization_id: int, name: str) -> Group:
    auth.require_organization(organization_id)
    group = Group(name=_clean_name(organization_id, name), organization_id=organization_id)
    db.session.add(group)
    db.session.commit()
    return group


def list_groups(auth: AuthContext, organization_id: int) -> List[Tuple[Group, int]]:
    """Groups of an organization paired with their active employee count."""
    auth.require_organization(organization_id)
    counts = dict(
        db.session.query(Employee.group_id, func.count(Employee.id))
        .filter(Employee.organization_id == organization_id, Employee.is_active.is_(True))
        .group_by(Employee.group_id)
        .all()
    )
    groups = Group.query.filter_by(organization_id=organization_id).order_by(Group.name.asc()).all()
    return [(group, counts.get(group.id, 0)) for group in groups]


def rename_group(auth: AuthContext, group_id: int, name: str) -> Group:
    group = get_group(auth, group_id)
    group.name = _clean_name(group.organization_id, name, exclude_id=group.id)
    db.session.commit()
    return group


def list_group_employees(auth: AuthContext, group_id: int) -> List[Employee]:
    group = get_group(auth, group_id)
    return (
        Employee.query.filter_by(group_id=group.id, is_active=True)
        .order_by(Employee.email.asc())
        .all()
    )


def delete_group(auth: AuthContext, group_id: int) -> int:
    """Detach all members and delete the group in one transaction.

    Historical responses keep their day and status but lose the
    reference to the deleted group. Returns the number of employees
    detached.
    """
    group = get_group(auth, group_id)
    try:
        detached = (
            Employee.query.filter_by(group_id=group.id)
            .update({Employee.group_id: None}, synchronize_session="fetch")
        )
        Response.query.filter_by(group_id=group.id).update(
            {Response.group_id: None}, synchronize_session="fetch"
        )
        db.session.delete(group)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Deleting group %s failed; no changes applied", group_id)
        raise
    logger.info("Deleted group %s and detached %d employees", group_id, detached)
    return detached
