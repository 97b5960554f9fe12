"""Request authentication context.

Manager endpoints never trust client-held state. Each request carries a
JWT; :func:`current_auth` verifies it, loads the organizations the
manager owns, and returns an :class:`AuthContext` that the route passes
into every service call. Services call
:meth:`AuthContext.require_organization` before touching an
organization's data.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet

from flask_jwt_extended import get_jwt_identity

from . import db
from .errors import AuthenticationError, ForbiddenError
from .models import Manager, Organization


@dataclass(frozen=True)
class AuthContext:
    manager_id: int
    organization_ids: FrozenSet[int] = field(default_factory=frozenset)

    def owns(self, organization_id: int) -> bool:
        return organization_id in self.organization_ids

    def require_organization(self, organization_id: int) -> None:
        """Raise ``ForbiddenError`` unless the manager owns the organization."""
        if not self.owns(organization_id):
            raise ForbiddenError()

    def with_organization(self, organization_id: int) -> "AuthContext":
        """Return a copy that also owns ``organization_id``."""
        return AuthContext(self.manager_id, self.organization_ids | {organization_id})


def load_auth_context(manager_id: int) -> AuthContext:
    """Build the context for ``manager_id`` from the database."""
    manager = db.session.get(Manager, manager_id)
    if manager is None:
        raise AuthenticationError("Manager account no longer exists.")
    rows = db.session.query(Organization.id).filter(Organization.manager_id == manager_id).all()
    return AuthContext(manager_id=manager_id, organization_ids=frozenset(row[0] for row in rows))


def current_auth() -> AuthContext:
    """Return the context for the JWT on the current request.

    Must be called inside a ``@jwt_required()`` view.
    """
    try:
        manager_id = int(get_jwt_identity())
    except (TypeError, ValueError):
        raise AuthenticationError("Invalid token identity.")
    return load_auth_context(manager_id)
