"""
Authentication routes for managers.

Managers register with a name, email and password, then log in to
obtain a JSON Web Token. The token is required on every manager
endpoint; employees never log in and use emailed check-in links
instead.
"""

from __future__ import annotations

from flask import Blueprint, request
from flask_jwt_extended import create_access_token, jwt_required

from ..auth import current_auth
from ..models import Manager
from ..schemas import ManagerSchema, RegisterManagerSchema, LoginSchema
from ..services.manager_service import register_manager, authenticate_manager
from .. import db


auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/managers/register", methods=["POST"])
def register() -> tuple[dict, int]:
    """Register a new manager.

    Expects JSON with ``name``, ``email`` and ``password`` (at least 8
    characters). Emails must be unique.
    """
    data = RegisterManagerSchema().load(request.get_json() or {})
    manager = register_manager(data["name"], data["email"], data["password"])
    return ManagerSchema().dump(manager), 201


@auth_bp.route("/login", methods=["POST"])
def login() -> tuple[dict, int]:
    """Authenticate a manager and return a JWT.

    Invalid credentials return 401.
    """
    data = LoginSchema().load(request.get_json() or {})
    manager = authenticate_manager(data["email"], data["password"])
    access_token = create_access_token(identity=str(manager.id))
    return {"access_token": access_token, "manager": ManagerSchema().dump(manager)}, 200


@auth_bp.route("/managers/me", methods=["GET"])
@jwt_required()
def me() -> tuple[dict, int]:
    """Return the logged-in manager with the ids of their organizations."""
    auth = current_auth()
    manager = db.session.get(Manager, auth.manager_id)
    body = ManagerSchema().dump(manager)
    body["organization_ids"] = sorted(auth.organization_ids)
    return body, 200
