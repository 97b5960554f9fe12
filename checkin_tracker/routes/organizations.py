"""
Routes for managing organizations.

A manager creates an organization, optionally importing an initial list
of employee emails, and can rename it later. Only the owning manager can
see or change an organization.
"""

from __future__ import annotations

from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from ..auth import current_auth
from ..schemas import OrganizationSchema, OrganizationInputSchema, NameSchema
from ..services import organization_service


organizations_bp = Blueprint("organizations", __name__)


@organizations_bp.route("/organizations", methods=["POST"])
@jwt_required()
def create_organization() -> tuple[dict, int]:
    """Create an organization.

    Accepts ``name`` and optional ``employee_emails``. Malformed and
    repeated emails are skipped; the number actually added is returned
    as ``employees_added``.
    """
    data = OrganizationInputSchema().load(request.get_json() or {})
    organization, added = organization_service.create_organization(
        current_auth(), data["name"], data["employee_emails"]
    )
    return {"organization": OrganizationSchema().dump(organization), "employees_added": added}, 201


@organizations_bp.route("/organizations", methods=["GET"])
@jwt_required()
def list_organizations() -> tuple[list[dict], int]:
    """List the organizations owned by the current manager."""
    organizations = organization_service.list_organizations(current_auth())
    return OrganizationSchema(many=True).dump(organizations), 200


@organizations_bp.route("/organizations/<int:organization_id>", methods=["GET"])
@jwt_required()
def get_organization(organization_id: int) -> tuple[dict, int]:
    """Organization details with active employee and group counts."""
    details = organization_service.organization_details(current_auth(), organization_id)
    body = OrganizationSchema().dump(details["organization"])
    body["employee_count"] = details["employee_count"]
    body["group_count"] = details["group_count"]
    return body, 200


@organizations_bp.route("/organizations/<int:organization_id>", methods=["PUT"])
@jwt_required()
def update_organization(organization_id: int) -> tuple[dict, int]:
    """Rename an organization."""
    data = NameSchema().load(request.get_json() or {})
    organization = organization_service.rename_organization(current_auth(), organization_id, data["name"])
    return OrganizationSchema().dump(organization), 200
