"""
Routes for managing groups within an organization.

Deleting a group never deletes its employees: they are detached and
become ungrouped in the same transaction that removes the group.
"""

from __future__ import annotations

from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from ..auth import current_auth
from ..schemas import GroupSchema, NameSchema, EmployeeSchema, ResponseSchema
from ..services import group_service, response_service
from ..util.params import date_arg


groups_bp = Blueprint("groups", __name__)


@groups_bp.route("/organizations/<int:organization_id>/groups", methods=["GET"])
@jwt_required()
def list_groups(organization_id: int) -> tuple[list[dict], int]:
    """List groups with their active employee count."""
    body = []
    for group, employee_count in group_service.list_groups(current_auth(), organization_id):
        item = GroupSchema().dump(group)
        item["employee_count"] = employee_count
        body.append(item)
    return body, 200


@groups_bp.route("/organizations/<int:organization_id>/groups", methods=["POST"])
@jwt_required()
def create_group(organization_id: int) -> tuple[dict, int]:
    """Create a group. Names are unique within an organization (409)."""
    data = NameSchema().load(request.get_json() or {})
    group = group_service.create_group(current_auth(), organization_id, data["name"])
    return GroupSchema().dump(group), 201


@groups_bp.route("/groups/<int:group_id>", methods=["PUT"])
@jwt_required()
def update_group(group_id: int) -> tuple[dict, int]:
    data = NameSchema().load(request.get_json() or {})
    group = group_service.rename_group(current_auth(), group_id, data["name"])
    return GroupSchema().dump(group), 200


@groups_bp.route("/groups/<int:group_id>", methods=["DELETE"])
@jwt_required()
def delete_group(group_id: int) -> tuple[dict, int]:
    """Detach the group's employees and delete it."""
    detached = group_service.delete_group(current_auth(), group_id)
    return {"message": "Group deleted.", "employees_detached": detached}, 200


@groups_bp.route("/groups/<int:group_id>/employees", methods=["GET"])
@jwt_required()
def list_group_employees(group_id: int) -> tuple[list[dict], int]:
    employees = group_service.list_group_employees(current_auth(), group_id)
    return EmployeeSchema(many=True).dump(employees), 200


@groups_bp.route("/groups/<int:group_id>/responses", methods=["GET"])
@jwt_required()
def list_group_responses(group_id: int) -> tuple[list[dict], int]:
    """Responses recorded under a group, optionally bounded by ``from``/``to``."""
    auth = current_auth()
    group = group_service.get_group(auth, group_id)
    responses = response_service.organization_responses(
        auth, group.organization_id, date_arg("from"), date_arg("to"), group_id=group.id
    )
    return ResponseSchema(many=True).dump(responses), 200
