"""
Routes for managing an organization's employees.

Employees can be added one at a time or in bulk, moved between groups,
deactivated and reactivated. Deactivation is the normal way to remove
someone: their past responses stay in the analytics. Permanent deletion
is only allowed for employees who never responded.
"""

from __future__ import annotations

from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from ..auth import current_auth
from ..errors import ValidationError
from ..schemas import EmployeeSchema, EmployeeInputSchema, GroupAssignmentSchema, ResponseSchema
from ..services import employee_service, response_service
from ..util.params import int_arg


employees_bp = Blueprint("employees", __name__)


@employees_bp.route("/organizations/<int:organization_id>/employees", methods=["GET"])
@jwt_required()
def list_employees(organization_id: int) -> tuple[list[dict], int]:
    """List active employees with their group name."""
    employees = employee_service.list_employees(current_auth(), organization_id)
    return EmployeeSchema(many=True).dump(employees), 200


@employees_bp.route("/organizations/<int:organization_id>/employees", methods=["POST"])
@jwt_required()
def add_employees(organization_id: int):
    """Add employees.

    Send ``email`` to add one employee (409 if it already exists) or
    ``emails`` to import a list, which returns one result per email.
    ``group_id`` optionally places the new employees in a group.
    """
    data = EmployeeInputSchema().load(request.get_json() or {})
    auth = current_auth()
    if "emails" in data:
        results = employee_service.add_employees(auth, organization_id, data["emails"], data["group_id"])
        return results, 201
    if not data.get("email"):
        raise ValidationError("email or emails is required.", {"email": "Required."})
    employee = employee_service.add_employee(auth, organization_id, data["email"], data["group_id"])
    return EmployeeSchema().dump(employee), 201


@employees_bp.route("/organizations/<int:organization_id>/employees/lookup", methods=["GET"])
@jwt_required()
def lookup_employee(organization_id: int) -> tuple[dict, int]:
    """Find an employee (active or not) by email."""
    email = request.args.get("email", "")
    employee = employee_service.find_employee_by_email(current_auth(), organization_id, email)
    return EmployeeSchema().dump(employee), 200


@employees_bp.route("/employees/<int:employee_id>/group", methods=["PUT"])
@jwt_required()
def update_employee_group(employee_id: int) -> tuple[dict, int]:
    """Move an employee into ``group_id``, or out of any group with ``null``."""
    data = GroupAssignmentSchema().load(request.get_json() or {})
    employee = employee_service.assign_group(current_auth(), employee_id, data["group_id"])
    return EmployeeSchema().dump(employee), 200


@employees_bp.route("/employees/<int:employee_id>/deactivate", methods=["POST"])
@jwt_required()
def deactivate_employee(employee_id: int) -> tuple[dict, int]:
    employee = employee_service.set_active(current_auth(), employee_id, False)
    return EmployeeSchema().dump(employee), 200


@employees_bp.route("/employees/<int:employee_id>/reactivate", methods=["POST"])
@jwt_required()
def reactivate_employee(employee_id: int) -> tuple[dict, int]:
    employee = employee_service.set_active(current_auth(), employee_id, True)
    return EmployeeSchema().dump(employee), 200


@employees_bp.route("/employees/<int:employee_id>", methods=["DELETE"])
@jwt_required()
def delete_employee(employee_id: int) -> tuple[dict, int]:
    """Permanently delete an employee with no responses (409 otherwise)."""
    employee_service.delete_employee(current_auth(), employee_id)
    return {"message": "Employee deleted."}, 200


@employees_bp.route("/employees/<int:employee_id>/responses", methods=["GET"])
@jwt_required()
def list_employee_responses(employee_id: int) -> tuple[list[dict], int]:
    """An employee's most recent responses, newest first (``limit``, default 30)."""
    limit = int_arg("limit", 30)
    responses = response_service.employee_history(current_auth(), employee_id, limit)
    return ResponseSchema(many=True).dump(responses), 200
