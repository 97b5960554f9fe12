"""
Public check-in routes used by employees.

No login is involved: the token from the emailed link is the only
credential. ``GET`` lets the page show who is answering and whether a
response was already given today; ``POST`` records the response.
"""

from __future__ import annotations

from flask import Blueprint, current_app, request

from ..schemas import SubmitResponseSchema, ResponseSchema
from ..services import response_service, token_service


checkin_bp = Blueprint("checkin", __name__)


@checkin_bp.route("/checkin/<token>", methods=["GET"])
def validate_checkin(token: str) -> tuple[dict, int]:
    """Validate a check-in token."""
    email_token = token_service.validate_token(
        token, allow_reuse=current_app.config["ALLOW_TOKEN_REUSE"]
    )
    employee = email_token.employee
    today = response_service.has_responded_today(employee.id)
    return {
        "valid": True,
        "employee_id": employee.id,
        "employee_email": employee.email,
        "organization_name": employee.organization.name,
        "expires_at": email_token.expires_at.isoformat(),
        "has_responded_today": today is not None,
        "response": ResponseSchema().dump(today) if today else None,
    }, 200


@checkin_bp.route("/checkin/<token>", methods=["POST"])
def submit_checkin(token: str) -> tuple[dict, int]:
    """Submit today's response.

    Expects JSON with ``status`` (``green``, ``amber`` or ``red``),
    optional ``comment`` and ``is_anonymous``. A second submission on the
    same day replaces the first and reports ``updated: true``.
    """
    data = SubmitResponseSchema().load(request.get_json() or {})
    result = token_service.submit_with_token(
        token,
        data["status"],
        comment=data["comment"],
        is_anonymous=data["is_anonymous"],
        allow_reuse=current_app.config["ALLOW_TOKEN_REUSE"],
    )
    status_code = 200 if result["updated"] else 201
    return {"success": True, **result}, status_code
