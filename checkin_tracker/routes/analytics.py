"""Routes for wellbeing analytics.

These endpoints are read-only. The heavy lifting is delegated to
``checkin_tracker.services.analytics_service``; this module only parses
query parameters and serialises the results.
"""
from __future__ import annotations

from flask import Blueprint, current_app
from flask_jwt_extended import jwt_required

from ..auth import current_auth
from ..schemas import OrganizationReportSchema, GroupReportSchema, ResponseSchema
from ..services import analytics_service, response_service
from ..util.params import int_arg, date_arg, bool_arg

analytics_bp = Blueprint("analytics", __name__)


def _days() -> int:
    return int_arg("days", current_app.config["ANALYTICS_DEFAULT_DAYS"])


@analytics_bp.route("/organizations/<int:organization_id>/analytics", methods=["GET"])
@jwt_required()
def organization_analytics(organization_id: int) -> tuple[dict, int]:
    """Overall status, status counts, today's response rate and daily trend.

    ``days`` (default 30) sets the look-back window, today included.
    """
    report = analytics_service.organization_report(current_auth(), organization_id, _days())
    return OrganizationReportSchema().dump(report), 200


@analytics_bp.route("/organizations/<int:organization_id>/analytics/groups", methods=["GET"])
@jwt_required()
def group_analytics(organization_id: int) -> tuple[list[dict], int]:
    """Per-group summaries, plus a "No Group" entry for ungrouped employees."""
    report = analytics_service.group_report(current_auth(), organization_id, _days())
    return GroupReportSchema(many=True).dump(report), 200


@analytics_bp.route("/organizations/<int:organization_id>/responses", methods=["GET"])
@jwt_required()
def organization_responses(organization_id: int) -> tuple[list[dict], int]:
    """Responses in an inclusive ``from``/``to`` date range (both optional)."""
    responses = response_service.organization_responses(
        current_auth(), organization_id, date_arg("from"), date_arg("to")
    )
    return ResponseSchema(many=True).dump(responses), 200


@analytics_bp.route("/organizations/<int:organization_id>/responses/recent", methods=["GET"])
@jwt_required()
def recent_responses(organization_id: int) -> tuple[list[dict], int]:
    """Latest responses with employee and group details.

    ``include_anonymous=false`` masks anonymous comments.
    """
    responses = response_service.recent_responses(
        current_auth(),
        organization_id,
        limit=int_arg("limit", 50),
        include_anonymous=bool_arg("include_anonymous", True),
    )
    return responses, 200
