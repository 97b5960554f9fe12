"""Scheduled job trigger.

An external scheduler calls ``POST /api/cron/send-daily-emails`` once a
day with ``Authorization: Bearer <CRON_SECRET>``.
"""
from __future__ import annotations

import hmac

from flask import Blueprint, current_app, request

from ..errors import AuthenticationError
from ..services.email_service import send_daily_checkins

cron_bp = Blueprint("cron", __name__)


def _authorised() -> bool:
    secret = current_app.config.get("CRON_SECRET")
    if not secret:
        return False
    supplied = request.headers.get("Authorization", "").encode()
    return hmac.compare_digest(supplied, f"Bearer {secret}".encode())


@cron_bp.route("/cron/send-daily-emails", methods=["POST"])
def send_daily_emails() -> tuple[dict, int]:
    """Email every active employee a fresh check-in link."""
    if not _authorised():
        raise AuthenticationError("Unauthorized")
    result = send_daily_checkins(
        current_app.extensions["email_sender"],
        current_app.config["APP_URL"],
        ttl_hours=current_app.config["TOKEN_TTL_HOURS"],
    )
    return result, 200
