"""Daily check-in email delivery.

:class:`EmailSender` wraps an injected ``httpx.Client`` and talks to
Resend when ``RESEND_API_KEY`` is configured, otherwise to SendGrid when
``SENDGRID_API_KEY`` is configured. With neither key it only logs the
message, which is the development setup.

The application factory builds one sender from config and stores it in
``app.extensions["email_sender"]``; nothing here is a module global.
"""
from __future__ import annotations

import html
import logging
from datetime import datetime
from typing import Optional
from urllib.parse import urlencode

import httpx
from sqlalchemy.exc import SQLAlchemyError

from .. import db
from ..errors import EmailDeliveryError
from ..models import Employee, Organization
from ..util.clock import utcnow
from .token_service import DEFAULT_TTL_HOURS, issue_token

logger = logging.getLogger(__name__)

RESEND_URL = "https://api.resend.com/emails"
SENDGRID_URL = "https://api.sendgrid.com/v3/mail/send"
SUBJECT = "R U OK? - Daily Check-in"


class EmailSender:
    """Sends HTML email through the configured provider."""

    def __init__(
        self,
        client: httpx.Client,
        from_email: str,
        resend_api_key: Optional[str] = None,
        sendgrid_api_key: Optional[str] = None,
    ):
        self.client = client
        self.from_email = from_email
        self.resend_api_key = resend_api_key
        self.sendgrid_api_key = sendgrid_api_key

    @classmethod
    def from_config(cls, config, client: Optional[httpx.Client] = None) -> "EmailSender":
        if client is None:
            client = httpx.Client(timeout=config.get("EMAIL_TIMEOUT_SECONDS", 10))
        return cls(
            client=client,
            from_email=config.get("EMAIL_FROM") or "noreply@example.com",
            resend_api_key=config.get("RESEND_API_KEY"),
            sendgrid_api_key=config.get("SENDGRID_API_KEY"),
        )

    @property
    def provider(self) -> str:
        if self.resend_api_key:
            return "resend"
        if self.sendgrid_api_key:
            return "sendgrid"
        return "log"

    def send(self, to: str, subject: str, html_body: str) -> dict:
        """Deliver one message. Raises ``EmailDeliveryError`` on rejection."""
        if self.provider == "resend":
            response = self._post(
                RESEND_URL,
                self.resend_api_key,
                {"from": self.from_email, "to": [to], "subject": subject, "html": html_body},
            )
            try:
                return response.json()
            except ValueError as exc:
                raise EmailDeliveryError(f"Unexpected reply from email provider: {response.text}") from exc
        if self.provider == "sendgrid":
            self._post(
                SENDGRID_URL,
                self.sendgrid_api_key,
                {
                    "personalizations": [{"to": [{"email": to}]}],
                    "from": {"email": self.from_email},
                    "subject": subject,
                    "content": [{"type": "text/html", "value": html_body}],
                },
            )
            return {"success": True}

        logger.info("Email would be sent to %s: %s", to, subject)
        logger.debug("Email HTML: %s", html_body)
        return {"success": True, "dev": True}

    def _post(self, url: str, api_key: str, payload: dict) -> httpx.Response:
        try:
            response = self.client.post(
                url, json=payload, headers={"Authorization": f"Bearer {api_key}"}
            )
        except httpx.HTTPError as exc:
            raise EmailDeliveryError(f"Failed to send email: {exc}") from exc
        if response.is_error:
            raise EmailDeliveryError(f"Failed to send email: {response.text}")
        return response

    def close(self) -> None:
        self.client.close()


def checkin_url(app_url: str, token: str) -> str:
    return f"{app_url.rstrip('/')}/employee/respond?{urlencode({'token': token})}"


def render_checkin_email(response_url: str, organization_name: str, ttl_hours: int = DEFAULT_TTL_HOURS) -> str:
    """HTML body of the daily check-in email."""
    url = html.escape(response_url, quote=True)
    org = html.escape(organization_name)
    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{SUBJECT}</title>
</head>
<body style="margin: 0; padding: 0; font-family: Arial, sans-serif; background-color: #f3f4f6;">
  <table width="100%" cellpadding="0" cellspacing="0" style="padding: 40px 20px;">
    <tr>
      <td align="center">
        <table width="600" cellpadding="0" cellspacing="0" style="background-color: #ffffff; border-radius: 12px;">
          <tr>
            <td style="background-color: #2563eb; padding: 40px; text-align: center;">
              <h1 style="margin: 0; color: #ffffff; font-size: 32px;">R U OK?</h1>
              <p style="margin: 10px 0 0; color: #dbeafe; font-size: 16px;">Daily Wellbeing Check-in</p>
            </td>
          </tr>
          <tr>
            <td style="padding: 40px; color: #374151; font-size: 16px; line-height: 1.6;">
              <p>Hi there,</p>
              <p>It's time for your daily check-in. How was your day today?</p>
              <p style="text-align: center; margin: 30px 0;">
                <a href="{url}" style="background-color: #2563eb; color: #ffffff; text-decoration: none; padding: 16px 40px; border-radius: 8px; font-weight: 600;">Submit Your Response</a>
              </p>
              <p style="color: #6b7280; font-size: 14px;">Your response will help {org} create a better work environment for everyone.</p>
            </td>
          </tr>
          <tr>
            <td style="background-color: #f9fafb; padding: 30px; text-align: center; color: #6b7280; font-size: 14px;">
              <p style="margin: 0 0 10px;">This link is valid for {ttl_hours} hours</p>
              <p style="margin: 0; font-size: 12px;">{org} - Wellbeing Tracking</p>
            </td>
          </tr>
        </table>
        <p style="color: #6b7280; font-size: 12px;">If the button doesn't work, copy and paste this link into your browser:<br>
          <a href="{url}" style="color: #2563eb; word-break: break-all;">{url}</a></p>
      </td>
    </tr>
  </table>
</body>
</html>
"""


def send_daily_checkins(
    sender: EmailSender,
    app_url: str,
    now: Optional[datetime] = None,
    ttl_hours: int = DEFAULT_TTL_HOURS,
) -> dict:
    """Email a fresh check-in link to every active employee.

    A failure for one employee is recorded in ``errors`` and the run
    carries on with the next one.
    """
    now = now or utcnow()
    sent = 0
    errors = []
    organizations = Organization.query.order_by(Organization.id.asc()).all()
    for organization in organizations:
        organization_name = organization.name
        employees = (
            Employee.query.filter_by(organization_id=organization.id, is_active=True)
            .order_by(Employee.id.asc())
            .all()
        )
        for employee in employees:
            email = employee.email
            try:
                email_token = issue_token(employee, now=now, ttl_hours=ttl_hours)
            except SQLAlchemyError as exc:
                db.session.rollback()
                logger.exception("Could not issue check-in token for %s", email)
                errors.append(f"Failed to send to {email}: {exc}")
                continue
            try:
                body = render_checkin_email(checkin_url(app_url, email_token.token), organization_name, ttl_hours)
                sender.send(email, SUBJECT, body)
                sent += 1
            except EmailDeliveryError as exc:
                logger.warning("Check-in email to %s failed: %s", email, exc)
                errors.append(f"Failed to send to {email}: {exc}")
    logger.info("Daily check-in dispatch sent %d emails with %d errors", sent, len(errors))
    return {"success": True, "total_emails_sent": sent, "errors": errors}
