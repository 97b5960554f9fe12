"""Check-in link tokens.

A token is a random 32-character alphanumeric string issued per employee
per daily email. It is valid for ``TOKEN_TTL_HOURS`` (48 by default) and
is consumed by the first successful submission. Consumption is a
conditional ``UPDATE ... WHERE used = false`` so two concurrent
submissions cannot both pass the used check.
"""
from __future__ import annotations

import logging
import secrets
import string
from datetime import datetime, timedelta
from typing import Optional, Union

from .. import db
from ..errors import TokenError
from ..models import EmailToken, Employee, Status
from ..util.clock import utcnow
from .response_service import submit_response

logger = logging.getLogger(__name__)

TOKEN_ALPHABET = string.ascii_letters + string.digits
TOKEN_LENGTH = 32
DEFAULT_TTL_HOURS = 48


def generate_token() -> str:
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(TOKEN_LENGTH))


def issue_token(
    employee: Employee, now: Optional[datetime] = None, ttl_hours: int = DEFAULT_TTL_HOURS
) -> EmailToken:
    """Create and commit a fresh token for ``employee``."""
    now = now or utcnow()
    email_token = EmailToken(
        token=generate_token(),
        employee_id=employee.id,
        expires_at=now + timedelta(hours=ttl_hours),
        used=False,
        created_at=now,
    )
    db.session.add(email_token)
    db.session.commit()
    return email_token


def validate_token(
    token: str, now: Optional[datetime] = None, allow_reuse: bool = False
) -> EmailToken:
    """Return the usable ``EmailToken`` for ``token`` or raise ``TokenError``.

    Checks run in order: unknown token, already used (skipped when
    ``allow_reuse``), expired, employee missing or inactive.
    """
    now = now or utcnow()
    email_token = EmailToken.query.filter_by(token=token).first() if token else None
    if email_token is None:
        raise TokenError("invalid")
    if email_token.used and not allow_reuse:
        raise TokenError("used")
    if email_token.expires_at < now:
        raise TokenError("expired")
    employee = email_token.employee
    if employee is None or not employee.is_active:
        raise TokenError("employee_inactive")
    return email_token


def consume_token(email_token: EmailToken) -> None:
    """Mark ``email_token`` used without committing.

    Raises ``TokenError("used")`` if another transaction consumed it
    first.
    """
    claimed = (
        EmailToken.query.filter_by(id=email_token.id, used=False)
        .update({EmailToken.used: True}, synchronize_session=False)
    )
    if not claimed:
        raise TokenError("used")
    email_token.used = True


def submit_with_token(
    token: str,
    status: Union[Status, str],
    comment: Optional[str] = None,
    is_anonymous: bool = False,
    now: Optional[datetime] = None,
    allow_reuse: bool = False,
) -> dict:
    """Validate ``token``, record the response and consume the token.

    The response write and the token consumption commit together.
    """
    now = now or utcnow()
    email_token = validate_token(token, now=now, allow_reuse=allow_reuse)
    token_id = email_token.id
    result = submit_response(
        email_token.employee, status, comment=comment, is_anonymous=is_anonymous, now=now, commit=False
    )
    if not allow_reuse:
        try:
            consume_token(db.session.get(EmailToken, token_id))
        except TokenError:
            db.session.rollback()
            raise
    db.session.commit()
    return result
