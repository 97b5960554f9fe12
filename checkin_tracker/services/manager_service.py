"""Manager registration and login.

Passwords are hashed with werkzeug on registration and checked against
the hash on login; no code path stores or compares plaintext.
"""
from __future__ import annotations

import logging

from .. import db
from ..errors import AuthenticationError, ConflictError, ValidationError
from ..models import Manager
from ..util.sanitization import is_valid_email, normalise_email, strip_tags

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


def register_manager(name: str, email: str, password: str) -> Manager:
    """Create a manager account.

    Raises ``ValidationError`` for a missing name, a malformed email or a
    short password, and ``ConflictError`` if the email is taken.
    """
    name = strip_tags(name)
    email = normalise_email(email)
    errors = {}
    if not name:
        errors["name"] = "Name is required."
    if not email:
        errors["email"] = "Email is required."
    elif not is_valid_email(email):
        errors["email"] = "Invalid email format."
    if len(password or "") < MIN_PASSWORD_LENGTH:
        errors["password"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
    if errors:
        raise ValidationError("Invalid registration details.", errors)

    if Manager.query.filter_by(email=email).first():
        raise ConflictError("Email already registered.")

    manager = Manager(name=name, email=email)
    manager.set_password(password)
    db.session.add(manager)
    db.session.commit()
    logger.info("Registered manager %s", manager.id)
    return manager


def authenticate_manager(email: str, password: str) -> Manager:
    """Return the manager matching the credentials or raise ``AuthenticationError``."""
    manager = Manager.query.filter_by(email=normalise_email(email)).first()
    if manager is None or not manager.check_password(password or ""):
        raise AuthenticationError()
    return manager
