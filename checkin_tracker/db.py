"""Database setup.

Exposes the shared ``db`` extension object used by the models and the
service layer. The application factory binds it to a Flask app; tests
bind it to an in-memory SQLite database.

Import ``db`` from ``checkin_tracker`` rather than from this module
directly.
"""
from __future__ import annotations

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
