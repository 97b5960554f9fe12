"""
Application factory for the Check-in Tracker.

This module provides a function to create and configure the Flask
application. All extensions (SQLAlchemy, Migrate, JWT) and the email
sender are initialised here, and the blueprints for each part of the
API are registered inside the factory so that tests can build isolated
apps.

Environment variables control the database connection, secrets and the
email provider. In production set ``DATABASE_URL``, ``JWT_SECRET_KEY``,
``CRON_SECRET``, ``APP_URL`` and one of ``RESEND_API_KEY`` or
``SENDGRID_API_KEY``. Without a database URL, SQLite is used.
"""

from __future__ import annotations

import atexit
import logging
import os
from datetime import timedelta

from flask import Flask
from flask_migrate import Migrate
from flask_jwt_extended import JWTManager

# Extensions are created unbound and attached in create_app(), which
# avoids circular imports between the models and the factory.
from .db import db
migrate = Migrate()
jwt = JWTManager()


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def create_app(test_config: dict | None = None) -> Flask:
    """Create and configure a Flask application.

    Parameters
    ----------
    test_config: dict | None, optional
        Configuration overrides used when running tests. An
        ``EMAIL_HTTP_CLIENT`` entry replaces the ``httpx.Client`` used
        for outbound email.

    Returns
    -------
    Flask
        A configured Flask application instance.
    """
    app = Flask(__name__)

    app.config.update(
        SQLALCHEMY_DATABASE_URI=os.environ.get("DATABASE_URL", "sqlite:///checkin.db"),
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
        JWT_SECRET_KEY=os.environ.get("JWT_SECRET_KEY", "please-change-this-secret-key"),
        JWT_ACCESS_TOKEN_EXPIRES=timedelta(days=1),
        CRON_SECRET=os.environ.get("CRON_SECRET", ""),
        APP_URL=os.environ.get("APP_URL", "http://localhost:3000"),
        EMAIL_FROM=os.environ.get("EMAIL_FROM", "noreply@example.com"),
        RESEND_API_KEY=os.environ.get("RESEND_API_KEY"),
        SENDGRID_API_KEY=os.environ.get("SENDGRID_API_KEY"),
        EMAIL_TIMEOUT_SECONDS=float(os.environ.get("EMAIL_TIMEOUT_SECONDS", "10")),
        TOKEN_TTL_HOURS=int(os.environ.get("TOKEN_TTL_HOURS", "48")),
        ALLOW_TOKEN_REUSE=_env_flag("ALLOW_TOKEN_REUSE"),
        ANALYTICS_DEFAULT_DAYS=int(os.environ.get("ANALYTICS_DEFAULT_DAYS", "30")),
        LOG_LEVEL=os.environ.get("LOG_LEVEL", "INFO"),
    )

    if test_config:
        app.config.update(test_config)

    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger(__name__).setLevel(app.config["LOG_LEVEL"])

    # Initialise extensions with the app
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    from .services.email_service import EmailSender
    injected_client = app.config.get("EMAIL_HTTP_CLIENT")
    email_sender = EmailSender.from_config(app.config, client=injected_client)
    app.extensions["email_sender"] = email_sender
    # The factory owns the client it built; injected clients belong to the caller.
    if injected_client is None:
        atexit.register(email_sender.close)

    # Register custom error handlers
    from .errors import register_error_handlers
    register_error_handlers(app)

    # Register blueprints. Importing here avoids circular imports.
    from .routes.auth import auth_bp
    from .routes.organizations import organizations_bp
    from .routes.employees import employees_bp
    from .routes.groups import groups_bp
    from .routes.analytics import analytics_bp
    from .routes.checkin import checkin_bp
    from .routes.cron import cron_bp

    app.register_blueprint(auth_bp, url_prefix="/api")
    app.register_blueprint(organizations_bp, url_prefix="/api")
    app.register_blueprint(employees_bp, url_prefix="/api")
    app.register_blueprint(groups_bp, url_prefix="/api")
    app.register_blueprint(analytics_bp, url_prefix="/api")
    app.register_blueprint(checkin_bp, url_prefix="/api")
    app.register_blueprint(cron_bp, url_prefix="/api")

    @app.route("/api/health")
    def health_check() -> dict[str, str]:
        """Return a simple health check response.

        Deployment platforms use this endpoint to verify that the
        application has started correctly.
        """
        return {"status": "ok"}

    return app
