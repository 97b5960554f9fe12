"""Shared pytest fixtures.

Each test gets a fresh app bound to an in-memory SQLite database and an
email client whose transport records outgoing requests instead of
calling a provider.
"""
from __future__ import annotations

import httpx
import pytest

from checkin_tracker import create_app, db as _db
from checkin_tracker.auth import AuthContext
from checkin_tracker.models import Employee, Group, Manager, Organization

MANAGER_PASSWORD = "correct-horse-battery"


@pytest.fixture
def sent_emails() -> list:
    return []


@pytest.fixture
def email_transport(sent_emails):
    def handler(request: httpx.Request) -> httpx.Response:
        sent_emails.append(request)
        return httpx.Response(200, json={"id": f"email_{len(sent_emails)}"})

    return httpx.MockTransport(handler)


@pytest.fixture
def app(email_transport):
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "JWT_SECRET_KEY": "test-secret-key-long-enough-for-hmac-sha256",
        "CRON_SECRET": "cron-secret",
        "APP_URL": "https://checkin.example.com",
        "RESEND_API_KEY": "re_test_key",
        "SENDGRID_API_KEY": None,
        "ALLOW_TOKEN_REUSE": False,
        "EMAIL_HTTP_CLIENT": httpx.Client(transport=email_transport),
    })
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    return _db


@pytest.fixture
def manager(db) -> Manager:
    manager = Manager(name="Morgan", email="morgan@example.com")
    manager.set_password(MANAGER_PASSWORD)
    db.session.add(manager)
    db.session.commit()
    return manager


@pytest.fixture
def organization(db, manager) -> Organization:
    organization = Organization(name="Acme", manager_id=manager.id)
    db.session.add(organization)
    db.session.commit()
    return organization


@pytest.fixture
def auth(manager, organization) -> AuthContext:
    return AuthContext(manager_id=manager.id, organization_ids=frozenset({organization.id}))


@pytest.fixture
def group(db, organization) -> Group:
    group = Group(name="Engineering", organization_id=organization.id)
    db.session.add(group)
    db.session.commit()
    return group


@pytest.fixture
def employee(db, organization, group) -> Employee:
    employee = Employee(email="ada@example.com", organization_id=organization.id, group_id=group.id, is_active=True)
    db.session.add(employee)
    db.session.commit()
    return employee


@pytest.fixture
def auth_headers(client, manager) -> dict:
    response = client.post("/api/login", json={"email": manager.email, "password": MANAGER_PASSWORD})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.get_json()['access_token']}"}
