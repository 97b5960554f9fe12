from checkin_tracker.models import Manager, Organization


def test_register_hashes_password(client, db):
    response = client.post(
        "/api/managers/register",
        json={"name": "Robin", "email": " Robin@Example.com ", "password": "longenough1"},
    )
    assert response.status_code == 201
    body = response.get_json()
    assert body["email"] == "robin@example.com"
    assert "password_hash" not in body

    manager = Manager.query.filter_by(email="robin@example.com").one()
    assert manager.password_hash != "longenough1"
    assert manager.check_password("longenough1")


def test_register_rejects_duplicate_email(client, manager):
    response = client.post(
        "/api/managers/register",
        json={"name": "Other", "email": manager.email.upper(), "password": "longenough1"},
    )
    assert response.status_code == 409
    assert response.get_json()["error"]["code"] == "CONFLICT"


def test_register_validates_input(client):
    response = client.post(
        "/api/managers/register", json={"name": "", "email": "not-an-email", "password": "short"}
    )
    assert response.status_code == 400
    fields = response.get_json()["error"]["fields"]
    assert set(fields) == {"name", "email", "password"}


def test_register_requires_fields(client):
    response = client.post("/api/managers/register", json={})
    assert response.status_code == 400
    assert response.get_json()["error"]["code"] == "VALIDATION_ERROR"


def test_login_with_wrong_password(client, manager):
    response = client.post("/api/login", json={"email": manager.email, "password": "nope-nope"})
    assert response.status_code == 401


def test_me_lists_owned_organizations(client, auth_headers, organization):
    response = client.get("/api/managers/me", headers=auth_headers)
    assert response.status_code == 200
    assert response.get_json()["organization_ids"] == [organization.id]


def test_manager_endpoints_require_token(client, organization):
    response = client.get(f"/api/organizations/{organization.id}/analytics")
    assert response.status_code == 401


def test_cannot_read_another_managers_organization(client, db, auth_headers):
    other = Manager(name="Other", email="other@example.com")
    other.set_password("longenough1")
    db.session.add(other)
    db.session.flush()
    foreign = Organization(name="Elsewhere", manager_id=other.id)
    db.session.add(foreign)
    db.session.commit()

    for url in (
        f"/api/organizations/{foreign.id}",
        f"/api/organizations/{foreign.id}/analytics",
        f"/api/organizations/{foreign.id}/employees",
    ):
        response = client.get(url, headers=auth_headers)
        assert response.status_code == 403, url
