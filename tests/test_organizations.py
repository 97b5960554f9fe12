from checkin_tracker.models import Employee


def test_create_organization_imports_valid_emails(client, auth_headers):
    response = client.post(
        "/api/organizations",
        json={
            "name": "Initech",
            "employee_emails": ["Peter@initech.com", "bad-email", "peter@initech.com ", "milton@initech.com"],
        },
        headers=auth_headers,
    )
    assert response.status_code == 201
    body = response.get_json()
    assert body["employees_added"] == 2

    organization_id = body["organization"]["id"]
    emails = sorted(e.email for e in Employee.query.filter_by(organization_id=organization_id))
    assert emails == ["milton@initech.com", "peter@initech.com"]


def test_create_organization_requires_name(client, auth_headers):
    response = client.post("/api/organizations", json={"name": ""}, headers=auth_headers)
    assert response.status_code == 400


def test_details_and_rename(client, auth_headers, organization, employee, group):
    response = client.get(f"/api/organizations/{organization.id}", headers=auth_headers)
    assert response.status_code == 200
    body = response.get_json()
    assert body["employee_count"] == 1
    assert body["group_count"] == 1

    response = client.put(
        f"/api/organizations/{organization.id}", json={"name": "<b>Acme</b> Corp"}, headers=auth_headers
    )
    assert response.status_code == 200
    assert response.get_json()["name"] == "Acme Corp"


def test_list_organizations(client, auth_headers, organization):
    response = client.get("/api/organizations", headers=auth_headers)
    assert [o["id"] for o in response.get_json()] == [organization.id]
