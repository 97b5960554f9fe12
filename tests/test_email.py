import httpx
import pytest

from checkin_tracker.errors import EmailDeliveryError
from checkin_tracker.models import EmailToken, Employee
from checkin_tracker.services.email_service import (
    EmailSender,
    checkin_url,
    render_checkin_email,
    send_daily_checkins,
)


def _sender(handler, **keys):
    return EmailSender(httpx.Client(transport=httpx.MockTransport(handler)), "team@example.com", **keys)


def test_resend_payload():
    captured = []

    def handler(request):
        captured.append(request)
        return httpx.Response(200, json={"id": "abc"})

    result = _sender(handler, resend_api_key="re_key").send("a@example.com", "Hi", "<p>x</p>")
    assert result == {"id": "abc"}
    request = captured[0]
    assert str(request.url) == "https://api.resend.com/emails"
    assert request.headers["Authorization"] == "Bearer re_key"
    assert b'"to":["a@example.com"]' in request.content.replace(b" ", b"")


def test_sendgrid_used_without_resend_key():
    captured = []

    def handler(request):
        captured.append(request)
        return httpx.Response(202)

    sender = _sender(handler, sendgrid_api_key="sg_key")
    assert sender.provider == "sendgrid"
    assert sender.send("a@example.com", "Hi", "<p>x</p>") == {"success": True}
    assert captured[0].url.host == "api.sendgrid.com"


def test_no_provider_only_logs():
    def handler(request):
        raise AssertionError("no HTTP call expected")

    assert _sender(handler).send("a@example.com", "Hi", "<p>x</p>") == {"success": True, "dev": True}


def test_provider_error_raises():
    sender = _sender(lambda request: httpx.Response(422, text="bad sender"), resend_api_key="re_key")
    with pytest.raises(EmailDeliveryError, match="bad sender"):
        sender.send("a@example.com", "Hi", "<p>x</p>")


def test_rendered_email_escapes_and_links():
    url = checkin_url("https://app.example.com/", "tok123")
    assert url == "https://app.example.com/employee/respond?token=tok123"
    body = render_checkin_email(url, "Tom & Jerry <Ltd>")
    assert url in body
    assert "Tom &amp; Jerry &lt;Ltd&gt;" in body
    assert "valid for 48 hours" in body


def test_daily_dispatch_sends_one_email_per_active_employee(app, db, organization, employee, sent_emails):
    db.session.add(Employee(email="gone@example.com", organization_id=organization.id, is_active=False))
    db.session.commit()

    result = send_daily_checkins(app.extensions["email_sender"], "https://checkin.example.com")

    assert result == {"success": True, "total_emails_sent": 1, "errors": []}
    assert len(sent_emails) == 1
    token = EmailToken.query.one()
    assert token.employee_id == employee.id
    assert f"token={token.token}".encode() in sent_emails[0].content


def test_daily_dispatch_collects_failures(db, organization, employee):
    db.session.add(Employee(email="bounce@example.com", organization_id=organization.id, is_active=True))
    db.session.commit()

    def handler(request):
        if b"bounce@example.com" in request.content:
            return httpx.Response(500, text="mailbox unavailable")
        return httpx.Response(200, json={"id": "ok"})

    result = send_daily_checkins(_sender(handler, resend_api_key="re_key"), "https://checkin.example.com")
    assert result["total_emails_sent"] == 1
    assert len(result["errors"]) == 1
    assert result["errors"][0].startswith("Failed to send to bounce@example.com")


def test_daily_dispatch_survives_non_json_reply(db, organization, employee):
    db.session.add(Employee(email="gateway@example.com", organization_id=organization.id, is_active=True))
    db.session.commit()

    def handler(request):
        if b"gateway@example.com" in request.content:
            return httpx.Response(200, text="<html>gateway ok</html>")
        return httpx.Response(200, json={"id": "ok"})

    result = send_daily_checkins(_sender(handler, resend_api_key="re_key"), "https://checkin.example.com")
    assert result["total_emails_sent"] == 1
    assert len(result["errors"]) == 1
    assert result["errors"][0].startswith("Failed to send to gateway@example.com")


def test_non_json_resend_reply_raises():
    sender = _sender(lambda request: httpx.Response(200, text="gateway ok"), resend_api_key="re_key")
    with pytest.raises(EmailDeliveryError, match="gateway ok"):
        sender.send("a@example.com", "Hi", "<p>x</p>")


def test_daily_dispatch_survives_token_failure(app, db, organization, employee, sent_emails, monkeypatch):
    from sqlalchemy.exc import IntegrityError

    from checkin_tracker.services import email_service

    db.session.add(Employee(email="clash@example.com", organization_id=organization.id, is_active=True))
    db.session.commit()
    real_issue_token = email_service.issue_token

    def issue_token(employee, **kwargs):
        if employee.email == "clash@example.com":
            raise IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: email_tokens.token"))
        return real_issue_token(employee, **kwargs)

    monkeypatch.setattr(email_service, "issue_token", issue_token)
    result = send_daily_checkins(app.extensions["email_sender"], "https://checkin.example.com")

    assert result["total_emails_sent"] == 1
    assert len(sent_emails) == 1
    assert len(result["errors"]) == 1
    assert result["errors"][0].startswith("Failed to send to clash@example.com")
    assert EmailToken.query.one().employee_id == employee.id


def test_factory_closes_the_client_it_builds(monkeypatch):
    from checkin_tracker import create_app

    registered = []
    monkeypatch.setattr("atexit.register", registered.append)
    app = create_app({"SQLALCHEMY_DATABASE_URI": "sqlite://"})
    assert registered == [app.extensions["email_sender"].close]

    registered.clear()
    create_app({"SQLALCHEMY_DATABASE_URI": "sqlite://", "EMAIL_HTTP_CLIENT": httpx.Client()})
    assert registered == []


def test_cron_endpoint_requires_secret(client, employee, sent_emails):
    assert client.post("/api/cron/send-daily-emails").status_code == 401
    response = client.post(
        "/api/cron/send-daily-emails", headers={"Authorization": "Bearer wrong"}
    )
    assert response.status_code == 401

    response = client.post(
        "/api/cron/send-daily-emails", headers={"Authorization": "Bearer cron-secret"}
    )
    assert response.status_code == 200
    assert response.get_json()["total_emails_sent"] == 1
    assert len(sent_emails) == 1


def test_cron_endpoint_disabled_without_secret(app, client):
    app.config["CRON_SECRET"] = ""
    response = client.post("/api/cron/send-daily-emails", headers={"Authorization": "Bearer "})
    assert response.status_code == 401
