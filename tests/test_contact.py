import pytest
import requests

from portfolio.main import create_app
from portfolio.services import notifications
from portfolio.services.notifications import build_contact_email, notify_new_message

JANE = {
    "name": "Jane",
    "email": "jane@x.com",
    "subject": "Hi",
    "message": "Hello there, interested in working together.",
}


class FakeSMTP:
    """Stands in for smtplib.SMTP and records what was sent."""

    sent = []

    def __init__(self, host, port, timeout=None):
        self.host, self.port = host, port
        self.logged_in = None

    def starttls(self):
        pass

    def login(self, user, password):
        self.logged_in = (user, password)

    def send_message(self, email):
        FakeSMTP.sent.append(email)

    def quit(self):
        pass


class BrokenSMTP(FakeSMTP):
    def __init__(self, host, port, timeout=None):
        raise OSError("connection refused")


@pytest.fixture
def notifying_client(settings, storage):
    from fastapi.testclient import TestClient

    configured = settings.model_copy(update={
        "email_host": "smtp.example.com",
        "email_user": "site@example.com",
        "email_password": "app-password",
        "owner_email": "owner@example.com",
        "webhook_url": "https://hooks.example.com/contact",
    })
    with TestClient(create_app(configured, storage)) as c:
        yield c


def test_contact_message_is_saved(client, admin_client):
    res = client.post("/api/contact", json=JANE)

    assert res.status_code == 201
    assert res.json() == {"success": True, "message": "Message sent successfully"}

    messages = admin_client.get("/api/admin/messages").json()
    assert len(messages) == 1
    saved = messages[0]
    assert {k: saved[k] for k in JANE} == JANE
    assert saved["id"] and saved["createdAt"]


def test_contact_strips_whitespace(client, storage):
    client.post("/api/contact", json={**JANE, "name": "  Jane  "})

    assert storage.list_messages()[0].name == "Jane"


@pytest.mark.parametrize("field,value", [
    ("name", "J"),
    ("email", "not-an-email"),
    ("subject", ""),
    ("message", "too short"),
])
def test_invalid_contact_is_rejected(client, storage, field, value):
    res = client.post("/api/contact", json={**JANE, field: value})

    assert res.status_code == 400
    body = res.json()
    assert body["success"] is False
    assert body["message"] == "Invalid form data"
    assert [e["field"] for e in body["errors"]] == [field]
    assert storage.list_messages() == []


def test_missing_fields_are_all_reported(client):
    res = client.post("/api/contact", json={})

    assert res.status_code == 400
    assert {e["field"] for e in res.json()["errors"]} == {"name", "email", "subject", "message"}


def test_notifications_are_sent(notifying_client, storage, monkeypatch):
    posted = []

    class Response:
        status_code = 200

        def raise_for_status(self):
            pass

    def fake_post(url, json=None, timeout=None):
        posted.append((url, json, timeout))
        return Response()

    FakeSMTP.sent = []
    monkeypatch.setattr(notifications.smtplib, "SMTP", FakeSMTP)
    monkeypatch.setattr(notifications.requests, "post", fake_post)

    res = notifying_client.post("/api/contact", json=JANE)

    assert res.status_code == 201
    assert len(FakeSMTP.sent) == 1
    email = FakeSMTP.sent[0]
    assert email["To"] == "owner@example.com"
    assert email["Reply-To"] == "jane@x.com"
    assert email["Subject"] == "New Contact Form Message: Hi"

    url, payload, timeout = posted[0]
    assert url == "https://hooks.example.com/contact"
    assert payload["event"] == "contact.created"
    assert payload["message"]["email"] == "jane@x.com"
    assert payload["message"]["id"] == storage.list_messages()[0].id
    assert timeout == 10


def test_failing_notifications_do_not_lose_the_message(notifying_client, storage, monkeypatch):
    def failing_post(*args, **kwargs):
        raise requests.ConnectionError("webhook down")

    monkeypatch.setattr(notifications.smtplib, "SMTP", BrokenSMTP)
    monkeypatch.setattr(notifications.requests, "post", failing_post)

    res = notifying_client.post("/api/contact", json=JANE)

    assert res.status_code == 201
    assert res.json()["success"] is True
    assert [m.name for m in storage.list_messages()] == ["Jane"]


def test_webhook_failure_still_sends_email(settings, storage, monkeypatch):
    from portfolio.schemas import MessageCreate

    configured = settings.model_copy(update={
        "email_host": "smtp.example.com",
        "email_user": "site@example.com",
        "email_password": "app-password",
        "owner_email": "owner@example.com",
        "webhook_url": "https://hooks.example.com/contact",
    })
    message = storage.create_message(MessageCreate(**JANE))

    def failing_post(*args, **kwargs):
        raise requests.Timeout("slow")

    FakeSMTP.sent = []
    monkeypatch.setattr(notifications.smtplib, "SMTP", FakeSMTP)
    monkeypatch.setattr(notifications.requests, "post", failing_post)

    notify_new_message(message, configured)

    assert len(FakeSMTP.sent) == 1


def test_unconfigured_notifications_only_log(settings, storage, monkeypatch, caplog):
    from portfolio.schemas import MessageCreate

    def unexpected(*args, **kwargs):
        raise AssertionError("should not be called")

    monkeypatch.setattr(notifications.smtplib, "SMTP", unexpected)
    monkeypatch.setattr(notifications.requests, "post", unexpected)
    message = storage.create_message(MessageCreate(**JANE))

    with caplog.at_level("INFO", logger="portfolio.services.notifications"):
        notify_new_message(message, settings)

    assert "not configured" in caplog.text


def test_email_body_escapes_html(settings, storage):
    from portfolio.schemas import MessageCreate

    message = storage.create_message(MessageCreate(**{**JANE, "message": "<script>alert(1)</script> hi there"}))
    email = build_contact_email(message, settings.model_copy(update={"email_user": "site@example.com", "owner_email": "owner@example.com"}))

    html_part = email.get_body(preferencelist=("html",)).get_content()
    assert "<script>" not in html_part
    assert "&lt;script&gt;" in html_part


@pytest.mark.parametrize("field,value", [
    ("subject", "Hi\nthere"),
    ("subject", "Hi\r\nBcc: someone@example.com"),
    ("name", "Jane\rDoe"),
])
def test_line_breaks_in_header_fields_are_rejected(client, storage, field, value):
    res = client.post("/api/contact", json={**JANE, field: value})

    assert res.status_code == 400
    assert [e["field"] for e in res.json()["errors"]] == [field]
    assert storage.list_messages() == []


def test_line_breaks_in_message_body_are_fine(client, storage):
    res = client.post("/api/contact", json={**JANE, "message": "Hello there,\n\nlet's work together."})

    assert res.status_code == 201
    assert "\n\n" in storage.list_messages()[0].message


def test_email_subject_is_folded_to_one_line(settings):
    from portfolio.schemas import Message, utcnow

    message = Message(
        id=7, name="Jane", email="jane@x.com", subject="Hi\nthere",
        message="Hello there, interested in working together.", created_at=utcnow(),
    )
    email = build_contact_email(
        message, settings.model_copy(update={"email_user": "site@example.com", "owner_email": "owner@example.com"})
    )

    assert email["Subject"] == "New Contact Form Message: Hi there"
