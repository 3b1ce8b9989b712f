import smtplib

import pytest
from fastapi.testclient import TestClient


class FakeSMTP:
    sent = []
    fail = False

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.logged_in = None
        self.tls = False

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.tls = True

    def login(self, user, password):
        self.logged_in = (user, password)

    def sendmail(self, sender, recipients, message):
        if FakeSMTP.fail:
            raise smtplib.SMTPException("relay refused")
        FakeSMTP.sent.append({"sender": sender, "recipients": recipients, "message": message, "tls": self.tls})


@pytest.fixture(autouse=True)
def fake_smtp(monkeypatch):
    FakeSMTP.sent = []
    FakeSMTP.fail = False
    monkeypatch.setattr(smtplib, "SMTP_SSL", FakeSMTP)
    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
    monkeypatch.setenv("SMTP_USER", "desk@example.com")
    monkeypatch.setenv("SMTP_PASSWORD", "app-password")
    monkeypatch.delenv("SMTP_PORT", raising=False)
    monkeypatch.delenv("MAIL_FROM", raising=False)
    return FakeSMTP


def test_send_email_success(client: TestClient):
    response = client.post(
        "/api/email/send",
        json={"to": ["a@x.com", "b@x.com"], "cc": "c@x.com", "subject": "SOB", "body": "<p>Sailed</p>"},
    )
    assert response.status_code == 200
    assert response.json() == {"message": "Email sent successfully"}

    sent = FakeSMTP.sent[0]
    assert sent["sender"] == "desk@example.com"
    assert sent["recipients"] == ["a@x.com", "b@x.com", "c@x.com"]
    assert "Subject: SOB" in sent["message"]
    assert sent["tls"] is False


def test_plain_smtp_port_uses_starttls(client: TestClient, monkeypatch):
    monkeypatch.setenv("SMTP_PORT", "587")
    response = client.post("/api/email/send", json={"to": "a@x.com", "subject": "Hi", "body": "Body"})
    assert response.status_code == 200
    assert FakeSMTP.sent[0]["tls"] is True


@pytest.mark.parametrize("payload", [
    {"subject": "Hi", "body": "Body"},
    {"to": "a@x.com", "body": "Body"},
    {"to": "a@x.com", "subject": "Hi"},
    {"to": [], "subject": "Hi", "body": "Body"},
])
def test_missing_fields_are_400(client: TestClient, payload):
    response = client.post("/api/email/send", json=payload)
    assert response.status_code == 400
    assert response.json()["detail"] == "Missing required fields: to, subject, or body"
    assert FakeSMTP.sent == []


def test_relay_failure_is_500(client: TestClient):
    FakeSMTP.fail = True
    response = client.post("/api/email/send", json={"to": "a@x.com", "subject": "Hi", "body": "Body"})
    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to send email"
