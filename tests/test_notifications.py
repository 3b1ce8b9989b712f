import pytest
import requests
from fastapi.testclient import TestClient

from conftest import create_entry, toggle
from services import notification_service


class FakeResponse:
    def __init__(self, status_code=200):
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


@pytest.fixture
def posted(monkeypatch):
    calls = []

    def _post(url, json=None, timeout=None):
        calls.append({"url": url, "json": json, "timeout": timeout})
        return FakeResponse()

    monkeypatch.setenv("SOB_NOTIFICATION_URL", "https://notify.example.com/sob")
    monkeypatch.setattr(notification_service.requests, "post", _post)
    return calls


def ready_for_sob(client: TestClient, **overrides) -> str:
    entry = create_entry(client, equipment=[{"type": "40HC", "qty": 1, "container_no": "MSKU7654321"}], **overrides)
    toggle(client, entry["id"], "vgm_filed")
    toggle(client, entry["id"], "si_filed", bl_type="OBL")
    toggle(client, entry["id"], "first_printed", bl_no="BL42")
    return entry["id"]


def test_sob_notification_payload(client: TestClient, posted):
    client.post("/api/master/customer", json={"record": {
        "name": "ACME EXPORTS",
        "customerEmail": "ops@acme.com",
        "salesPersonEmail": "anil@desk.com, sunita@desk.com",
    }})
    entry_id = ready_for_sob(client, fpod={"name": "HOUSTON", "country": "USA"})

    response = toggle(client, entry_id, "sob", sob_date="2025-06-12", notify=True)
    assert response.status_code == 200, response.text
    assert response.json()["notification"] == {"sent": True, "detail": "SOB notification sent"}

    call = posted[0]
    assert call["url"] == "https://notify.example.com/sob"
    assert call["timeout"] == 15.0
    assert call["json"] == {
        "customer_email": "OPS@ACME.COM",
        "sales_person_email": "ANIL@DESK.COM,SUNITA@DESK.COM",
        "customer_name": "ACME EXPORTS",
        "booking_no": "MAEU123456",
        "sob_date": "12-06-2025",
        "vessel": "MSC AURORA",
        "voyage": "123E",
        "pol": "NHAVA SHEVA",
        "pod": "JEBEL ALI",
        "fpod": "HOUSTON, USA",
        "container_no": "MSKU7654321",
        "volume": "1 x 40HC",
        "bl_no": "BL42",
    }


def test_embedded_customer_emails_are_used(client: TestClient, posted):
    entry_id = ready_for_sob(client, customer={"name": "GLOBEX", "customerEmail": ["ops@globex.com"]})
    toggle(client, entry_id, "sob", sob_date="2025-06-12", notify=True)
    assert posted[0]["json"]["customer_email"] == "ops@globex.com"
    assert posted[0]["json"]["sales_person_email"] == ""


def test_failed_notification_keeps_the_flag(client: TestClient, monkeypatch):
    def _post(url, json=None, timeout=None):
        raise requests.ConnectionError("unreachable")

    monkeypatch.setenv("SOB_NOTIFICATION_URL", "https://notify.example.com/sob")
    monkeypatch.setattr(notification_service.requests, "post", _post)
    entry_id = ready_for_sob(client, customer={"name": "GLOBEX", "customerEmail": ["ops@globex.com"]})

    response = toggle(client, entry_id, "sob", sob_date="2025-06-12", notify=True)
    assert response.status_code == 200
    body = response.json()
    assert body["entry"]["sob"] is True
    assert body["notification"]["sent"] is False


def test_no_emails_on_record_is_reported(client: TestClient, posted):
    entry_id = ready_for_sob(client)
    response = toggle(client, entry_id, "sob", sob_date="2025-06-12", notify=True)
    assert response.json()["notification"]["sent"] is False
    assert posted == []


def test_unconfigured_endpoint_skips_sending(client: TestClient, monkeypatch):
    monkeypatch.delenv("SOB_NOTIFICATION_URL", raising=False)
    entry_id = ready_for_sob(client, customer={"name": "GLOBEX", "customerEmail": ["ops@globex.com"]})
    response = toggle(client, entry_id, "sob", sob_date="2025-06-12", notify=True)
    assert response.json()["notification"]["sent"] is False
