from datetime import date

from fastapi.testclient import TestClient

from conftest import create_entry, toggle
from models.completed_file import CompletedFile
from services.dashboard_service import DashboardService, normalize_token_date, parse_query

TODAY = date(2025, 6, 12)


def seed(client: TestClient, db_session):
    a = create_entry(client, "A1", etd="2025-06-08", customer="ACME")
    b = create_entry(client, "B2", etd="2025-06-10", customer="ACME", equipment=[{"type": "20HAZ", "qty": 1}])
    c = create_entry(client, "C3", etd="2025-06-20", customer="GLOBEX", location="CHENNAI")
    toggle(client, b["id"], "si_filed", bl_type="OBL")
    toggle(client, b["id"], "first_printed", bl_no="BLB2")
    db_session.add(CompletedFile(
        booking_no="Z9", location="MUMBAI", customer="INITECH", etd="2025-06-09",
        equipment=[], volume="1 x 40HC", bl_released=True, actions=[],
    ))
    db_session.commit()
    return a, b, c


def test_pending_counts(client: TestClient, db_session):
    seed(client, db_session)
    summary = DashboardService.summary(db_session, today=TODAY)
    assert summary["counts"] == {
        "pending_si": 2,
        "pending_first_print": 0,
        "pending_correction": 1,
        "pending_bl": 0,
        "pending_invoice": 1,
        "pending_dg": 1,
    }


def test_sailings_shippers_and_detailed_rows(client: TestClient, db_session):
    seed(client, db_session)
    summary = DashboardService.summary(db_session, today=TODAY)

    assert summary["start_date"] == date(2025, 6, 5)
    assert summary["shipped_in_range"] == 3
    assert [(p["day"], p["shipments"]) for p in summary["sailings"]] == [
        (date(2025, 6, 8), 1), (date(2025, 6, 9), 1), (date(2025, 6, 10), 1),
    ]
    assert summary["sailings"][0]["label"] == "08 Jun"
    assert summary["top_shippers"][0] == {"shipper": "ACME", "shipments": 2}
    assert [row["booking_no"] for row in summary["detailed"]] == ["A1", "Z9", "B2"]
    assert summary["detailed"][1]["status"] == "completed"


def test_location_filter(client: TestClient, db_session):
    seed(client, db_session)
    summary = DashboardService.summary(db_session, location="CHENNAI", today=TODAY)
    assert summary["counts"]["pending_si"] == 1
    assert summary["shipped_in_range"] == 0


def test_pending_view_sorted_by_etd_with_missing_last(client: TestClient, db_session):
    create_entry(client, "LATE", etd="2025-07-01")
    create_entry(client, "NOETD", etd=None)
    create_entry(client, "EARLY", etd="2025-06-01")

    rows = DashboardService.pending_view("pending_si", db_session, today=TODAY)
    assert [row.booking_no for row in rows] == ["EARLY", "LATE", "NOETD"]


def test_advanced_search_tokens(client: TestClient, db_session):
    seed(client, db_session)

    rows = DashboardService.pending_view("pending_si", db_session, query="details of acme", today=TODAY)
    assert [row.booking_no for row in rows] == ["A1"]

    rows = DashboardService.pending_view("pending_si", db_session, query="20-06-2025", today=TODAY)
    assert [row.booking_no for row in rows] == ["C3"]

    rows = DashboardService.pending_view("pending_correction", db_session, query="filed", today=TODAY)
    assert [row.booking_no for row in rows] == ["B2"]


def test_dashboard_endpoint(client: TestClient, db_session):
    seed(client, db_session)
    response = client.get("/api/dashboard/", params={"start_date": "2025-06-01", "end_date": "2025-06-30"})
    assert response.status_code == 200, response.text
    assert response.json()["shipped_in_range"] == 4

    assert client.get("/api/dashboard/pending/pending_dg").json()[0]["booking_no"] == "B2"
    assert client.get("/api/dashboard/pending/unknown").status_code == 404
    assert client.get(
        "/api/dashboard/", params={"start_date": "2025-06-30", "end_date": "2025-06-01"}
    ).status_code == 400


def test_query_helpers():
    assert parse_query("Details of MAERSK, in Mumbai!") == ["maersk", "mumbai"]
    assert normalize_token_date("20-06-2025") == date(2025, 6, 20)
    assert normalize_token_date("2025-06-20") == date(2025, 6, 20)
    assert normalize_token_date("maersk") is None
