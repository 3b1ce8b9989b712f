from fastapi.testclient import TestClient

from services.local_charges_service import CHARGE_ROWS, EQUIPMENT_COLUMNS, make_doc_id


def test_doc_id_escapes_like_encode_uri_component():
    assert make_doc_id("MAERSK", "NHAVA SHEVA") == "MAERSK%7C%7CNHAVA%20SHEVA"
    assert make_doc_id("CMA (CGM)", "A/B") == "CMA%20(CGM)%7C%7CA%2FB"


def test_unsaved_pair_returns_empty_grid(client: TestClient):
    body = client.get("/api/locals/", params={"line": "MAERSK", "pol": "NHAVA SHEVA"}).json()
    assert body["saved"] is False
    assert body["charges"] == list(CHARGE_ROWS)
    assert body["equipment_types"] == list(EQUIPMENT_COLUMNS)
    assert all(cell == "" for row in body["grid"].values() for cell in row.values())


def test_save_overwrites_whole_grid(client: TestClient):
    first = {
        "line": "MAERSK",
        "pol": "NHAVA SHEVA",
        "grid": {"THC": {"20 DV": "1500", "40DV": "2200"}, "DOC": {"20 DV": "50"}},
        "currencies": {"THC": {"20 DV": "INR", "40DV": "INR"}, "DOC": {"20 DV": "USD"}},
    }
    response = client.put("/api/locals/", json=first)
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["saved"] is True
    assert body["updated_by"] == "test-user"
    assert body["grid"]["THC"]["40DV"] == "2200"
    assert body["grid"]["VTS"]["40HAZ"] == ""

    second = {"line": "MAERSK", "pol": "NHAVA SHEVA", "grid": {"SEAL": {"20HAZ": "10"}}}
    client.put("/api/locals/", json=second)

    body = client.get("/api/locals/", params={"line": "MAERSK", "pol": "NHAVA SHEVA"}).json()
    assert body["grid"]["SEAL"]["20HAZ"] == "10"
    assert body["grid"]["THC"]["20 DV"] == ""
    assert body["currencies"]["DOC"]["20 DV"] == ""


def test_unknown_rows_columns_or_currency_rejected(client: TestClient):
    base = {"line": "MAERSK", "pol": "MUNDRA"}
    assert client.put("/api/locals/", json={**base, "grid": {"BAF": {"20 DV": "1"}}}).status_code == 400
    assert client.put("/api/locals/", json={**base, "grid": {"THC": {"45HC": "1"}}}).status_code == 400
    assert client.put("/api/locals/", json={**base, "currencies": {"THC": {"20 DV": "EUR"}}}).status_code == 400
    assert client.get("/api/locals/", params=base).json()["saved"] is False


def test_options_come_from_master_data(client: TestClient):
    client.post("/api/master/line", json={"record": {"name": "MAERSK"}})
    client.post("/api/master/pol", json={"record": {"name": "MUNDRA"}})
    assert client.get("/api/locals/options").json() == {"lines": ["MAERSK"], "pols": ["MUNDRA"]}
