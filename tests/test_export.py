from io import BytesIO

from fastapi.testclient import TestClient
from openpyxl import load_workbook

from conftest import create_entry
from services.export_service import ENTRY_COLUMNS, XLSX_MEDIA_TYPE, cell_value


def read_rows(response) -> list[tuple]:
    return list(load_workbook(BytesIO(response.content)).active.iter_rows(values_only=True))


def test_entries_export_has_header_and_one_row_per_entry(client: TestClient):
    create_entry(client, "EXP001", customer={"name": "ACME", "customerEmail": []})
    create_entry(client, "EXP002", fpod={"name": "HOUSTON", "country": "USA"})

    response = client.get("/api/entries/export")
    assert response.status_code == 200
    assert response.headers["content-type"] == XLSX_MEDIA_TYPE
    assert "entries.xlsx" in response.headers["content-disposition"]

    rows = read_rows(response)
    assert rows[0] == tuple(label for _, label in ENTRY_COLUMNS)
    assert len(rows) == 3

    header = rows[0]
    by_booking = {row[header.index("Booking No")]: row for row in rows[1:]}
    assert by_booking["EXP001"][header.index("Customer")] == "ACME"
    assert by_booking["EXP002"][header.index("FPOD")] == "HOUSTON, USA"
    assert by_booking["EXP001"][header.index("SI Filed")] == "No"


def test_entries_export_follows_filter(client: TestClient):
    create_entry(client, "KEEP01", location="MUMBAI")
    create_entry(client, "DROP01", location="CHENNAI")

    rows = read_rows(client.get("/api/entries/export", params={"location": "MUMBAI"}))
    assert len(rows) == 2
    assert rows[1][rows[0].index("Booking No")] == "KEEP01"


def test_empty_export_is_header_only(client: TestClient):
    rows = read_rows(client.get("/api/completed-files/export"))
    assert len(rows) == 1
    assert rows[0][-3:] == ("Invoice No", "Completed By", "Completed At")


def test_cell_value_rendering():
    assert cell_value("customer", {"name": "ACME"}) == "ACME"
    assert cell_value("fpod", {"name": "LA", "country": "USA"}) == "LA, USA"
    assert cell_value("sob", True) == "Yes"
    assert cell_value("etd", "2025-06-10", dates=True) == "10/06/2025"
    assert cell_value("etd", "2025-06-10") == "2025-06-10"
    assert cell_value("remarks", None) == ""


def test_control_characters_are_dropped_from_cells(client: TestClient):
    create_entry(client, "CTRL01", remarks="bell\x07here")

    response = client.get("/api/entries/export")
    assert response.status_code == 200
    rows = read_rows(response)
    assert rows[1][rows[0].index("Remarks")] == "bellhere"
    assert cell_value("remarks", "tab\x0bbed") == "tabbed"


def test_text_starting_with_equals_stays_text(client: TestClient):
    create_entry(client, "FORM01", remarks="=1+1")
    create_entry(client, "FORM02", remarks="@SUM(A1)")

    response = client.get("/api/entries/export")
    sheet = load_workbook(BytesIO(response.content)).active
    remarks_col = [cell.value for cell in sheet[1]].index("Remarks") + 1
    cells = {sheet.cell(row=r, column=remarks_col).value: sheet.cell(row=r, column=remarks_col)
             for r in range(2, sheet.max_row + 1)}

    assert set(cells) == {"=1+1", "@SUM(A1)"}
    assert all(cell.data_type == "s" for cell in cells.values())
