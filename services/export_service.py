"""
Spreadsheet downloads of the entries, completed files and booking request views.
"""
from io import BytesIO
from typing import Any, Iterable, Sequence

from fastapi.responses import StreamingResponse
from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from services.formatting import format_display_date, fpod_display, reference_name

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

ENTRY_COLUMNS = [
    ("location", "Location"),
    ("booking_date", "Booking Date"),
    ("customer", "Customer"),
    ("booking_validity", "Booking Validity"),
    ("line", "Line"),
    ("booking_no", "Booking No"),
    ("pol", "POL"),
    ("pod", "POD"),
    ("fpod", "FPOD"),
    ("container_no", "Container No"),
    ("volume", "Volume"),
    ("vessel", "Vessel"),
    ("voyage", "Voyage"),
    ("port_cut_off", "Port CutOff"),
    ("si_cut_off", "SI CutOff"),
    ("etd", "ETD"),
    ("vgm_filed", "VGM Filed"),
    ("si_filed", "SI Filed"),
    ("first_printed", "First Printed"),
    ("corrections_finalised", "Corrections Finalised"),
    ("liner_invoice", "Liner Invoice"),
    ("bl_released", "B/L - Released"),
    ("isf_sent", "ISF Sent"),
    ("sob", "SOB"),
    ("final_dg", "Final DG"),
    ("bl_no", "BL No"),
    ("bl_type", "BL Type"),
    ("sob_date", "SOB Date"),
    ("remarks", "Remarks"),
]

COMPLETED_FILE_COLUMNS = ENTRY_COLUMNS + [
    ("invoice_no", "Invoice No"),
    ("completed_by", "Completed By"),
    ("completed_at", "Completed At"),
]

BOOKING_REQUEST_COLUMNS = [
    ("booking_no", "Booking No"),
    ("location", "Location"),
    ("req_date", "Req Date"),
    ("customer", "Customer"),
    ("shipper", "Shipper"),
    ("pol", "POL"),
    ("pod", "POD"),
    ("equipment_type", "Equipment Type"),
    ("cargo", "Cargo"),
    ("cargo_wt", "Cargo Wt"),
    ("line", "Line"),
    ("sq_ra", "SQ/RA"),
    ("vessel", "Vessel"),
    ("etd", "ETD"),
    ("remarks", "Remarks"),
    ("booking_reference", "Booking Reference"),
]

DATE_FIELDS = {"req_date", "etd"}


def _render(field: str, value: Any, dates: bool) -> Any:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if field == "fpod":
        return fpod_display(value)
    if dates and field in DATE_FIELDS:
        return format_display_date(value)
    if isinstance(value, dict):
        return reference_name(value)
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return value


def cell_value(field: str, value: Any, dates: bool = False) -> Any:
    rendered = _render(field, value, dates)
    if isinstance(rendered, str):
        # Control characters are not allowed in worksheet XML
        return ILLEGAL_CHARACTERS_RE.sub("", rendered)
    return rendered


def build_workbook(
    title: str,
    columns: Sequence[tuple[str, str]],
    records: Iterable[Any],
    dates: bool = False,
) -> Workbook:
    """One sheet: a header row, then one row per record."""
    wb = Workbook()
    ws = wb.active
    ws.title = title
    ws.append([label for _, label in columns])
    for cell in ws[1]:
        cell.font = Font(bold=True)

    for record in records:
        ws.append([cell_value(field, getattr(record, field, None), dates) for field, _ in columns])
        # User text is exported as typed, never as a formula
        for cell in ws[ws.max_row]:
            if cell.data_type == "f":
                cell.data_type = "s"

    for idx, (_, label) in enumerate(columns, start=1):
        ws.column_dimensions[get_column_letter(idx)].width = max(12, len(label) + 2)
    return wb


def workbook_response(wb: Workbook, filename: str) -> StreamingResponse:
    buffer = BytesIO()
    wb.save(buffer)
    buffer.seek(0)
    return StreamingResponse(
        buffer,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


class ExportService:

    @staticmethod
    def entries(records: Iterable[Any]) -> StreamingResponse:
        return workbook_response(build_workbook("Entries", ENTRY_COLUMNS, records), "entries.xlsx")

    @staticmethod
    def completed_files(records: Iterable[Any]) -> StreamingResponse:
        wb = build_workbook("Completed Files", COMPLETED_FILE_COLUMNS, records)
        return workbook_response(wb, "completed_files.xlsx")

    @staticmethod
    def booking_requests(records: Iterable[Any]) -> StreamingResponse:
        wb = build_workbook("Booking Requests", BOOKING_REQUEST_COLUMNS, records, dates=True)
        return workbook_response(wb, "booking_requests.xlsx")
