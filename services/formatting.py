"""
Display formatting shared by the booking, dashboard and export services.
"""
import re
from datetime import date, datetime
from typing import Any, Iterable, Optional

CUT_OFF_PATTERN = re.compile(r"^\d{2}/\d{2}-\d{4} HRS$")


def format_cut_off(value: Optional[str]) -> Optional[str]:
    """
    Normalise a cut-off to ``DD/MM-HHMM HRS``.

    Accepts eight digits (``06061800``) or an already formatted value.
    Raises ValueError for anything else.
    """
    if value is None:
        return None
    raw = str(value).strip().upper()
    if not raw:
        return None
    if CUT_OFF_PATTERN.match(raw):
        return raw

    digits = re.sub(r"[^0-9]", "", raw)
    if len(digits) != 8:
        raise ValueError("Cut-off must be in the format DD/MM-HHMM HRS (e.g., 06/06-1800 HRS)")

    day, month, hour, minute = (int(digits[i:i + 2]) for i in range(0, 8, 2))
    if not (1 <= day <= 31 and 1 <= month <= 12 and 0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValueError("Invalid date or time. Please enter a valid DDMMHHMM (e.g., 06061800 for 06/06-1800 HRS)")
    return f"{digits[0:2]}/{digits[2:4]}-{digits[4:6]}{digits[6:8]} HRS"


def reference_name(value: Any) -> str:
    """Name of an inline string or an embedded master-data reference."""
    if value is None:
        return ""
    if isinstance(value, dict):
        return str(value.get("name") or value.get("type") or "")
    return str(value)


def fpod_display(value: Any) -> str:
    if isinstance(value, dict):
        name = str(value.get("name") or "")
        country = str(value.get("country") or "")
        return f"{name}, {country}" if country else name
    return reference_name(value)


def build_volume(equipment: Iterable[dict]) -> str:
    parts = []
    for item in equipment:
        parts.append(f"{item.get('qty', 1)} x {reference_name(item.get('type'))}")
    return ", ".join(parts)


def join_container_numbers(equipment: Iterable[dict]) -> str:
    numbers = [str(item.get("container_no") or "").strip() for item in equipment]
    return ", ".join(number for number in numbers if number)


def is_hazardous(volume: Optional[str]) -> bool:
    return "HAZ" in (volume or "").upper()


def parse_iso_date(value: Any) -> Optional[date]:
    """Best-effort parse of ``YYYY-MM-DD`` / ``DD-MM-YYYY`` / ISO datetime strings."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    raw = str(value).strip()
    for pattern in ("%Y-%m-%d", "%d-%m-%Y", "%d/%m/%Y"):
        try:
            return datetime.strptime(raw[:10], pattern).date()
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(raw).date()
    except ValueError:
        return None


def format_display_date(value: Any) -> str:
    """Render a stored date as ``DD/MM/YYYY`` for spreadsheets and mail."""
    parsed = parse_iso_date(value)
    return parsed.strftime("%d/%m/%Y") if parsed else ""


def format_sob_date(value: Any) -> str:
    parsed = parse_iso_date(value)
    return parsed.strftime("%d-%m-%Y") if parsed else ""
