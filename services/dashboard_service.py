"""
Dashboard figures over active entries and completed files.
"""
import re
from collections import Counter
from datetime import date, timedelta
from typing import Callable, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from models.booking import BookingEntry, BookingFieldsMixin
from models.completed_file import CompletedFile
from services.formatting import fpod_display, is_hazardous, parse_iso_date, reference_name

STOP_WORDS = {"details", "of", "on", "with", "for", "in", "at"}
TRUE_WORDS = {"yes", "true", "filed"}
FALSE_WORDS = {"no", "false"}

TEXT_FIELDS = (
    "location", "customer", "line", "pol", "pod", "fpod", "vessel",
    "booking_no", "container_no", "volume", "voyage", "bl_no", "bl_type",
)
DATE_FIELDS = ("booking_date", "booking_validity", "etd", "sob_date")
BOOLEAN_FIELDS = (
    "vgm_filed", "si_filed", "final_dg", "first_printed", "corrections_finalised",
    "bl_released", "isf_sent", "sob",
)

TOP_SHIPPERS = 8
DETAILED_ROWS = 10
DEFAULT_RANGE_DAYS = 7


def _invoice_overdue(entry: BookingFieldsMixin, today: date) -> bool:
    due = parse_iso_date(entry.invoice_due_date or entry.etd)
    return bool(entry.first_printed and not entry.liner_invoice and due and due < today)


def pending_rules(today: date) -> dict[str, Callable[[BookingFieldsMixin], bool]]:
    return {
        "pending_si": lambda e: not e.si_filed,
        "pending_first_print": lambda e: e.si_filed and not e.first_printed,
        "pending_correction": lambda e: e.first_printed and not e.corrections_finalised,
        "pending_bl": lambda e: e.corrections_finalised and not e.bl_released,
        "pending_invoice": lambda e: _invoice_overdue(e, today),
        "pending_dg": lambda e: is_hazardous(e.volume) and not e.final_dg,
    }


def parse_query(query: Optional[str]) -> list[str]:
    cleaned = re.sub(r"[^\w\s-]", "", (query or "").lower())
    return [token for token in cleaned.split() if token not in STOP_WORDS]


def normalize_token_date(token: str) -> Optional[date]:
    """``DD-MM-YYYY`` or ``YYYY-MM-DD`` search token as a date."""
    parts = token.split("-")
    if len(parts) != 3 or not all(part.isdigit() for part in parts):
        return None
    if len(parts[0]) == 4:
        return parse_iso_date(token)
    return parse_iso_date(f"{parts[2]}-{parts[1]}-{parts[0]}")


def token_matches(entry: BookingFieldsMixin, token: str) -> bool:
    for field in TEXT_FIELDS:
        raw = getattr(entry, field, None)
        value = fpod_display(raw) if field == "fpod" else reference_name(raw)
        if token in value.lower():
            return True

    wanted = normalize_token_date(token)
    if wanted and any(parse_iso_date(getattr(entry, field, None)) == wanted for field in DATE_FIELDS):
        return True

    if token in TRUE_WORDS:
        return any(getattr(entry, field) is True for field in BOOLEAN_FIELDS)
    if token in FALSE_WORDS:
        return any(getattr(entry, field) is False for field in BOOLEAN_FIELDS)
    return False


def advanced_search(entries: list, query: Optional[str]) -> list:
    tokens = parse_query(query)
    if not tokens:
        return list(entries)
    return [entry for entry in entries if all(token_matches(entry, token) for token in tokens)]


def _at_location(document: BookingFieldsMixin, location: Optional[str]) -> bool:
    if not location or location.strip().upper() == "ALL":
        return True
    return reference_name(document.location).strip().upper() == location.strip().upper()


def _etd_sort_key(document: BookingFieldsMixin):
    etd = parse_iso_date(document.etd)
    return (etd is None, etd or date.min)


def _row(document: BookingFieldsMixin, status: str) -> dict:
    return {
        "id": document.id,
        "status": status,
        "booking_no": document.booking_no,
        "location": reference_name(document.location),
        "customer": reference_name(document.customer),
        "line": reference_name(document.line),
        "vessel": reference_name(document.vessel),
        "fpod": fpod_display(document.fpod),
        "volume": document.volume,
        "etd": document.etd,
    }


class DashboardService:

    @staticmethod
    def summary(
        db: Session,
        location: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        today: Optional[date] = None,
    ) -> dict:
        today = today or date.today()
        end_date = end_date or today
        start_date = start_date or end_date - timedelta(days=DEFAULT_RANGE_DAYS)
        if start_date > end_date:
            raise HTTPException(status_code=400, detail="Start date must not be after end date.")

        active = [e for e in db.query(BookingEntry).all() if _at_location(e, location)]
        completed = [f for f in db.query(CompletedFile).all() if _at_location(f, location)]

        counts = {name: sum(1 for e in active if rule(e)) for name, rule in pending_rules(today).items()}

        documents = [(e, "active") for e in active] + [(f, "completed") for f in completed]
        in_range = []
        for document, status in documents:
            etd = parse_iso_date(document.etd)
            if etd and start_date <= etd <= end_date:
                in_range.append((etd, document, status))

        per_day = Counter(etd for etd, _, _ in in_range)
        sailings = [
            {"day": day, "label": day.strftime("%d %b"), "shipments": per_day[day]}
            for day in sorted(per_day)
        ]

        shippers = Counter(
            reference_name(document.customer) for document, _ in documents if reference_name(document.customer)
        )
        top_shippers = [
            {"shipper": name, "shipments": count} for name, count in shippers.most_common(TOP_SHIPPERS)
        ]

        in_range.sort(key=lambda item: item[0])
        detailed = [_row(document, status) for _, document, status in in_range[:DETAILED_ROWS]]

        return {
            "location": location,
            "start_date": start_date,
            "end_date": end_date,
            "counts": counts,
            "shipped_in_range": len(in_range),
            "sailings": sailings,
            "top_shippers": top_shippers,
            "detailed": detailed,
        }

    @staticmethod
    def pending_view(
        bucket: str,
        db: Session,
        location: Optional[str] = None,
        query: Optional[str] = None,
        today: Optional[date] = None,
    ) -> list[BookingEntry]:
        """Active entries in one pending bucket, ETD ascending with undated entries last."""
        rules = pending_rules(today or date.today())
        if bucket not in rules:
            raise HTTPException(status_code=404, detail=f"Unknown dashboard view '{bucket}'. Use: {list(rules)}")

        rule = rules[bucket]
        entries = [e for e in db.query(BookingEntry).all() if _at_location(e, location) and rule(e)]
        entries.sort(key=_etd_sort_key)
        return advanced_search(entries, query)
