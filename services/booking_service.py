import logging
from typing import Any, Iterable, Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.booking import BookingEntry, BookingFieldsMixin
from schemas.booking import BookingCreate, BookingUpdate
from services.audit_service import AuditService
from services.formatting import build_volume, fpod_display, join_container_numbers, reference_name
from services.master_data_service import MasterDataService

log = logging.getLogger(__name__)

ROUTING_FIELDS = ("location", "customer", "line", "pol", "pod", "fpod", "vessel")

SEARCH_FIELDS = (
    "location", "customer", "line", "pol", "pod", "fpod", "vessel",
    "booking_no", "booking_date", "booking_validity", "voyage", "volume",
    "container_no", "port_cut_off", "si_cut_off", "etd", "bl_no", "bl_type",
    "remarks", "reference_no",
)


def searchable_values(document: BookingFieldsMixin) -> list[str]:
    values = []
    for field in SEARCH_FIELDS:
        raw = getattr(document, field, None)
        value = fpod_display(raw) if field == "fpod" else reference_name(raw)
        if value:
            values.append(value.lower())
    return values


def filter_documents(
    documents: Iterable[BookingFieldsMixin],
    search: Optional[str] = None,
    locations: Optional[list[str]] = None,
) -> list:
    needle = (search or "").strip().lower()
    wanted = {loc.strip().upper() for loc in (locations or []) if loc and loc.strip()}
    result = []
    for document in documents:
        if wanted and reference_name(document.location).upper() not in wanted:
            continue
        if needle and not any(needle in value for value in searchable_values(document)):
            continue
        result.append(document)
    return result


def _equipment_dicts(equipment: Iterable[Any]) -> list[dict]:
    lines = []
    for item in equipment:
        data = item.model_dump() if hasattr(item, "model_dump") else dict(item)
        lines.append({
            "type": data.get("type"),
            "qty": int(data.get("qty") or 1),
            "container_no": data.get("container_no") or "",
        })
    return lines


def _commit(db: Session, action: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        log.error("Store write failed while trying to %s: %s", action, exc, exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to {action}.")


class BookingService:
    """Service layer for active booking entries."""

    @staticmethod
    def get_entry(entry_id: str, db: Session) -> BookingEntry:
        entry = db.query(BookingEntry).filter(BookingEntry.id == entry_id).first()
        if not entry:
            raise HTTPException(status_code=404, detail="Booking entry not found")
        return entry

    @staticmethod
    def booking_no_exists(booking_no: str, db: Session, exclude_id: Optional[str] = None) -> bool:
        query = db.query(BookingEntry).filter(BookingEntry.booking_no == booking_no)
        if exclude_id:
            query = query.filter(BookingEntry.id != exclude_id)
        return query.first() is not None

    @staticmethod
    def create_entry(payload: BookingCreate, username: Optional[str], db: Session) -> BookingEntry:
        if BookingService.booking_no_exists(payload.booking_no, db):
            raise HTTPException(status_code=409, detail="Booking No already exists. Cannot proceed.")

        equipment = _equipment_dicts(payload.equipment)
        data = payload.model_dump(exclude={"equipment", "add_missing_to_master"})
        entry = BookingEntry(
            **data,
            equipment=equipment,
            volume=build_volume(equipment),
            container_no=join_container_numbers(equipment),
        )
        AuditService.stamp_created(entry, username)

        db.add(entry)
        _commit(db, "add booking entry")
        db.refresh(entry)
        log.info("Booking %s created by %s", entry.booking_no, username)

        if payload.add_missing_to_master:
            BookingService.register_routing_values(entry, username, db)
        return entry

    @staticmethod
    def register_routing_values(entry: BookingEntry, username: Optional[str], db: Session) -> list[str]:
        """Append routing values missing from master data. The entry is already stored."""
        registered = []
        pending = [(field, getattr(entry, field)) for field in ROUTING_FIELDS]
        pending += [("equipmentType", item.get("type")) for item in (entry.equipment or [])]
        for category, value in pending:
            try:
                if MasterDataService.ensure_value(category, value, username, db):
                    registered.append(f"{category}:{value}")
            except SQLAlchemyError as exc:
                db.rollback()
                log.error("Could not register %s %r in master data: %s", category, value, exc)
        return registered

    @staticmethod
    def list_entries(
        db: Session,
        search: Optional[str] = None,
        location: Optional[str] = None,
    ) -> list[BookingEntry]:
        entries = db.query(BookingEntry).order_by(BookingEntry.created_at.desc()).all()
        return filter_documents(entries, search, [location] if location else None)

    @staticmethod
    def update_entry(entry_id: str, payload: BookingUpdate, username: Optional[str], db: Session) -> BookingEntry:
        entry = BookingService.get_entry(entry_id, db)
        data = payload.model_dump(exclude_unset=True)

        new_booking_no = data.get("booking_no")
        if new_booking_no and new_booking_no != entry.booking_no:
            if BookingService.booking_no_exists(new_booking_no, db, exclude_id=entry.id):
                raise HTTPException(status_code=409, detail="Booking No already exists. Cannot proceed.")

        if "equipment" in data and data["equipment"] is not None:
            equipment = _equipment_dicts(data["equipment"])
            data["equipment"] = equipment
            data["volume"] = build_volume(equipment)
            if "container_no" not in data:
                data["container_no"] = join_container_numbers(equipment)

        changes = {}
        for field, value in data.items():
            if getattr(entry, field) != value:
                setattr(entry, field, value)
                changes[field] = value

        if changes:
            AuditService.record_changes(entry, username, changes)
            _commit(db, "update entry")
            db.refresh(entry)
        return entry

    @staticmethod
    def delete_entry(entry_id: str, username: Optional[str], db: Session) -> None:
        entry = BookingService.get_entry(entry_id, db)
        db.delete(entry)
        _commit(db, "delete entry")
        log.info("Booking %s deleted by %s", entry.booking_no, username)
