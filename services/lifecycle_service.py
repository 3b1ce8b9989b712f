"""
Documentation checklist for active booking entries.

Ticking a flag may require other flags and extra fields (BL type, BL
number, SOB date). Releasing the B/L moves the entry to completed files.
"""
import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.booking import BOOKING_COPY_FIELDS, BookingEntry
from models.completed_file import CompletedFile
from schemas.booking import FlagToggleRequest
from services.audit_service import AuditService
from services.booking_service import BookingService
from services.formatting import fpod_display, is_hazardous, reference_name
from services.master_data_service import MasterDataService
from services.notification_service import NotificationService

log = logging.getLogger(__name__)

FLAG_LABELS = {
    "vgm_filed": "VGM Filed",
    "si_filed": "SI Filed",
    "first_printed": "First Print",
    "corrections_finalised": "Correction Finalised",
    "liner_invoice": "Liner Invoice",
    "bl_released": "BL Released",
    "isf_sent": "ISF Sent",
    "sob": "SOB",
    "final_dg": "Final DG",
}

# Flags that must already be ticked before the key flag can be ticked
PREREQUISITES = {
    "first_printed": ("si_filed",),
    "corrections_finalised": ("first_printed",),
    "liner_invoice": ("corrections_finalised",),
    "sob": ("vgm_filed", "si_filed"),
    "bl_released": ("vgm_filed", "si_filed", "first_printed", "corrections_finalised", "liner_invoice"),
}

BL_TYPES = ("OBL", "SEAWAY")


def is_usa_destination(entry: BookingEntry, db: Session) -> bool:
    if "USA" in fpod_display(entry.fpod).upper():
        return True
    record = MasterDataService.find_record("fpod", reference_name(entry.fpod), db)
    return bool(record) and "USA" in str(record.get("country") or "").upper()


def release_requirements(entry: BookingEntry, db: Session) -> list[str]:
    required = list(PREREQUISITES["bl_released"])
    if is_hazardous(entry.volume):
        required.append("final_dg")
    if is_usa_destination(entry, db):
        required.append("isf_sent")
    return required


def check_toggle(entry: BookingEntry, request: FlagToggleRequest, db: Session) -> dict:
    """
    Validate a checklist toggle and return the fields to write.

    Raises ValueError with the operator-facing reason when rejected.
    """
    flag = request.flag
    if not request.value:
        return {flag: False}

    label = FLAG_LABELS[flag]
    updates: dict = {flag: True}

    if flag == "bl_released":
        required = release_requirements(entry, db)
    else:
        required = list(PREREQUISITES.get(flag, ()))
    missing = [FLAG_LABELS[name] for name in required if not getattr(entry, name)]

    if flag == "sob":
        if not (entry.container_no or "").strip() or not (entry.voyage or "").strip():
            raise ValueError("Container No and Voyage must be filled before ticking SOB.")
    if missing:
        raise ValueError(f"Please tick {', '.join(missing)} before {label}.")

    if flag == "si_filed":
        bl_type = (request.bl_type or "").strip().upper()
        if bl_type not in BL_TYPES:
            raise ValueError("Please select BL Type (OBL or SEAWAY) to file the SI.")
        updates["bl_type"] = bl_type
    elif flag == "first_printed":
        bl_no = (request.bl_no or "").strip().upper()
        if not bl_no:
            raise ValueError("BL No is required for First Print.")
        updates["bl_no"] = bl_no
    elif flag == "sob":
        if request.sob_date is None:
            raise ValueError("SOB Date is required to tick SOB.")
        updates["sob_date"] = request.sob_date.isoformat()
    return updates


class LifecycleService:

    @staticmethod
    def toggle_flag(entry_id: str, request: FlagToggleRequest, username: Optional[str], db: Session) -> dict:
        entry = BookingService.get_entry(entry_id, db)
        try:
            updates = check_toggle(entry, request, db)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

        for field, value in updates.items():
            setattr(entry, field, value)
        AuditService.record_changes(entry, username, updates)

        if request.flag == "bl_released" and request.value:
            completed = LifecycleService.complete_entry(entry, username, db)
            return {
                "message": "BL Released. Booking moved to Completed Files.",
                "entry": None,
                "completed_file_id": completed.id,
                "notification": None,
            }

        try:
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            log.error("Could not update %s on %s: %s", request.flag, entry.booking_no, exc, exc_info=True)
            raise HTTPException(status_code=500, detail="Failed to update booking status.")
        db.refresh(entry)

        notification = None
        if request.flag == "sob" and request.value and request.notify:
            notification = NotificationService.send_sob_notification(entry, db)

        state = "ticked" if request.value else "cleared"
        return {
            "message": f"{FLAG_LABELS[request.flag]} {state}.",
            "entry": entry,
            "completed_file_id": None,
            "notification": notification,
        }

    @staticmethod
    def complete_entry(entry: BookingEntry, username: Optional[str], db: Session) -> CompletedFile:
        """Copy the entry into completed files and delete it in one commit."""
        snapshot = {field: getattr(entry, field) for field in BOOKING_COPY_FIELDS}
        snapshot["bl_released"] = True
        completed = CompletedFile(
            **snapshot,
            source_entry_id=entry.id,
            status="completed",
            completed_by=username,
            completed_at=datetime.utcnow(),
        )
        try:
            db.add(completed)
            db.delete(entry)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            log.error("Could not complete booking %s: %s", entry.booking_no, exc, exc_info=True)
            raise HTTPException(status_code=500, detail="Failed to move booking to completed files.")

        db.refresh(completed)
        log.info("Booking %s released by %s and moved to completed files", completed.booking_no, username)
        return completed
