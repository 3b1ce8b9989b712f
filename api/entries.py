from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.dependencies import require_add_booking, require_entries
from core.database import get_db
from models.user import User
from schemas.booking import (
    AuditTrailResponse,
    BookingCreate,
    BookingResponse,
    BookingUpdate,
    FlagToggleRequest,
    FlagToggleResponse,
)
from services.audit_service import AuditService
from services.booking_service import BookingService
from services.export_service import ExportService
from services.lifecycle_service import LifecycleService

router = APIRouter(prefix="/entries", tags=["entries"])


@router.post("/", response_model=BookingResponse, status_code=201)
def create_entry(
    payload: BookingCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_add_booking),
):
    """Add a booking. Routing values not yet in master data are appended when requested."""
    return BookingService.create_entry(payload, current_user.username, db)


@router.get("/", response_model=list[BookingResponse])
def list_entries(
    search: Optional[str] = None,
    location: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_entries),
):
    return BookingService.list_entries(db, search, location)


@router.get("/export")
def export_entries(
    search: Optional[str] = None,
    location: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_entries),
):
    """Download the filtered entries view as an .xlsx workbook."""
    return ExportService.entries(BookingService.list_entries(db, search, location))


@router.get("/{entry_id}", response_model=BookingResponse)
def get_entry(
    entry_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_entries),
):
    return BookingService.get_entry(entry_id, db)


@router.patch("/{entry_id}", response_model=BookingResponse)
def update_entry(
    entry_id: str,
    payload: BookingUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_entries),
):
    return BookingService.update_entry(entry_id, payload, current_user.username, db)


@router.delete("/{entry_id}")
def delete_entry(
    entry_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_entries),
):
    BookingService.delete_entry(entry_id, current_user.username, db)
    return {"message": "Entry deleted successfully"}


@router.post("/{entry_id}/flags", response_model=FlagToggleResponse)
def toggle_flag(
    entry_id: str,
    payload: FlagToggleRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_entries),
):
    """Tick or clear one checklist flag. Releasing the B/L moves the booking to completed files."""
    return LifecycleService.toggle_flag(entry_id, payload, current_user.username, db)


@router.get("/{entry_id}/audit", response_model=AuditTrailResponse)
def audit_trail(
    entry_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_entries),
):
    return AuditService.trail(BookingService.get_entry(entry_id, db))
