from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.dependencies import require_booking_request
from core.database import get_db
from models.user import User
from schemas.booking_request import (
    BookingRequestCreate,
    BookingRequestExport,
    BookingRequestResponse,
    BookingRequestUpdate,
)
from services.booking_request_service import BookingRequestService
from services.export_service import ExportService

router = APIRouter(prefix="/booking-requests", tags=["booking-requests"])


@router.post("/", response_model=BookingRequestResponse, status_code=201)
def create_request(
    payload: BookingRequestCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_booking_request),
):
    return BookingRequestService.create_request(payload, current_user.username, db)


@router.get("/", response_model=list[BookingRequestResponse])
def list_requests(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_booking_request),
):
    return BookingRequestService.list_requests(db)


@router.post("/export")
def export_requests(
    payload: BookingRequestExport,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_booking_request),
):
    """Selected rows, or every request when nothing is selected."""
    return ExportService.booking_requests(BookingRequestService.list_requests(db, payload.ids))


@router.patch("/{request_id}", response_model=BookingRequestResponse)
def update_request(
    request_id: str,
    payload: BookingRequestUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_booking_request),
):
    return BookingRequestService.update_request(request_id, payload, current_user.username, db)
