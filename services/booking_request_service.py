import logging
from datetime import date
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.booking_request import BookingRequest
from schemas.booking_request import BookingRequestCreate, BookingRequestUpdate

log = logging.getLogger(__name__)

MANDATORY_FIELDS = ("location", "req_date", "customer", "pol", "pod", "equipment_type", "line", "sq_ra")


def _stored(data: dict) -> dict:
    """Dates are kept as ISO ``YYYY-MM-DD`` strings."""
    return {key: value.isoformat() if isinstance(value, date) else value for key, value in data.items()}


class BookingRequestService:

    @staticmethod
    def get_request(request_id: str, db: Session) -> BookingRequest:
        request = db.query(BookingRequest).filter(BookingRequest.id == request_id).first()
        if not request:
            raise HTTPException(status_code=404, detail="Booking request not found")
        return request

    @staticmethod
    def create_request(payload: BookingRequestCreate, username: Optional[str], db: Session) -> BookingRequest:
        request = BookingRequest(**_stored(payload.model_dump()), created_by=username)
        db.add(request)
        try:
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            log.error("Error adding booking request: %s", exc, exc_info=True)
            raise HTTPException(status_code=500, detail="Failed to add booking request.")
        db.refresh(request)
        return request

    @staticmethod
    def list_requests(db: Session, ids: Optional[list[str]] = None) -> list[BookingRequest]:
        query = db.query(BookingRequest)
        if ids:
            query = query.filter(BookingRequest.id.in_(ids))
        return query.order_by(BookingRequest.created_at.desc()).all()

    @staticmethod
    def update_request(
        request_id: str,
        payload: BookingRequestUpdate,
        username: Optional[str],
        db: Session,
    ) -> BookingRequest:
        request = BookingRequestService.get_request(request_id, db)
        data = _stored(payload.model_dump(exclude_unset=True))

        for field in MANDATORY_FIELDS:
            if field in data and not (data[field] or "").strip():
                raise HTTPException(status_code=400, detail=f"{field} is required")

        for field, value in data.items():
            setattr(request, field, value)
        try:
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            log.error("Error updating booking request %s: %s", request_id, exc, exc_info=True)
            raise HTTPException(status_code=500, detail="Failed to update booking request.")
        db.refresh(request)
        log.info("Booking request %s updated by %s", request_id, username)
        return request
