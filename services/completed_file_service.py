import logging
import re
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.completed_file import CompletedFile
from services.booking_service import filter_documents
from services.config_service import get_invoice_fy_suffix
from services.formatting import reference_name

log = logging.getLogger(__name__)

INVOICE_TEMPLATE = re.compile(r"^DMS/[^/]+/[^/]+$")


def format_invoice_no(value: str, suffix: Optional[str] = None) -> str:
    """Wrap an invoice serial as ``DMS/<serial>/<FY>``; a wrapped value is kept as is."""
    raw = (value or "").strip().upper()
    if not raw:
        raise ValueError("Invoice No cannot be empty.")
    if INVOICE_TEMPLATE.match(raw):
        return raw
    return f"DMS/{raw}/{suffix or get_invoice_fy_suffix()}"


class CompletedFileService:

    @staticmethod
    def get_file(file_id: str, db: Session) -> CompletedFile:
        completed = db.query(CompletedFile).filter(CompletedFile.id == file_id).first()
        if not completed:
            raise HTTPException(status_code=404, detail="Completed file not found")
        return completed

    @staticmethod
    def list_files(
        db: Session,
        search: Optional[str] = None,
        locations: Optional[list[str]] = None,
    ) -> list[CompletedFile]:
        files = db.query(CompletedFile).order_by(CompletedFile.completed_at.desc()).all()
        return filter_documents(files, search, locations)

    @staticmethod
    def distinct_locations(db: Session) -> list[str]:
        names = {reference_name(row.location).strip().upper() for row in db.query(CompletedFile).all()}
        return sorted(name for name in names if name)

    @staticmethod
    def update_invoice_no(file_id: str, invoice_no: str, username: Optional[str], db: Session) -> CompletedFile:
        completed = CompletedFileService.get_file(file_id, db)
        try:
            formatted = format_invoice_no(invoice_no)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

        completed.invoice_no = formatted  # type: ignore[assignment]
        try:
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            log.error("Could not save invoice no for %s: %s", completed.booking_no, exc, exc_info=True)
            raise HTTPException(status_code=500, detail="Failed to update invoice number.")
        db.refresh(completed)
        log.info("Invoice %s set on %s by %s", formatted, completed.booking_no, username)
        return completed
