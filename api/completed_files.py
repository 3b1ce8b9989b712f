from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.dependencies import require_completed_files
from core.database import get_db
from models.user import User
from schemas.completed_file import CompletedFileResponse, InvoiceNoUpdate
from services.completed_file_service import CompletedFileService
from services.export_service import ExportService

router = APIRouter(
    prefix="/completed-files",
    tags=["completed-files"],
)


@router.get("/", response_model=list[CompletedFileResponse])
def list_completed_files(
    search: Optional[str] = None,
    location: Optional[list[str]] = Query(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_completed_files),
):
    return CompletedFileService.list_files(db, search, location)


@router.get("/locations")
def list_locations(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_completed_files),
):
    return {"locations": CompletedFileService.distinct_locations(db)}


@router.get("/export")
def export_completed_files(
    search: Optional[str] = None,
    location: Optional[list[str]] = Query(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_completed_files),
):
    return ExportService.completed_files(CompletedFileService.list_files(db, search, location))


@router.get("/{file_id}", response_model=CompletedFileResponse)
def get_completed_file(
    file_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_completed_files),
):
    return CompletedFileService.get_file(file_id, db)


@router.put("/{file_id}/invoice", response_model=CompletedFileResponse)
def update_invoice_no(
    file_id: str,
    payload: InvoiceNoUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_completed_files),
):
    """Store the invoice number as DMS/<serial>/<financial year>."""
    return CompletedFileService.update_invoice_no(file_id, payload.invoice_no, current_user.username, db)
