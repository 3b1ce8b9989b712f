from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.dependencies import require_dashboard
from core.database import get_db
from models.user import User
from schemas.booking import BookingResponse
from schemas.dashboard import DashboardSummary
from services.dashboard_service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/", response_model=DashboardSummary)
def get_summary(
    location: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_dashboard),
):
    """Pending counts, sailings per day and top shippers. Range defaults to the last 7 days."""
    return DashboardService.summary(db, location, start_date, end_date)


@router.get("/pending/{bucket}", response_model=list[BookingResponse])
def pending_view(
    bucket: str,
    location: Optional[str] = None,
    q: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_dashboard),
):
    return DashboardService.pending_view(bucket, db, location, q)
