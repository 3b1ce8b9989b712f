from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.dependencies import require_locals
from core.database import get_db
from models.user import User
from schemas.local_charges import LocalChargesOptions, LocalChargesResponse, LocalChargesSave
from services.local_charges_service import LocalChargesService

router = APIRouter(prefix="/locals", tags=["local-charges"])


@router.get("/options", response_model=LocalChargesOptions)
def list_options(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_locals),
):
    """Line and POL choices taken from master data."""
    return LocalChargesService.options(db)


@router.get("/", response_model=LocalChargesResponse)
def get_grid(
    line: str,
    pol: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_locals),
):
    return LocalChargesService.get_grid(line, pol, db)


@router.put("/", response_model=LocalChargesResponse)
def save_grid(
    payload: LocalChargesSave,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_locals),
):
    return LocalChargesService.save_grid(payload, current_user.username, db)
