from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.dependencies import require_manage_master, require_master
from core.database import get_db
from models.master_data import MASTER_CATEGORIES
from models.user import User
from schemas.master_data import (
    MasterAddResponse,
    MasterCategoriesResponse,
    MasterListResponse,
    MasterRecordPayload,
)
from services.master_data_service import FIELD_DEFINITIONS, MasterDataService

router = APIRouter(prefix="/master", tags=["master-data"])


@router.get("/", response_model=MasterCategoriesResponse)
def list_categories(current_user: User = Depends(require_master)):
    return {"categories": list(MASTER_CATEGORIES), "fields": FIELD_DEFINITIONS}


@router.get("/{category}", response_model=MasterListResponse)
def list_records(
    category: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_master),
):
    return {
        "category": category,
        "records": MasterDataService.list_records(category, db),
        "options": MasterDataService.display_options(category, db),
    }


@router.post("/{category}", response_model=MasterAddResponse)
def add_record(
    category: str,
    payload: MasterRecordPayload,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_master),
):
    """Append a record unless an identical one is already listed."""
    added, records = MasterDataService.add_record(category, payload.record, current_user.username, db)
    message = f"{category} added successfully" if added else f"This {category} already exists."
    return {"category": category, "added": added, "message": message, "records": records}


@router.put("/{category}/{index}", response_model=MasterListResponse)
def update_record(
    category: str,
    index: int,
    payload: MasterRecordPayload,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manage_master),
):
    records = MasterDataService.update_record(category, index, payload.record, current_user.username, db)
    return {"category": category, "records": records, "options": MasterDataService.display_options(category, db)}


@router.delete("/{category}/{index}", response_model=MasterListResponse)
def delete_record(
    category: str,
    index: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manage_master),
):
    records = MasterDataService.delete_record(category, index, current_user.username, db)
    return {"category": category, "records": records, "options": MasterDataService.display_options(category, db)}
