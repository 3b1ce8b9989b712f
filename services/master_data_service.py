"""
Master data: one ordered list of reference records per category.

Records are appended by the "add new" dialogs and by booking creation,
and edited or removed by index from the manager screen.
"""
import logging
import re
from typing import Any, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from models.master_data import MASTER_CATEGORIES, MasterList

log = logging.getLogger(__name__)

FIELD_DEFINITIONS: dict[str, list[str]] = {
    "location": ["name"],
    "customer": [
        "name",
        "contactPerson",
        "customerEmail",
        "contactNumber",
        "address",
        "salesPerson",
        "salesPersonEmail",
    ],
    "line": ["name", "contactPerson", "email", "contactNumber"],
    "pol": ["name"],
    "pod": ["name"],
    "fpod": ["name", "country"],
    "vessel": ["name", "flag"],
    "equipmentType": ["type"],
}

# Fields compared when deciding whether a record from the add dialog already exists
DEDUP_FIELDS: dict[str, list[str]] = {
    "customer": FIELD_DEFINITIONS["customer"],
    "fpod": ["name", "country"],
    "vessel": ["name", "flag"],
    "equipmentType": ["type"],
}

LIST_FIELDS = {"customerEmail", "salesPersonEmail"}
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def key_field(category: str) -> str:
    return "type" if category == "equipmentType" else "name"


def record_label(category: str, record: Any) -> str:
    if isinstance(record, str):
        return record
    if not isinstance(record, dict):
        return str(record or "")
    if category == "fpod":
        return f"{record.get('name', '')}, {record.get('country', '')}"
    return str(record.get("name") or record.get("type") or "")


def _split_list(value: Any, uppercase: bool) -> list[str]:
    if value is None:
        return []
    items = value if isinstance(value, list) else str(value).split(",")
    cleaned = [str(item).strip() for item in items]
    return [item.upper() if uppercase else item for item in cleaned if item]


class MasterDataService:

    @staticmethod
    def check_category(category: str) -> str:
        if category not in MASTER_CATEGORIES:
            raise HTTPException(
                status_code=404,
                detail=f"Unknown master category '{category}'. Use: {list(MASTER_CATEGORIES)}"
            )
        return category

    @staticmethod
    def _load(category: str, db: Session, for_update: bool = False) -> Optional[MasterList]:
        query = db.query(MasterList).filter(MasterList.category == category)
        if for_update:
            query = query.with_for_update()
        return query.first()

    @staticmethod
    def list_records(category: str, db: Session) -> list[dict]:
        MasterDataService.check_category(category)
        master = MasterDataService._load(category, db)
        return list(master.records or []) if master else []

    @staticmethod
    def display_options(category: str, db: Session) -> list[str]:
        labels = [record_label(category, item) for item in MasterDataService.list_records(category, db)]
        return [label for label in labels if label]

    @staticmethod
    def find_record(category: str, name: str, db: Session) -> Optional[dict]:
        """First record whose key field equals ``name`` (case-insensitive)."""
        wanted = (name or "").strip().upper()
        if not wanted:
            return None
        field = key_field(category)
        for item in MasterDataService.list_records(category, db):
            if isinstance(item, dict) and str(item.get(field) or "").strip().upper() == wanted:
                return item
        return None

    @staticmethod
    def normalize_record(category: str, record: dict, uppercase: bool = True) -> dict:
        """Keep the category's known fields, fill blanks, validate the key and emails."""
        MasterDataService.check_category(category)
        normalized: dict[str, Any] = {}
        for field in FIELD_DEFINITIONS[category]:
            value = record.get(field)
            if field in LIST_FIELDS:
                normalized[field] = _split_list(value, uppercase)
            else:
                text = "" if value is None else str(value).strip()
                normalized[field] = text.upper() if uppercase else text

        key = key_field(category)
        if not normalized[key]:
            raise HTTPException(status_code=400, detail=f"Please enter all required fields for {category}.")

        if category == "customer":
            for field, label in (("customerEmail", "customer"), ("salesPersonEmail", "sales person")):
                if any(not EMAIL_PATTERN.match(email) for email in normalized[field]):
                    raise HTTPException(status_code=400, detail=f"Please enter valid {label} email addresses.")
        return normalized

    @staticmethod
    def is_duplicate(category: str, records: list, candidate: dict) -> bool:
        fields = DEDUP_FIELDS.get(category, ["name"])
        for item in records:
            if not isinstance(item, dict):
                continue
            if all(item.get(field, [] if field in LIST_FIELDS else "") == candidate.get(field) for field in fields):
                return True
        return False

    @staticmethod
    def add_record(category: str, record: dict, username: Optional[str], db: Session) -> tuple[bool, list]:
        """Append ``record`` unless an equal one is already listed. Returns (added, records)."""
        candidate = MasterDataService.normalize_record(category, record)
        master = MasterDataService._load(category, db)
        records = list(master.records or []) if master else []

        if MasterDataService.is_duplicate(category, records, candidate):
            return False, records

        records.append(candidate)
        _save_records(category, records, username, db, master)
        log.info("Master %s: added %s", category, record_label(category, candidate))
        return True, records

    @staticmethod
    def ensure_value(category: str, value: Any, username: Optional[str], db: Session) -> bool:
        """
        Register a routing value typed on the booking form.

        Membership is tested on the key field only; embedded reference
        objects were picked from the list and are never re-added.
        """
        MasterDataService.check_category(category)
        if isinstance(value, dict) or value is None:
            return False
        name = str(value).strip()
        if not name:
            return False

        master = MasterDataService._load(category, db)
        records = list(master.records or []) if master else []
        field = key_field(category)
        if any(isinstance(item, dict) and item.get(field) == name for item in records):
            return False

        minimal = {key: ([] if key in LIST_FIELDS else "") for key in FIELD_DEFINITIONS[category]}
        minimal[field] = name
        records.append(minimal)
        _save_records(category, records, username, db, master)
        log.info("Master %s: registered %s from booking form", category, name)
        return True

    @staticmethod
    def update_record(category: str, index: int, record: dict, username: Optional[str], db: Session) -> list:
        MasterDataService.check_category(category)
        replacement = MasterDataService.normalize_record(category, record, uppercase=False)
        master = MasterDataService._load(category, db, for_update=True)
        records = list(master.records or []) if master else []
        if index < 0 or index >= len(records):
            db.rollback()
            raise HTTPException(status_code=404, detail="Master record not found")

        records[index] = replacement
        _save_records(category, records, username, db, master)
        return records

    @staticmethod
    def delete_record(category: str, index: int, username: Optional[str], db: Session) -> list:
        MasterDataService.check_category(category)
        master = MasterDataService._load(category, db, for_update=True)
        records = list(master.records or []) if master else []
        if index < 0 or index >= len(records):
            db.rollback()
            raise HTTPException(status_code=404, detail="Master record not found")

        removed = records.pop(index)
        _save_records(category, records, username, db, master)
        log.info("Master %s: deleted %s", category, record_label(category, removed))
        return records


def _save_records(
    category: str,
    records: list,
    username: Optional[str],
    db: Session,
    master: Optional[MasterList],
) -> MasterList:
    if master is None:
        master = MasterList(category=category, records=records, updated_by=username)
        db.add(master)
    else:
        master.records = records  # type: ignore[assignment]
        master.updated_by = username  # type: ignore[assignment]
    db.commit()
    return master
