"""
Local charges tariff grid per (line, port of loading).
"""
import logging
from datetime import datetime
from typing import Optional
from urllib.parse import quote

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.local_charges import LocalChargeGrid
from schemas.local_charges import LocalChargesSave
from services.master_data_service import MasterDataService

log = logging.getLogger(__name__)

CHARGE_ROWS = (
    "THC",
    "DOC",
    "SEAL",
    "HAZDOC",
    "MUC",
    "TOLL",
    "SEAWAY BL FEE",
    "Surrender Charges",
    "Admin Fee",
    "Equipment Charges",
    "VTS",
)
EQUIPMENT_COLUMNS = ("20 DV", "40DV", "20HAZ", "40HAZ")
CURRENCIES = ("", "USD", "INR")


def make_doc_id(line: str, pol: str) -> str:
    # Same escaping as encodeURIComponent
    return quote(f"{line}||{pol}", safe="!*'()")


def empty_grid() -> dict[str, dict[str, str]]:
    return {row: {col: "" for col in EQUIPMENT_COLUMNS} for row in CHARGE_ROWS}


def _fill(stored: Optional[dict]) -> dict[str, dict[str, str]]:
    grid = empty_grid()
    for row, cells in (stored or {}).items():
        if row not in grid or not isinstance(cells, dict):
            continue
        for col, value in cells.items():
            if col in grid[row] and value is not None:
                grid[row][col] = str(value)
    return grid


def _check_names(grid: dict, label: str) -> None:
    unknown_rows = [row for row in grid if row not in CHARGE_ROWS]
    if unknown_rows:
        raise HTTPException(status_code=400, detail=f"Unknown charge rows in {label}: {unknown_rows}")
    for row, cells in grid.items():
        unknown_cols = [col for col in cells if col not in EQUIPMENT_COLUMNS]
        if unknown_cols:
            raise HTTPException(status_code=400, detail=f"Unknown equipment columns in {label}: {unknown_cols}")


class LocalChargesService:

    @staticmethod
    def _response(line: str, pol: str, record: Optional[LocalChargeGrid]) -> dict:
        return {
            "id": make_doc_id(line, pol),
            "line": line,
            "pol": pol,
            "charges": list(CHARGE_ROWS),
            "equipment_types": list(EQUIPMENT_COLUMNS),
            "grid": _fill(record.grid if record else None),
            "currencies": _fill(record.currencies if record else None),
            "saved": record is not None,
            "updated_by": record.updated_by if record else None,
            "updated_at": record.updated_at if record else None,
        }

    @staticmethod
    def get_grid(line: str, pol: str, db: Session) -> dict:
        record = db.query(LocalChargeGrid).filter(LocalChargeGrid.id == make_doc_id(line, pol)).first()
        return LocalChargesService._response(line, pol, record)

    @staticmethod
    def save_grid(payload: LocalChargesSave, username: Optional[str], db: Session) -> dict:
        """Overwrite the whole grid for the pair."""
        _check_names(payload.grid, "grid")
        _check_names(payload.currencies, "currencies")
        bad = sorted({
            value for cells in payload.currencies.values() for value in cells.values() if value not in CURRENCIES
        })
        if bad:
            raise HTTPException(status_code=400, detail=f"Unknown currencies: {bad}. Use USD or INR.")

        doc_id = make_doc_id(payload.line, payload.pol)
        record = db.query(LocalChargeGrid).filter(LocalChargeGrid.id == doc_id).first()
        if record is None:
            record = LocalChargeGrid(id=doc_id, line=payload.line, pol=payload.pol)
            db.add(record)
        record.grid = _fill(payload.grid)  # type: ignore[assignment]
        record.currencies = _fill(payload.currencies)  # type: ignore[assignment]
        record.updated_by = username  # type: ignore[assignment]
        record.updated_at = datetime.utcnow()  # type: ignore[assignment]

        try:
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            log.error("Could not save local charges %s: %s", doc_id, exc, exc_info=True)
            raise HTTPException(status_code=500, detail="Failed to save local charges.")
        db.refresh(record)
        log.info("Local charges for %s / %s saved by %s", payload.line, payload.pol, username)
        return LocalChargesService._response(payload.line, payload.pol, record)

    @staticmethod
    def options(db: Session) -> dict:
        return {
            "lines": MasterDataService.display_options("line", db),
            "pols": MasterDataService.display_options("pol", db),
        }
