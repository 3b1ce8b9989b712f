from datetime import date
from typing import Optional

from pydantic import BaseModel


class PendingCounts(BaseModel):
    pending_si: int
    pending_first_print: int
    pending_correction: int
    pending_bl: int
    pending_invoice: int
    pending_dg: int


class SailingPoint(BaseModel):
    day: date
    label: str
    shipments: int


class ShipperCount(BaseModel):
    shipper: str
    shipments: int


class DashboardRow(BaseModel):
    id: str
    status: str
    booking_no: str
    location: str
    customer: str
    line: str
    vessel: str
    fpod: str
    volume: Optional[str] = None
    etd: Optional[str] = None


class DashboardSummary(BaseModel):
    location: Optional[str]
    start_date: date
    end_date: date
    counts: PendingCounts
    shipped_in_range: int
    sailings: list[SailingPoint]
    top_shippers: list[ShipperCount]
    detailed: list[DashboardRow]
