from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class LocalChargesSave(BaseModel):
    line: str = Field(..., min_length=1)
    pol: str = Field(..., min_length=1)
    grid: dict[str, dict[str, str]] = Field(default_factory=dict)
    currencies: dict[str, dict[str, str]] = Field(default_factory=dict)


class LocalChargesResponse(BaseModel):
    id: str
    line: str
    pol: str
    charges: list[str]
    equipment_types: list[str]
    grid: dict[str, dict[str, str]]
    currencies: dict[str, dict[str, str]]
    saved: bool
    updated_by: Optional[str] = None
    updated_at: Optional[datetime] = None


class LocalChargesOptions(BaseModel):
    lines: list[str]
    pols: list[str]
