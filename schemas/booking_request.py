from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BookingRequestBase(BaseModel):
    shipper: Optional[str] = None
    cargo: Optional[str] = None
    cargo_wt: Optional[str] = None
    vessel: Optional[str] = None
    etd: Optional[date] = None
    remarks: Optional[str] = None
    booking_reference: Optional[str] = None
    booking_no: Optional[str] = None


class BookingRequestCreate(BookingRequestBase):
    location: str = Field(..., min_length=1)
    req_date: date
    customer: str = Field(..., min_length=1)
    pol: str = Field(..., min_length=1)
    pod: str = Field(..., min_length=1)
    equipment_type: str = Field(..., min_length=1)
    line: str = Field(..., min_length=1)
    sq_ra: str = Field(..., min_length=1)

    @field_validator("location", "customer", "pol", "pod", "equipment_type", "line", "sq_ra", mode="before")
    @classmethod
    def not_blank(cls, v):
        if isinstance(v, str) and not v.strip():
            raise ValueError("Field is required")
        return v.strip() if isinstance(v, str) else v


class BookingRequestUpdate(BookingRequestBase):
    location: Optional[str] = None
    req_date: Optional[date] = None
    customer: Optional[str] = None
    pol: Optional[str] = None
    pod: Optional[str] = None
    equipment_type: Optional[str] = None
    line: Optional[str] = None
    sq_ra: Optional[str] = None


class BookingRequestResponse(BaseModel):
    id: str
    location: str
    req_date: str
    customer: str
    shipper: Optional[str]
    pol: str
    pod: str
    equipment_type: str
    cargo: Optional[str]
    cargo_wt: Optional[str]
    line: str
    sq_ra: str
    vessel: Optional[str]
    etd: Optional[str]
    remarks: Optional[str]
    booking_reference: Optional[str]
    booking_no: Optional[str]
    created_by: Optional[str]
    created_at: Optional[datetime]
    model_config = ConfigDict(from_attributes=True)


class BookingRequestExport(BaseModel):
    ids: list[str] = Field(default_factory=list, description="Selected rows; all rows when empty")
