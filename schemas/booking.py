from datetime import date, datetime
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from services.formatting import format_cut_off

# Inline value or a copy of the master record it was picked from
Reference = Union[str, dict[str, Any]]

LifecycleFlag = Literal[
    "vgm_filed",
    "si_filed",
    "first_printed",
    "corrections_finalised",
    "liner_invoice",
    "bl_released",
    "isf_sent",
    "sob",
    "final_dg",
]


def _normalize_reference(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip().upper()
    if isinstance(value, dict):
        if not (value.get("name") or value.get("type")):
            raise ValueError("Reference object must carry a name or type")
        return value
    return value


class EquipmentLine(BaseModel):
    type: str = Field(..., min_length=1)
    qty: int = Field(1, gt=0, description="Quantity must be a positive number greater than 0")
    container_no: Optional[str] = None

    @field_validator("type", "container_no", mode="before")
    @classmethod
    def upper(cls, v):
        return v.strip().upper() if isinstance(v, str) else v


class BookingCreate(BaseModel):
    location: Reference
    customer: Reference
    line: Reference
    pol: Reference
    pod: Reference
    fpod: Reference
    vessel: Reference
    booking_no: str = Field(..., min_length=1)
    booking_date: Optional[str] = None
    booking_validity: Optional[str] = None
    voyage: Optional[str] = None
    equipment: list[EquipmentLine] = Field(..., min_length=1)
    port_cut_off: Optional[str] = None
    si_cut_off: Optional[str] = None
    etd: Optional[str] = None
    invoice_due_date: Optional[str] = None
    remarks: Optional[str] = None
    reference_no: Optional[str] = None
    add_missing_to_master: bool = True

    @field_validator("location", "customer", "line", "pol", "pod", "fpod", "vessel", mode="before")
    @classmethod
    def references(cls, v):
        return _normalize_reference(v)

    @field_validator("booking_no", "voyage", mode="before")
    @classmethod
    def upper_text(cls, v):
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("port_cut_off", "si_cut_off", mode="before")
    @classmethod
    def cut_off(cls, v):
        return format_cut_off(v)


class BookingUpdate(BaseModel):
    """Grid edit. Lifecycle flags are only changed through the checklist."""

    location: Optional[Reference] = None
    customer: Optional[Reference] = None
    line: Optional[Reference] = None
    pol: Optional[Reference] = None
    pod: Optional[Reference] = None
    fpod: Optional[Reference] = None
    vessel: Optional[Reference] = None
    booking_no: Optional[str] = Field(None, min_length=1)
    booking_date: Optional[str] = None
    booking_validity: Optional[str] = None
    voyage: Optional[str] = None
    equipment: Optional[list[EquipmentLine]] = Field(None, min_length=1)
    container_no: Optional[str] = None
    port_cut_off: Optional[str] = None
    si_cut_off: Optional[str] = None
    etd: Optional[str] = None
    invoice_due_date: Optional[str] = None
    bl_no: Optional[str] = None
    bl_type: Optional[Literal["OBL", "SEAWAY"]] = None
    remarks: Optional[str] = None
    reference_no: Optional[str] = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("booking_no", "equipment", mode="before")
    @classmethod
    def not_null(cls, v, info):
        # Omit the field to leave it unchanged; null would clear a required value
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    @field_validator("location", "customer", "line", "pol", "pod", "fpod", "vessel", mode="before")
    @classmethod
    def references(cls, v):
        return _normalize_reference(v)

    @field_validator("booking_no", "voyage", mode="before")
    @classmethod
    def upper_text(cls, v):
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("port_cut_off", "si_cut_off", mode="before")
    @classmethod
    def cut_off(cls, v):
        return format_cut_off(v)


class FlagToggleRequest(BaseModel):
    flag: LifecycleFlag
    value: bool
    bl_type: Optional[str] = Field(None, description="Required when filing the SI: OBL or SEAWAY")
    bl_no: Optional[str] = Field(None, description="Required when ticking first print")
    sob_date: Optional[date] = Field(None, description="Required when ticking SOB")
    notify: bool = Field(False, description="Send the SOB notification after ticking SOB")


class BookingResponse(BaseModel):
    id: str
    location: Optional[Reference]
    customer: Optional[Reference]
    line: Optional[Reference]
    pol: Optional[Reference]
    pod: Optional[Reference]
    fpod: Optional[Reference]
    vessel: Optional[Reference]
    booking_no: str
    booking_date: Optional[str]
    booking_validity: Optional[str]
    voyage: Optional[str]
    equipment: list[dict[str, Any]]
    volume: Optional[str]
    container_no: Optional[str]
    port_cut_off: Optional[str]
    si_cut_off: Optional[str]
    etd: Optional[str]
    invoice_due_date: Optional[str]
    vgm_filed: bool
    si_filed: bool
    first_printed: bool
    corrections_finalised: bool
    liner_invoice: bool
    bl_released: bool
    isf_sent: bool
    sob: bool
    final_dg: bool
    bl_no: Optional[str]
    bl_type: Optional[str]
    sob_date: Optional[str]
    remarks: Optional[str]
    reference_no: Optional[str]
    created_by: Optional[str]
    created_at: Optional[datetime]
    last_edited_by: Optional[str]
    last_edited_at: Optional[datetime]
    model_config = ConfigDict(from_attributes=True)


class NotificationResult(BaseModel):
    sent: bool
    detail: str


class FlagToggleResponse(BaseModel):
    message: str
    entry: Optional[BookingResponse] = None
    completed_file_id: Optional[str] = None
    notification: Optional[NotificationResult] = None


class AuditAction(BaseModel):
    field: str
    user: str
    value: str
    timestamp: str


class AuditTrailResponse(BaseModel):
    created_by: Optional[str]
    created_at: Optional[datetime]
    last_edited_by: Optional[str]
    last_edited_at: Optional[datetime]
    actions: list[AuditAction]
