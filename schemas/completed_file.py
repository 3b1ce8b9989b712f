from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from schemas.booking import BookingResponse


class CompletedFileResponse(BookingResponse):
    source_entry_id: Optional[str]
    status: str
    invoice_no: Optional[str]
    completed_by: Optional[str]
    completed_at: Optional[datetime]


class InvoiceNoUpdate(BaseModel):
    invoice_no: str = Field(..., description="Invoice serial; stored as DMS/<invoice_no>/<FY>")
