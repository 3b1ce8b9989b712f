from datetime import datetime

from sqlalchemy import Column, DateTime, String

from core.database import Base
from models.booking import BookingFieldsMixin, _new_document_id


class CompletedFile(BookingFieldsMixin, Base):
    """Terminal snapshot of a booking entry whose B/L has been released."""

    __tablename__ = "completed_files"

    id = Column(String(36), primary_key=True, default=_new_document_id)
    source_entry_id = Column(String(36), index=True, nullable=True)
    status = Column(String(16), nullable=False, default="completed")
    invoice_no = Column(String(64), nullable=True)
    completed_by = Column(String(64), nullable=True)
    completed_at = Column(DateTime(timezone=True), default=datetime.utcnow)
