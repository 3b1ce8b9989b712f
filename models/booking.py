"""
Booking entry model.

A booking entry is mutated in place while it moves through the
documentation checklist and is moved to ``completed_files`` once the
B/L is released.
"""
import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, JSON, String, Text

from core.database import Base


def _new_document_id() -> str:
    return uuid.uuid4().hex


class BookingFieldsMixin:
    """Columns shared by active booking entries and completed files."""

    # Routing references: either an inline string or a copy of the master record
    location = Column(JSON, nullable=True)
    customer = Column(JSON, nullable=True)
    line = Column(JSON, nullable=True)
    pol = Column(JSON, nullable=True)
    pod = Column(JSON, nullable=True)
    fpod = Column(JSON, nullable=True)
    vessel = Column(JSON, nullable=True)

    booking_no = Column(String(64), index=True, nullable=False)
    booking_date = Column(String(32), nullable=True)
    booking_validity = Column(String(32), nullable=True)
    voyage = Column(String(64), nullable=True)

    equipment = Column(JSON, nullable=False, default=list)
    volume = Column(String(255), nullable=True)
    container_no = Column(String(255), nullable=True)

    port_cut_off = Column(String(20), nullable=True)
    si_cut_off = Column(String(20), nullable=True)
    etd = Column(String(32), nullable=True)
    invoice_due_date = Column(String(32), nullable=True)

    vgm_filed = Column(Boolean, nullable=False, default=False)
    si_filed = Column(Boolean, nullable=False, default=False)
    first_printed = Column(Boolean, nullable=False, default=False)
    corrections_finalised = Column(Boolean, nullable=False, default=False)
    liner_invoice = Column(Boolean, nullable=False, default=False)
    bl_released = Column(Boolean, nullable=False, default=False)
    isf_sent = Column(Boolean, nullable=False, default=False)
    sob = Column(Boolean, nullable=False, default=False)
    final_dg = Column(Boolean, nullable=False, default=False)

    bl_no = Column(String(64), nullable=True)
    bl_type = Column(String(16), nullable=True)
    sob_date = Column(String(32), nullable=True)
    remarks = Column(Text, nullable=True)
    reference_no = Column(String(64), nullable=True)

    # Audit sub-structure
    created_by = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow)
    last_edited_by = Column(String(64), nullable=True)
    last_edited_at = Column(DateTime(timezone=True), default=datetime.utcnow)
    actions = Column(JSON, nullable=False, default=list)


# Every column a completed file copies verbatim from the entry it was released from
BOOKING_COPY_FIELDS = tuple(
    name for name, value in vars(BookingFieldsMixin).items() if isinstance(value, Column)
)


class BookingEntry(BookingFieldsMixin, Base):
    __tablename__ = "entries"

    id = Column(String(36), primary_key=True, default=_new_document_id)
