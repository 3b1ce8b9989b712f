import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, String, Text

from core.database import Base


class BookingRequest(Base):
    __tablename__ = "booking_requests"

    id = Column(String(36), primary_key=True, default=lambda: uuid.uuid4().hex)
    location = Column(String(128), nullable=False)
    req_date = Column(String(10), nullable=False)  # YYYY-MM-DD
    customer = Column(String(255), nullable=False)
    shipper = Column(String(255), nullable=True)
    pol = Column(String(128), nullable=False)
    pod = Column(String(128), nullable=False)
    equipment_type = Column(String(64), nullable=False)
    cargo = Column(String(255), nullable=True)
    cargo_wt = Column(String(64), nullable=True)
    line = Column(String(128), nullable=False)
    sq_ra = Column(String(128), nullable=False)
    vessel = Column(String(128), nullable=True)
    etd = Column(String(10), nullable=True)
    remarks = Column(Text, nullable=True)
    booking_reference = Column(String(64), nullable=True)
    booking_no = Column(String(64), nullable=True)
    created_by = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow)
