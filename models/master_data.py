from datetime import datetime

from sqlalchemy import Column, DateTime, JSON, String

from core.database import Base


MASTER_CATEGORIES = (
    "location",
    "customer",
    "line",
    "pol",
    "pod",
    "fpod",
    "vessel",
    "equipmentType",
)


class MasterList(Base):
    """One ordered list of reference records per master-data category."""

    __tablename__ = "master_data"

    category = Column(String(32), primary_key=True)
    records = Column(JSON, nullable=False, default=list)
    updated_by = Column(String(64), nullable=True)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow)
