from datetime import datetime

from sqlalchemy import Column, DateTime, JSON, String

from core.database import Base


class LocalChargeGrid(Base):
    """Local-charge tariff for one (line, port of loading) pair."""

    __tablename__ = "local_charges"

    id = Column(String(255), primary_key=True)  # quote("<line>||<pol>")
    line = Column(String(128), nullable=False)
    pol = Column(String(128), nullable=False)
    grid = Column(JSON, nullable=False, default=dict)
    currencies = Column(JSON, nullable=False, default=dict)
    updated_by = Column(String(64), nullable=True)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow)
