"""Saved report snapshots."""

from sqlalchemy import JSON, Column, Date, DateTime, Integer, String

from backend.app.core.time import utc_now
from backend.app.db.base_class import Base


class Report(Base):
    __tablename__ = "reports"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    type = Column(String(20), nullable=False, index=True)
    from_date = Column(Date, nullable=True)
    to_date = Column(Date, nullable=True)
    data = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
