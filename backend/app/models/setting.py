"""Key/value settings persisted as JSON text, grouped by category."""

from sqlalchemy import Column, String, Text

from backend.app.db.base_class import Base


class Setting(Base):
    __tablename__ = "settings"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)
    category = Column(String(50), nullable=False, default="general", index=True)
