"""Client model: the billed party referenced by invoices and templates."""

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from backend.app.core.time import utc_now
from backend.app.db.base_class import Base


class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String(20), nullable=True)
    company = Column(String(100), nullable=True)
    address = Column(String(255), nullable=True)
    city = Column(String(50), nullable=True)
    state = Column(String(50), nullable=True)
    zip_code = Column(String(10), nullable=True)
    country = Column(String(2), nullable=False, default="US")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    invoices = relationship("Invoice", back_populates="client")
    recurring_templates = relationship(
        "RecurringInvoiceTemplate", back_populates="client", cascade="all, delete-orphan"
    )

    @property
    def formatted_address(self) -> str:
        """Single-line address used for the invoice snapshot."""
        locality = " ".join(part for part in (self.state, self.zip_code) if part)
        parts = [part for part in (self.address, self.city, locality) if part]
        return ", ".join(parts)
