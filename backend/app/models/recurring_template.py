"""Recurring invoice template: a blueprint that periodically generates invoices."""

from sqlalchemy import JSON, Boolean, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from backend.app.core.time import utc_now
from backend.app.db.base_class import Base


class RecurringInvoiceTemplate(Base):
    __tablename__ = "recurring_invoice_templates"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    description = Column(Text, nullable=True)
    amount = Column(Numeric(10, 2), nullable=False)
    frequency = Column(String(20), nullable=False, default="monthly")
    payment_terms = Column(String(20), nullable=False, default="net_30")
    next_invoice_date = Column(Date, nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    line_items = Column(JSON, nullable=False, default=list)
    tax_amount = Column(Numeric(10, 2), nullable=False, default=0)
    tax_rate_id = Column(String(50), nullable=True)
    shipping_amount = Column(Numeric(10, 2), nullable=False, default=0)
    shipping_rate_id = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)
    last_generated_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    client = relationship("Client", back_populates="recurring_templates")
    invoices = relationship("Invoice", back_populates="template")
