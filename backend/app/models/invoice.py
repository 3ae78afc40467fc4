"""Invoice model for billing."""

from sqlalchemy import JSON, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from backend.app.core.time import utc_now
from backend.app.db.base_class import Base


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, index=True)
    invoice_number = Column(String(50), nullable=False, unique=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    template_id = Column(
        Integer, ForeignKey("recurring_invoice_templates.id", ondelete="SET NULL"), nullable=True, index=True
    )
    type = Column(String(20), nullable=False, default="one-time")

    # Client snapshot taken when the invoice is created
    client_name = Column(String(100), nullable=True)
    client_email = Column(String(255), nullable=True)
    client_phone = Column(String(20), nullable=True)
    client_address = Column(String(255), nullable=True)

    description = Column(Text, nullable=True)
    line_items = Column(JSON, nullable=False, default=list)
    amount = Column(Numeric(10, 2), nullable=False, default=0)
    tax_amount = Column(Numeric(10, 2), nullable=False, default=0)
    tax_rate_id = Column(String(50), nullable=True)
    shipping_amount = Column(Numeric(10, 2), nullable=False, default=0)
    shipping_rate_id = Column(String(50), nullable=True)
    total_amount = Column(Numeric(10, 2), nullable=False, default=0)
    amount_paid = Column(Numeric(10, 2), nullable=False, default=0)
    balance_due = Column(Numeric(10, 2), nullable=False, default=0)

    status = Column(String(20), nullable=False, default="draft", index=True)
    payment_terms = Column(String(20), nullable=True)
    issue_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    client = relationship("Client", back_populates="invoices")
    template = relationship("RecurringInvoiceTemplate", back_populates="invoices")
    payments = relationship("Payment", back_populates="invoice")
