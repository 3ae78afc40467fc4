"""Invoice schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from backend.app.models.enums import InvoiceStatus, InvoiceType, PaymentTerms
from backend.app.schemas.line_item import LineItem


class InvoiceBase(BaseModel):
    client_id: int
    description: Optional[str] = None
    amount: Decimal = Field(..., ge=0)
    line_items: list[LineItem] = Field(default_factory=list)
    tax_amount: Decimal = Field(Decimal("0"), ge=0)
    tax_rate_id: Optional[str] = Field(None, max_length=50)
    shipping_amount: Decimal = Field(Decimal("0"), ge=0)
    shipping_rate_id: Optional[str] = Field(None, max_length=50)
    payment_terms: Optional[PaymentTerms] = None
    notes: Optional[str] = None


class InvoiceCreate(InvoiceBase):
    invoice_number: Optional[str] = Field(None, min_length=3, max_length=50)
    status: InvoiceStatus = InvoiceStatus.DRAFT
    type: InvoiceType = InvoiceType.ONE_TIME
    template_id: Optional[int] = None
    issue_date: Optional[date] = None
    due_date: Optional[date] = None

    model_config = ConfigDict(use_enum_values=True)


class InvoiceUpdate(BaseModel):
    description: Optional[str] = None
    amount: Optional[Decimal] = Field(None, ge=0)
    line_items: Optional[list[LineItem]] = None
    tax_amount: Optional[Decimal] = Field(None, ge=0)
    tax_rate_id: Optional[str] = Field(None, max_length=50)
    shipping_amount: Optional[Decimal] = Field(None, ge=0)
    shipping_rate_id: Optional[str] = Field(None, max_length=50)
    status: Optional[InvoiceStatus] = None
    payment_terms: Optional[PaymentTerms] = None
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    notes: Optional[str] = None

    model_config = ConfigDict(use_enum_values=True)


class InvoiceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    invoice_number: str
    client_id: int
    template_id: Optional[int]
    type: str

    client_name: Optional[str]
    client_email: Optional[str]
    client_phone: Optional[str]
    client_address: Optional[str]

    description: Optional[str]
    line_items: list[LineItem]
    amount: Decimal
    tax_amount: Decimal
    tax_rate_id: Optional[str]
    shipping_amount: Decimal
    shipping_rate_id: Optional[str]
    total_amount: Decimal
    amount_paid: Decimal
    balance_due: Decimal

    status: str
    payment_terms: Optional[str]
    issue_date: date
    due_date: date
    notes: Optional[str]

    created_at: datetime
    updated_at: datetime
