"""Recurring invoice template schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from backend.app.models.enums import Frequency, PaymentTerms
from backend.app.schemas.line_item import LineItem


class RecurringTemplateBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    client_id: int
    description: Optional[str] = None
    amount: Decimal = Field(..., ge=0)
    frequency: Frequency = Frequency.MONTHLY
    payment_terms: PaymentTerms = PaymentTerms.NET_30
    next_invoice_date: date
    is_active: bool = True
    line_items: list[LineItem] = Field(default_factory=list)
    tax_amount: Decimal = Field(Decimal("0"), ge=0)
    tax_rate_id: Optional[str] = Field(None, max_length=50)
    shipping_amount: Decimal = Field(Decimal("0"), ge=0)
    shipping_rate_id: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None


class RecurringTemplateCreate(RecurringTemplateBase):
    model_config = ConfigDict(use_enum_values=True)


class RecurringTemplateUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    client_id: Optional[int] = None
    description: Optional[str] = None
    amount: Optional[Decimal] = Field(None, ge=0)
    frequency: Optional[Frequency] = None
    payment_terms: Optional[PaymentTerms] = None
    next_invoice_date: Optional[date] = None
    is_active: Optional[bool] = None
    line_items: Optional[list[LineItem]] = None
    tax_amount: Optional[Decimal] = Field(None, ge=0)
    tax_rate_id: Optional[str] = Field(None, max_length=50)
    shipping_amount: Optional[Decimal] = Field(None, ge=0)
    shipping_rate_id: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None

    model_config = ConfigDict(use_enum_values=True)


class RecurringTemplateToggle(BaseModel):
    is_active: bool


class RecurringTemplateRead(RecurringTemplateBase):
    id: int
    last_generated_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ProcessingResultRead(BaseModel):
    processed: int
    invoice_ids: list[int]
    errors: list[str]
    timestamp: datetime


class ProcessingStatsRead(BaseModel):
    total_active_templates: int
    templates_due_today: int
    templates_overdue: int
    next_processing_date: Optional[date] = None
