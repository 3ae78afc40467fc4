"""Payment schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from backend.app.models.enums import PaymentMethod, PaymentStatus


class PaymentBase(BaseModel):
    amount: Decimal = Field(..., gt=0)
    method: PaymentMethod = PaymentMethod.CASH
    reference: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    status: PaymentStatus = PaymentStatus.RECEIVED
    payment_date: Optional[date] = None


class PaymentCreate(PaymentBase):
    invoice_id: Optional[int] = None
    client_name: Optional[str] = Field(None, min_length=1, max_length=100)

    model_config = ConfigDict(use_enum_values=True)


class PaymentRead(PaymentBase):
    id: int
    payment_number: str
    invoice_id: Optional[int]
    client_name: str
    payment_date: date
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
