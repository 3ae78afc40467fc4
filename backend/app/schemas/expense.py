"""Expense schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ExpenseBase(BaseModel):
    description: str = Field(..., min_length=1, max_length=255)
    amount: Decimal = Field(..., gt=0)
    currency: str = Field("USD", min_length=3, max_length=3)
    category: Optional[str] = Field(None, max_length=100)
    expense_date: date
    vendor: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None
    is_billable: bool = False
    client_id: Optional[int] = None
    project: Optional[str] = Field(None, max_length=100)


class ExpenseCreate(ExpenseBase):
    pass


class ExpenseUpdate(BaseModel):
    description: Optional[str] = Field(None, min_length=1, max_length=255)
    amount: Optional[Decimal] = Field(None, gt=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    category: Optional[str] = Field(None, max_length=100)
    expense_date: Optional[date] = None
    vendor: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None
    is_billable: Optional[bool] = None
    client_id: Optional[int] = None
    project: Optional[str] = Field(None, max_length=100)


class ExpenseRead(ExpenseBase):
    id: int
    expense_number: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
