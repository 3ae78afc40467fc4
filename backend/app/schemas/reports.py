"""Report schemas."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class AccountingMethod(str, Enum):
    CASH = "cash"
    ACCRUAL = "accrual"


class ReportType(str, Enum):
    PROFIT_LOSS = "profit_loss"
    EXPENSES = "expenses"
    INVOICES = "invoices"
    CLIENTS = "clients"


class CategoryTotal(BaseModel):
    category: str
    count: int
    total: Decimal


class StatusTotal(BaseModel):
    status: str
    count: int
    total: Decimal


class ProfitLossReport(BaseModel):
    """Revenue against expenses for a period."""

    from_date: Optional[date]
    to_date: Optional[date]
    accounting_method: AccountingMethod
    paid_revenue: Decimal
    outstanding_revenue: Decimal
    revenue: Decimal
    expenses: Decimal
    expenses_by_category: List[CategoryTotal]
    net_profit: Decimal
    profit_margin: Decimal


class ExpenseReport(BaseModel):
    from_date: Optional[date]
    to_date: Optional[date]
    by_category: List[CategoryTotal]
    total_amount: Decimal
    total_count: int


class InvoiceReport(BaseModel):
    from_date: Optional[date]
    to_date: Optional[date]
    by_status: List[StatusTotal]
    total_amount: Decimal
    paid_amount: Decimal
    outstanding_amount: Decimal
    overdue_amount: Decimal
    total_count: int


class ClientSummaryRow(BaseModel):
    client_id: int
    client_name: str
    invoice_count: int
    total_billed: Decimal
    paid_amount: Decimal
    outstanding_amount: Decimal
    overdue_amount: Decimal


class ClientReport(BaseModel):
    from_date: Optional[date]
    to_date: Optional[date]
    clients: List[ClientSummaryRow]
    total_billed: Decimal
    paid_amount: Decimal
    outstanding_amount: Decimal


class SavedReportCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    type: ReportType
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    accounting_method: AccountingMethod = AccountingMethod.CASH

    model_config = ConfigDict(use_enum_values=True)

    @model_validator(mode="after")
    def check_range(self):
        if self.from_date and self.to_date and self.to_date < self.from_date:
            raise ValueError("to_date cannot be before from_date")
        return self


class SavedReportUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)


class SavedReportRead(BaseModel):
    id: int
    name: str
    type: ReportType
    from_date: Optional[date]
    to_date: Optional[date]
    data: Dict[str, Any]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
