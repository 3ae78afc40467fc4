"""Reporting endpoints."""

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from backend.app.core.security import get_current_user
from backend.app.db.session import get_db
from backend.app.models.user import User
from backend.app.schemas.reports import (
    AccountingMethod,
    ClientReport,
    ExpenseReport,
    InvoiceReport,
    ProfitLossReport,
    ReportType,
    SavedReportCreate,
    SavedReportRead,
    SavedReportUpdate,
)
from backend.app.services.reports import (
    client_summary,
    delete_report,
    expense_summary,
    get_report_or_404,
    invoice_summary,
    list_reports,
    profit_and_loss,
    rename_report,
    save_report,
)

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/profit-loss", response_model=ProfitLossReport)
async def get_profit_loss(
    from_date: date | None = Query(default=None),
    to_date: date | None = Query(default=None),
    accounting_method: AccountingMethod = Query(default=AccountingMethod.CASH),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return profit_and_loss(db, from_date, to_date, accounting_method)


@router.get("/expenses", response_model=ExpenseReport)
async def get_expense_report(
    from_date: date | None = Query(default=None),
    to_date: date | None = Query(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return expense_summary(db, from_date, to_date)


@router.get("/invoices", response_model=InvoiceReport)
async def get_invoice_report(
    from_date: date | None = Query(default=None),
    to_date: date | None = Query(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return invoice_summary(db, from_date, to_date)


@router.get("/clients", response_model=ClientReport)
async def get_client_report(
    from_date: date | None = Query(default=None),
    to_date: date | None = Query(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return client_summary(db, from_date, to_date)


@router.post("/saved", response_model=SavedReportRead, status_code=status.HTTP_201_CREATED)
async def create_saved_report(
    report_in: SavedReportCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return save_report(db, report_in)


@router.get("/saved", response_model=List[SavedReportRead])
async def list_saved_reports(
    report_type: ReportType | None = Query(default=None, alias="type"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return list_reports(db, report_type)


@router.get("/saved/{report_id}", response_model=SavedReportRead)
async def get_saved_report(report_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return get_report_or_404(db, report_id)


@router.patch("/saved/{report_id}", response_model=SavedReportRead)
async def rename_saved_report(
    report_id: int,
    report_in: SavedReportUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    report = get_report_or_404(db, report_id)
    return rename_report(db, report, report_in)


@router.delete("/saved/{report_id}")
async def delete_saved_report(
    report_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    report = get_report_or_404(db, report_id)
    delete_report(db, report)
    return {"status": "deleted", "id": report_id}
