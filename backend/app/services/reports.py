"""Reporting helpers: profit and loss, expense, invoice and client summaries."""

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, List

from sqlalchemy.orm import Session

from backend.app.core.errors import NotFoundError, ValidationError
from backend.app.models.client import Client
from backend.app.models.enums import InvoiceStatus
from backend.app.models.expense import Expense
from backend.app.models.invoice import Invoice
from backend.app.models.report import Report
from backend.app.schemas.reports import (
    AccountingMethod,
    CategoryTotal,
    ClientReport,
    ClientSummaryRow,
    ExpenseReport,
    InvoiceReport,
    ProfitLossReport,
    ReportType,
    SavedReportCreate,
    SavedReportUpdate,
    StatusTotal,
)

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
UNCATEGORIZED = "Uncategorized"
OUTSTANDING_STATUSES = {InvoiceStatus.SENT.value, InvoiceStatus.OVERDUE.value}


def _money(value) -> Decimal:
    return Decimal(str(value or 0)).quantize(CENT)


def _check_range(from_date: date | None, to_date: date | None) -> None:
    if from_date and to_date and to_date < from_date:
        raise ValidationError("to_date cannot be before from_date")


def _invoices_in_range(db: Session, from_date: date | None, to_date: date | None) -> List[Invoice]:
    query = db.query(Invoice)
    if from_date is not None:
        query = query.filter(Invoice.issue_date >= from_date)
    if to_date is not None:
        query = query.filter(Invoice.issue_date <= to_date)
    return query.order_by(Invoice.issue_date, Invoice.id).all()


def _expenses_by_category(
    db: Session, from_date: date | None, to_date: date | None
) -> tuple[List[CategoryTotal], Decimal, int]:
    query = db.query(Expense)
    if from_date is not None:
        query = query.filter(Expense.expense_date >= from_date)
    if to_date is not None:
        query = query.filter(Expense.expense_date <= to_date)

    totals: Dict[str, Decimal] = defaultdict(Decimal)
    counts: Dict[str, int] = defaultdict(int)
    for expense in query.all():
        category = expense.category or UNCATEGORIZED
        totals[category] += _money(expense.amount)
        counts[category] += 1

    rows = [
        CategoryTotal(category=category, count=counts[category], total=total)
        for category, total in sorted(totals.items(), key=lambda item: (-item[1], item[0]))
    ]
    return rows, sum(totals.values(), Decimal("0.00")), sum(counts.values())


def profit_and_loss(
    db: Session,
    from_date: date | None = None,
    to_date: date | None = None,
    accounting_method: AccountingMethod = AccountingMethod.CASH,
) -> ProfitLossReport:
    """Compare invoice revenue with recorded expenses.

    Cash basis counts only paid invoices. Accrual basis also counts invoices
    that have been sent but not yet paid. Drafts and cancelled invoices never
    count as revenue.
    """
    _check_range(from_date, to_date)
    paid = Decimal("0.00")
    outstanding = Decimal("0.00")
    for invoice in _invoices_in_range(db, from_date, to_date):
        if invoice.status == InvoiceStatus.PAID.value:
            paid += _money(invoice.total_amount)
        elif invoice.status in OUTSTANDING_STATUSES:
            outstanding += _money(invoice.total_amount)

    revenue = paid if accounting_method == AccountingMethod.CASH else paid + outstanding
    by_category, expenses, _ = _expenses_by_category(db, from_date, to_date)
    net_profit = revenue - expenses
    margin = (net_profit / revenue * 100).quantize(CENT) if revenue else Decimal("0.00")

    return ProfitLossReport(
        from_date=from_date,
        to_date=to_date,
        accounting_method=accounting_method,
        paid_revenue=paid,
        outstanding_revenue=outstanding,
        revenue=revenue,
        expenses=expenses,
        expenses_by_category=by_category,
        net_profit=net_profit,
        profit_margin=margin,
    )


def expense_summary(db: Session, from_date: date | None = None, to_date: date | None = None) -> ExpenseReport:
    _check_range(from_date, to_date)
    by_category, total, count = _expenses_by_category(db, from_date, to_date)
    return ExpenseReport(
        from_date=from_date, to_date=to_date, by_category=by_category, total_amount=total, total_count=count
    )


def invoice_summary(db: Session, from_date: date | None = None, to_date: date | None = None) -> InvoiceReport:
    """Group invoices by status. Cancelled invoices are listed but left out of the totals."""
    _check_range(from_date, to_date)
    totals: Dict[str, Decimal] = defaultdict(Decimal)
    counts: Dict[str, int] = defaultdict(int)
    report_total = Decimal("0.00")
    paid = Decimal("0.00")
    outstanding = Decimal("0.00")
    overdue = Decimal("0.00")
    total_count = 0

    for invoice in _invoices_in_range(db, from_date, to_date):
        amount = _money(invoice.total_amount)
        totals[invoice.status] += amount
        counts[invoice.status] += 1
        if invoice.status == InvoiceStatus.CANCELLED.value:
            continue
        total_count += 1
        report_total += amount
        paid += _money(invoice.amount_paid)
        if invoice.status in OUTSTANDING_STATUSES:
            outstanding += _money(invoice.balance_due)
        if invoice.status == InvoiceStatus.OVERDUE.value:
            overdue += _money(invoice.balance_due)

    by_status = [
        StatusTotal(status=status.value, count=counts[status.value], total=totals[status.value])
        for status in InvoiceStatus
        if counts[status.value]
    ]
    return InvoiceReport(
        from_date=from_date,
        to_date=to_date,
        by_status=by_status,
        total_amount=report_total,
        paid_amount=paid,
        outstanding_amount=outstanding,
        overdue_amount=overdue,
        total_count=total_count,
    )


def client_summary(db: Session, from_date: date | None = None, to_date: date | None = None) -> ClientReport:
    """Per-client billing totals. Clients without invoices in the period are omitted."""
    _check_range(from_date, to_date)
    rows: Dict[int, ClientSummaryRow] = {}
    for invoice in _invoices_in_range(db, from_date, to_date):
        if invoice.status == InvoiceStatus.CANCELLED.value:
            continue
        row = rows.get(invoice.client_id)
        if row is None:
            client = db.get(Client, invoice.client_id)
            row = ClientSummaryRow(
                client_id=invoice.client_id,
                client_name=client.name if client else (invoice.client_name or "Unknown Client"),
                invoice_count=0,
                total_billed=Decimal("0.00"),
                paid_amount=Decimal("0.00"),
                outstanding_amount=Decimal("0.00"),
                overdue_amount=Decimal("0.00"),
            )
            rows[invoice.client_id] = row
        row.invoice_count += 1
        row.total_billed += _money(invoice.total_amount)
        row.paid_amount += _money(invoice.amount_paid)
        if invoice.status in OUTSTANDING_STATUSES:
            row.outstanding_amount += _money(invoice.balance_due)
        if invoice.status == InvoiceStatus.OVERDUE.value:
            row.overdue_amount += _money(invoice.balance_due)

    clients = sorted(rows.values(), key=lambda r: (-r.total_billed, r.client_name))
    return ClientReport(
        from_date=from_date,
        to_date=to_date,
        clients=clients,
        total_billed=sum((r.total_billed for r in clients), Decimal("0.00")),
        paid_amount=sum((r.paid_amount for r in clients), Decimal("0.00")),
        outstanding_amount=sum((r.outstanding_amount for r in clients), Decimal("0.00")),
    )


def build_report(
    db: Session,
    report_type: ReportType,
    from_date: date | None = None,
    to_date: date | None = None,
    accounting_method: AccountingMethod = AccountingMethod.CASH,
):
    report_type = ReportType(report_type)
    if report_type == ReportType.PROFIT_LOSS:
        return profit_and_loss(db, from_date, to_date, AccountingMethod(accounting_method))
    if report_type == ReportType.EXPENSES:
        return expense_summary(db, from_date, to_date)
    if report_type == ReportType.INVOICES:
        return invoice_summary(db, from_date, to_date)
    return client_summary(db, from_date, to_date)


def save_report(db: Session, report_in: SavedReportCreate) -> Report:
    """Generate a report and store a snapshot of its figures."""
    snapshot = build_report(db, report_in.type, report_in.from_date, report_in.to_date, report_in.accounting_method)
    report = Report(
        name=report_in.name,
        type=ReportType(report_in.type).value,
        from_date=report_in.from_date,
        to_date=report_in.to_date,
        data=snapshot.model_dump(mode="json"),
    )
    db.add(report)
    db.commit()
    db.refresh(report)
    logger.info("Saved %s report %s", report.type, report.id)
    return report


def list_reports(db: Session, report_type: ReportType | None = None) -> List[Report]:
    query = db.query(Report)
    if report_type is not None:
        query = query.filter(Report.type == ReportType(report_type).value)
    return query.order_by(Report.created_at.desc(), Report.id.desc()).all()


def get_report_or_404(db: Session, report_id: int) -> Report:
    report = db.get(Report, report_id)
    if report is None:
        raise NotFoundError(f"Report {report_id} not found")
    return report


def rename_report(db: Session, report: Report, report_in: SavedReportUpdate) -> Report:
    if report_in.name is not None:
        report.name = report_in.name
    db.commit()
    db.refresh(report)
    return report


def delete_report(db: Session, report: Report) -> None:
    db.delete(report)
    db.commit()
