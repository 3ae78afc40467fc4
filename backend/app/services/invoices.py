"""Invoice-related service helpers."""

import logging
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from backend.app.core.errors import ConflictError, NotFoundError, ValidationError
from backend.app.core.time import utc_today
from backend.app.models.client import Client
from backend.app.models.enums import DocumentType, InvoiceStatus
from backend.app.models.invoice import Invoice
from backend.app.models.payment import Payment
from backend.app.models.recurring_template import RecurringInvoiceTemplate
from backend.app.schemas.invoice import InvoiceCreate, InvoiceUpdate
from backend.app.schemas.line_item import dump_line_items
from backend.app.services.clients import get_client_or_404
from backend.app.services.numbering import NumberingService
from backend.app.services.schedule import calculate_due_date

logger = logging.getLogger(__name__)

NON_NULLABLE_FIELDS = {"amount", "tax_amount", "shipping_amount", "status", "issue_date", "due_date", "line_items"}


def apply_client_snapshot(invoice: Invoice, client: Client) -> None:
    """Copy the client's contact fields onto the invoice."""
    invoice.client_name = client.name
    invoice.client_email = client.email
    invoice.client_phone = client.phone
    invoice.client_address = client.formatted_address


def recalculate_invoice_totals(invoice: Invoice) -> None:
    amount = Decimal(str(invoice.amount or 0))
    tax = Decimal(str(invoice.tax_amount or 0))
    shipping = Decimal(str(invoice.shipping_amount or 0))
    invoice.total_amount = amount + tax + shipping

    paid = sum(
        (Decimal(str(p.amount)) for p in invoice.payments if p.amount is not None and p.status == "received"),
        Decimal("0.00"),
    )
    invoice.amount_paid = paid
    balance = invoice.total_amount - paid
    if balance < Decimal("0.00"):
        balance = Decimal("0.00")
    invoice.balance_due = balance


def determine_invoice_status(invoice: Invoice, today: date | None = None) -> str:
    if invoice.status == InvoiceStatus.CANCELLED.value:
        return invoice.status
    if invoice.amount_paid > 0 and invoice.balance_due <= 0:
        return InvoiceStatus.PAID.value
    if invoice.status == InvoiceStatus.DRAFT.value:
        return invoice.status
    check_date = today or utc_today()
    if invoice.due_date and check_date > invoice.due_date:
        return InvoiceStatus.OVERDUE.value
    return InvoiceStatus.SENT.value


def create_invoice(
    db: Session,
    invoice_in: InvoiceCreate,
    numbering: NumberingService | None = None,
    today: date | None = None,
) -> Invoice:
    """Create an invoice, generating its number and snapshotting the client."""
    numbering = numbering or NumberingService(db)
    client = get_client_or_404(db, invoice_in.client_id)
    if invoice_in.template_id is not None and db.get(RecurringInvoiceTemplate, invoice_in.template_id) is None:
        raise NotFoundError(f"Recurring template {invoice_in.template_id} not found")

    if invoice_in.invoice_number:
        if numbering.exists(DocumentType.INVOICE, invoice_in.invoice_number):
            raise ConflictError(f"Invoice number {invoice_in.invoice_number} already exists")
        invoice_number = invoice_in.invoice_number
    else:
        invoice_number = numbering.next_for_table(DocumentType.INVOICE, today=today)

    issue_date = invoice_in.issue_date or today or utc_today()
    due_date = invoice_in.due_date or calculate_due_date(issue_date, invoice_in.payment_terms)
    if due_date < issue_date:
        raise ValidationError("Due date cannot be before the issue date")

    invoice = Invoice(
        invoice_number=invoice_number,
        client_id=client.id,
        template_id=invoice_in.template_id,
        type=invoice_in.type,
        description=invoice_in.description,
        line_items=dump_line_items(invoice_in.line_items),
        amount=invoice_in.amount,
        tax_amount=invoice_in.tax_amount,
        tax_rate_id=invoice_in.tax_rate_id,
        shipping_amount=invoice_in.shipping_amount,
        shipping_rate_id=invoice_in.shipping_rate_id,
        status=invoice_in.status,
        payment_terms=invoice_in.payment_terms,
        issue_date=issue_date,
        due_date=due_date,
        notes=invoice_in.notes,
    )
    apply_client_snapshot(invoice, client)
    recalculate_invoice_totals(invoice)
    db.add(invoice)
    db.commit()
    db.refresh(invoice)
    logger.info("Created invoice %s for client %s", invoice.invoice_number, client.id)
    return invoice


def get_invoice_or_404(db: Session, invoice_id: int) -> Invoice:
    invoice = db.get(Invoice, invoice_id)
    if invoice is None:
        raise NotFoundError(f"Invoice {invoice_id} not found")
    return invoice


def update_invoice(db: Session, invoice: Invoice, invoice_in: InvoiceUpdate) -> Invoice:
    """Apply a partial update. The originating template is never touched."""
    update_data = {
        field: value
        for field, value in invoice_in.model_dump(exclude_unset=True).items()
        if value is not None or field not in NON_NULLABLE_FIELDS
    }
    if "line_items" in update_data:
        update_data["line_items"] = dump_line_items(invoice_in.line_items)
    for field, value in update_data.items():
        setattr(invoice, field, value)
    if invoice.due_date < invoice.issue_date:
        raise ValidationError("Due date cannot be before the issue date")
    recalculate_invoice_totals(invoice)
    if "status" not in update_data:
        invoice.status = determine_invoice_status(invoice)
    db.commit()
    db.refresh(invoice)
    return invoice


def delete_invoice(db: Session, invoice: Invoice) -> Invoice:
    payment_count = db.query(Payment.id).filter(Payment.invoice_id == invoice.id).count()
    if payment_count:
        raise ConflictError(
            f"Invoice {invoice.invoice_number} has {payment_count} payment(s); delete them or cancel the invoice"
        )
    db.delete(invoice)
    db.commit()
    return invoice


def refresh_overdue_statuses(db: Session, today: date | None = None) -> int:
    """Mark sent invoices whose due date has passed as overdue."""
    check_date = today or utc_today()
    invoices = (
        db.query(Invoice)
        .filter(Invoice.status == InvoiceStatus.SENT.value, Invoice.due_date < check_date)
        .all()
    )
    for invoice in invoices:
        invoice.status = InvoiceStatus.OVERDUE.value
    db.commit()
    if invoices:
        logger.info("Marked %d invoices overdue", len(invoices))
    return len(invoices)


def payments_for_invoice(db: Session, invoice_id: int) -> list[Payment]:
    return db.query(Payment).filter(Payment.invoice_id == invoice_id).order_by(Payment.payment_date.asc()).all()
