"""Payment recording and its effect on invoice balances."""

import logging
from datetime import date

from sqlalchemy.orm import Session

from backend.app.core.errors import NotFoundError, ValidationError
from backend.app.core.time import utc_today
from backend.app.models.enums import DocumentType, InvoiceStatus
from backend.app.models.invoice import Invoice
from backend.app.models.payment import Payment
from backend.app.schemas.payment import PaymentCreate
from backend.app.services.invoices import determine_invoice_status, recalculate_invoice_totals
from backend.app.services.numbering import NumberingService

logger = logging.getLogger(__name__)


def record_payment(
    db: Session,
    payment_in: PaymentCreate,
    numbering: NumberingService | None = None,
    today: date | None = None,
) -> Payment:
    """Store a payment and, when it targets an invoice, update the invoice balance."""
    numbering = numbering or NumberingService(db)
    invoice = None
    if payment_in.invoice_id is not None:
        invoice = db.get(Invoice, payment_in.invoice_id)
        if invoice is None:
            raise NotFoundError(f"Invoice {payment_in.invoice_id} not found")
        if invoice.status == InvoiceStatus.CANCELLED.value:
            raise ValidationError("Cannot apply payment to a cancelled invoice")

    client_name = payment_in.client_name or (invoice.client_name if invoice is not None else None)
    if not client_name:
        raise ValidationError("client_name is required when the payment is not linked to an invoice")

    payment_date = payment_in.payment_date or today or utc_today()
    payment = Payment(
        payment_number=numbering.next_for_table(DocumentType.PAYMENT, today=payment_date),
        invoice_id=payment_in.invoice_id,
        client_name=client_name,
        amount=payment_in.amount,
        method=payment_in.method,
        reference=payment_in.reference,
        description=payment_in.description,
        status=payment_in.status,
        payment_date=payment_date,
    )
    db.add(payment)
    if invoice is not None:
        invoice.payments.append(payment)
        recalculate_invoice_totals(invoice)
        invoice.status = determine_invoice_status(invoice, today=payment_date)
    db.commit()
    db.refresh(payment)
    logger.info("Recorded payment %s of %s", payment.payment_number, payment.amount)
    return payment


def get_payment_or_404(db: Session, payment_id: int) -> Payment:
    payment = db.get(Payment, payment_id)
    if payment is None:
        raise NotFoundError(f"Payment {payment_id} not found")
    return payment


def delete_payment(db: Session, payment: Payment) -> Payment:
    invoice = payment.invoice
    if invoice is not None:
        invoice.payments.remove(payment)
    db.delete(payment)
    if invoice is not None:
        recalculate_invoice_totals(invoice)
        invoice.status = determine_invoice_status(invoice)
    db.commit()
    return payment
