"""Recurring invoice generation.

Each run walks the active templates once. A template whose
``next_invoice_date`` is on or before today fires: one draft invoice is
created from the template's current values and the template's next date
moves forward by one period, counted from the date that was due. A template
that is several periods behind therefore needs several runs to catch up,
unless the run is started with ``catch_up=True``.

Invoice creation and the date advance are committed together; a failure
rolls both back and the template fires again on the next run.
"""

import logging
from dataclasses import dataclass, field
from datetime import date

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app.core.errors import InvoiceDeskError, NotFoundError, ValidationError
from backend.app.core.time import utc_now, utc_today
from backend.app.models.client import Client
from backend.app.models.enums import DocumentType, Frequency, InvoiceStatus, InvoiceType, PaymentTerms
from backend.app.models.invoice import Invoice
from backend.app.models.recurring_template import RecurringInvoiceTemplate
from backend.app.schemas.line_item import dump_line_items, load_line_items
from backend.app.services.invoices import apply_client_snapshot, recalculate_invoice_totals
from backend.app.services.numbering import NumberingService
from backend.app.services.schedule import calculate_due_date, calculate_next_invoice_date

logger = logging.getLogger(__name__)

# Upper bound on invoices generated for a single template in one catch-up run
MAX_CATCH_UP_PERIODS = 120


@dataclass
class ProcessingResult:
    created: int = 0
    invoice_ids: list[int] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


@dataclass
class ProcessingStats:
    total_active_templates: int
    templates_due_today: int
    templates_overdue: int
    next_processing_date: date | None


def build_invoice_from_template(
    template: RecurringInvoiceTemplate, client: Client, invoice_number: str, issue_date: date
) -> Invoice:
    """Materialize a draft invoice from the template's current field values."""
    payment_terms = PaymentTerms(template.payment_terms or PaymentTerms.NET_30)
    invoice = Invoice(
        invoice_number=invoice_number,
        client_id=client.id,
        template_id=template.id,
        type=InvoiceType.RECURRING.value,
        description=template.description,
        line_items=dump_line_items(load_line_items(template.line_items)),
        amount=template.amount,
        tax_amount=template.tax_amount or 0,
        tax_rate_id=template.tax_rate_id,
        shipping_amount=template.shipping_amount or 0,
        shipping_rate_id=template.shipping_rate_id,
        status=InvoiceStatus.DRAFT.value,
        payment_terms=payment_terms.value,
        issue_date=issue_date,
        due_date=calculate_due_date(issue_date, payment_terms),
        notes=template.notes,
    )
    apply_client_snapshot(invoice, client)
    recalculate_invoice_totals(invoice)
    return invoice


class RecurringInvoiceProcessor:
    """Creates invoices from recurring templates that have come due."""

    def __init__(self, db: Session, numbering: NumberingService | None = None):
        self.db = db
        self.numbering = numbering or NumberingService(db)

    def process_due_templates(self, today: date | None = None, catch_up: bool = False) -> ProcessingResult:
        today = today or utc_today()
        result = ProcessingResult()

        templates = (
            self.db.query(RecurringInvoiceTemplate)
            .filter(RecurringInvoiceTemplate.is_active.is_(True))
            .order_by(RecurringInvoiceTemplate.next_invoice_date.asc(), RecurringInvoiceTemplate.id.asc())
            .all()
        )
        template_ids = [template.id for template in templates]

        for template_id in template_ids:
            fired = 0
            while True:
                template = self.db.get(RecurringInvoiceTemplate, template_id)
                if template is None or template.next_invoice_date > today:
                    break
                try:
                    invoice = self._fire(template, today)
                except (InvoiceDeskError, SQLAlchemyError, ValueError) as exc:
                    self.db.rollback()
                    logger.error("Error processing recurring template %s: %s", template_id, exc)
                    result.errors.append(f"Template {template_id}: {exc}")
                    break
                result.created += 1
                result.invoice_ids.append(invoice.id)
                fired += 1
                if not catch_up:
                    break
                if fired >= MAX_CATCH_UP_PERIODS:
                    logger.warning(
                        "Template %s still behind after %d invoices; stopping catch-up", template_id, fired
                    )
                    break

        logger.info(
            "Recurring invoice processing completed: %d created, %d errors", result.created, len(result.errors)
        )
        return result

    def process_single_template(self, template_id: int, today: date | None = None) -> Invoice:
        """Fire one template now, whatever its next invoice date."""
        template = self.db.get(RecurringInvoiceTemplate, template_id)
        if template is None:
            raise NotFoundError(f"Recurring template {template_id} not found")
        if not template.is_active:
            raise ValidationError(f"Recurring template {template_id} is inactive")
        try:
            return self._fire(template, today or utc_today())
        except SQLAlchemyError:
            self.db.rollback()
            raise
        except ValueError as exc:
            self.db.rollback()
            raise ValidationError(f"Recurring template {template_id} is invalid: {exc}") from exc

    def get_processing_stats(self, today: date | None = None) -> ProcessingStats:
        today = today or utc_today()
        active = self.db.query(RecurringInvoiceTemplate).filter(RecurringInvoiceTemplate.is_active.is_(True))
        return ProcessingStats(
            total_active_templates=active.count(),
            templates_due_today=active.filter(RecurringInvoiceTemplate.next_invoice_date == today).count(),
            templates_overdue=active.filter(RecurringInvoiceTemplate.next_invoice_date < today).count(),
            next_processing_date=(
                self.db.query(func.min(RecurringInvoiceTemplate.next_invoice_date))
                .filter(
                    RecurringInvoiceTemplate.is_active.is_(True),
                    RecurringInvoiceTemplate.next_invoice_date > today,
                )
                .scalar()
            ),
        )

    def _fire(self, template: RecurringInvoiceTemplate, today: date) -> Invoice:
        client = self.db.get(Client, template.client_id)
        if client is None:
            raise NotFoundError(f"Client {template.client_id} not found")

        invoice_number = self.numbering.next_for_table(DocumentType.INVOICE, today=today)
        invoice = build_invoice_from_template(template, client, invoice_number, today)
        self.db.add(invoice)

        due_on = template.next_invoice_date
        template.next_invoice_date = calculate_next_invoice_date(due_on, Frequency(template.frequency))
        template.last_generated_at = utc_now()

        self.db.commit()
        self.db.refresh(invoice)
        logger.info(
            "Created invoice %s from template %s (%s); next invoice scheduled for %s",
            invoice.invoice_number,
            template.id,
            template.name,
            template.next_invoice_date.isoformat(),
        )
        return invoice
