"""Endpoints for scheduled jobs (called by an external cron)."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backend.app.core.security import get_current_user
from backend.app.core.time import utc_now
from backend.app.db.session import get_db
from backend.app.models.user import User
from backend.app.schemas.recurring_template import ProcessingResultRead
from backend.app.services.invoices import refresh_overdue_statuses
from backend.app.services.recurring import RecurringInvoiceProcessor

router = APIRouter(prefix="/cron", tags=["cron"])


@router.get("/health")
async def cron_health():
    return {"status": "ok", "timestamp": utc_now().isoformat()}


@router.post("/recurring-invoices", response_model=ProcessingResultRead)
async def run_recurring_invoices(
    catch_up: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    result = RecurringInvoiceProcessor(db).process_due_templates(catch_up=catch_up)
    return ProcessingResultRead(
        processed=result.created, invoice_ids=result.invoice_ids, errors=result.errors, timestamp=utc_now()
    )


@router.post("/overdue-invoices")
async def run_overdue_invoices(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return {"updated": refresh_overdue_statuses(db), "timestamp": utc_now().isoformat()}
