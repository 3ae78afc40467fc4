"""Recurring invoice template endpoints."""

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.core.security import get_current_user
from backend.app.core.time import utc_now, utc_today
from backend.app.crud.crud_recurring_template import recurring_template_crud
from backend.app.db.session import get_db
from backend.app.models.user import User
from backend.app.schemas.invoice import InvoiceRead
from backend.app.schemas.recurring_template import (
    ProcessingResultRead,
    ProcessingStatsRead,
    RecurringTemplateCreate,
    RecurringTemplateRead,
    RecurringTemplateToggle,
    RecurringTemplateUpdate,
)
from backend.app.services.recurring import RecurringInvoiceProcessor

router = APIRouter(prefix="/recurring-templates", tags=["recurring_templates"])


def _get_template_or_404(db: Session, template_id: int):
    template = recurring_template_crud.get(db, template_id=template_id)
    if not template:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recurring template not found")
    return template


@router.post("/", response_model=RecurringTemplateRead, status_code=status.HTTP_201_CREATED)
async def create_recurring_template(
    template_in: RecurringTemplateCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return recurring_template_crud.create(db, obj_in=template_in)


@router.get("/", response_model=list[RecurringTemplateRead])
async def list_recurring_templates(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return recurring_template_crud.get_multi(db)


@router.get("/active", response_model=list[RecurringTemplateRead])
async def list_active_templates(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return recurring_template_crud.get_multi(db, active_only=True)


@router.get("/due", response_model=list[RecurringTemplateRead])
async def list_due_templates(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return recurring_template_crud.get_due(db, as_of=utc_today())


@router.get("/stats", response_model=ProcessingStatsRead)
async def get_processing_stats(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return asdict(RecurringInvoiceProcessor(db).get_processing_stats())


@router.post("/process", response_model=ProcessingResultRead)
async def process_recurring_templates(
    catch_up: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    result = RecurringInvoiceProcessor(db).process_due_templates(catch_up=catch_up)
    return ProcessingResultRead(
        processed=result.created, invoice_ids=result.invoice_ids, errors=result.errors, timestamp=utc_now()
    )


@router.post("/{template_id}/process", response_model=InvoiceRead, status_code=status.HTTP_201_CREATED)
async def process_single_template(
    template_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    return RecurringInvoiceProcessor(db).process_single_template(template_id)


@router.get("/{template_id}", response_model=RecurringTemplateRead)
async def get_recurring_template(
    template_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    return _get_template_or_404(db, template_id)


@router.put("/{template_id}", response_model=RecurringTemplateRead)
async def update_recurring_template(
    template_id: int,
    template_in: RecurringTemplateUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    template = _get_template_or_404(db, template_id)
    return recurring_template_crud.update(db, db_obj=template, obj_in=template_in)


@router.patch("/{template_id}/toggle", response_model=RecurringTemplateRead)
async def toggle_recurring_template(
    template_id: int,
    payload: RecurringTemplateToggle,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    template = _get_template_or_404(db, template_id)
    return recurring_template_crud.set_active(db, db_obj=template, is_active=payload.is_active)


@router.delete("/{template_id}")
async def delete_recurring_template(
    template_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    template = _get_template_or_404(db, template_id)
    recurring_template_crud.delete(db, db_obj=template)
    return {"status": "deleted", "id": template_id}
