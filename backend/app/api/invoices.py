"""Invoice routes."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.core.security import get_current_user
from backend.app.db.session import get_db
from backend.app.models.enums import DocumentType
from backend.app.models.invoice import Invoice
from backend.app.models.user import User
from backend.app.schemas.invoice import InvoiceCreate, InvoiceRead, InvoiceUpdate
from backend.app.schemas.payment import PaymentRead
from backend.app.schemas.settings import NextNumberRead
from backend.app.services.invoices import (
    create_invoice,
    delete_invoice,
    get_invoice_or_404,
    payments_for_invoice,
    refresh_overdue_statuses,
    update_invoice,
)
from backend.app.services.numbering import NumberingService

router = APIRouter(prefix="/invoices", tags=["invoices"])


@router.get("/", response_model=List[InvoiceRead])
async def list_invoices(
    status: str | None = None,
    client_id: int | None = None,
    template_id: int | None = None,
    skip: int = 0,
    limit: int = 50,
    sort_by: str = "created_at",
    sort_order: str = "desc",
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(Invoice)
    if status:
        query = query.filter(Invoice.status == status)
    if client_id:
        query = query.filter(Invoice.client_id == client_id)
    if template_id:
        query = query.filter(Invoice.template_id == template_id)

    supported_sort_fields = {
        "created_at": Invoice.created_at,
        "status": Invoice.status,
        "total_amount": Invoice.total_amount,
        "due_date": Invoice.due_date,
        "issue_date": Invoice.issue_date,
        "invoice_number": Invoice.invoice_number,
    }
    if sort_by not in supported_sort_fields:
        raise HTTPException(status_code=400, detail="Invalid sort_by value")
    sort_order_normalized = (sort_order or "desc").lower()
    if sort_order_normalized not in {"asc", "desc"}:
        raise HTTPException(status_code=400, detail="Invalid sort_order value")
    sort_column = supported_sort_fields[sort_by]
    if sort_order_normalized == "asc":
        order_by_clause = [sort_column.asc(), Invoice.id.asc()]
    else:
        order_by_clause = [sort_column.desc(), Invoice.id.desc()]

    query = query.order_by(*order_by_clause).offset(skip).limit(limit)
    return query.all()


@router.post("/", response_model=InvoiceRead, status_code=status.HTTP_201_CREATED)
async def create_invoice_endpoint(
    invoice_in: InvoiceCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return create_invoice(db, invoice_in)


@router.get("/next-number", response_model=NextNumberRead)
async def preview_next_invoice_number(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    next_number = NumberingService(db).next_for_table(DocumentType.INVOICE)
    return NextNumberRead(document_type=DocumentType.INVOICE.value, next_number=next_number)


@router.post("/refresh-overdue")
async def refresh_overdue(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return {"updated": refresh_overdue_statuses(db)}


@router.get("/{invoice_id}", response_model=InvoiceRead)
async def get_invoice(invoice_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return get_invoice_or_404(db, invoice_id)


@router.patch("/{invoice_id}", response_model=InvoiceRead)
async def update_invoice_endpoint(
    invoice_id: int,
    payload: InvoiceUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    invoice = get_invoice_or_404(db, invoice_id)
    return update_invoice(db, invoice, payload)


@router.delete("/{invoice_id}")
async def delete_invoice_endpoint(
    invoice_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    invoice = get_invoice_or_404(db, invoice_id)
    delete_invoice(db, invoice)
    return {"status": "deleted", "id": invoice_id}


@router.get("/{invoice_id}/payments", response_model=List[PaymentRead])
async def list_invoice_payments(
    invoice_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    get_invoice_or_404(db, invoice_id)
    return payments_for_invoice(db, invoice_id)
