"""Payment endpoints."""

from datetime import date
from decimal import Decimal
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.core.security import get_current_user
from backend.app.db.session import get_db
from backend.app.models.payment import Payment
from backend.app.models.user import User
from backend.app.schemas.payment import PaymentCreate, PaymentRead
from backend.app.services.payments import delete_payment, get_payment_or_404, record_payment

router = APIRouter(prefix="/payments", tags=["payments"])


@router.get("/", response_model=List[PaymentRead])
async def list_payments(
    invoice_id: int | None = None,
    min_amount: Decimal | None = None,
    max_amount: Decimal | None = None,
    from_date: date | None = None,
    to_date: date | None = None,
    method: str | None = None,
    skip: int = 0,
    limit: int = 50,
    sort_by: str = "payment_date",
    sort_order: str = "desc",
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(Payment)

    if invoice_id is not None:
        query = query.filter(Payment.invoice_id == invoice_id)
    if method:
        query = query.filter(Payment.method == method)
    if min_amount is not None:
        query = query.filter(Payment.amount >= min_amount)
    if max_amount is not None:
        query = query.filter(Payment.amount <= max_amount)
    if from_date is not None:
        query = query.filter(Payment.payment_date >= from_date)
    if to_date is not None:
        query = query.filter(Payment.payment_date <= to_date)

    supported_sort_fields = {
        "payment_date": Payment.payment_date,
        "amount": Payment.amount,
        "id": Payment.id,
    }
    if sort_by not in supported_sort_fields:
        raise HTTPException(status_code=400, detail="Invalid sort_by field")
    sort_order_normalized = (sort_order or "desc").lower()
    if sort_order_normalized not in {"asc", "desc"}:
        raise HTTPException(status_code=400, detail="Invalid sort_order value")

    sort_column = supported_sort_fields[sort_by]
    if sort_order_normalized == "asc":
        query = query.order_by(sort_column.asc(), Payment.id.asc())
    else:
        query = query.order_by(sort_column.desc(), Payment.id.desc())

    query = query.offset(skip).limit(limit)
    return query.all()


@router.post("/", response_model=PaymentRead, status_code=status.HTTP_201_CREATED)
async def create_payment(
    payment_in: PaymentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return record_payment(db, payment_in)


@router.get("/{payment_id}", response_model=PaymentRead)
async def get_payment(payment_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return get_payment_or_404(db, payment_id)


@router.delete("/{payment_id}")
async def delete_payment_endpoint(
    payment_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    payment = get_payment_or_404(db, payment_id)
    delete_payment(db, payment)
    return {"status": "deleted", "id": payment_id}
