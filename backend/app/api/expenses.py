"""Expense endpoints."""

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.app.core.security import get_current_user
from backend.app.db.session import get_db
from backend.app.models.user import User
from backend.app.schemas.expense import ExpenseCreate, ExpenseRead, ExpenseUpdate
from backend.app.services.expenses import (
    create_expense,
    delete_expense,
    get_expense_or_404,
    list_expenses,
    update_expense,
)

router = APIRouter(prefix="/expenses", tags=["expenses"])


@router.post("/", response_model=ExpenseRead, status_code=status.HTTP_201_CREATED)
async def create_expense_endpoint(
    expense_in: ExpenseCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return create_expense(db, expense_in)


@router.get("/", response_model=List[ExpenseRead])
async def list_expenses_endpoint(
    category: str | None = None,
    client_id: int | None = None,
    from_date: date | None = None,
    to_date: date | None = None,
    skip: int = 0,
    limit: int = 50,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return list_expenses(
        db,
        category=category,
        client_id=client_id,
        from_date=from_date,
        to_date=to_date,
        skip=skip,
        limit=limit,
    )


@router.get("/{expense_id}", response_model=ExpenseRead)
async def get_expense(expense_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return get_expense_or_404(db, expense_id)


@router.put("/{expense_id}", response_model=ExpenseRead)
async def update_expense_endpoint(
    expense_id: int,
    expense_in: ExpenseUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    expense = get_expense_or_404(db, expense_id)
    return update_expense(db, expense, expense_in)


@router.delete("/{expense_id}")
async def delete_expense_endpoint(
    expense_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    expense = get_expense_or_404(db, expense_id)
    delete_expense(db, expense)
    return {"status": "deleted", "id": expense_id}
