"""Expense bookkeeping."""

from datetime import date
from typing import List

from sqlalchemy.orm import Session

from backend.app.core.errors import NotFoundError
from backend.app.models.client import Client
from backend.app.models.enums import DocumentType
from backend.app.models.expense import Expense
from backend.app.schemas.expense import ExpenseCreate, ExpenseUpdate
from backend.app.services.numbering import NumberingService


def _ensure_client(db: Session, client_id: int | None) -> None:
    if client_id is not None and db.get(Client, client_id) is None:
        raise NotFoundError(f"Client {client_id} not found")


def create_expense(db: Session, expense_in: ExpenseCreate, numbering: NumberingService | None = None) -> Expense:
    numbering = numbering or NumberingService(db)
    _ensure_client(db, expense_in.client_id)
    expense = Expense(
        expense_number=numbering.next_for_table(DocumentType.EXPENSE, today=expense_in.expense_date),
        **expense_in.model_dump(),
    )
    db.add(expense)
    db.commit()
    db.refresh(expense)
    return expense


def get_expense_or_404(db: Session, expense_id: int) -> Expense:
    expense = db.get(Expense, expense_id)
    if expense is None:
        raise NotFoundError(f"Expense {expense_id} not found")
    return expense


def list_expenses(
    db: Session,
    *,
    category: str | None = None,
    client_id: int | None = None,
    from_date: date | None = None,
    to_date: date | None = None,
    skip: int = 0,
    limit: int = 50,
) -> List[Expense]:
    query = db.query(Expense)
    if category:
        query = query.filter(Expense.category == category)
    if client_id is not None:
        query = query.filter(Expense.client_id == client_id)
    if from_date is not None:
        query = query.filter(Expense.expense_date >= from_date)
    if to_date is not None:
        query = query.filter(Expense.expense_date <= to_date)
    return query.order_by(Expense.expense_date.desc(), Expense.id.desc()).offset(skip).limit(limit).all()


def update_expense(db: Session, expense: Expense, expense_in: ExpenseUpdate) -> Expense:
    update_data = expense_in.model_dump(exclude_unset=True)
    if "client_id" in update_data:
        _ensure_client(db, update_data["client_id"])
    for field, value in update_data.items():
        if value is None and field in {"description", "amount", "currency", "expense_date", "is_billable"}:
            continue
        setattr(expense, field, value)
    db.commit()
    db.refresh(expense)
    return expense


def delete_expense(db: Session, expense: Expense) -> Expense:
    db.delete(expense)
    db.commit()
    return expense
