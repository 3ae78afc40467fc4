"""Client endpoints."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from backend.app.core.security import get_current_user
from backend.app.crud.crud_recurring_template import recurring_template_crud
from backend.app.db.session import get_db
from backend.app.models.client import Client
from backend.app.models.invoice import Invoice
from backend.app.models.user import User
from backend.app.schemas.client import ClientCreate, ClientRead, ClientUpdate
from backend.app.schemas.invoice import InvoiceRead
from backend.app.schemas.recurring_template import RecurringTemplateRead
from backend.app.services.clients import create_client, delete_client, get_client_or_404, update_client

router = APIRouter(prefix="/clients", tags=["clients"])


@router.post("/", response_model=ClientRead, status_code=status.HTTP_201_CREATED)
async def create_client_endpoint(
    client_in: ClientCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return create_client(db, client_in)


@router.get("/", response_model=List[ClientRead])
async def list_clients(
    search: str | None = None,
    skip: int = 0,
    limit: int = 50,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(Client)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(Client.name.ilike(pattern), Client.email.ilike(pattern), Client.company.ilike(pattern)))
    return query.order_by(Client.name.asc(), Client.id.asc()).offset(skip).limit(limit).all()


@router.get("/{client_id}", response_model=ClientRead)
async def get_client(client_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return get_client_or_404(db, client_id)


@router.put("/{client_id}", response_model=ClientRead)
async def update_client_endpoint(
    client_id: int,
    client_in: ClientUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    client = get_client_or_404(db, client_id)
    return update_client(db, client, client_in)


@router.delete("/{client_id}")
async def delete_client_endpoint(
    client_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    client = get_client_or_404(db, client_id)
    delete_client(db, client)
    return {"status": "deleted", "id": client_id}


@router.get("/{client_id}/invoices", response_model=List[InvoiceRead])
async def list_client_invoices(
    client_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    get_client_or_404(db, client_id)
    return (
        db.query(Invoice)
        .filter(Invoice.client_id == client_id)
        .order_by(Invoice.issue_date.desc(), Invoice.id.desc())
        .all()
    )


@router.get("/{client_id}/recurring-templates", response_model=List[RecurringTemplateRead])
async def list_client_templates(
    client_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    get_client_or_404(db, client_id)
    return recurring_template_crud.get_by_client(db, client_id=client_id)
