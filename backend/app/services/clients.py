"""Client record helpers."""

from sqlalchemy.orm import Session

from backend.app.core.errors import ConflictError, NotFoundError
from backend.app.models.client import Client
from backend.app.models.invoice import Invoice
from backend.app.schemas.client import ClientCreate, ClientUpdate


def get_client_or_404(db: Session, client_id: int) -> Client:
    client = db.get(Client, client_id)
    if client is None:
        raise NotFoundError(f"Client {client_id} not found")
    return client


def create_client(db: Session, client_in: ClientCreate) -> Client:
    client = Client(**client_in.model_dump())
    db.add(client)
    db.commit()
    db.refresh(client)
    return client


def update_client(db: Session, client: Client, client_in: ClientUpdate) -> Client:
    """Update client fields. Existing invoices keep their snapshot."""
    for field, value in client_in.model_dump(exclude_unset=True).items():
        if value is None and field in {"name", "email", "country"}:
            continue
        setattr(client, field, value)
    db.commit()
    db.refresh(client)
    return client


def delete_client(db: Session, client: Client) -> Client:
    invoice_count = db.query(Invoice.id).filter(Invoice.client_id == client.id).count()
    if invoice_count:
        raise ConflictError(f"Client {client.id} has {invoice_count} invoice(s) and cannot be deleted")
    db.delete(client)
    db.commit()
    return client
