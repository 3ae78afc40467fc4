"""CRUD operations for recurring invoice templates."""

from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from backend.app.core.errors import ConflictError, NotFoundError
from backend.app.models.client import Client
from backend.app.models.invoice import Invoice
from backend.app.models.recurring_template import RecurringInvoiceTemplate
from backend.app.schemas.line_item import dump_line_items
from backend.app.schemas.recurring_template import RecurringTemplateCreate, RecurringTemplateUpdate

NON_NULLABLE_FIELDS = {"name", "client_id", "amount", "frequency", "payment_terms", "next_invoice_date", "is_active"}


class CRUDRecurringTemplate:
    def _ensure_client(self, db: Session, client_id: int) -> None:
        if db.get(Client, client_id) is None:
            raise NotFoundError(f"Client {client_id} not found")

    def create(self, db: Session, *, obj_in: RecurringTemplateCreate) -> RecurringInvoiceTemplate:
        self._ensure_client(db, obj_in.client_id)
        data = obj_in.model_dump()
        data["line_items"] = dump_line_items(obj_in.line_items)
        obj = RecurringInvoiceTemplate(**data)
        db.add(obj)
        db.commit()
        db.refresh(obj)
        return obj

    def get(self, db: Session, *, template_id: int) -> Optional[RecurringInvoiceTemplate]:
        return db.get(RecurringInvoiceTemplate, template_id)

    def get_multi(self, db: Session, *, active_only: bool = False) -> List[RecurringInvoiceTemplate]:
        query = db.query(RecurringInvoiceTemplate)
        if active_only:
            query = query.filter(RecurringInvoiceTemplate.is_active.is_(True))
        return query.order_by(RecurringInvoiceTemplate.name.asc(), RecurringInvoiceTemplate.id.asc()).all()

    def get_by_client(self, db: Session, *, client_id: int) -> List[RecurringInvoiceTemplate]:
        return (
            db.query(RecurringInvoiceTemplate)
            .filter(RecurringInvoiceTemplate.client_id == client_id)
            .order_by(RecurringInvoiceTemplate.name.asc())
            .all()
        )

    def get_due(self, db: Session, *, as_of: date) -> List[RecurringInvoiceTemplate]:
        """Active templates whose next invoice date is on or before ``as_of``."""
        return (
            db.query(RecurringInvoiceTemplate)
            .filter(
                RecurringInvoiceTemplate.is_active.is_(True),
                RecurringInvoiceTemplate.next_invoice_date <= as_of,
            )
            .order_by(RecurringInvoiceTemplate.next_invoice_date.asc(), RecurringInvoiceTemplate.id.asc())
            .all()
        )

    def update(
        self, db: Session, *, db_obj: RecurringInvoiceTemplate, obj_in: RecurringTemplateUpdate
    ) -> RecurringInvoiceTemplate:
        update_data = obj_in.model_dump(exclude_unset=True)
        if update_data.get("client_id") is not None:
            self._ensure_client(db, update_data["client_id"])
        if "line_items" in update_data:
            update_data["line_items"] = dump_line_items(obj_in.line_items)
        for field, value in update_data.items():
            if value is None and field in NON_NULLABLE_FIELDS:
                continue
            setattr(db_obj, field, value)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def set_active(self, db: Session, *, db_obj: RecurringInvoiceTemplate, is_active: bool) -> RecurringInvoiceTemplate:
        db_obj.is_active = is_active
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def delete(self, db: Session, *, db_obj: RecurringInvoiceTemplate) -> RecurringInvoiceTemplate:
        generated = db.query(Invoice.id).filter(Invoice.template_id == db_obj.id).count()
        if generated:
            raise ConflictError(
                f"Template {db_obj.id} has generated {generated} invoice(s); deactivate it instead"
            )
        db.delete(db_obj)
        db.commit()
        return db_obj


recurring_template_crud = CRUDRecurringTemplate()
