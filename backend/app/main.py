"""InvoiceDesk backend entrypoint: client billing with recurring invoices."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.app.api import clients
from backend.app.api import cron
from backend.app.api import expenses
from backend.app.api import invoices
from backend.app.api import login
from backend.app.api import payments
from backend.app.api import recurring_templates
from backend.app.api import register
from backend.app.api import reports
from backend.app.api import settings as settings_api
from backend.app.api.errors import register_error_handlers
from backend.app.core.logging import setup_logging
from backend.app.core.settings import get_settings
from backend.app.db.base import Base
from backend.app.db.session import SessionLocal, engine
from backend.app.services.recurring import RecurringInvoiceProcessor

settings = get_settings()
setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, version=settings.api_version)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(register.router)
app.include_router(login.router)
app.include_router(clients.router)
app.include_router(invoices.router)
app.include_router(recurring_templates.router)
app.include_router(payments.router)
app.include_router(expenses.router)
app.include_router(reports.router)
app.include_router(settings_api.router)
app.include_router(cron.router)


@app.get("/")
def read_root():
    return {"app": settings.app_name, "status": "ok"}


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.on_event("startup")
def prepare_database():
    Base.metadata.create_all(bind=engine)
    if not settings.process_recurring_on_startup:
        return
    db = SessionLocal()
    try:
        result = RecurringInvoiceProcessor(db).process_due_templates()
        logger.info("Startup recurring run created %d invoices", result.created)
    finally:
        db.close()
