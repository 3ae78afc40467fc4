"""Document numbering: settings resolution, formatting, parsing and sequencing.

Numbers look like ``INV-2024-0007`` (with year) or ``INV-0007`` (without).
Each document type (invoice, expense, payment) has its own settings, stored in
the settings table under ``<type>_numbering_settings``.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app.core.time import utc_today
from backend.app.models.enums import DocumentType
from backend.app.models.expense import Expense
from backend.app.models.invoice import Invoice
from backend.app.models.payment import Payment
from backend.app.schemas.settings import NumberingSettings
from backend.app.services.settings_store import SettingsStore

logger = logging.getLogger(__name__)

DEFAULT_NUMBERING_SETTINGS = {
    DocumentType.INVOICE: NumberingSettings(prefix="INV"),
    DocumentType.EXPENSE: NumberingSettings(prefix="EXP"),
    DocumentType.PAYMENT: NumberingSettings(prefix="PAY"),
}

_WITH_YEAR = re.compile(r"([A-Za-z]+)-([0-9]{4})-([0-9]+)")
_WITHOUT_YEAR = re.compile(r"([A-Za-z]+)-([0-9]+)")

_NUMBER_COLUMNS = {
    DocumentType.INVOICE: (Invoice, Invoice.invoice_number),
    DocumentType.EXPENSE: (Expense, Expense.expense_number),
    DocumentType.PAYMENT: (Payment, Payment.payment_number),
}


def settings_key(doc_type: DocumentType) -> str:
    return f"{DocumentType(doc_type).value}_numbering_settings"


@dataclass(frozen=True)
class ParsedNumber:
    prefix: Optional[str] = None
    year: Optional[int] = None
    sequence: Optional[int] = None


def generate_number(settings: NumberingSettings, sequence: int, year: int | None = None) -> str:
    """Format ``sequence`` (and ``year``) according to ``settings``.

    The sequence is zero-padded to ``padding_length`` and never truncated.
    """
    current_year = year or utc_today().year
    padded = str(sequence).rjust(settings.padding_length, "0")
    if settings.include_year:
        return f"{settings.prefix}-{current_year}-{padded}"
    return f"{settings.prefix}-{padded}"


def parse_number(text: str) -> ParsedNumber:
    """Split a number into prefix, year and sequence.

    Recognizes ``LETTERS-YYYY-DIGITS`` and ``LETTERS-DIGITS``; anything else
    yields an empty ``ParsedNumber``.
    """
    match = _WITH_YEAR.fullmatch(text or "")
    if match:
        return ParsedNumber(prefix=match.group(1), year=int(match.group(2)), sequence=int(match.group(3)))
    match = _WITHOUT_YEAR.fullmatch(text or "")
    if match:
        return ParsedNumber(prefix=match.group(1), sequence=int(match.group(2)))
    return ParsedNumber()


class NumberingSettingsResolver:
    """Loads and saves numbering settings, falling back to defaults."""

    def __init__(self, store: SettingsStore):
        self.store = store

    def get(self, doc_type: DocumentType) -> NumberingSettings:
        doc_type = DocumentType(doc_type)
        defaults = DEFAULT_NUMBERING_SETTINGS[doc_type]
        try:
            stored = self.store.get(settings_key(doc_type))
            if not stored:
                return defaults
            return NumberingSettings(
                prefix=stored.get("prefix") or defaults.prefix,
                start_number=_first_set(stored.get("startNumber"), defaults.start_number),
                padding_length=_first_set(stored.get("paddingLength"), defaults.padding_length),
                include_year=_first_set(stored.get("includeYear"), defaults.include_year),
                reset_on_new_year=_first_set(stored.get("resetOnNewYear"), defaults.reset_on_new_year),
            )
        except (SQLAlchemyError, ValueError, TypeError, AttributeError) as exc:
            logger.error("Error loading %s numbering settings, using defaults: %s", doc_type.value, exc)
            return defaults

    def set(self, doc_type: DocumentType, settings: NumberingSettings) -> None:
        self.store.set(settings_key(doc_type), settings.model_dump(by_alias=True), category="general")


def _first_set(value, default):
    return default if value is None else value


class NumberingService:
    """Computes the next number for a document type."""

    def __init__(self, db: Session, resolver: NumberingSettingsResolver | None = None):
        self.db = db
        self.resolver = resolver or NumberingSettingsResolver(SettingsStore(db))

    def next_number(self, doc_type: DocumentType, last_number: str | None = None, today: date | None = None) -> str:
        settings = self.resolver.get(doc_type)
        current_year = (today or utc_today()).year

        if not last_number:
            return generate_number(settings, settings.start_number, current_year)

        parsed = parse_number(last_number)

        if settings.reset_on_new_year and parsed.year is not None and parsed.year < current_year:
            return generate_number(settings, settings.start_number, current_year)

        if parsed.sequence is not None:
            year_to_use = current_year if settings.include_year else None
            return generate_number(settings, parsed.sequence + 1, year_to_use)

        logger.warning(
            "Could not parse previous %s number %r; restarting sequence at %s",
            DocumentType(doc_type).value,
            last_number,
            settings.start_number,
        )
        return generate_number(settings, settings.start_number, current_year)

    def last_issued(self, doc_type: DocumentType) -> str | None:
        model, column = _NUMBER_COLUMNS[DocumentType(doc_type)]
        row = self.db.query(column).order_by(model.id.desc()).first()
        return row[0] if row else None

    def next_for_table(self, doc_type: DocumentType, today: date | None = None) -> str:
        """Next number after the most recently issued one, skipping numbers already taken."""
        candidate = self.next_number(doc_type, self.last_issued(doc_type), today=today)
        while self.exists(doc_type, candidate):
            logger.warning("%s number %s already issued; advancing", DocumentType(doc_type).value, candidate)
            candidate = self._advance(doc_type, candidate, today)
        return candidate

    def exists(self, doc_type: DocumentType, number: str) -> bool:
        model, column = _NUMBER_COLUMNS[DocumentType(doc_type)]
        return self.db.query(model.id).filter(column == number).first() is not None

    def _advance(self, doc_type: DocumentType, number: str, today: date | None) -> str:
        settings = self.resolver.get(doc_type)
        parsed = parse_number(number)
        year = parsed.year if parsed.year is not None else (today or utc_today()).year
        return generate_number(settings, (parsed.sequence or 0) + 1, year)
