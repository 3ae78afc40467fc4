"""Date arithmetic for recurring billing."""

from datetime import date, timedelta

from dateutil.relativedelta import relativedelta

from backend.app.models.enums import Frequency, PaymentTerms

PAYMENT_TERM_DAYS = {
    PaymentTerms.DUE_ON_RECEIPT: 0,
    PaymentTerms.NET_15: 15,
    PaymentTerms.NET_30: 30,
    PaymentTerms.NET_60: 60,
    PaymentTerms.NET_90: 90,
}

PERIODS = {
    Frequency.WEEKLY: relativedelta(weeks=1),
    Frequency.MONTHLY: relativedelta(months=1),
    Frequency.QUARTERLY: relativedelta(months=3),
    Frequency.YEARLY: relativedelta(years=1),
}


def calculate_due_date(issue_date: date, payment_terms: PaymentTerms | str | None) -> date:
    """Issue date plus the day offset of the payment terms (net 30 when unset)."""
    terms = PaymentTerms(payment_terms) if payment_terms else PaymentTerms.NET_30
    return issue_date + timedelta(days=PAYMENT_TERM_DAYS[terms])


def calculate_next_invoice_date(current: date, frequency: Frequency | str) -> date:
    """Advance ``current`` by one period.

    Month-based periods clamp to the last day of the target month, so
    2024-01-31 + 1 month is 2024-02-29.
    """
    return current + PERIODS[Frequency(frequency)]
