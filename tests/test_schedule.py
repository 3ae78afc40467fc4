from datetime import date

import pytest

from backend.app.models.enums import Frequency, PaymentTerms
from backend.app.services.schedule import calculate_due_date, calculate_next_invoice_date


@pytest.mark.parametrize(
    "terms,expected",
    [
        (PaymentTerms.DUE_ON_RECEIPT, date(2024, 3, 15)),
        (PaymentTerms.NET_15, date(2024, 3, 30)),
        (PaymentTerms.NET_30, date(2024, 4, 14)),
        (PaymentTerms.NET_60, date(2024, 5, 14)),
        (PaymentTerms.NET_90, date(2024, 6, 13)),
    ],
)
def test_due_date_offsets(terms, expected):
    assert calculate_due_date(date(2024, 3, 15), terms) == expected


def test_due_date_accepts_plain_strings():
    assert calculate_due_date(date(2024, 3, 15), "net_30") == date(2024, 4, 14)


def test_due_date_defaults_to_net_30():
    assert calculate_due_date(date(2024, 3, 15), None) == date(2024, 4, 14)


def test_unknown_terms_rejected():
    with pytest.raises(ValueError):
        calculate_due_date(date(2024, 3, 15), "net_45")


@pytest.mark.parametrize(
    "frequency,current,expected",
    [
        (Frequency.WEEKLY, date(2024, 12, 28), date(2025, 1, 4)),
        (Frequency.MONTHLY, date(2024, 3, 10), date(2024, 4, 10)),
        (Frequency.MONTHLY, date(2024, 1, 31), date(2024, 2, 29)),
        (Frequency.MONTHLY, date(2023, 1, 31), date(2023, 2, 28)),
        (Frequency.QUARTERLY, date(2024, 11, 30), date(2025, 2, 28)),
        (Frequency.YEARLY, date(2024, 2, 29), date(2025, 2, 28)),
    ],
)
def test_next_invoice_date(frequency, current, expected):
    assert calculate_next_invoice_date(current, frequency) == expected


def test_next_invoice_date_rejects_unknown_frequency():
    with pytest.raises(ValueError):
        calculate_next_invoice_date(date(2024, 1, 1), "fortnightly")
