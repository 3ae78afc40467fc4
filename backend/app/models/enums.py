"""Tagged values shared by models, schemas and services."""

from enum import Enum


class DocumentType(str, Enum):
    """Document kinds that carry a generated number."""

    INVOICE = "invoice"
    EXPENSE = "expense"
    PAYMENT = "payment"


class Frequency(str, Enum):
    """How often a recurring template fires."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class PaymentTerms(str, Enum):
    DUE_ON_RECEIPT = "due_on_receipt"
    NET_15 = "net_15"
    NET_30 = "net_30"
    NET_60 = "net_60"
    NET_90 = "net_90"


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class InvoiceType(str, Enum):
    ONE_TIME = "one-time"
    RECURRING = "recurring"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CHECK = "check"
    BANK_TRANSFER = "bank_transfer"
    CREDIT_CARD = "credit_card"
    PAYPAL = "paypal"
    OTHER = "other"


class PaymentStatus(str, Enum):
    RECEIVED = "received"
    PENDING = "pending"
    FAILED = "failed"
    REFUNDED = "refunded"
