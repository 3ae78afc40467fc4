from backend.app.db.base_class import Base

# Import models to register metadata for Base.metadata.create_all in tests
from backend.app.models.user import User  # noqa: F401
from backend.app.models.client import Client  # noqa: F401
from backend.app.models.recurring_template import RecurringInvoiceTemplate  # noqa: F401
from backend.app.models.invoice import Invoice  # noqa: F401
from backend.app.models.payment import Payment  # noqa: F401
from backend.app.models.expense import Expense  # noqa: F401
from backend.app.models.setting import Setting  # noqa: F401
from backend.app.models.report import Report  # noqa: F401
