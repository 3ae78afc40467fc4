"""Domain exceptions raised by the service layer.

The API layer maps these to HTTP responses in ``backend.app.api.errors``.
"""


class InvoiceDeskError(Exception):
    """Base class for domain errors."""


class NotFoundError(InvoiceDeskError):
    """A referenced record does not exist."""


class ValidationError(InvoiceDeskError):
    """A domain rule rejected the requested change."""


class ConflictError(InvoiceDeskError):
    """The change conflicts with existing state (duplicates, live references)."""
