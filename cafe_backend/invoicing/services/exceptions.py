# invoicing/services/exceptions.py


class InvoicingServiceError(Exception):
    """Base error for invoicing services."""


class InvoiceNotFoundError(InvoicingServiceError):
    pass


class InvoiceValidationError(InvoicingServiceError):
    pass
