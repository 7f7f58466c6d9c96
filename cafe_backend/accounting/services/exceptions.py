# accounting/services/exceptions.py

"""
ACCOUNTING SERVICE ERRORS

Centralized domain errors for accounting services.

All of these are caller-correctable validation failures: API views map them
to 4xx responses and nothing retries them.
"""

from __future__ import annotations


class AccountingServiceError(Exception):
    """Base exception for all accounting service failures."""


class AccountResolutionError(AccountingServiceError):
    """Raised when an expected account cannot be resolved."""


class DuplicateAccountError(AccountingServiceError):
    """Raised when an account number already exists for the tenant."""


class JournalEntryCreationError(AccountingServiceError):
    """Raised when a journal entry cannot be created."""


class UnbalancedEntryError(JournalEntryCreationError):
    """Raised when total debits and total credits differ beyond tolerance."""

    def __init__(self, total_debit, total_credit):
        self.total_debit = total_debit
        self.total_credit = total_credit
        super().__init__(
            f"Journal entry not balanced: debits={total_debit} credits={total_credit}"
        )


class JournalEntryNotFoundError(AccountingServiceError):
    """Raised when a journal entry does not exist for the tenant."""


class JournalEntryStateError(AccountingServiceError):
    """Raised when a journal entry is not in a state that allows the operation."""


class IdempotencyError(AccountingServiceError):
    """Raised on duplicate or retried accounting events."""


class SequenceAllocationError(AccountingServiceError):
    """Raised when a document number cannot be allocated."""


class ExpenseWorkflowError(AccountingServiceError):
    """Raised on invalid expense input or an illegal status transition."""


class VendorError(AccountingServiceError):
    """Raised on invalid vendor input."""
