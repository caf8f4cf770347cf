"""
Billing errors.

Every BillingError says whether redelivering the same request can succeed,
so webhook and worker callers know whether to retry.
"""

from common.core.exceptions import AppException, NotFoundError


class BillingError(AppException):
    """Base class for billing errors."""


class PlanNotFoundError(NotFoundError):
    """Plan id is not in the catalog."""


class AccountNotFoundError(NotFoundError):
    """No account with this id."""


class InvalidEventError(BillingError):
    """Payment event failed verification. Terminal: do not retry this session."""


class TransientProviderError(BillingError):
    """Timeout or network failure talking to the payment provider."""

    retryable = True


class StateConflictError(BillingError):
    """
    A concurrent writer got there first (duplicate session_ref).

    Callers treat this as already handled.
    """


class PersistenceFailureError(BillingError):
    """Local write failed; the ledger entry is left PENDING or FAILED for reconciliation."""

    retryable = True


class InvalidStatusTransitionError(BillingError):
    """Ledger status change not allowed from the current status."""
