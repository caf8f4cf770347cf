class AppException(Exception):
    """Base application exception.

    ``retryable`` tells webhook and worker callers whether the same request
    can succeed if it is delivered again.
    """

    retryable: bool = False


class NotFoundError(AppException):
    """Requested account, plan or subscription does not exist."""


class ValidationError(AppException):
    """Input rejected by a domain rule (not a schema error)."""


class LockUnavailableError(AppException):
    """A per-account or per-session lock could not be acquired in time."""

    retryable = True
