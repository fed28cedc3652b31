class ExpenseTrackerError(Exception):
    """Base error carrying the message returned to the caller."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ExpenseTrackerError):
    """Missing or malformed input, detected before any I/O."""


class AuthError(ExpenseTrackerError):
    """No resolved identity for the request."""


class NotFoundError(ExpenseTrackerError):
    """No local user, or no matching owned record."""


class ProviderError(ExpenseTrackerError):
    """Identity provider unreachable or returned no profile."""
