"""Ledger rule violations."""

from .base import DomainException


class PermissionDeniedException(DomainException):
    """Raised when the acting user does not own the account being used."""

    def __init__(self, resource_type: str, user_id: int):
        super().__init__(
            message=f"User does not have permission to modify this {resource_type}",
            code="PERMISSION_DENIED",
        )
        self.resource_type = resource_type
        self.user_id = user_id


class UnsupportedOperationException(DomainException):
    """Raised when a plain transaction targets a Transfer category."""

    def __init__(self, message: str = "Transfers are not allowed here"):
        super().__init__(message=message, code="UNSUPPORTED_OPERATION")


class ConcurrencyConflictException(DomainException):
    """
    Raised when an account balance changed between read and write.

    The ledger retries the whole operation on this error; it only
    reaches callers once the retry budget is spent.
    """

    def __init__(self, account_token: str):
        super().__init__(
            message=f"Account {account_token} was modified concurrently",
            code="CONCURRENCY_CONFLICT",
        )
        self.account_token = account_token
