"""Base domain exception."""

from typing import Any, Optional


class DomainException(Exception):
    """
    Base exception for all domain-level errors.

    Every ledger failure is raised before any write reaches the database,
    so catching one of these means the account balance is untouched.
    """

    def __init__(
        self,
        message: str,
        code: str = "DOMAIN_ERROR",
        details: Optional[Any] = None,
    ):
        self.message = message
        self.code = code
        self.details = details
        super().__init__(self.message)
