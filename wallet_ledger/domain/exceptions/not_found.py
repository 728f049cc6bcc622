"""Lookup failures for accounts, categories and transactions."""

from .base import DomainException


class NotFoundException(DomainException):
    """Raised when a referenced resource does not exist."""

    def __init__(self, message: str, code: str = "NOT_FOUND"):
        super().__init__(message=message, code=code)


class TransactionNotFoundException(NotFoundException):
    def __init__(self, transaction_id: int):
        super().__init__(
            message=f"Transaction not found: {transaction_id}",
            code="TRANSACTION_NOT_FOUND",
        )
        self.transaction_id = transaction_id


class AccountNotFoundException(NotFoundException):
    def __init__(self, account_token: str):
        super().__init__(
            message=f"Account not found: {account_token}",
            code="ACCOUNT_NOT_FOUND",
        )
        self.account_token = account_token


class CategoryNotFoundException(NotFoundException):
    def __init__(self, category_id: int):
        super().__init__(
            message=f"Category not found: {category_id}",
            code="CATEGORY_NOT_FOUND",
        )
        self.category_id = category_id
