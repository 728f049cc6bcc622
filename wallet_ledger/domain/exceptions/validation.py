"""Validation failures carrying a typed list of field errors."""

from dataclasses import dataclass
from typing import List

from .base import DomainException


@dataclass(frozen=True)
class FieldError:
    """A single field/reason pair."""

    field: str
    reason: str

    def to_dict(self) -> dict:
        return {"field": self.field, "reason": self.reason}


class ValidationFailedException(DomainException):
    """Raised when an amount, date or category reference is malformed."""

    def __init__(self, errors: List[FieldError]):
        super().__init__(
            message="; ".join(f"{e.field}: {e.reason}" for e in errors) or "Validation failed",
            code="VALIDATION_FAILED",
            details=[e.to_dict() for e in errors],
        )
        self.errors = errors

    @classmethod
    def single(cls, field: str, reason: str) -> "ValidationFailedException":
        return cls([FieldError(field=field, reason=reason)])
