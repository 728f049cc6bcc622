"""Pydantic schema for API error responses."""

from pydantic import BaseModel, Field


class FieldErrorSchema(BaseModel):
    field: str
    reason: str


class ErrorResponseSchema(BaseModel):
    """Standard error response format for all API errors."""
    error: str = Field(
        ...,
        description="Error code",
        examples=["ACCOUNT_NOT_FOUND"],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Account not found: acc-main"],
    )
    request_id: str | None = Field(
        None,
        description="Request ID for tracing",
    )
    details: list[FieldErrorSchema] | None = Field(
        None,
        description="Offending fields, only for validation errors",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "error": "VALIDATION_FAILED",
                    "message": "amount: must be a positive number",
                    "request_id": "abc123",
                    "details": [{"field": "amount", "reason": "must be a positive number"}],
                }
            ]
        }
    }
