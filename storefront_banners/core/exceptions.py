import uuid as uuid_pkg
from typing import Any

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{resource} not found",
        )


class ValidationError(HTTPException):
    """Raised when a banner configuration fails validation.

    Carries every field-level violation so the admin form can render
    all of them at once.
    """

    def __init__(self, errors: list[dict[str, Any]]):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=errors,
        )


class TransactionFailure(Exception):
    """A multi-row write failed and its unit of work was rolled back."""

    def __init__(
        self,
        operation: str,
        announcement_id: uuid_pkg.UUID | None = None,
        reason: str | None = None,
    ):
        self.operation = operation
        self.announcement_id = announcement_id
        self.reason = reason
        target = f" announcement {announcement_id}" if announcement_id else ""
        message = f"{operation}{target} failed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
