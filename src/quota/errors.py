"""Errors raised by the accounting core.

Every error carries a machine-distinguishable outcome kind so the REST layer
can translate it to a status code without inspecting messages.
"""

from enum import Enum
from typing import Optional


class OutcomeKind(str, Enum):
    """Kinds of failed outcomes."""

    INVALID_INPUT = "InvalidInput"
    ALREADY_EXISTS = "AlreadyExists"
    NOT_FOUND = "NotFound"
    QUOTA_EXCEEDED = "QuotaExceeded"
    SERVICE_UNAVAILABLE = "ServiceUnavailable"
    STORAGE_FAILURE = "StorageFailure"


class AccountError(Exception):
    """Base class for all errors of the accounting core."""

    kind: OutcomeKind = OutcomeKind.STORAGE_FAILURE

    def __init__(self, message: str, user_id: Optional[str] = None) -> None:
        """Construct error with human readable message."""
        super().__init__(message)
        self.message = message
        self.user_id = user_id


class InvalidInputError(AccountError):
    """Request field is missing, has wrong type or is out of range."""

    kind = OutcomeKind.INVALID_INPUT


class AccountAlreadyExistsError(AccountError):
    """Account with given identifier already exists."""

    kind = OutcomeKind.ALREADY_EXISTS

    def __init__(self, user_id: str) -> None:
        """Construct error for the colliding identifier."""
        super().__init__(f"Account {user_id} already exists", user_id)


class AccountNotFoundError(AccountError):
    """Operation targets an account that does not exist."""

    kind = OutcomeKind.NOT_FOUND

    def __init__(self, user_id: str, message: Optional[str] = None) -> None:
        """Construct error for the missing account."""
        super().__init__(message or f"Account {user_id} not found", user_id)


class QuotaExceedError(AccountError):
    """User has no remaining tokens to spend."""

    kind = OutcomeKind.QUOTA_EXCEEDED

    def __init__(self, user_id: str, available: int) -> None:
        """Construct error with the last known remaining budget."""
        if available < 0:
            message = f"User {user_id} has {-available} tokens over the limit"
        else:
            message = f"User {user_id} has no available tokens"
        super().__init__(message, user_id)
        self.available = available


class ServiceUnavailableError(AccountError):
    """Metered external operation failed or is unreachable."""

    kind = OutcomeKind.SERVICE_UNAVAILABLE


class StorageFailureError(AccountError):
    """Account store could not complete the operation."""

    kind = OutcomeKind.STORAGE_FAILURE

    def __init__(
        self, operation: str, user_id: Optional[str] = None, cause: str = ""
    ) -> None:
        """Construct error with the failed operation and account as context."""
        target = f" for user {user_id}" if user_id is not None else ""
        message = f"Failed to {operation}{target}"
        if cause:
            message = f"{message}: {cause}"
        super().__init__(message, user_id)
        self.operation = operation
