"""Custom exception classes for ledger operations.

Every exception carries an error_code that maps to the error catalog in
errors.py. Reconciler errors abort the enclosing database transaction; the
Categorizer never raises.
"""

from typing import Any

from ledger.core.errors import get_error


class LedgerError(Exception):
    """Base exception for all ledger errors.

    Attributes:
        error_code: Code from the error catalog (e.g., "VAL_001")
        details: Additional context about the error (for logging)
    """

    def __init__(self, error_code: str, details: dict[str, Any] | None = None):
        """Initialize the exception.

        Args:
            error_code: Error code from errors.py
            details: Additional error context (not shown to users)
        """
        self.error_code = error_code
        self.details = details or {}
        super().__init__(error_code)

    @property
    def user_message(self) -> str:
        return get_error(self.error_code)["user_message"]

    @property
    def retry_allowed(self) -> bool:
        return get_error(self.error_code)["retry_allowed"]

    def __str__(self) -> str:
        message = get_error(self.error_code)["message"]
        if self.details:
            return f"{self.error_code}: {message} {self.details}"
        return f"{self.error_code}: {message}"


class ValidationError(LedgerError):
    """Raised for bad input: non-positive amount, blank required field.

    Always surfaced to the caller, never retried automatically.
    """

    pass


class NotFoundError(LedgerError):
    """Raised when a referenced entity does not exist."""

    pass


class ConsistencyError(LedgerError):
    """Raised when a ledger invariant is violated.

    Fatal to the operation: the transaction is rolled back and the error is
    logged in full. Users only see a generic "please retry" message.
    """

    pass


class InvalidOperationError(LedgerError):
    """Raised when an operation is not allowed in the current state.

    Examples:
    - Deleting a default category (OP_001)
    - Driving a goal's saved amount below zero (OP_002)
    """

    pass
