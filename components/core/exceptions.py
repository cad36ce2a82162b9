"""Domain exceptions raised by the repositories."""

from typing import Optional


class LoanServiceError(Exception):
    """Base exception for all back office errors."""

    status_code = 500

    def __init__(self, message: str, errors: Optional[list] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors


class ValidationError(LoanServiceError):
    """Raised when input is well-formed but breaks a business validation rule."""

    status_code = 422


class InvalidAmountError(ValidationError):
    """Raised when a monetary amount is zero or negative."""


class NotFoundError(LoanServiceError):
    """Raised when a referenced entity does not exist."""

    status_code = 404


class InvalidStateError(LoanServiceError):
    """Raised when an entity is in an invalid state for the operation."""

    status_code = 400


class OverpaymentError(InvalidStateError):
    """Raised when a payment exceeds the current loan balance."""


class BalanceConflictError(LoanServiceError):
    """Raised when the loan balance kept changing while a payment was being applied."""

    status_code = 409
