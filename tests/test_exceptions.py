"""Tests for the domain exception hierarchy."""

import pytest

from components.core.exceptions import (
    BalanceConflictError,
    InvalidAmountError,
    InvalidStateError,
    LoanServiceError,
    NotFoundError,
    OverpaymentError,
    ValidationError,
)


class TestExceptionHierarchy:
    """Test exception inheritance and HTTP status mapping."""

    @pytest.mark.parametrize("exc_class, status_code", [
        (LoanServiceError, 500),
        (ValidationError, 422),
        (InvalidAmountError, 422),
        (NotFoundError, 404),
        (InvalidStateError, 400),
        (OverpaymentError, 400),
        (BalanceConflictError, 409),
    ])
    def test_status_codes(self, exc_class, status_code):
        assert exc_class("boom").status_code == status_code

    def test_all_inherit_from_base(self):
        for exc_class in (ValidationError, InvalidAmountError, NotFoundError,
                          InvalidStateError, OverpaymentError, BalanceConflictError):
            assert issubclass(exc_class, LoanServiceError)

    def test_ledger_errors(self):
        assert issubclass(OverpaymentError, InvalidStateError)
        # a lost balance race is not a business-rule rejection
        assert not issubclass(BalanceConflictError, InvalidStateError)
        assert issubclass(InvalidAmountError, ValidationError)

    def test_message_and_errors(self):
        exc = ValidationError("Error de validación", errors=[{"field": "dpi", "message": "duplicado"}])
        assert str(exc) == "Error de validación"
        assert exc.message == "Error de validación"
        assert exc.errors == [{"field": "dpi", "message": "duplicado"}]

    def test_catch_base(self):
        with pytest.raises(LoanServiceError):
            raise OverpaymentError("excede saldo")
