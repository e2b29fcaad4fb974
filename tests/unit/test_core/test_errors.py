"""Tests for the error catalog, exception hierarchy and result type."""
import pytest

from ledger.core.errors import ERROR_CATALOG, get_error, get_suggestion, get_user_message, is_retryable
from ledger.core.exceptions import (
    ConsistencyError,
    InvalidOperationError,
    LedgerError,
    NotFoundError,
    ValidationError,
)
from ledger.core.result import Err, Ok, capture


class TestErrorCatalog:
    def test_every_entry_is_complete(self):
        for code, definition in ERROR_CATALOG.items():
            assert definition["code"] == code
            for key in ("message", "user_message", "suggestion", "retry_allowed"):
                assert key in definition

    def test_unknown_code_gets_generic_definition(self):
        assert get_error("NOPE_999")["code"] == "UNKNOWN"
        assert is_retryable("NOPE_999")

    def test_consistency_errors_share_generic_message(self):
        for code in ("CONS_001", "CONS_002", "CONS_003"):
            assert get_user_message(code) == "Failed to save, please retry."
            assert is_retryable(code)

    def test_validation_not_retryable(self):
        assert not is_retryable("VAL_001")
        assert get_suggestion("VAL_002")


class TestExceptions:
    @pytest.mark.parametrize(
        "cls,code",
        [
            (ValidationError, "VAL_001"),
            (NotFoundError, "NF_001"),
            (ConsistencyError, "CONS_001"),
            (InvalidOperationError, "OP_001"),
        ],
    )
    def test_hierarchy(self, cls, code):
        error = cls(code)
        assert isinstance(error, LedgerError)
        assert error.error_code == code
        assert error.details == {}

    def test_str_includes_details(self):
        error = NotFoundError("NF_002", {"account_id": "acct-1"})
        assert str(error).startswith("NF_002: Account not found")
        assert "acct-1" in str(error)

    def test_user_message_hides_details(self):
        error = ConsistencyError("CONS_002", {"stored": 1, "recomputed": 2})
        assert error.user_message == "Failed to save, please retry."
        assert error.retry_allowed


class TestResult:
    async def test_capture_ok(self):
        async def op():
            return 42

        result = await capture(op())
        assert isinstance(result, Ok)
        assert result.ok
        assert result.unwrap() == 42
        assert result.error is None

    async def test_capture_ledger_error(self):
        async def op():
            raise InvalidOperationError("OP_001", {"category_id": "food"})

        result = await capture(op())
        assert isinstance(result, Err)
        assert not result.ok
        assert result.value is None
        assert result.error_code == "OP_001"
        assert result.user_message == "Built-in categories can't be deleted."
        with pytest.raises(InvalidOperationError):
            result.unwrap()

    async def test_capture_lets_other_errors_through(self):
        async def op():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            await capture(op())
