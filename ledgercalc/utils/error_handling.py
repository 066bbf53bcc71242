"""
LedgerCalc - Error Handling

Error types surfaced by the calculation engine:
- Error codes shared by every engine error
- Validation errors returned (not raised) at the submit gate
- ValidationResult container handed back to the caller
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger("ledgercalc.errors")


class ErrorCode(str, Enum):
    """Standardized error codes for the engine"""

    # Input Errors
    INVALID_AMOUNT = "INVALID_AMOUNT"
    LINE_NOT_FOUND = "LINE_NOT_FOUND"

    # Business Rule Errors
    BALANCE_MISMATCH = "BALANCE_MISMATCH"
    ZERO_AMOUNT = "ZERO_AMOUNT"


def _jsonable(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


class EngineException(Exception):
    """Base exception for all engine errors"""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        field: Optional[str] = None,
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        self.field = field
        self.timestamp = datetime.now(timezone.utc)
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a plain dictionary for the caller"""
        result = {
            "code": self.code.value,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.field:
            result["field"] = self.field
        if self.details:
            result["details"] = _jsonable(self.details)
        return result


# ============================================================================
# Submit-time Validation Errors
# ============================================================================

class BalanceError(EngineException):
    """Journal debit total does not equal credit total"""

    def __init__(self, debit_total: Decimal, credit_total: Decimal):
        difference = debit_total - credit_total
        super().__init__(
            code=ErrorCode.BALANCE_MISMATCH,
            message=f"Entry must be balanced. Debit: {debit_total}, Credit: {credit_total}",
            field="data_details",
            details={
                "debit_total": debit_total,
                "credit_total": credit_total,
                "difference": difference,
            },
        )
        self.debit_total = debit_total
        self.credit_total = credit_total
        self.difference = difference


class ZeroAmountError(EngineException):
    """Header total or local total is zero at submit time"""

    def __init__(self, tot_amt: Decimal, tot_local_amt: Decimal):
        zero_fields = []
        if tot_amt == 0:
            zero_fields.append("tot_amt")
        if tot_local_amt == 0:
            zero_fields.append("tot_local_amt")
        super().__init__(
            code=ErrorCode.ZERO_AMOUNT,
            message="Total Amount and Total Local Amount should not be zero",
            field=zero_fields[0] if zero_fields else None,
            details={
                "tot_amt": tot_amt,
                "tot_local_amt": tot_local_amt,
                "zero_fields": zero_fields,
            },
        )


# ============================================================================
# Caller Errors
# ============================================================================

class LineNotFoundError(EngineException):
    """An edit referenced an item number that is not in the document"""

    def __init__(self, item_no: int):
        super().__init__(
            code=ErrorCode.LINE_NOT_FOUND,
            message=f"Detail line {item_no} not found",
            field="item_no",
            details={"item_no": item_no},
        )


class ValidationResult:
    """Outcome of a submit-time validation pass."""

    def __init__(self, errors: Optional[List[EngineException]] = None):
        self.errors: List[EngineException] = list(errors or [])

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls()

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def __bool__(self) -> bool:
        return self.is_valid

    def has_error(self, error_type: type) -> bool:
        return any(isinstance(e, error_type) for e in self.errors)

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        return ValidationResult(self.errors + other.errors)

    def raise_for_errors(self) -> None:
        """Raise the first error, for callers that prefer exceptions."""
        if self.errors:
            raise self.errors[0]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": [e.to_dict() for e in self.errors],
        }

    def __repr__(self) -> str:
        codes = [e.code.value for e in self.errors]
        return f"ValidationResult(is_valid={self.is_valid}, errors={codes})"


def log_validation_failure(result: ValidationResult, document_type: Optional[str] = None) -> None:
    """Log a failed submit-time validation at INFO."""
    if result.is_valid:
        return
    for error in result.errors:
        logger.info(
            f"Submit validation failed [{error.code.value}]: {error.message}",
            extra={"document_type": document_type, "details": _jsonable(error.details)},
        )
