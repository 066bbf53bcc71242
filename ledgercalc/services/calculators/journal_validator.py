"""
LedgerCalc - Journal Balance Validator

Submit-time gates between an in-memory document and persistence:
- Journal debit total must equal credit total (exact, at amount decimals)
- Invoice, receipt, adjustment and journal headers must not be zero

Failures are returned in a ValidationResult, never raised.
"""

import logging
from typing import Optional, Sequence

from ledgercalc.schemas.decimal_profile import DecimalProfile
from ledgercalc.schemas.transaction import (
    DebitCreditSummary,
    DetailLine,
    DocumentType,
    HeaderTotals,
    capabilities_for,
)
from ledgercalc.services.currency_service import ZERO, subtract_amounts, sum_amounts
from ledgercalc.utils.error_handling import (
    BalanceError,
    ValidationResult,
    ZeroAmountError,
    log_validation_failure,
)

logger = logging.getLogger(__name__)


class JournalBalanceValidator:
    """Debit/credit and non-zero checks run before a document is saved."""

    @staticmethod
    def balance_status(
        lines: Sequence[DetailLine],
        decimals: Optional[DecimalProfile] = None,
    ) -> DebitCreditSummary:
        """Debit and credit totals of a journal at amount decimals."""
        amt_dec = (decimals or DecimalProfile()).amount_decimals
        debit_total = sum_amounts(
            (line.amount for line in lines if getattr(line, "is_debit", False)), amt_dec
        )
        credit_total = sum_amounts(
            (line.amount for line in lines if not getattr(line, "is_debit", False)), amt_dec
        )
        difference = subtract_amounts(debit_total, credit_total, amt_dec)
        return DebitCreditSummary(
            debit_total=debit_total,
            credit_total=credit_total,
            difference=difference,
            is_balanced=difference == ZERO,
        )

    @staticmethod
    def validate(
        lines: Sequence[DetailLine],
        decimals: Optional[DecimalProfile] = None,
    ) -> ValidationResult:
        """
        Check that debits equal credits.

        Args:
            lines: Journal lines (lines without `is_debit` count as credits)
            decimals: Company decimal profile

        Returns:
            ValidationResult holding a BalanceError when unbalanced
        """
        status = JournalBalanceValidator.balance_status(lines, decimals)
        if status.is_balanced:
            return ValidationResult.ok()
        return ValidationResult([BalanceError(status.debit_total, status.credit_total)])

    @staticmethod
    def validate_non_zero(totals: HeaderTotals) -> ValidationResult:
        """Reject a header whose total or local total is zero."""
        if totals.tot_amt == ZERO or totals.tot_local_amt == ZERO:
            return ValidationResult([ZeroAmountError(totals.tot_amt, totals.tot_local_amt)])
        return ValidationResult.ok()

    @staticmethod
    def validate_for_submit(
        document_type: DocumentType,
        lines: Sequence[DetailLine],
        totals: HeaderTotals,
        decimals: DecimalProfile,
    ) -> ValidationResult:
        """
        Run every gate that applies to the document type.

        Payments pass unconditionally at this layer.
        """
        capabilities = capabilities_for(document_type)
        result = ValidationResult.ok()
        if capabilities.requires_non_zero:
            result = result.merge(JournalBalanceValidator.validate_non_zero(totals))
        if capabilities.requires_balance:
            result = result.merge(JournalBalanceValidator.validate(lines, decimals))

        log_validation_failure(result, DocumentType(document_type).value)
        return result


def validate(lines: Sequence[DetailLine], decimals: Optional[DecimalProfile] = None) -> ValidationResult:
    return JournalBalanceValidator.validate(lines, decimals)


def balance_status(lines: Sequence[DetailLine], decimals: Optional[DecimalProfile] = None) -> DebitCreditSummary:
    return JournalBalanceValidator.balance_status(lines, decimals)


def validate_for_submit(
    document_type: DocumentType,
    lines: Sequence[DetailLine],
    totals: HeaderTotals,
    decimals: DecimalProfile,
) -> ValidationResult:
    return JournalBalanceValidator.validate_for_submit(document_type, lines, totals, decimals)
