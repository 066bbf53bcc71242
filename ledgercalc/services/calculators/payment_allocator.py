"""
LedgerCalc - Payment Allocator

Allocation of a payment against outstanding document balances.

Rules:
- An allocation always carries the sign of the balance it settles
- Its magnitude never exceeds that balance
- A zero balance accepts nothing
- The local-currency twin is clamped against its own balance field

Exchange gain/loss on a line is the difference between the allocated
amount valued at the document's original rate and at the payment rate.
A negative figure is a loss.
"""

import logging
from decimal import Decimal
from typing import Any, List, Sequence, Tuple

from ledgercalc.schemas.decimal_profile import DecimalProfile
from ledgercalc.schemas.transaction import AllocationTotals, PaymentLine
from ledgercalc.services.currency_service import (
    ZERO,
    convert,
    normalize_rate,
    round_amount,
    subtract_amounts,
    sum_amounts,
    to_decimal,
)
from ledgercalc.utils.money import truncate_amount

logger = logging.getLogger(__name__)


class PaymentAllocator:
    """Allocation clamping and payment-side totals."""

    # ===========================================
    # CLAMPING
    # ===========================================

    @staticmethod
    def clamp(entered_value: Any, doc_bal_amount: Any, decimals: int) -> Decimal:
        """Force sign, cap magnitude, round to `decimals`."""
        value = to_decimal(entered_value)
        balance = to_decimal(doc_bal_amount)
        is_negative = balance < ZERO

        if is_negative and value > ZERO:
            value = -value
        elif not is_negative and value < ZERO:
            value = -value

        if is_negative:
            value = max(value, balance)
        else:
            value = min(value, balance)

        result = round_amount(value, decimals)
        # Balance finer than `decimals` may round past itself
        if abs(result) > abs(balance):
            result = truncate_amount(balance, decimals)
        return result

    @staticmethod
    def clamp_allocation(entered_value: Any, doc_bal_amount: Any, decimals: DecimalProfile) -> Decimal:
        """
        Clamp a user-entered allocation against the line's balance.

        Args:
            entered_value: Amount typed by the user (non-numeric counts as 0)
            doc_bal_amount: Outstanding balance of the document
            decimals: Company decimal profile

        Returns:
            Allocation with the balance's sign, |result| <= |balance|,
            rounded to amount_decimals
        """
        return PaymentAllocator.clamp(entered_value, doc_bal_amount, decimals.amount_decimals)

    @staticmethod
    def clamp_local_allocation(entered_value: Any, doc_bal_local_amount: Any, decimals: DecimalProfile) -> Decimal:
        """Local-currency twin of clamp_allocation."""
        return PaymentAllocator.clamp(entered_value, doc_bal_local_amount, decimals.local_amount_decimals)

    # ===========================================
    # LINE ALLOCATION
    # ===========================================

    @staticmethod
    def with_allocation(
        line: PaymentLine,
        alloc_amount: Decimal,
        exchange_rate: Any,
        decimals: DecimalProfile,
    ) -> PaymentLine:
        """
        Derive local figures and gain/loss for an already-clamped allocation.
        """
        loc_dec = decimals.local_amount_decimals
        rate = normalize_rate(exchange_rate, decimals.exchange_rate_decimals)
        doc_rate = normalize_rate(line.doc_exchange_rate, decimals.exchange_rate_decimals)

        alloc_local_amount = convert(alloc_amount, rate, loc_dec)
        if alloc_amount == ZERO:
            doc_alloc_local_amount = round_amount(ZERO, loc_dec)
        elif alloc_amount == line.doc_bal_amount:
            # Settling the whole balance clears the whole local balance
            doc_alloc_local_amount = round_amount(line.doc_bal_local_amount, loc_dec)
        else:
            doc_alloc_local_amount = PaymentAllocator.clamp_local_allocation(
                convert(alloc_amount, doc_rate, loc_dec), line.doc_bal_local_amount, decimals
            )

        return line.model_copy(update={
            "alloc_amount": alloc_amount,
            "alloc_local_amount": alloc_local_amount,
            "doc_alloc_amount": alloc_amount,
            "doc_alloc_local_amount": doc_alloc_local_amount,
            "exchange_gain_loss": subtract_amounts(doc_alloc_local_amount, alloc_local_amount, loc_dec),
        })

    @staticmethod
    def allocate_line(
        line: PaymentLine,
        entered_value: Any,
        exchange_rate: Any,
        decimals: DecimalProfile,
    ) -> PaymentLine:
        """Apply a user-entered allocation to one payment line."""
        alloc_amount = PaymentAllocator.clamp_allocation(entered_value, line.doc_bal_amount, decimals)
        if alloc_amount != round_amount(entered_value, decimals.amount_decimals):
            logger.debug(
                f"Allocation on line {line.item_no} clamped from {entered_value} to {alloc_amount}"
            )
        return PaymentAllocator.with_allocation(line, alloc_amount, exchange_rate, decimals)

    @staticmethod
    def allocate_line_local(line: PaymentLine, entered_value: Any, decimals: DecimalProfile) -> PaymentLine:
        """Apply a user-entered local allocation; the document amount is left alone."""
        alloc_local_amount = PaymentAllocator.clamp_local_allocation(
            entered_value, line.doc_bal_local_amount, decimals
        )
        return line.model_copy(update={
            "alloc_local_amount": alloc_local_amount,
            "exchange_gain_loss": subtract_amounts(
                line.doc_alloc_local_amount, alloc_local_amount, decimals.local_amount_decimals
            ),
        })

    @staticmethod
    def reset_allocations(lines: Sequence[PaymentLine], decimals: DecimalProfile) -> List[PaymentLine]:
        """Zero every allocation field."""
        amt_zero = round_amount(ZERO, decimals.amount_decimals)
        loc_zero = round_amount(ZERO, decimals.local_amount_decimals)
        return [
            line.model_copy(update={
                "alloc_amount": amt_zero,
                "alloc_local_amount": loc_zero,
                "doc_alloc_amount": amt_zero,
                "doc_alloc_local_amount": loc_zero,
                "exchange_gain_loss": loc_zero,
            })
            for line in lines
        ]

    # ===========================================
    # AUTO ALLOCATION
    # ===========================================

    @staticmethod
    def auto_allocate(
        lines: Sequence[PaymentLine],
        tot_amt: Any,
        exchange_rate: Any,
        decimals: DecimalProfile,
    ) -> List[PaymentLine]:
        """
        Spread the payment amount over the outstanding balances.

        With a zero payment amount every line is settled in full. Otherwise
        credit balances (negative) are taken in full first, since they add
        to the amount available, then debit balances in item order until
        the amount is used up.
        """
        amt_dec = decimals.amount_decimals
        tot_amt = round_amount(tot_amt, amt_dec)
        ordered = sorted(lines, key=lambda line: line.item_no)
        full = {
            line.item_no: PaymentAllocator.clamp(line.doc_bal_amount, line.doc_bal_amount, amt_dec)
            for line in ordered
        }

        if tot_amt == ZERO:
            allocations = full
        else:
            allocations = {}
            remaining = tot_amt
            for line in ordered:
                if line.doc_bal_amount < ZERO:
                    allocations[line.item_no] = full[line.item_no]
                    remaining -= allocations[line.item_no]
            for line in ordered:
                if line.doc_bal_amount < ZERO:
                    continue
                alloc = PaymentAllocator.clamp(max(remaining, ZERO), line.doc_bal_amount, amt_dec)
                allocations[line.item_no] = alloc
                remaining -= alloc

        result = [
            PaymentAllocator.with_allocation(line, allocations[line.item_no], exchange_rate, decimals)
            for line in lines
        ]
        logger.debug(
            f"Auto-allocated {sum_amounts(allocations.values(), amt_dec)} of {tot_amt}"
            f" across {len(result)} lines"
        )
        return result

    # ===========================================
    # HEADER FIGURES
    # ===========================================

    @staticmethod
    def calculate_unallocated(
        tot_amt: Any,
        tot_local_amt: Any,
        alloc_tot_amt: Any,
        alloc_tot_local_amt: Any,
        decimals: DecimalProfile,
    ) -> Tuple[Decimal, Decimal]:
        """Payment amount not yet allocated, in document and local currency."""
        return (
            subtract_amounts(tot_amt, alloc_tot_amt, decimals.amount_decimals),
            subtract_amounts(tot_local_amt, alloc_tot_local_amt, decimals.local_amount_decimals),
        )

    @staticmethod
    def summarize(
        lines: Sequence[PaymentLine],
        tot_amt: Any,
        tot_local_amt: Any,
        decimals: DecimalProfile,
    ) -> AllocationTotals:
        """Allocated, unallocated and gain/loss totals for the payment header."""
        alloc_tot_amt = sum_amounts((line.alloc_amount for line in lines), decimals.amount_decimals)
        alloc_tot_local_amt = sum_amounts(
            (line.alloc_local_amount for line in lines), decimals.local_amount_decimals
        )
        un_alloc_tot_amt, un_alloc_tot_local_amt = PaymentAllocator.calculate_unallocated(
            tot_amt, tot_local_amt, alloc_tot_amt, alloc_tot_local_amt, decimals
        )
        return AllocationTotals(
            alloc_tot_amt=alloc_tot_amt,
            alloc_tot_local_amt=alloc_tot_local_amt,
            un_alloc_tot_amt=un_alloc_tot_amt,
            un_alloc_tot_local_amt=un_alloc_tot_local_amt,
            exchange_gain_loss=sum_amounts(
                (line.exchange_gain_loss for line in lines), decimals.local_amount_decimals
            ),
        )


# ===========================================
# CONVENIENCE FUNCTIONS
# ===========================================

def clamp_allocation(entered_value: Any, doc_bal_amount: Any, decimals: DecimalProfile) -> Decimal:
    return PaymentAllocator.clamp_allocation(entered_value, doc_bal_amount, decimals)


def clamp_local_allocation(entered_value: Any, doc_bal_local_amount: Any, decimals: DecimalProfile) -> Decimal:
    return PaymentAllocator.clamp_local_allocation(entered_value, doc_bal_local_amount, decimals)


def allocate_line(line: PaymentLine, entered_value: Any, exchange_rate: Any, decimals: DecimalProfile) -> PaymentLine:
    return PaymentAllocator.allocate_line(line, entered_value, exchange_rate, decimals)


def auto_allocate(
    lines: Sequence[PaymentLine],
    tot_amt: Any,
    exchange_rate: Any,
    decimals: DecimalProfile,
) -> List[PaymentLine]:
    return PaymentAllocator.auto_allocate(lines, tot_amt, exchange_rate, decimals)


def summarize_allocations(
    lines: Sequence[PaymentLine],
    tot_amt: Any,
    tot_local_amt: Any,
    decimals: DecimalProfile,
) -> AllocationTotals:
    return PaymentAllocator.summarize(lines, tot_amt, tot_local_amt, decimals)
