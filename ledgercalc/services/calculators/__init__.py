"""
LedgerCalc - Calculators Package

Calculation services for multi-currency transaction documents.

Modules:
- gst_calculator: line amount cascade and GST in three currencies
- detail_recalculator: whole-document recalculation after a rate change
- header_aggregator: header totals (gross, net and debit-side)
- payment_allocator: allocation clamping, auto allocation, gain/loss
- journal_validator: debit/credit and non-zero submit gates
"""

from ledgercalc.services.calculators.gst_calculator import (
    LineGstCalculator,
    apply_amount,
    apply_gst,
    apply_quantity,
    calculate_gst_amount,
)
from ledgercalc.services.calculators.detail_recalculator import DetailRecalculator, recalculate_all
from ledgercalc.services.calculators.header_aggregator import (
    HeaderAggregator,
    aggregate,
    aggregate_debit_side,
    aggregate_net,
)
from ledgercalc.services.calculators.payment_allocator import (
    PaymentAllocator,
    allocate_line,
    auto_allocate,
    clamp_allocation,
    clamp_local_allocation,
    summarize_allocations,
)
from ledgercalc.services.calculators.journal_validator import (
    JournalBalanceValidator,
    balance_status,
    validate,
    validate_for_submit,
)


__all__ = [
    # GST
    "LineGstCalculator",
    "apply_amount",
    "apply_gst",
    "apply_quantity",
    "calculate_gst_amount",
    # Recalculation
    "DetailRecalculator",
    "recalculate_all",
    # Aggregation
    "HeaderAggregator",
    "aggregate",
    "aggregate_debit_side",
    "aggregate_net",
    # Allocation
    "PaymentAllocator",
    "allocate_line",
    "auto_allocate",
    "clamp_allocation",
    "clamp_local_allocation",
    "summarize_allocations",
    # Validation
    "JournalBalanceValidator",
    "balance_status",
    "validate",
    "validate_for_submit",
]
