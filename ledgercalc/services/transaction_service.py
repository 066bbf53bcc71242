"""
LedgerCalc - Transaction Service

Document-level pipeline over the calculators. Every operation takes a
TransactionDocument and returns a new one:

1. Line edits run the per-line cascade (amount -> local/country -> GST)
2. Header rate changes run DetailRecalculator over all lines
3. HeaderAggregator runs last, so totals always match the line set

The service holds no state besides its decimal profile and the company
country-currency flag.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ledgercalc.schemas.decimal_profile import DecimalProfile
from ledgercalc.schemas.transaction import (
    DebitCreditSummary,
    DetailLine,
    DocumentType,
    ExchangeRates,
    HeaderTotals,
    JournalLine,
    PaymentLine,
    TransactionDocument,
    capabilities_for,
)
from ledgercalc.services.calculators.detail_recalculator import DetailRecalculator
from ledgercalc.services.calculators.gst_calculator import LineGstCalculator
from ledgercalc.services.calculators.header_aggregator import HeaderAggregator
from ledgercalc.services.calculators.journal_validator import JournalBalanceValidator
from ledgercalc.services.calculators.payment_allocator import PaymentAllocator
from ledgercalc.services.currency_service import ZERO, normalize_rate, round_amount, to_decimal
from ledgercalc.utils.error_handling import LineNotFoundError, ValidationResult

logger = logging.getLogger(__name__)

_CASCADE_FIELDS = ("qty", "unit_price", "amount", "gst_percentage")
_NUMBERING_FIELDS = {"item_no", "seq_no"}

_LINE_TYPES = {
    DocumentType.AP_INVOICE: DetailLine,
    DocumentType.CB_RECEIPT: DetailLine,
    DocumentType.AP_ADJUSTMENT: JournalLine,
    DocumentType.GL_JOURNAL: JournalLine,
    DocumentType.AP_PAYMENT: PaymentLine,
}


class TransactionService:
    """Service for editing transaction documents."""

    def __init__(self, decimals: DecimalProfile, country_currency_enabled: bool = False):
        self.decimals = decimals
        self.country_currency_enabled = country_currency_enabled
        self.gst_calculator = LineGstCalculator()
        self.recalculator = DetailRecalculator()
        self.aggregator = HeaderAggregator()
        self.allocator = PaymentAllocator()
        self.validator = JournalBalanceValidator()

    # =========================================================================
    # DOCUMENT LIFECYCLE
    # =========================================================================

    def new_document(
        self,
        document_type: DocumentType,
        exchange_rate: Any = Decimal("1"),
        country_exchange_rate: Optional[Any] = None,
    ) -> TransactionDocument:
        """Start an empty document with normalised rates and zero totals."""
        rates = self._rates(exchange_rate, exchange_rate if country_exchange_rate is None else country_exchange_rate)
        document = TransactionDocument(
            document_type=document_type,
            exchange_rate=rates.exchange_rate,
            country_exchange_rate=rates.country_exchange_rate,
            totals=HeaderTotals.zero(self.decimals),
        )
        return self._finalize(document, document.lines)

    def line_type(self, document_type: DocumentType) -> type:
        return _LINE_TYPES[DocumentType(document_type)]

    def clone(self, document: TransactionDocument) -> TransactionDocument:
        """
        Copy a document for re-entry.

        Lines are cleared and every monetary field is zero; the type and
        rates carry over.
        """
        cloned = document.model_copy(update={
            "tot_amt": round_amount(ZERO, self.decimals.amount_decimals),
            "tot_local_amt": round_amount(ZERO, self.decimals.local_amount_decimals),
            "lines": [],
        })
        return self._finalize(cloned, [])

    def reset(self, document: TransactionDocument) -> TransactionDocument:
        """Discard everything; a fresh document of the same type."""
        return self.new_document(document.document_type)

    # =========================================================================
    # LINE EDITS
    # =========================================================================

    def add_line(self, document: TransactionDocument, line: Optional[DetailLine] = None, **values: Any) -> TransactionDocument:
        """
        Append a line with the next item number and run the line cascade.

        Either pass a ready line or keyword values for a new one.
        """
        if line is None:
            line = self.line_type(document.document_type)(**values)
        next_no = max((existing.item_no for existing in document.lines), default=0) + 1
        line = line.model_copy(update={"item_no": next_no, "seq_no": next_no})
        line = self._calculate_line(document, line)

        logger.debug(f"Added line {next_no} to {document.document_type.value} document")
        return self._finalize(document, list(document.lines) + [line])

    def update_line(self, document: TransactionDocument, item_no: int, **changes: Any) -> TransactionDocument:
        """
        Edit one line and rerun its cascade.

        `qty`/`unit_price` recompute the amount; `amount` sets it directly;
        `gst_percentage` recomputes GST. Other fields are validated like a
        new line; `item_no` and `seq_no` are owned by the document and ignored.
        """
        index = self._index_of(document, item_no)
        line = document.lines[index]

        plain = {k: v for k, v in changes.items() if k not in _CASCADE_FIELDS}
        for key in _NUMBERING_FIELDS.intersection(plain):
            logger.debug(f"Ignoring {key} edit on line {item_no}")
            del plain[key]
        if plain:
            line = type(line).model_validate({**line.model_dump(), **plain})
        if "gst_percentage" in changes:
            line = line.model_copy(update={
                "gst_percentage": self.gst_calculator.normalize_percentage(changes["gst_percentage"]),
            })

        rates = document.rates
        if "qty" in changes or "unit_price" in changes:
            qty = changes.get("qty", line.qty)
            unit_price = changes.get("unit_price", line.unit_price)
            line = self.gst_calculator.apply_quantity(
                line, qty, unit_price, self.decimals, rates, self.country_currency_enabled
            )
        elif "amount" in changes:
            line = self.gst_calculator.apply_amount(
                line, changes["amount"], self.decimals, rates, self.country_currency_enabled
            )
        else:
            line = self._calculate_line(document, line)

        lines = list(document.lines)
        lines[index] = line
        return self._finalize(document, lines)

    def set_gst_percentage(self, document: TransactionDocument, item_no: int, gst_percentage: Any) -> TransactionDocument:
        return self.update_line(document, item_no, gst_percentage=gst_percentage)

    def remove_lines(self, document: TransactionDocument, item_nos: Iterable[int]) -> TransactionDocument:
        """
        Delete one or many lines and renumber the rest densely.

        Removing a payment line resets every allocation on the document.
        """
        targets = set()
        for item_no in item_nos:
            value = to_decimal(item_no)
            if value == value.to_integral_value():
                targets.add(int(value))
        remaining = [line for line in document.lines if line.item_no not in targets]
        if len(remaining) == len(document.lines):
            return document

        lines = self._renumber(remaining)
        if document.capabilities.has_allocation:
            lines = self.allocator.reset_allocations(lines, self.decimals)
        logger.debug(f"Removed {len(document.lines) - len(lines)} lines")
        return self._finalize(document, lines)

    def reorder_lines(self, document: TransactionDocument, ordered_item_nos: Sequence[int]) -> TransactionDocument:
        """
        Put lines in the given item-number order and renumber from 1.

        Lines not named keep their relative order after the named ones.
        """
        by_no: Dict[int, DetailLine] = {line.item_no: line for line in document.lines}
        ordered = [by_no.pop(no) for no in ordered_item_nos if no in by_no]
        ordered.extend(line for line in document.lines if line.item_no in by_no)
        return self._finalize(document, self._renumber(ordered))

    # =========================================================================
    # HEADER CHANGES
    # =========================================================================

    def change_rates(
        self,
        document: TransactionDocument,
        exchange_rate: Any,
        country_exchange_rate: Optional[Any] = None,
    ) -> TransactionDocument:
        """
        Apply a new exchange-rate pair: recalculate every line, then the header.

        Used for document currency change and for exchange-rate or
        country-exchange-rate edits.
        """
        if country_exchange_rate is None:
            country_exchange_rate = document.country_exchange_rate
        rates = self._rates(exchange_rate, country_exchange_rate)

        lines = self.recalculator.recalculate_all(
            document.lines,
            rates.exchange_rate,
            rates.country_exchange_rate,
            self.decimals,
            self.country_currency_enabled,
        )
        if document.capabilities.has_allocation:
            lines = [
                self.allocator.with_allocation(line, line.alloc_amount, rates.exchange_rate, self.decimals)
                for line in lines
            ]

        updated = document.model_copy(update={
            "exchange_rate": rates.exchange_rate,
            "country_exchange_rate": rates.country_exchange_rate,
        })
        return self._finalize(updated, lines)

    # =========================================================================
    # PAYMENT ALLOCATION
    # =========================================================================

    def set_payment_amount(self, document: TransactionDocument, tot_amt: Any) -> TransactionDocument:
        """Set the payment header amount and its local equivalent."""
        tot_amt = round_amount(tot_amt, self.decimals.amount_decimals)
        updated = document.model_copy(update={
            "tot_amt": tot_amt,
            "tot_local_amt": round_amount(
                tot_amt * document.exchange_rate, self.decimals.local_amount_decimals
            ),
        })
        return self._finalize(updated, updated.lines)

    def allocate(self, document: TransactionDocument, item_no: int, entered_value: Any) -> TransactionDocument:
        """
        Manually allocate against one line.

        While the payment amount is zero manual allocation is not accepted
        and the line is set to zero; auto allocation is the way in.
        """
        index = self._index_of(document, item_no)
        if document.tot_amt == ZERO:
            logger.debug("Payment amount is zero; manual allocation forced to zero")
            entered_value = ZERO

        lines = list(document.lines)
        lines[index] = self.allocator.allocate_line(
            lines[index], entered_value, document.exchange_rate, self.decimals
        )
        return self._finalize(document, lines)

    def allocate_local(self, document: TransactionDocument, item_no: int, entered_value: Any) -> TransactionDocument:
        index = self._index_of(document, item_no)
        lines = list(document.lines)
        lines[index] = self.allocator.allocate_line_local(lines[index], entered_value, self.decimals)
        return self._finalize(document, lines)

    def auto_allocate(self, document: TransactionDocument) -> TransactionDocument:
        """
        Allocate the payment amount over all lines.

        A zero payment amount settles every balance and the payment amount
        becomes the allocated total.
        """
        if not document.lines:
            return document
        lines = self.allocator.auto_allocate(
            document.lines, document.tot_amt, document.exchange_rate, self.decimals
        )
        updated = document
        if document.tot_amt == ZERO:
            summary = self.allocator.summarize(lines, ZERO, ZERO, self.decimals)
            updated = document.model_copy(update={
                "tot_amt": summary.alloc_tot_amt,
                "tot_local_amt": summary.alloc_tot_local_amt,
            })
        return self._finalize(updated, lines)

    def reset_allocations(self, document: TransactionDocument) -> TransactionDocument:
        lines = self.allocator.reset_allocations(document.lines, self.decimals)
        return self._finalize(document, lines)

    # =========================================================================
    # VALIDATION
    # =========================================================================

    def balance_status(self, document: TransactionDocument) -> DebitCreditSummary:
        return self.validator.balance_status(document.lines, self.decimals)

    def debit_side_totals(self, document: TransactionDocument) -> HeaderTotals:
        return self.aggregator.aggregate_debit_side(
            document.lines, self.decimals, self.country_currency_enabled
        )

    def validate_for_submit(self, document: TransactionDocument) -> ValidationResult:
        """Run the submit gates for the document's type."""
        return self.validator.validate_for_submit(
            document.document_type, document.lines, document.totals, self.decimals
        )

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _rates(self, exchange_rate: Any, country_exchange_rate: Any) -> ExchangeRates:
        return ExchangeRates(
            exchange_rate=normalize_rate(exchange_rate, self.decimals.exchange_rate_decimals),
            country_exchange_rate=normalize_rate(country_exchange_rate, self.decimals.exchange_rate_decimals),
        ).for_country_currency(self.country_currency_enabled)

    def _calculate_line(self, document: TransactionDocument, line: DetailLine) -> DetailLine:
        rates = document.rates
        if line.qty is not None and line.unit_price is not None:
            return self.gst_calculator.apply_quantity(
                line, line.qty, line.unit_price, self.decimals, rates, self.country_currency_enabled
            )
        line = self.gst_calculator.apply_amount(
            line, line.amount, self.decimals, rates, self.country_currency_enabled
        )
        if not capabilities_for(document.document_type).has_gst:
            zero = round_amount(ZERO, self.decimals.amount_decimals)
            zero_local = round_amount(ZERO, self.decimals.local_amount_decimals)
            zero_country = zero_local
            if self.country_currency_enabled:
                zero_country = round_amount(ZERO, self.decimals.country_amount_decimals)
            line = line.model_copy(update={
                "gst_percentage": round_amount(ZERO, 2),
                "gst_amount": zero,
                "gst_local_amount": zero_local,
                "gst_country_amount": zero_country,
            })
        return line

    def _index_of(self, document: TransactionDocument, item_no: int) -> int:
        for index, line in enumerate(document.lines):
            if line.item_no == item_no:
                return index
        raise LineNotFoundError(item_no)

    @staticmethod
    def _renumber(lines: Sequence[DetailLine]) -> List[DetailLine]:
        return [
            line.model_copy(update={"item_no": position, "seq_no": position})
            for position, line in enumerate(lines, start=1)
        ]

    def _finalize(self, document: TransactionDocument, lines: Sequence[DetailLine]) -> TransactionDocument:
        """Aggregate the header from the final line set."""
        lines = list(lines)
        if document.capabilities.net_header:
            totals = self.aggregator.aggregate_net(lines, self.decimals, self.country_currency_enabled)
        else:
            totals = self.aggregator.aggregate(lines, self.decimals, self.country_currency_enabled)

        allocation = None
        if document.capabilities.has_allocation:
            allocation = self.allocator.summarize(
                lines, document.tot_amt, document.tot_local_amt, self.decimals
            )

        return document.model_copy(update={
            "lines": lines,
            "totals": totals,
            "allocation": allocation,
        })
