"""
LedgerCalc - Transaction Schemas

Pydantic schemas for detail lines, header totals and the in-memory
transaction document the engine recalculates.
"""

from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ledgercalc.schemas.decimal_profile import DecimalProfile
from ledgercalc.utils.money import clamp_percentage, round_amount, to_decimal


# =============================================================================
# ENUMS / CAPABILITIES
# =============================================================================

class DocumentType(str, Enum):
    AP_INVOICE = "ap_invoice"
    AP_ADJUSTMENT = "ap_adjustment"
    AP_PAYMENT = "ap_payment"
    CB_RECEIPT = "cb_receipt"
    GL_JOURNAL = "gl_journal"


class LineCapabilities(BaseModel):
    """What a document type's lines can do."""
    model_config = ConfigDict(frozen=True)

    has_gst: bool = True
    has_debit_credit: bool = False
    has_allocation: bool = False
    net_header: bool = False
    requires_non_zero: bool = True
    requires_balance: bool = False


DOCUMENT_CAPABILITIES: Dict[DocumentType, LineCapabilities] = {
    DocumentType.AP_INVOICE: LineCapabilities(),
    DocumentType.CB_RECEIPT: LineCapabilities(),
    DocumentType.AP_ADJUSTMENT: LineCapabilities(has_debit_credit=True, net_header=True),
    DocumentType.GL_JOURNAL: LineCapabilities(has_debit_credit=True, requires_balance=True),
    DocumentType.AP_PAYMENT: LineCapabilities(
        has_gst=False,
        has_allocation=True,
        requires_non_zero=False,
    ),
}


def capabilities_for(document_type: DocumentType) -> LineCapabilities:
    return DOCUMENT_CAPABILITIES[DocumentType(document_type)]


# =============================================================================
# EXCHANGE RATES
# =============================================================================

class ExchangeRates(BaseModel):
    """Document-to-local and document-to-country exchange rates."""
    model_config = ConfigDict(frozen=True)

    exchange_rate: Decimal = Decimal("1")
    country_exchange_rate: Decimal = Decimal("1")

    @field_validator("exchange_rate", "country_exchange_rate", mode="before")
    @classmethod
    def coerce_rate(cls, v):
        return to_decimal(v)

    def for_country_currency(self, enabled: bool) -> "ExchangeRates":
        """Force the country rate to the local rate when the flag is off."""
        if enabled:
            return self
        return self.model_copy(update={"country_exchange_rate": self.exchange_rate})

    def normalized(self, decimals: DecimalProfile) -> "ExchangeRates":
        return ExchangeRates(
            exchange_rate=round_amount(self.exchange_rate, decimals.exchange_rate_decimals),
            country_exchange_rate=round_amount(self.country_exchange_rate, decimals.exchange_rate_decimals),
        )


# =============================================================================
# DETAIL LINES
# =============================================================================

_LINE_MONEY_FIELDS = (
    "amount", "local_amount", "country_amount",
    "gst_amount", "gst_local_amount", "gst_country_amount",
)


class DetailLine(BaseModel):
    """Base schema for a transaction detail line (invoice, receipt)."""

    item_no: int = Field(default=1, ge=1)
    seq_no: int = Field(default=1, ge=0)
    description: Optional[str] = None

    qty: Optional[Decimal] = None
    unit_price: Optional[Decimal] = None

    gst_percentage: Decimal = Decimal("0.00")

    amount: Decimal = Decimal("0")
    local_amount: Decimal = Decimal("0")
    country_amount: Decimal = Decimal("0")
    gst_amount: Decimal = Decimal("0")
    gst_local_amount: Decimal = Decimal("0")
    gst_country_amount: Decimal = Decimal("0")

    @field_validator(*_LINE_MONEY_FIELDS, mode="before")
    @classmethod
    def coerce_amounts(cls, v):
        return to_decimal(v)

    @field_validator("qty", "unit_price", mode="before")
    @classmethod
    def coerce_optional(cls, v):
        if v is None:
            return None
        return to_decimal(v)

    @field_validator("gst_percentage", mode="before")
    @classmethod
    def coerce_percentage(cls, v):
        return clamp_percentage(v)


class JournalLine(DetailLine):
    """GL journal posting line."""
    is_debit: bool = False


class PaymentLine(DetailLine):
    """Payment allocation line against one outstanding document."""
    document_no: Optional[str] = None
    doc_exchange_rate: Decimal = Decimal("1")

    doc_bal_amount: Decimal = Decimal("0")
    doc_bal_local_amount: Decimal = Decimal("0")

    alloc_amount: Decimal = Decimal("0")
    alloc_local_amount: Decimal = Decimal("0")
    doc_alloc_amount: Decimal = Decimal("0")
    doc_alloc_local_amount: Decimal = Decimal("0")
    exchange_gain_loss: Decimal = Decimal("0")

    @field_validator(
        "doc_exchange_rate", "doc_bal_amount", "doc_bal_local_amount",
        "alloc_amount", "alloc_local_amount", "doc_alloc_amount",
        "doc_alloc_local_amount", "exchange_gain_loss",
        mode="before",
    )
    @classmethod
    def coerce_allocation(cls, v):
        return to_decimal(v)


AnyLine = Union[JournalLine, PaymentLine, DetailLine]


# =============================================================================
# HEADER AGGREGATES
# =============================================================================

class HeaderTotals(BaseModel):
    """Header totals in document, local and country currency."""
    tot_amt: Decimal = Decimal("0")
    gst_amt: Decimal = Decimal("0")
    tot_amt_after_gst: Decimal = Decimal("0")

    tot_local_amt: Decimal = Decimal("0")
    gst_local_amt: Decimal = Decimal("0")
    tot_local_amt_after_gst: Decimal = Decimal("0")

    tot_country_amt: Decimal = Decimal("0")
    gst_country_amt: Decimal = Decimal("0")
    tot_country_amt_after_gst: Decimal = Decimal("0")

    # Only meaningful for net (adjustment) headers
    is_debit: bool = False

    @classmethod
    def zero(cls, decimals: DecimalProfile) -> "HeaderTotals":
        amt = round_amount(0, decimals.amount_decimals)
        loc = round_amount(0, decimals.local_amount_decimals)
        cty = round_amount(0, decimals.country_amount_decimals)
        return cls(
            tot_amt=amt, gst_amt=amt, tot_amt_after_gst=amt,
            tot_local_amt=loc, gst_local_amt=loc, tot_local_amt_after_gst=loc,
            tot_country_amt=cty, gst_country_amt=cty, tot_country_amt_after_gst=cty,
        )


class AllocationTotals(BaseModel):
    """Payment header allocation figures."""
    alloc_tot_amt: Decimal = Decimal("0")
    alloc_tot_local_amt: Decimal = Decimal("0")
    un_alloc_tot_amt: Decimal = Decimal("0")
    un_alloc_tot_local_amt: Decimal = Decimal("0")
    exchange_gain_loss: Decimal = Decimal("0")


class DebitCreditSummary(BaseModel):
    """Journal balance status."""
    debit_total: Decimal = Decimal("0")
    credit_total: Decimal = Decimal("0")
    difference: Decimal = Decimal("0")
    is_balanced: bool = True


# =============================================================================
# DOCUMENT
# =============================================================================

class TransactionDocument(BaseModel):
    """In-memory transaction being edited."""
    document_type: DocumentType = DocumentType.AP_INVOICE
    exchange_rate: Decimal = Decimal("1")
    country_exchange_rate: Decimal = Decimal("1")

    # Payment header amounts entered by the user
    tot_amt: Decimal = Decimal("0")
    tot_local_amt: Decimal = Decimal("0")

    lines: List[AnyLine] = Field(default_factory=list)
    totals: HeaderTotals = Field(default_factory=HeaderTotals)
    allocation: Optional[AllocationTotals] = None

    @field_validator("exchange_rate", "country_exchange_rate", "tot_amt", "tot_local_amt", mode="before")
    @classmethod
    def coerce_header_amounts(cls, v):
        return to_decimal(v)

    @property
    def capabilities(self) -> LineCapabilities:
        return capabilities_for(self.document_type)

    @property
    def rates(self) -> ExchangeRates:
        return ExchangeRates(
            exchange_rate=self.exchange_rate,
            country_exchange_rate=self.country_exchange_rate,
        )
