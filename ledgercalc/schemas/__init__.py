"""
LedgerCalc - Schemas Package

Pydantic schemas for the calculation engine.
"""

from ledgercalc.schemas.decimal_profile import DecimalProfile
from ledgercalc.schemas.transaction import (
    AllocationTotals,
    DebitCreditSummary,
    DetailLine,
    DocumentType,
    ExchangeRates,
    HeaderTotals,
    JournalLine,
    LineCapabilities,
    PaymentLine,
    TransactionDocument,
    capabilities_for,
)

__all__ = [
    "AllocationTotals",
    "DebitCreditSummary",
    "DecimalProfile",
    "DetailLine",
    "DocumentType",
    "ExchangeRates",
    "HeaderTotals",
    "JournalLine",
    "LineCapabilities",
    "PaymentLine",
    "TransactionDocument",
    "capabilities_for",
]
