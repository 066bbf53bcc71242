"""
LedgerCalc - Test Configuration

Pytest fixtures and configuration.
"""

from decimal import Decimal

import pytest

from ledgercalc.schemas.decimal_profile import DecimalProfile
from ledgercalc.schemas.transaction import (
    DetailLine,
    ExchangeRates,
    JournalLine,
    PaymentLine,
)
from ledgercalc.services.transaction_service import TransactionService


# =============================================================================
# DECIMAL PROFILES / RATES
# =============================================================================

@pytest.fixture
def decimals() -> DecimalProfile:
    """Standard company profile: 2/2/2 amount decimals, 6 rate decimals."""
    return DecimalProfile()


@pytest.fixture
def yen_decimals() -> DecimalProfile:
    """Profile with a zero-decimal local currency."""
    return DecimalProfile(
        amount_decimals=2,
        local_amount_decimals=0,
        country_amount_decimals=3,
        exchange_rate_decimals=6,
    )


@pytest.fixture
def unit_rates() -> ExchangeRates:
    return ExchangeRates(exchange_rate=Decimal("1"), country_exchange_rate=Decimal("1"))


@pytest.fixture
def usd_rates() -> ExchangeRates:
    """Document in USD, local MYR, country SGD."""
    return ExchangeRates(exchange_rate=Decimal("4.5"), country_exchange_rate=Decimal("1.35"))


# =============================================================================
# LINES
# =============================================================================

@pytest.fixture
def invoice_line() -> DetailLine:
    return DetailLine(item_no=1, seq_no=1, amount=Decimal("1000.00"), gst_percentage=Decimal("10"))


@pytest.fixture
def journal_lines():
    """Balanced two-line journal: 500 debit, 500 credit."""
    return [
        JournalLine(item_no=1, seq_no=1, amount=Decimal("500.00"), is_debit=True),
        JournalLine(item_no=2, seq_no=2, amount=Decimal("500.00"), is_debit=False),
    ]


@pytest.fixture
def payment_lines():
    """Two invoices and one credit note outstanding."""
    return [
        PaymentLine(
            item_no=1, seq_no=1, document_no="INV-001",
            doc_exchange_rate=Decimal("4.2"),
            doc_bal_amount=Decimal("300.00"), doc_bal_local_amount=Decimal("1260.00"),
        ),
        PaymentLine(
            item_no=2, seq_no=2, document_no="INV-002",
            doc_exchange_rate=Decimal("4.4"),
            doc_bal_amount=Decimal("500.00"), doc_bal_local_amount=Decimal("2200.00"),
        ),
        PaymentLine(
            item_no=3, seq_no=3, document_no="CN-001",
            doc_exchange_rate=Decimal("4.3"),
            doc_bal_amount=Decimal("-100.00"), doc_bal_local_amount=Decimal("-430.00"),
        ),
    ]


# =============================================================================
# SERVICES
# =============================================================================

@pytest.fixture
def service(decimals) -> TransactionService:
    return TransactionService(decimals, country_currency_enabled=False)


@pytest.fixture
def country_service(decimals) -> TransactionService:
    return TransactionService(decimals, country_currency_enabled=True)
