"""
LedgerCalc - Currency Conversion Service

Conversion primitives used by every calculator:
- Document-to-local/country conversion with a single rounding step
- Sums and differences rounded once at the target decimals

Input normalisation and rounding live in ledgercalc.utils.money and are
re-exported here for the calculators.
"""

from decimal import Decimal
from typing import Any, Iterable, Tuple

from ledgercalc.utils.money import HUNDRED, ZERO, quantum, round_amount, to_decimal

__all__ = [
    "HUNDRED",
    "ZERO",
    "CurrencyConverter",
    "add_amounts",
    "convert",
    "normalize_rate",
    "percentage_of",
    "quantum",
    "round_amount",
    "subtract_amounts",
    "sum_amounts",
    "to_decimal",
]


def convert(amount: Any, rate: Any, target_decimals: int) -> Decimal:
    """
    Convert a document-currency amount with an exchange rate.

    The product is rounded once, at the end. Zero or negative rates are
    accepted and simply produce zero or negative output.

    Args:
        amount: Document-currency amount
        rate: Exchange rate to the target currency
        target_decimals: Decimals of the target currency

    Returns:
        round(amount * rate, target_decimals)
    """
    return round_amount(to_decimal(amount) * to_decimal(rate), target_decimals)


def percentage_of(amount: Any, percentage: Any, decimals: int) -> Decimal:
    """round(amount * percentage / 100, decimals)"""
    return round_amount(to_decimal(amount) * to_decimal(percentage) / HUNDRED, decimals)


def add_amounts(a: Any, b: Any, decimals: int) -> Decimal:
    return round_amount(to_decimal(a) + to_decimal(b), decimals)


def subtract_amounts(a: Any, b: Any, decimals: int) -> Decimal:
    return round_amount(to_decimal(a) - to_decimal(b), decimals)


def sum_amounts(values: Iterable[Any], decimals: int) -> Decimal:
    """Sum at full precision, round once."""
    total = ZERO
    for value in values:
        total += to_decimal(value)
    return round_amount(total, decimals)


def normalize_rate(rate: Any, exchange_rate_decimals: int) -> Decimal:
    """Round an exchange rate to the company's rate precision."""
    return round_amount(rate, exchange_rate_decimals)


class CurrencyConverter:
    """
    Converter bound to one decimal profile.

    Thin wrapper over the module functions so callers holding a profile
    do not have to pick the decimals for each currency themselves.
    """

    def __init__(self, decimals):
        self.decimals = decimals

    def to_local(self, amount: Any, exchange_rate: Any) -> Decimal:
        return convert(amount, exchange_rate, self.decimals.local_amount_decimals)

    def to_country(self, amount: Any, country_exchange_rate: Any) -> Decimal:
        return convert(amount, country_exchange_rate, self.decimals.country_amount_decimals)

    def round_document(self, amount: Any) -> Decimal:
        return round_amount(amount, self.decimals.amount_decimals)

    def round_local(self, amount: Any) -> Decimal:
        return round_amount(amount, self.decimals.local_amount_decimals)

    def round_country(self, amount: Any) -> Decimal:
        return round_amount(amount, self.decimals.country_amount_decimals)

    def round_rate(self, rate: Any) -> Decimal:
        return normalize_rate(rate, self.decimals.exchange_rate_decimals)

    def local_and_country(
        self,
        amount: Any,
        exchange_rate: Any,
        country_exchange_rate: Any,
        country_currency_enabled: bool,
    ) -> Tuple[Decimal, Decimal]:
        """
        Convert one amount to local and country currency.

        With the country currency switched off the country figure mirrors
        the local figure exactly.
        """
        local_amount = self.to_local(amount, exchange_rate)
        if not country_currency_enabled:
            return local_amount, local_amount
        return local_amount, self.to_country(amount, country_exchange_rate)
