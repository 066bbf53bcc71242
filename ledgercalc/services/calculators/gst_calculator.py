"""
LedgerCalc - Line GST Calculator

GST and amount cascade for a single detail line:
- Quantity x unit price -> taxable amount
- Taxable amount -> local and country amounts
- GST percentage -> GST amount in all three currencies

Every function returns a new line; the input line is never modified.
"""

import logging
from decimal import Decimal
from typing import Any, TypeVar

from ledgercalc.schemas.decimal_profile import DecimalProfile
from ledgercalc.schemas.transaction import DetailLine, ExchangeRates
from ledgercalc.services.currency_service import (
    CurrencyConverter,
    percentage_of,
    round_amount,
    to_decimal,
)
from ledgercalc.utils.money import clamp_percentage

logger = logging.getLogger(__name__)

LineT = TypeVar("LineT", bound=DetailLine)


class LineGstCalculator:
    """
    GST calculation for one detail line.

    GST is computed on the document-currency taxable amount, rounded at the
    document decimals, then converted to local and country currency with the
    document's exchange rates.
    """

    @staticmethod
    def normalize_percentage(gst_percentage: Any) -> Decimal:
        """Two-decimal percentage limited to 0-100."""
        return clamp_percentage(gst_percentage)

    @staticmethod
    def calculate_gst_amount(amount: Any, gst_percentage: Any, decimals: DecimalProfile) -> Decimal:
        """
        Calculate GST on a document-currency amount.

        Args:
            amount: Taxable amount
            gst_percentage: GST rate as a percentage
            decimals: Company decimal profile

        Returns:
            round(amount * gst_percentage / 100, amount_decimals)
        """
        pct = LineGstCalculator.normalize_percentage(gst_percentage)
        return percentage_of(amount, pct, decimals.amount_decimals)

    @staticmethod
    def apply_gst(
        line: LineT,
        gst_percentage: Any,
        decimals: DecimalProfile,
        rates: ExchangeRates,
        country_currency_enabled: bool = False,
    ) -> LineT:
        """
        Set a line's GST percentage and derive its three GST amounts.

        Only GST fields change. Calling it twice with the same inputs gives
        the same line.
        """
        pct = LineGstCalculator.normalize_percentage(gst_percentage)
        rates = rates.for_country_currency(country_currency_enabled).normalized(decimals)
        converter = CurrencyConverter(decimals)

        gst_amount = percentage_of(line.amount, pct, decimals.amount_decimals)
        gst_local_amount, gst_country_amount = converter.local_and_country(
            gst_amount,
            rates.exchange_rate,
            rates.country_exchange_rate,
            country_currency_enabled,
        )

        return line.model_copy(update={
            "gst_percentage": pct,
            "gst_amount": gst_amount,
            "gst_local_amount": gst_local_amount,
            "gst_country_amount": gst_country_amount,
        })

    @staticmethod
    def apply_amount(
        line: LineT,
        amount: Any,
        decimals: DecimalProfile,
        rates: ExchangeRates,
        country_currency_enabled: bool = False,
    ) -> LineT:
        """
        Set a line's taxable amount and cascade to local, country and GST.
        """
        rates = rates.for_country_currency(country_currency_enabled).normalized(decimals)
        converter = CurrencyConverter(decimals)

        doc_amount = round_amount(amount, decimals.amount_decimals)
        local_amount, country_amount = converter.local_and_country(
            doc_amount,
            rates.exchange_rate,
            rates.country_exchange_rate,
            country_currency_enabled,
        )
        updated = line.model_copy(update={
            "amount": doc_amount,
            "local_amount": local_amount,
            "country_amount": country_amount,
        })
        return LineGstCalculator.apply_gst(
            updated, line.gst_percentage, decimals, rates, country_currency_enabled
        )

    @staticmethod
    def apply_quantity(
        line: LineT,
        qty: Any,
        unit_price: Any,
        decimals: DecimalProfile,
        rates: ExchangeRates,
        country_currency_enabled: bool = False,
    ) -> LineT:
        """
        Set billed quantity and unit price; amount = qty x unit price.
        """
        qty = to_decimal(qty)
        unit_price = to_decimal(unit_price)
        updated = line.model_copy(update={"qty": qty, "unit_price": unit_price})
        return LineGstCalculator.apply_amount(
            updated, qty * unit_price, decimals, rates, country_currency_enabled
        )


# ===========================================
# CONVENIENCE FUNCTIONS
# ===========================================

def calculate_gst_amount(amount: Any, gst_percentage: Any, decimals: DecimalProfile) -> Decimal:
    return LineGstCalculator.calculate_gst_amount(amount, gst_percentage, decimals)


def apply_gst(
    line: LineT,
    gst_percentage: Any,
    decimals: DecimalProfile,
    rates: ExchangeRates,
    country_currency_enabled: bool = False,
) -> LineT:
    return LineGstCalculator.apply_gst(line, gst_percentage, decimals, rates, country_currency_enabled)


def apply_amount(
    line: LineT,
    amount: Any,
    decimals: DecimalProfile,
    rates: ExchangeRates,
    country_currency_enabled: bool = False,
) -> LineT:
    return LineGstCalculator.apply_amount(line, amount, decimals, rates, country_currency_enabled)


def apply_quantity(
    line: LineT,
    qty: Any,
    unit_price: Any,
    decimals: DecimalProfile,
    rates: ExchangeRates,
    country_currency_enabled: bool = False,
) -> LineT:
    return LineGstCalculator.apply_quantity(
        line, qty, unit_price, decimals, rates, country_currency_enabled
    )
