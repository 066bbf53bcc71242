"""
LedgerCalc - Detail Recalculator

Re-derives local and country amounts of every detail line after a
header-level change (document currency, exchange rate, country exchange
rate, or the country-currency flag).
"""

import logging
from typing import Any, List, Sequence

from ledgercalc.schemas.decimal_profile import DecimalProfile
from ledgercalc.schemas.transaction import DetailLine, ExchangeRates
from ledgercalc.services.currency_service import CurrencyConverter

logger = logging.getLogger(__name__)


class DetailRecalculator:
    """Whole-document currency recalculation."""

    @staticmethod
    def recalculate_line(
        line: DetailLine,
        rates: ExchangeRates,
        decimals: DecimalProfile,
        country_currency_enabled: bool,
    ) -> DetailLine:
        """
        Recompute one line's local/country figures from its document amounts.

        `rates` must already be normalised and country-forced; the document
        amount and GST amount are taken as they stand.
        """
        converter = CurrencyConverter(decimals)
        local_amount, country_amount = converter.local_and_country(
            line.amount, rates.exchange_rate, rates.country_exchange_rate, country_currency_enabled
        )
        gst_local_amount, gst_country_amount = converter.local_and_country(
            line.gst_amount, rates.exchange_rate, rates.country_exchange_rate, country_currency_enabled
        )
        return line.model_copy(update={
            "local_amount": local_amount,
            "country_amount": country_amount,
            "gst_local_amount": gst_local_amount,
            "gst_country_amount": gst_country_amount,
        })

    @staticmethod
    def recalculate_all(
        lines: Sequence[DetailLine],
        exchange_rate: Any,
        country_exchange_rate: Any,
        decimals: DecimalProfile,
        country_currency_enabled: bool,
    ) -> List[DetailLine]:
        """
        Recalculate every line with a new exchange-rate pair.

        When the country currency is off the country rate is forced to the
        exchange rate before the loop runs. The result is a new list; the
        caller's lines are untouched, so a half-applied state is never
        visible.

        Args:
            lines: Current detail lines
            exchange_rate: Document-to-local rate
            country_exchange_rate: Document-to-country rate
            decimals: Company decimal profile
            country_currency_enabled: Company country-currency flag

        Returns:
            New list of recalculated lines, in the same order
        """
        rates = ExchangeRates(
            exchange_rate=exchange_rate,
            country_exchange_rate=country_exchange_rate,
        ).for_country_currency(country_currency_enabled).normalized(decimals)

        recalculated = [
            DetailRecalculator.recalculate_line(line, rates, decimals, country_currency_enabled)
            for line in lines
        ]
        logger.debug(
            f"Recalculated {len(recalculated)} lines at rate {rates.exchange_rate}"
            f" / country rate {rates.country_exchange_rate}"
        )
        return recalculated


def recalculate_all(
    lines: Sequence[DetailLine],
    exchange_rate: Any,
    country_exchange_rate: Any,
    decimals: DecimalProfile,
    country_currency_enabled: bool = False,
) -> List[DetailLine]:
    return DetailRecalculator.recalculate_all(
        lines, exchange_rate, country_exchange_rate, decimals, country_currency_enabled
    )
