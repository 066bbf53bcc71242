"""
LedgerCalc - Header Aggregator

Sums detail lines into header totals in document, local and country
currency.

Each header figure is summed at full precision and rounded once at the
header's own decimals. Header totals are therefore not guaranteed to equal
the sum of already-rounded line values to the last unit: a drift of one unit
in the last decimal place across many lines is accepted.
"""

import logging
from decimal import Decimal
from typing import Iterable, List, Sequence

from ledgercalc.schemas.decimal_profile import DecimalProfile
from ledgercalc.schemas.transaction import DetailLine, HeaderTotals
from ledgercalc.services.currency_service import (
    ZERO,
    add_amounts,
    subtract_amounts,
    sum_amounts,
)

logger = logging.getLogger(__name__)


def _sum_field(lines: Iterable[DetailLine], field: str, decimals: int) -> Decimal:
    return sum_amounts((getattr(line, field) for line in lines), decimals)


class HeaderAggregator:
    """Pure reduction of detail lines into header totals."""

    @staticmethod
    def aggregate(
        lines: Sequence[DetailLine],
        decimals: DecimalProfile,
        country_currency_enabled: bool = False,
    ) -> HeaderTotals:
        """
        Aggregate all lines into header totals.

        Args:
            lines: Detail lines of the document
            decimals: Company decimal profile
            country_currency_enabled: Company country-currency flag

        Returns:
            HeaderTotals; all zero when there are no lines
        """
        if not lines:
            return HeaderTotals.zero(decimals)

        amt_dec = decimals.amount_decimals
        loc_dec = decimals.local_amount_decimals
        cty_dec = decimals.country_amount_decimals

        tot_amt = _sum_field(lines, "amount", amt_dec)
        gst_amt = _sum_field(lines, "gst_amount", amt_dec)
        tot_local_amt = _sum_field(lines, "local_amount", loc_dec)
        gst_local_amt = _sum_field(lines, "gst_local_amount", loc_dec)

        tot_local_amt_after_gst = add_amounts(tot_local_amt, gst_local_amt, loc_dec)

        if country_currency_enabled:
            tot_country_amt = _sum_field(lines, "country_amount", cty_dec)
            gst_country_amt = _sum_field(lines, "gst_country_amount", cty_dec)
            tot_country_amt_after_gst = add_amounts(tot_country_amt, gst_country_amt, cty_dec)
        else:
            tot_country_amt = tot_local_amt
            gst_country_amt = gst_local_amt
            tot_country_amt_after_gst = tot_local_amt_after_gst

        return HeaderTotals(
            tot_amt=tot_amt,
            gst_amt=gst_amt,
            tot_amt_after_gst=add_amounts(tot_amt, gst_amt, amt_dec),
            tot_local_amt=tot_local_amt,
            gst_local_amt=gst_local_amt,
            tot_local_amt_after_gst=tot_local_amt_after_gst,
            tot_country_amt=tot_country_amt,
            gst_country_amt=gst_country_amt,
            tot_country_amt_after_gst=tot_country_amt_after_gst,
        )

    @staticmethod
    def aggregate_debit_side(
        lines: Sequence[DetailLine],
        decimals: DecimalProfile,
        country_currency_enabled: bool = False,
    ) -> HeaderTotals:
        """Header figures from debit lines only, as shown on a journal header."""
        debit_lines = [line for line in lines if getattr(line, "is_debit", False)]
        return HeaderAggregator.aggregate(debit_lines, decimals, country_currency_enabled)

    @staticmethod
    def aggregate_net(
        lines: Sequence[DetailLine],
        decimals: DecimalProfile,
        country_currency_enabled: bool = False,
    ) -> HeaderTotals:
        """
        Net header for adjustments: debit side minus credit side.

        Figures are stored as absolute values; `is_debit` is set when the
        net document amount is negative.
        """
        if not lines:
            return HeaderTotals.zero(decimals)

        debit_lines: List[DetailLine] = [line for line in lines if getattr(line, "is_debit", False)]
        credit_lines: List[DetailLine] = [line for line in lines if not getattr(line, "is_debit", False)]
        debit = HeaderAggregator.aggregate(debit_lines, decimals, country_currency_enabled)
        credit = HeaderAggregator.aggregate(credit_lines, decimals, country_currency_enabled)

        amt_dec = decimals.amount_decimals
        loc_dec = decimals.local_amount_decimals
        cty_dec = decimals.country_amount_decimals

        net_amt = subtract_amounts(debit.tot_amt, credit.tot_amt, amt_dec)
        net_gst = subtract_amounts(debit.gst_amt, credit.gst_amt, amt_dec)
        net_local = subtract_amounts(debit.tot_local_amt, credit.tot_local_amt, loc_dec)
        net_gst_local = subtract_amounts(debit.gst_local_amt, credit.gst_local_amt, loc_dec)
        net_country = subtract_amounts(debit.tot_country_amt, credit.tot_country_amt, cty_dec)
        net_gst_country = subtract_amounts(debit.gst_country_amt, credit.gst_country_amt, cty_dec)

        totals = HeaderTotals(
            is_debit=net_amt < ZERO,
            tot_amt=abs(net_amt),
            gst_amt=abs(net_gst),
            tot_amt_after_gst=abs(add_amounts(net_amt, net_gst, amt_dec)),
            tot_local_amt=abs(net_local),
            gst_local_amt=abs(net_gst_local),
            tot_local_amt_after_gst=abs(add_amounts(net_local, net_gst_local, loc_dec)),
            tot_country_amt=abs(net_country),
            gst_country_amt=abs(net_gst_country),
            tot_country_amt_after_gst=abs(add_amounts(net_country, net_gst_country, cty_dec)),
        )
        if not country_currency_enabled:
            totals = totals.model_copy(update={
                "tot_country_amt": totals.tot_local_amt,
                "gst_country_amt": totals.gst_local_amt,
                "tot_country_amt_after_gst": totals.tot_local_amt_after_gst,
            })
        return totals


def aggregate(
    lines: Sequence[DetailLine],
    decimals: DecimalProfile,
    country_currency_enabled: bool = False,
) -> HeaderTotals:
    return HeaderAggregator.aggregate(lines, decimals, country_currency_enabled)


def aggregate_net(
    lines: Sequence[DetailLine],
    decimals: DecimalProfile,
    country_currency_enabled: bool = False,
) -> HeaderTotals:
    return HeaderAggregator.aggregate_net(lines, decimals, country_currency_enabled)


def aggregate_debit_side(
    lines: Sequence[DetailLine],
    decimals: DecimalProfile,
    country_currency_enabled: bool = False,
) -> HeaderTotals:
    return HeaderAggregator.aggregate_debit_side(lines, decimals, country_currency_enabled)
