"""
LedgerCalc - GST Calculator Tests

Unit tests for the per-line amount cascade and GST in three currencies.
"""

import pytest
from decimal import Decimal

from ledgercalc.schemas.decimal_profile import DecimalProfile
from ledgercalc.schemas.transaction import DetailLine, ExchangeRates
from ledgercalc.services.calculators import (
    LineGstCalculator,
    apply_amount,
    apply_gst,
    apply_quantity,
    calculate_gst_amount,
)


class TestGstAmount:
    """GST on a document-currency amount."""

    def test_ten_percent_of_1000(self, decimals):
        """1000 at 10% GST is 100.00."""
        assert calculate_gst_amount(Decimal("1000"), Decimal("10"), decimals) == Decimal("100.00")

    def test_gst_rounds_half_up(self, decimals):
        """33.35 at 6% = 2.001 -> 2.00; 10.25 at 6% = 0.615 -> 0.62."""
        assert calculate_gst_amount(Decimal("33.35"), Decimal("6"), decimals) == Decimal("2.00")
        assert calculate_gst_amount(Decimal("10.25"), Decimal("6"), decimals) == Decimal("0.62")

    def test_zero_percentage(self, decimals):
        assert calculate_gst_amount(Decimal("1000"), Decimal("0"), decimals) == Decimal("0.00")

    @pytest.mark.parametrize("raw,expected", [
        ("7.125", "7.13"),
        ("-5", "0.00"),
        ("150", "100.00"),
        ("abc", "0.00"),
    ])
    def test_percentage_normalized(self, raw, expected):
        """Percentage is two decimals and limited to 0-100."""
        assert LineGstCalculator.normalize_percentage(raw) == Decimal(expected)


class TestApplyGst:
    """Setting the GST percentage on a line."""

    def test_gst_fields_in_three_currencies(self, decimals, usd_rates):
        line = DetailLine(amount=Decimal("1000.00"), local_amount=Decimal("4500.00"))
        result = apply_gst(line, Decimal("10"), decimals, usd_rates, country_currency_enabled=True)

        assert result.gst_percentage == Decimal("10.00")
        assert result.gst_amount == Decimal("100.00")
        assert result.gst_local_amount == Decimal("450.00")
        assert result.gst_country_amount == Decimal("135.00")

    def test_only_gst_fields_change(self, decimals, usd_rates):
        """Amount and its local/country figures are untouched."""
        line = DetailLine(
            amount=Decimal("1000.00"),
            local_amount=Decimal("1.00"),
            country_amount=Decimal("2.00"),
        )
        result = apply_gst(line, Decimal("10"), decimals, usd_rates)

        assert result.amount == line.amount
        assert result.local_amount == Decimal("1.00")
        assert result.country_amount == Decimal("2.00")

    def test_input_line_not_modified(self, decimals, usd_rates, invoice_line):
        apply_gst(invoice_line, Decimal("6"), decimals, usd_rates)

        assert invoice_line.gst_percentage == Decimal("10.00")
        assert invoice_line.gst_amount == Decimal("0")

    def test_apply_gst_is_idempotent(self, decimals, usd_rates, invoice_line):
        """Applying the same percentage twice gives the same line."""
        once = apply_gst(invoice_line, Decimal("6"), decimals, usd_rates)
        twice = apply_gst(once, Decimal("6"), decimals, usd_rates)

        assert once == twice

    def test_country_gst_mirrors_local_when_disabled(self, decimals, usd_rates):
        line = DetailLine(amount=Decimal("1000.00"))
        result = apply_gst(line, Decimal("10"), decimals, usd_rates, country_currency_enabled=False)

        assert result.gst_country_amount == result.gst_local_amount


class TestAmountCascade:
    """Quantity -> amount -> local/country -> GST."""

    def test_quantity_times_unit_price(self, decimals, unit_rates):
        """200 x 1.5 = 300.00."""
        line = DetailLine()
        result = apply_quantity(line, Decimal("200"), Decimal("1.5"), decimals, unit_rates)

        assert result.qty == Decimal("200")
        assert result.unit_price == Decimal("1.5")
        assert result.amount == Decimal("300.00")
        assert result.local_amount == Decimal("300.00")

    def test_quantity_rounds_amount(self, decimals, unit_rates):
        """3 x 0.3333 = 0.9999 -> 1.00."""
        result = apply_quantity(DetailLine(), 3, "0.3333", decimals, unit_rates)
        assert result.amount == Decimal("1.00")

    def test_amount_cascades_to_gst(self, decimals, usd_rates):
        line = DetailLine(gst_percentage=Decimal("6"))
        result = apply_amount(line, Decimal("250.00"), decimals, usd_rates, country_currency_enabled=True)

        assert result.amount == Decimal("250.00")
        assert result.local_amount == Decimal("1125.00")
        assert result.country_amount == Decimal("337.50")
        assert result.gst_amount == Decimal("15.00")
        assert result.gst_local_amount == Decimal("67.50")
        assert result.gst_country_amount == Decimal("20.25")

    def test_zero_local_decimals(self, yen_decimals):
        rates = ExchangeRates(exchange_rate=Decimal("0.555"), country_exchange_rate=Decimal("1"))
        result = apply_amount(DetailLine(), Decimal("10.00"), yen_decimals, rates)

        assert result.local_amount == Decimal("6")

    def test_non_numeric_amount_is_zero(self, decimals, unit_rates):
        result = apply_amount(DetailLine(gst_percentage=10), "n/a", decimals, unit_rates)

        assert result.amount == Decimal("0.00")
        assert result.gst_amount == Decimal("0.00")

    def test_rate_normalized_before_conversion(self):
        """A rate with more places than configured is rounded first."""
        profile = DecimalProfile(exchange_rate_decimals=2)
        rates = ExchangeRates(exchange_rate=Decimal("1.005"), country_exchange_rate=Decimal("1"))
        result = apply_amount(DetailLine(), Decimal("1000.00"), profile, rates)

        # 1.005 -> 1.01 before multiplying
        assert result.local_amount == Decimal("1010.00")
