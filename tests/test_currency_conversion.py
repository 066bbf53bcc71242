"""
LedgerCalc - Currency Conversion Tests

Unit tests for rounding, conversion and numeric input handling.
"""

import pytest
from decimal import Decimal

from ledgercalc.schemas.decimal_profile import DecimalProfile
from ledgercalc.services.currency_service import (
    CurrencyConverter,
    convert,
    normalize_rate,
    quantum,
    round_amount,
    sum_amounts,
    to_decimal,
)


class TestToDecimal:
    """Non-numeric input is treated as zero."""

    @pytest.mark.parametrize("value", [None, "", "   ", "abc", "1.2.3", float("nan"), float("inf")])
    def test_invalid_input_is_zero(self, value):
        """Blank, unparsable and non-finite values become 0."""
        assert to_decimal(value) == Decimal("0")

    def test_float_has_no_binary_noise(self):
        """0.1 arrives as exactly 0.1."""
        assert to_decimal(0.1) == Decimal("0.1")

    def test_thousands_separator_stripped(self):
        assert to_decimal("1,234.50") == Decimal("1234.50")

    def test_decimal_passes_through(self):
        value = Decimal("12.3456789")
        assert to_decimal(value) == value

    def test_helpers_live_in_utils(self):
        """Schemas and services share one set of money helpers."""
        from ledgercalc.schemas import transaction

        assert transaction.to_decimal is to_decimal
        assert to_decimal.__module__ == "ledgercalc.utils.money"


class TestRounding:
    """Half-up rounding to configured decimals."""

    def test_half_up(self):
        """0.125 rounds to 0.13, not banker's 0.12."""
        assert round_amount(Decimal("0.125"), 2) == Decimal("0.13")

    def test_negative_half_up_rounds_away_from_zero(self):
        assert round_amount(Decimal("-0.125"), 2) == Decimal("-0.13")

    def test_zero_decimals(self):
        assert round_amount(Decimal("1234.5"), 0) == Decimal("1235")

    def test_exponent_matches_decimals(self):
        """Result always carries exactly the requested places."""
        assert round_amount(5, 3).as_tuple().exponent == -3

    @pytest.mark.parametrize("value", ["0.005", "123.4449", "-7.777", "1E+3", "99.995"])
    @pytest.mark.parametrize("places", [0, 2, 4])
    def test_rounding_is_idempotent(self, value, places):
        """round(round(x, d), d) == round(x, d)."""
        once = round_amount(Decimal(value), places)
        assert round_amount(once, places) == once

    def test_quantum(self):
        assert quantum(2) == Decimal("0.01")
        assert quantum(0) == Decimal("1")


class TestConversion:
    """Document-to-local/country conversion."""

    def test_convert_rounds_once(self):
        """33.335 * 1 rounds to 33.34 at the end."""
        assert convert(Decimal("33.335"), Decimal("1"), 2) == Decimal("33.34")

    def test_convert_with_rate(self):
        assert convert(Decimal("100.00"), Decimal("4.5"), 2) == Decimal("450.00")

    def test_zero_rate_gives_zero(self):
        assert convert(Decimal("100.00"), Decimal("0"), 2) == Decimal("0.00")

    def test_negative_rate_accepted(self):
        assert convert(Decimal("10.00"), Decimal("-2"), 2) == Decimal("-20.00")

    def test_normalize_rate(self):
        assert normalize_rate(Decimal("4.12345678"), 6) == Decimal("4.123457")

    def test_large_amount_rounds_without_error(self):
        """Amounts beyond the default 28-digit context still round."""
        result = convert(Decimal("1e27"), Decimal("1"), 2)

        assert result == Decimal("1e27")
        assert result.as_tuple().exponent == -2

    def test_large_amount_half_up(self):
        assert round_amount(Decimal("123456789012345678901234567890.125"), 2) == Decimal(
            "123456789012345678901234567890.13"
        )

    def test_sum_rounds_once(self):
        """Three thirds summed at full precision before rounding."""
        third = Decimal("1") / Decimal("3")
        assert sum_amounts([third, third, third], 2) == Decimal("1.00")


class TestCurrencyConverter:
    """Converter bound to a decimal profile."""

    def test_country_mirrors_local_when_disabled(self):
        converter = CurrencyConverter(DecimalProfile(country_amount_decimals=3))
        local, country = converter.local_and_country(
            Decimal("100.00"), Decimal("4.5"), Decimal("1.35"), country_currency_enabled=False
        )

        assert local == Decimal("450.00")
        assert country == local

    def test_country_uses_own_rate_when_enabled(self):
        converter = CurrencyConverter(DecimalProfile(country_amount_decimals=3))
        local, country = converter.local_and_country(
            Decimal("100.00"), Decimal("4.5"), Decimal("1.35"), country_currency_enabled=True
        )

        assert local == Decimal("450.00")
        assert country == Decimal("135.000")

    def test_local_decimals_respected(self):
        converter = CurrencyConverter(DecimalProfile(local_amount_decimals=0))
        assert converter.to_local(Decimal("10.00"), Decimal("0.55")) == Decimal("6")
