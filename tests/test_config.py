"""
LedgerCalc - Configuration Tests
"""

import logging
from decimal import Decimal

import pytest
from pydantic import ValidationError

from ledgercalc.config import Settings, configure_logging, get_settings
from ledgercalc.schemas.decimal_profile import DecimalProfile
from ledgercalc.schemas.transaction import HeaderTotals


class TestSettings:
    """Settings loaded from LEDGERCALC_ environment variables."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("LEDGERCALC_AMOUNT_DECIMALS", raising=False)
        config = Settings(_env_file=None)

        assert config.app_name == "LedgerCalc"
        assert config.country_currency_enabled is False
        assert config.decimal_profile == DecimalProfile()

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("LEDGERCALC_LOCAL_AMOUNT_DECIMALS", "0")
        monkeypatch.setenv("LEDGERCALC_COUNTRY_CURRENCY_ENABLED", "true")
        config = Settings(_env_file=None)

        assert config.decimal_profile.local_amount_decimals == 0
        assert config.country_currency_enabled is True

    def test_negative_decimals_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, amount_decimals=-1)

    def test_is_production(self):
        assert Settings(_env_file=None, app_env="Production").is_production

    def test_get_settings_cached(self):
        assert get_settings() is get_settings()


class TestDecimalProfile:
    def test_profile_is_frozen(self):
        profile = DecimalProfile()

        with pytest.raises(ValidationError):
            profile.amount_decimals = 4

    def test_profile_drives_zero_totals(self):
        totals = HeaderTotals.zero(DecimalProfile(amount_decimals=4))
        assert totals.tot_amt == Decimal("0.0000")
        assert totals.tot_amt.as_tuple().exponent == -4


class TestLogging:
    def test_debug_flag_sets_debug_level(self, monkeypatch):
        calls = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))
        configure_logging(Settings(_env_file=None, debug=True))

        assert calls["level"] == logging.DEBUG
        assert "%(name)s" in calls["format"]

    def test_log_level_from_settings(self, monkeypatch):
        calls = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))
        configure_logging(Settings(_env_file=None, log_level="warning"))

        assert calls["level"] == logging.WARNING
