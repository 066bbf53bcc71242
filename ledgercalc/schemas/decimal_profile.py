"""
LedgerCalc - Decimal Profile Schema

Per-company rounding configuration shared by every calculation.
"""

from pydantic import BaseModel, ConfigDict, Field


class DecimalProfile(BaseModel):
    """Number of decimals each kind of value is rounded to."""
    model_config = ConfigDict(frozen=True)

    amount_decimals: int = Field(default=2, ge=0)
    local_amount_decimals: int = Field(default=2, ge=0)
    country_amount_decimals: int = Field(default=2, ge=0)
    exchange_rate_decimals: int = Field(default=6, ge=0)
