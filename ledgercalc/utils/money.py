"""
LedgerCalc - Money Utilities

Numeric primitives shared by the schemas and the services:
- Input normalisation (non-numeric input becomes zero)
- Half-up rounding to a configured number of decimals
- GST percentage limits
"""

import logging
from decimal import Decimal, InvalidOperation, ROUND_DOWN, ROUND_HALF_UP, localcontext
from typing import Any

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value: Any) -> Decimal:
    """
    Convert any input to Decimal without rounding.

    None, empty strings, unparsable strings, NaN and infinities become zero.
    Floats are converted via str() to avoid binary noise.
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        try:
            result = Decimal(str(value))
        except InvalidOperation:
            return ZERO
    elif isinstance(value, str):
        text = value.strip().replace(",", "")
        if not text:
            return ZERO
        try:
            result = Decimal(text)
        except InvalidOperation:
            logger.debug(f"Non-numeric input {value!r} treated as zero")
            return ZERO
    else:
        return ZERO

    if not result.is_finite():
        return ZERO
    return result


def quantum(decimals: int) -> Decimal:
    """Smallest unit at the given precision, e.g. 2 -> Decimal('0.01')."""
    return Decimal(1).scaleb(-max(int(decimals), 0))


def round_amount(value: Any, decimals: int, rounding: str = ROUND_HALF_UP) -> Decimal:
    """
    Round to exactly `decimals` places (half-up unless told otherwise).

    The context precision grows with the value, so large amounts are
    rounded instead of raising InvalidOperation.
    """
    value = to_decimal(value)
    places = max(int(decimals), 0)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + places + 2)
        return value.quantize(quantum(places), rounding=rounding)


def truncate_amount(value: Any, decimals: int) -> Decimal:
    """Round toward zero to `decimals` places."""
    return round_amount(value, decimals, rounding=ROUND_DOWN)


def clamp_percentage(value: Any) -> Decimal:
    """Two-decimal percentage limited to 0-100."""
    pct = round_amount(value, 2)
    if pct < ZERO:
        return round_amount(ZERO, 2)
    if pct > HUNDRED:
        return round_amount(HUNDRED, 2)
    return pct
