"""
Money formatting with thousand/million abbreviations.
"""

from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP, Decimal
from typing import Optional

THOUSAND = Decimal(1000)
MILLION = Decimal(1_000_000)


def _format_decimal(value: Decimal) -> str:
    # At most one fractional digit, trailing zeros dropped, comma separator
    rounded = value.quantize(Decimal("0.1"), rounding=ROUND_HALF_EVEN)
    text = format(rounded.normalize(), "f")
    return text.replace(".", ",")


def format_with_abbreviation(amount: Optional[Decimal], currency: str = "₽") -> str:
    """
    Format an amount compactly for dashboards.

    Examples: 950 -> "₽950", 10000 -> "₽10 тыс.", 100500 -> "₽100,5 тыс.",
    1200000 -> "₽1,2 млн".

    Args:
        amount: Amount to format; None is shown as zero
        currency: Currency symbol placed before the number

    Returns:
        Formatted string
    """
    if amount is None:
        return f"{currency}0"

    amount = Decimal(amount)
    sign = "-" if amount < 0 else ""
    absolute = abs(amount)

    if absolute < THOUSAND:
        whole = absolute.quantize(Decimal(1), rounding=ROUND_HALF_UP)
        return f"{sign}{currency}{whole:f}"

    if absolute < MILLION:
        thousands = (absolute / THOUSAND).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
        return f"{sign}{currency}{_format_decimal(thousands)} тыс."

    millions = (absolute / MILLION).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{sign}{currency}{_format_decimal(millions)} млн"
