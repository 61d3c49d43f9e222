"""Money helpers - every amount is an integer number of cents"""

from decimal import Decimal, ROUND_HALF_UP


def format_cents(cents: int, symbol: str = "$") -> str:
    """
    Render cents as a currency string.

    Example:
        -123456 -> "-$1,234.56"
    """
    sign = "-" if cents < 0 else ""
    whole, fraction = divmod(abs(cents), 100)
    return f"{sign}{symbol}{whole:,}.{fraction:02d}"


def round_div(numerator: int, denominator: int) -> int:
    """Integer division rounding half away from zero"""
    if denominator == 0:
        raise ZeroDivisionError("denominator must be non-zero")
    quotient = Decimal(numerator) / Decimal(denominator)
    return int(quotient.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
