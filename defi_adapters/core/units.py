"""Unit formatting and rate conversions."""

from decimal import Decimal, localcontext


def format_units(value_raw: int, decimals: int) -> str:
    """Render a raw integer amount as a decimal string.

    Exact integer arithmetic, always at least one fractional digit:
    ``format_units(1500000, 6) == "1.5"``, ``format_units(10**18, 18) == "1.0"``.
    """
    negative = value_raw < 0
    whole, fraction = divmod(abs(value_raw), 10**decimals)
    fraction_digits = str(fraction).rjust(decimals, "0").rstrip("0") if decimals else ""
    text = f"{whole}.{fraction_digits or '0'}"
    return f"-{text}" if negative else text


def apr_to_apy(apr: Decimal, compoundings_per_year: int) -> Decimal:
    """
    Convert APR to APY with the given number of compounding periods.

    APY = (1 + APR/n)^n - 1

    Args:
        apr: Annual Percentage Rate as a fraction (0.05 = 5%)
        compoundings_per_year: Number of compounding periods per year

    Returns:
        Annual Percentage Yield as a fraction
    """
    if apr <= Decimal("0"):
        return Decimal("0")

    with localcontext() as ctx:
        ctx.prec = 50
        rate_per_period = apr / Decimal(compoundings_per_year)
        apy = (Decimal("1") + rate_per_period) ** compoundings_per_year - Decimal("1")
    return +apy
