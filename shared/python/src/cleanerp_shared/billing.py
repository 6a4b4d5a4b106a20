"""
billing.py — Conversion of recurring amounts between billing frequencies.

Every conversion pivots through a weekly amount using fixed weeks-per-period
factors. The monthly factor (4.33) approximates 52/12, so converting
weekly → monthly → weekly is lossy; ROUND_TRIP_TOLERANCE bounds the error.

Usage:
    from cleanerp_shared.billing import convert_billing_amount, calculate_all_billing_frequencies

    convert_billing_amount(500, "weekly", "monthly")        # 2165.0
    calculate_all_billing_frequencies(500, "weekly")
    # BillingBreakdown(weekly=500.0, monthly=2165.0, annually=26000.0)
"""

from __future__ import annotations

import math
from typing import Final, NamedTuple

from cleanerp_shared.constants import BillingFrequency

# Weeks contained in one period of each frequency
CONVERSION_FACTORS: Final[dict[str, float]] = {
    "weekly": 1,
    "fortnightly": 2,
    "monthly": 4.33,
    "quarterly": 13,
    "annually": 52,
}

# Accepted drift after a weekly -> monthly -> weekly round trip
ROUND_TRIP_TOLERANCE: Final[float] = 0.01

_CURRENCY_SYMBOLS: Final[dict[str, str]] = {
    "AUD": "$",
    "NZD": "$",
    "USD": "$",
    "CAD": "$",
    "EUR": "€",
    "GBP": "£",
}


class BillingBreakdown(NamedTuple):
    weekly: float
    monthly: float
    annually: float

    def to_dict(self) -> dict[str, float]:
        return self._asdict()


def round_currency(value: float) -> float:
    """Round half-up to cents. Non-finite values pass through unchanged."""
    if not math.isfinite(value):
        return value
    return math.floor(value * 100 + 0.5) / 100


def convert_billing_amount(
    amount: float,
    from_frequency: BillingFrequency | str,
    to_frequency: BillingFrequency | str,
) -> float:
    """
    Convert an amount quoted in one billing frequency to another.

    No validation is performed: an unknown frequency yields NaN and a
    non-finite amount propagates as-is.

    Args:
        amount:         Monetary amount in from_frequency.
        from_frequency: Frequency the amount is currently quoted in.
        to_frequency:   Target frequency.

    Returns:
        The converted amount rounded to 2 decimal places.
    """
    weekly_rate = amount / CONVERSION_FACTORS.get(from_frequency, math.nan)
    converted = weekly_rate * CONVERSION_FACTORS.get(to_frequency, math.nan)
    return round_currency(converted)


def calculate_all_billing_frequencies(
    amount: float | None,
    frequency: BillingFrequency | str,
) -> BillingBreakdown:
    """Weekly, monthly and annual equivalents of an amount."""
    if not amount or math.isnan(amount):
        return BillingBreakdown(weekly=0, monthly=0, annually=0)

    return BillingBreakdown(
        weekly=convert_billing_amount(amount, frequency, "weekly"),
        monthly=convert_billing_amount(amount, frequency, "monthly"),
        annually=convert_billing_amount(amount, frequency, "annually"),
    )


def format_currency(amount: float, currency: str = "AUD") -> str:
    """Format an amount as en-AU currency text, e.g. ``$1,234.56``."""
    symbol = _CURRENCY_SYMBOLS.get(currency.upper(), f"{currency.upper()} ")
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(round_currency(amount)):,.2f}"
