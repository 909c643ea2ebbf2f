"""USD amount helpers for statistics payloads.

Postgres returns NUMERIC sums as Decimal (or None when no row matched).
Snapshots carry plain JSON numbers, so amounts go through as_number()
before they are stored or summed.
"""

from decimal import ROUND_HALF_UP, Decimal

Number = int | float


def as_number(value: Decimal | int | float | None) -> Number:
    """Coerce a DB aggregate to a JSON number: None -> 0, integral -> int."""
    if value is None:
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, Decimal):
        if not value.is_finite():
            return 0
        return int(value) if value == value.to_integral_value() else float(value)
    if value != value or value in (float("inf"), float("-inf")):
        return 0
    return int(value) if value.is_integer() else value


def _to_fixed(amount: float, places: int) -> str:
    """Round the exact binary value of `amount`, ties away from zero.

    Same digits as the web app's Number#toFixed: 1.45 is stored as
    1.4499999..., so it gives "1.4", while an exact tie like 1.25 gives "1.3".
    """
    exponent = Decimal(1).scaleb(-places)
    return str(Decimal(amount).quantize(exponent, rounding=ROUND_HALF_UP))


def _grouped(amount: Number) -> str:
    """Thousands separators, at most three fraction digits: 1234.5 -> '1,234.5'."""
    if isinstance(amount, int) or float(amount).is_integer():
        return f"{int(amount):,}"
    return f"{amount:,.3f}".rstrip("0").rstrip(".")


def format_compact_usd(amount: Number) -> str:
    """Compact display string: 1_500_000 -> '$1.5M', 45_000 -> '$45K', 999 -> '$999'."""
    value = Decimal(str(amount))
    if value >= 1_000_000:
        return f"${_to_fixed(float(amount) / 1_000_000, 1)}M"
    if value >= 1_000:
        return f"${_to_fixed(float(amount) / 1_000, 0)}K"
    return f"${_grouped(amount)}"
