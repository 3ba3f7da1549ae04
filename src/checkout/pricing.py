"""Per-draft pricing: fixed delivery fee plus a flat tax on the subtotal."""

from decimal import ROUND_HALF_UP, Decimal

TAX_RATE = Decimal("0.10")
DELIVERY_FEE = Decimal("5.00")

_CENTS = Decimal("0.01")


def to_decimal(value) -> Decimal:
    """Convert a wire or float amount to Decimal without binary float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Not an amount: {value!r}")
    return Decimal(str(value))


def round2(value) -> Decimal:
    return to_decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP)


def tax_for(subtotal: Decimal) -> Decimal:
    return round2(to_decimal(subtotal) * TAX_RATE)
