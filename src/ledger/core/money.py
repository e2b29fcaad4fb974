"""Conversion between Decimal amounts and integer minor units.

All amounts are stored in the smallest currency unit (paise for INR, cents
for USD) so that balances are sums of integers and never drift.

Services pass the minor unit from their own ``Settings``; the module-level
settings are only the fallback for callers that do not.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from ledger.config import settings
from ledger.core.exceptions import ValidationError

# Amounts are stored in 64-bit signed integer columns.
MAX_MINOR = 2**63 - 1


def _scale(minor_unit: int | None) -> int:
    return settings.currency_minor_unit if minor_unit is None else minor_unit


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """Coerce a user-supplied amount to Decimal.

    Floats go through str() so 0.1 becomes Decimal("0.1"), not its binary
    approximation.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValidationError("VAL_001", {"value": value})
    try:
        if isinstance(value, float):
            return Decimal(str(value))
        return Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise ValidationError("VAL_001", {"value": str(value)}) from e


def to_minor(value: Decimal | int | float | str, minor_unit: int | None = None) -> int:
    """Convert an amount to minor units (e.g. 1234.56 -> 123456).

    Raises:
        ValidationError: If the value is not a finite number or too large to
            store (VAL_001), or carries more precision than the minor unit
            allows (VAL_002)
    """
    amount = to_decimal(value)
    if not amount.is_finite():
        raise ValidationError("VAL_001", {"value": str(value)})

    places = _scale(minor_unit)
    quantum = Decimal(1).scaleb(-places)
    try:
        quantized = amount.quantize(quantum, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        # More digits than the decimal context holds.
        raise ValidationError("VAL_001", {"value": str(value), "reason": "too large"}) from e
    if quantized != amount:
        raise ValidationError("VAL_002", {"value": str(value), "places": places})
    minor = int(quantized.scaleb(places))
    if abs(minor) > MAX_MINOR:
        raise ValidationError("VAL_001", {"value": str(value), "reason": "too large"})
    return minor


def from_minor(minor: int, minor_unit: int | None = None) -> Decimal:
    """Convert minor units back to a Decimal with fixed places (123456 -> 1234.56)."""
    places = _scale(minor_unit)
    return Decimal(minor).scaleb(-places).quantize(Decimal(1).scaleb(-places))


def positive_minor(value: Decimal | int | float | str, minor_unit: int | None = None) -> int:
    """Convert an amount that must be strictly positive."""
    minor = to_minor(value, minor_unit)
    if minor <= 0:
        raise ValidationError("VAL_001", {"value": str(value)})
    return minor
