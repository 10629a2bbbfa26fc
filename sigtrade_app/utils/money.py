"""
Decimal helpers for stakes, payouts and balances.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

CENT = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    """
    Convert a numeric value to Decimal without binary float artifacts.

    Raises:
        ValueError: If the value is not numeric or not finite
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a numeric value: {value!r}")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError) as e:
            raise ValueError(f"Not a numeric value: {value!r}") from e

    if not result.is_finite():
        raise ValueError(f"Not a finite value: {value!r}")
    return result


def parse_decimal(text: str) -> Optional[Decimal]:
    """Parse text as a finite Decimal, returning None when it is not numeric."""
    try:
        return to_decimal(text)
    except ValueError:
        return None


def quantize_money(value: Decimal) -> Decimal:
    """Round to cents for display and payout simulation."""
    return value.quantize(CENT)
