"""Currency coercion and rounding helpers."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
CENT = Decimal("0.01")


def coerce_money(value: Any, field: str = "amount") -> Decimal:
    """Coerce a stored currency value into a non-negative ``Decimal``.

    Missing, non-numeric, non-finite and negative values become zero so a single
    malformed row cannot poison an aggregate. Floats go through ``str`` to keep
    ``0.1`` as ``Decimal("0.1")`` rather than its binary expansion.
    """
    if value is None or value == "":
        return ZERO
    if isinstance(value, bool):
        logger.warning("Coercing boolean %s=%r to 0", field, value)
        return ZERO

    try:
        if isinstance(value, Decimal):
            amount = value
        elif isinstance(value, float):
            amount = Decimal(str(value))
        else:
            amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        logger.warning("Coercing malformed %s=%r to 0", field, value)
        return ZERO

    if not amount.is_finite():
        logger.warning("Coercing non-finite %s=%r to 0", field, value)
        return ZERO
    if amount < 0:
        logger.warning("Coercing negative %s=%r to 0", field, value)
        return ZERO
    return amount


def money_sum(values: Iterable[Decimal]) -> Decimal:
    """Sum decimals starting from an exact zero."""
    return sum(values, ZERO)


def round_money(value: Decimal) -> Decimal:
    """Round to two decimals for presentation."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(value: Decimal, label: str = "PKR") -> str:
    """Render an amount like ``PKR 1,250.50``."""
    return f"{label} {round_money(value):,}"
