# File: utils/math_utils.py
"""Math and calculation utilities for League Ops.

Pure Python math functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

Functions:
    - round_currency: Consistent rounding for ledger amounts
    - calculate_percentage: Progress percentage clamped to 0-100
    - clamp: Bound a value between a minimum and maximum
    - coerce_int: Best-effort integer conversion for stored numeric fields
"""

from __future__ import annotations

import logging
from typing import Any

# Module-level logger (no HA dependency)
_LOGGER = logging.getLogger(__name__)

# ==============================================================================
# Constants (local copies to avoid circular imports)
# ==============================================================================

# Default float precision for currency rounding
DATA_FLOAT_PRECISION = 2


def round_currency(value: float, precision: int = DATA_FLOAT_PRECISION) -> float:
    """Round a currency amount to the configured precision.

    Prevents float arithmetic drift (e.g., 27.499999999999996 → 27.5).

    Examples:
        round_currency(10.456) → 10.46
        round_currency(10.0) → 10.0
    """
    return round(float(value), precision)


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp a value between minimum and maximum bounds."""
    return max(min_val, min(value, max_val))


def calculate_percentage(
    current: float,
    target: float,
    precision: int = DATA_FLOAT_PRECISION,
) -> float:
    """Calculate progress percentage, clamped to 0-100 and rounded.

    Args:
        current: Current progress value
        target: Target/total value
        precision: Number of decimal places for rounding

    Returns:
        Percentage (0-100), or 0.0 if target is 0 or negative

    Examples:
        calculate_percentage(20, 50) → 40.0
        calculate_percentage(75, 50) → 100.0
        calculate_percentage(1, 3) → 33.33
        calculate_percentage(5, 0) → 0.0  # Division by zero protection
    """
    if target <= 0:
        return 0.0
    ratio = clamp(current / target, 0.0, 1.0)
    return round(ratio * 100, precision)


def coerce_int(value: Any, default: int = 0) -> int:
    """Convert a stored numeric value to int, falling back to ``default``.

    Stored documents may carry numbers as strings or floats ("50", 50.0).
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(float(value))
    except (TypeError, ValueError):
        _LOGGER.debug("Unable to coerce %r to int, using %s", value, default)
        return default
