"""Configuration validation for the simulation core.

Configuration errors are rejected once, when the offending object is
constructed, so later arithmetic (divisions, step loops) never sees them.
"""

from __future__ import annotations

import math


def require_positive_finite(value: float, parameter_name: str) -> float:
    """Validate that a configuration value is a positive, finite number.

    Args:
        value: Value to validate.
        parameter_name: Name used in the error message.

    Returns:
        The value as a float.

    Raises:
        ValueError: If the value is zero, negative, NaN or infinite.
    """
    numeric_value = float(value)
    if not math.isfinite(numeric_value) or numeric_value <= 0.0:
        raise ValueError(f"{parameter_name} must be a positive finite number, got {value!r}")
    return numeric_value
