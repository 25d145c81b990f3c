"""Dashboard figures derived from booking counts."""

import math


def calculate_conversion_rate(confirmed: int, total: int) -> float:
    """Percentage of bookings confirmed, rounded half-up to one decimal.

    Examples:
        >>> calculate_conversion_rate(3, 7)
        42.9
        >>> calculate_conversion_rate(0, 0)
        0.0
    """
    if confirmed <= 0 or total <= 0:
        return 0.0
    percent = confirmed / total * 100
    return math.floor(percent * 10 + 0.5) / 10
