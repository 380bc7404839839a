"""Numeric helpers shared by the analyzers."""

import math
from typing import Iterable, Optional

import numpy as np


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with halves rounded up.

    Unlike the built-in ``round``, 50.5 becomes 51 and 49.5 becomes 50.

    Args:
        value: Number to round

    Returns:
        Rounded integer
    """
    return int(math.floor(value + 0.5))


def rounded_mean(values: Iterable[float]) -> Optional[int]:
    """Mean of the values rounded half-up, or None for an empty input."""
    values = list(values)
    if not values:
        return None
    return round_half_up(float(np.mean(values)))
