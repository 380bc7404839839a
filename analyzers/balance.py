"""Left/right balance normalization."""

from typing import Tuple

from models.telemetry import BalanceReading, RightReferenced
from models.results import NormalizedBalance
from utils.numeric import round_half_up


def balance_split(reading: BalanceReading) -> Tuple[float, float]:
    """Get the unrounded (left, right) percentages of a balance reading."""
    if isinstance(reading, RightReferenced):
        return 100 - reading.value, reading.value
    return reading.value, 100 - reading.value


def normalize_balance(reading: BalanceReading) -> NormalizedBalance:
    """Convert a polarity-tagged balance reading into a left/right split.

    Both sides are rounded independently, so the pair may sum to 99 or 101.

    Args:
        reading: LeftReferenced or RightReferenced balance reading

    Returns:
        NormalizedBalance with left and right percentages
    """
    left, right = balance_split(reading)
    return NormalizedBalance(left=round_half_up(left), right=round_half_up(right))
