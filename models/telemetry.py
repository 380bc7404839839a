"""Data models for decoded FIT telemetry."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Tuple, Union
import pandas as pd


@dataclass(frozen=True)
class LeftReferenced:
    """Balance reading whose value is the left leg's share of total power."""

    value: float


@dataclass(frozen=True)
class RightReferenced:
    """Balance reading whose value is the right leg's share of total power."""

    value: float


BalanceReading = Union[LeftReferenced, RightReferenced]


def balance_from_flag(value: float, right_is_reference: bool) -> BalanceReading:
    """Build a balance reading from a decoder value and its polarity flag.

    Args:
        value: Percentage (0-100) of total power
        right_is_reference: True if ``value`` refers to the right leg

    Returns:
        RightReferenced or LeftReferenced reading
    """
    if right_is_reference:
        return RightReferenced(value)
    return LeftReferenced(value)


@dataclass(frozen=True)
class SampleRecord:
    """One timestamped telemetry point from a FIT ``record`` message."""

    timestamp: Optional[datetime] = None
    power: Optional[int] = None
    balance: Optional[BalanceReading] = None
    left_torque_effectiveness: Optional[float] = None
    right_torque_effectiveness: Optional[float] = None
    left_pedal_smoothness: Optional[float] = None
    right_pedal_smoothness: Optional[float] = None

    @property
    def has_power(self) -> bool:
        return self.power is not None and self.power > 0


@dataclass(frozen=True)
class SessionSummary:
    """Session-level summary values from a FIT ``session`` message."""

    average_power: Optional[float] = None
    threshold_power: Optional[float] = None
    balance: Optional[BalanceReading] = None


@dataclass(frozen=True)
class DecodedActivity:
    """Everything the analyzer needs from a decoded FIT file."""

    samples: Tuple[SampleRecord, ...] = ()
    session: Optional[SessionSummary] = None
    raw_data: Optional[pd.DataFrame] = field(default=None, compare=False, repr=False)
    session_fields: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def power_sample_count(self) -> int:
        """Number of samples carrying a positive power reading."""
        return sum(1 for sample in self.samples if sample.has_power)
