"""Result models produced by the power analyzer."""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class SidePair:
    """Left and right percentages, rounded to whole numbers."""

    left: int
    right: int

    def to_dict(self) -> Dict[str, int]:
        return {'left': self.left, 'right': self.right}


# A normalized balance is a side pair whose sides sum to 100 (+/-1 after rounding)
NormalizedBalance = SidePair


def _pair_dict(pair: Optional[SidePair]) -> Optional[Dict[str, int]]:
    return pair.to_dict() if pair is not None else None


@dataclass(frozen=True)
class PowerZoneAggregate:
    """Averaged pedalling metrics for the samples that fell into one power zone."""

    zone_id: str
    label: str
    power_range: str
    sample_count: int
    balance: NormalizedBalance
    torque_effectiveness: Optional[SidePair] = None
    pedal_smoothness: Optional[SidePair] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the JSON field names of the HTTP API."""
        return {
            'zone': self.zone_id,
            'description': self.label,
            'powerRange': self.power_range,
            'sampleCount': self.sample_count,
            'leftRightBalance': _pair_dict(self.balance),
            'torqueEffectiveness': _pair_dict(self.torque_effectiveness),
            'pedalSmoothness': _pair_dict(self.pedal_smoothness),
        }


@dataclass(frozen=True)
class ActivityAggregate:
    """Whole-activity power metrics."""

    average_power: int = 0
    threshold_power: Optional[float] = None
    balance: Optional[NormalizedBalance] = None
    torque_effectiveness: Optional[SidePair] = None
    pedal_smoothness: Optional[SidePair] = None


@dataclass(frozen=True)
class PowerAnalysisResult:
    """Complete power analysis of one activity."""

    average_power: int = 0
    threshold_power: Optional[float] = None
    balance: Optional[NormalizedBalance] = None
    torque_effectiveness: Optional[SidePair] = None
    pedal_smoothness: Optional[SidePair] = None
    zones: Tuple[PowerZoneAggregate, ...] = ()

    @classmethod
    def from_aggregate(cls, overall: ActivityAggregate,
                       zones: Tuple[PowerZoneAggregate, ...] = ()) -> 'PowerAnalysisResult':
        return cls(
            average_power=overall.average_power,
            threshold_power=overall.threshold_power,
            balance=overall.balance,
            torque_effectiveness=overall.torque_effectiveness,
            pedal_smoothness=overall.pedal_smoothness,
            zones=tuple(zones),
        )

    @property
    def has_power_data(self) -> bool:
        """Check if any power data was found in the activity."""
        return self.average_power > 0

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the JSON field names of the HTTP API."""
        threshold = self.threshold_power
        if threshold is not None and float(threshold).is_integer():
            threshold = int(threshold)
        return {
            'averagePower': self.average_power,
            'thresholdPower': threshold,
            'leftRightBalance': _pair_dict(self.balance),
            'torqueEffectiveness': _pair_dict(self.torque_effectiveness),
            'pedalSmoothness': _pair_dict(self.pedal_smoothness),
            'powerZoneBalances': [zone.to_dict() for zone in self.zones],
        }
