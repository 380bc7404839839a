"""Power analyzer for balance, torque effectiveness and pedal smoothness metrics."""

import logging
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from analyzers.balance import balance_split, normalize_balance
from models.results import ActivityAggregate, PowerAnalysisResult, PowerZoneAggregate, SidePair
from models.telemetry import DecodedActivity, SampleRecord, SessionSummary
from models.zones import ZoneCalculator
from parsers.fit_parser import FitDecoder
from utils.numeric import round_half_up, rounded_mean

logger = logging.getLogger(__name__)

TORQUE_FIELDS = ('left_torque_effectiveness', 'right_torque_effectiveness')
SMOOTHNESS_FIELDS = ('left_pedal_smoothness', 'right_pedal_smoothness')


def _is_positive(value: Optional[float]) -> bool:
    return value is not None and value > 0


def _both_sides(sample: SampleRecord, fields: Tuple[str, str]) -> Optional[Tuple[float, float]]:
    """Get a (left, right) metric pair, or None unless both sides are positive."""
    left = getattr(sample, fields[0])
    right = getattr(sample, fields[1])
    if _is_positive(left) and _is_positive(right):
        return left, right
    return None


@dataclass
class _ZoneTotals:
    """Running sums for one zone."""

    label: str
    power_range: str
    left_total: float = 0.0
    right_total: float = 0.0
    count: int = 0
    left_torque_total: float = 0.0
    right_torque_total: float = 0.0
    torque_count: int = 0
    left_smooth_total: float = 0.0
    right_smooth_total: float = 0.0
    smooth_count: int = 0

    @staticmethod
    def _pair(left_total: float, right_total: float, count: int) -> Optional[SidePair]:
        if count == 0:
            return None
        return SidePair(left=round_half_up(left_total / count), right=round_half_up(right_total / count))

    def finalize(self, zone_id: str) -> PowerZoneAggregate:
        return PowerZoneAggregate(
            zone_id=zone_id,
            label=self.label,
            power_range=self.power_range,
            sample_count=self.count,
            balance=self._pair(self.left_total, self.right_total, self.count),
            torque_effectiveness=self._pair(self.left_torque_total, self.right_torque_total, self.torque_count),
            pedal_smoothness=self._pair(self.left_smooth_total, self.right_smooth_total, self.smooth_count),
        )


class PowerAnalyzer:
    """Analyzer for power distribution metrics of a decoded activity."""

    def __init__(self):
        """Initialize power analyzer."""
        self.zone_calculator = ZoneCalculator()

    def analyze_activity(self, activity: DecodedActivity,
                         threshold_override: Optional[float] = None) -> PowerAnalysisResult:
        """Analyze a decoded activity.

        Args:
            activity: Decoded samples and session summary
            threshold_override: Threshold power used when the session carries none

        Returns:
            PowerAnalysisResult with overall and per-zone metrics
        """
        overall = self.aggregate_activity(activity.samples, activity.session)

        if overall.threshold_power is None and _is_positive(threshold_override):
            logger.info(f"No threshold power in file, using override of {threshold_override}W")
            overall = replace(overall, threshold_power=threshold_override)

        zones = self.aggregate_by_zone(activity.samples, overall.threshold_power)
        return PowerAnalysisResult.from_aggregate(overall, zones)

    def aggregate_activity(self, samples: Sequence[SampleRecord],
                           session: Optional[SessionSummary] = None) -> ActivityAggregate:
        """Calculate whole-activity power metrics.

        Session values are preferred where the session has them; every field falls
        back to the samples independently.

        Args:
            samples: Telemetry samples
            session: Optional session summary

        Returns:
            ActivityAggregate with average power, threshold, balance, torque and smoothness
        """
        power_samples = [sample for sample in samples if sample.has_power]

        session_power = session is not None and _is_positive(session.average_power)
        if session_power:
            average_power = round_half_up(session.average_power)
            logger.debug(f"Average power {average_power}W taken from session summary")
        elif power_samples:
            average_power = round_half_up(float(np.mean([sample.power for sample in power_samples])))
            logger.debug(f"Average power {average_power}W computed from {len(power_samples)} samples")
        else:
            average_power = 0

        threshold_power = None
        if session is not None and _is_positive(session.threshold_power):
            threshold_power = session.threshold_power

        if session_power and session.balance is not None:
            balance = normalize_balance(session.balance)
            logger.debug("Balance taken from session summary")
        else:
            balance = self._average_balance(power_samples)

        return ActivityAggregate(
            average_power=average_power,
            threshold_power=threshold_power,
            balance=balance,
            torque_effectiveness=self._average_sides(samples, TORQUE_FIELDS),
            pedal_smoothness=self._average_sides(samples, SMOOTHNESS_FIELDS),
        )

    def aggregate_by_zone(self, samples: Iterable[SampleRecord],
                          threshold_power: Optional[float]) -> Tuple[PowerZoneAggregate, ...]:
        """Group samples by power zone and average their pedalling metrics.

        Only samples with power and a balance reading are classified. A zone is
        reported once it holds at least one such sample.

        Args:
            samples: Telemetry samples
            threshold_power: Threshold power in watts; no zones are computed without it

        Returns:
            Tuple of PowerZoneAggregate ordered by zone id
        """
        if not threshold_power:
            return ()

        totals: Dict[str, _ZoneTotals] = {}
        for sample in samples:
            if not sample.has_power or sample.balance is None:
                continue

            zone = self.zone_calculator.classify(sample.power, threshold_power)
            zone_totals = totals.get(zone.zone_id)
            if zone_totals is None:
                zone_totals = _ZoneTotals(
                    label=zone.label,
                    power_range=self.zone_calculator.format_power_range(zone, threshold_power),
                )
                totals[zone.zone_id] = zone_totals

            left, right = balance_split(sample.balance)
            zone_totals.left_total += left
            zone_totals.right_total += right
            zone_totals.count += 1

            torque = _both_sides(sample, TORQUE_FIELDS)
            if torque is not None:
                zone_totals.left_torque_total += torque[0]
                zone_totals.right_torque_total += torque[1]
                zone_totals.torque_count += 1

            smoothness = _both_sides(sample, SMOOTHNESS_FIELDS)
            if smoothness is not None:
                zone_totals.left_smooth_total += smoothness[0]
                zone_totals.right_smooth_total += smoothness[1]
                zone_totals.smooth_count += 1

        logger.debug(f"Classified samples into {len(totals)} power zones at {threshold_power}W threshold")
        return tuple(totals[zone_id].finalize(zone_id) for zone_id in sorted(totals))

    @staticmethod
    def _average_balance(power_samples: List[SampleRecord]) -> Optional[SidePair]:
        splits = [balance_split(sample.balance) for sample in power_samples if sample.balance is not None]
        if not splits:
            return None
        return SidePair(
            left=rounded_mean(left for left, _ in splits),
            right=rounded_mean(right for _, right in splits),
        )

    @staticmethod
    def _average_sides(samples: Iterable[SampleRecord], fields: Tuple[str, str]) -> Optional[SidePair]:
        pairs = [pair for pair in (_both_sides(sample, fields) for sample in samples) if pair is not None]
        if not pairs:
            return None
        return SidePair(
            left=rounded_mean(left for left, _ in pairs),
            right=rounded_mean(right for _, right in pairs),
        )


def analyze(data: bytes, decoder: Optional[FitDecoder] = None) -> PowerAnalysisResult:
    """Decode a FIT file and analyze its power data.

    Decoder errors are not caught here; they reach the caller unchanged.

    Args:
        data: Raw FIT file bytes
        decoder: Decoder to use, a default FitDecoder if omitted

    Returns:
        PowerAnalysisResult for the activity
    """
    decoder = decoder or FitDecoder()
    activity = decoder.decode(data)
    return PowerAnalyzer().analyze_activity(activity)
