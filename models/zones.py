"""Power zone definitions and classification."""

from typing import Dict, Optional, Tuple
from dataclasses import dataclass

from utils.numeric import round_half_up


@dataclass(frozen=True)
class ZoneDefinition:
    """Definition of a power zone as a percentage band of threshold power."""

    zone_id: str
    label: str
    min_percent: float
    max_percent: Optional[float]  # None means unbounded
    color: str

    def contains(self, percentage: float) -> bool:
        """Check if a percentage of threshold falls in this zone (lower-inclusive)."""
        if percentage < self.min_percent:
            return False
        return self.max_percent is None or percentage < self.max_percent


POWER_ZONES: Tuple[ZoneDefinition, ...] = (
    ZoneDefinition(zone_id='Z1', label='Active Recovery', min_percent=0, max_percent=55, color='lightblue'),
    ZoneDefinition(zone_id='Z2', label='Endurance', min_percent=55, max_percent=75, color='green'),
    ZoneDefinition(zone_id='Z3', label='Tempo', min_percent=75, max_percent=90, color='yellow'),
    ZoneDefinition(zone_id='Z4', label='Lactate Threshold', min_percent=90, max_percent=105, color='orange'),
    ZoneDefinition(zone_id='Z5', label='VO2 Max', min_percent=105, max_percent=120, color='red'),
    ZoneDefinition(zone_id='Z6', label='Anaerobic/Neuromuscular', min_percent=120, max_percent=None, color='purple'),
)


class ZoneCalculator:
    """Calculator for threshold-relative power zones."""

    @staticmethod
    def get_power_zones() -> Dict[str, ZoneDefinition]:
        """Get power zone definitions keyed by zone id, in zone order."""
        return {zone.zone_id: zone for zone in POWER_ZONES}

    @staticmethod
    def classify(power: float, threshold_power: float) -> ZoneDefinition:
        """Get the zone a power reading belongs to.

        Args:
            power: Power in watts
            threshold_power: Threshold power in watts, must be positive

        Returns:
            Matching zone definition

        Raises:
            ValueError: If threshold_power is not positive
        """
        if not threshold_power or threshold_power <= 0:
            raise ValueError(f"Threshold power must be positive, got {threshold_power!r}")

        percentage = power * 100 / threshold_power
        for zone in POWER_ZONES:
            if zone.contains(percentage):
                return zone
        # Only negative power lands here
        return POWER_ZONES[0]

    @staticmethod
    def power_range(zone: ZoneDefinition, threshold_power: float) -> Tuple[int, Optional[int]]:
        """Get the watt range of a zone for a threshold.

        Args:
            zone: Zone definition
            threshold_power: Threshold power in watts

        Returns:
            Tuple of (min_watts, max_watts); max_watts is None for the open-ended zone
        """
        min_watts = round_half_up(threshold_power * zone.min_percent / 100)
        if zone.max_percent is None:
            return min_watts, None
        return min_watts, round_half_up(threshold_power * zone.max_percent / 100)

    @classmethod
    def format_power_range(cls, zone: ZoneDefinition, threshold_power: float) -> str:
        """Render a zone's watt range for display, e.g. ``'110-150W'`` or ``'240+W'``."""
        min_watts, max_watts = cls.power_range(zone, threshold_power)
        if max_watts is None:
            return f"{min_watts}+W"
        return f"{min_watts}-{max_watts}W"
