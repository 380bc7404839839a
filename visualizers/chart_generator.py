"""Chart generator for power zone metrics."""

import logging
from pathlib import Path
from typing import Callable, Dict, Optional

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns

from config.settings import CHART_DPI, CHART_FORMAT
from models.results import PowerAnalysisResult, PowerZoneAggregate, SidePair

logger = logging.getLogger(__name__)

LEFT_COLOR = '#ff3b30'
RIGHT_COLOR = '#007aff'


class ChartGenerator:
    """Generate per-zone left/right charts for a power analysis."""

    def __init__(self, output_dir: Path = None):
        """Initialize chart generator.

        Args:
            output_dir: Directory to save charts
        """
        self.output_dir = Path(output_dir or 'charts')
        self.output_dir.mkdir(parents=True, exist_ok=True)

        # Set style
        sns.set_theme(style='whitegrid')

    def generate_zone_charts(self, result: PowerAnalysisResult, prefix: str = 'activity') -> Dict[str, str]:
        """Generate all zone charts for an analysis.

        Args:
            result: Analysis result
            prefix: File name prefix for the saved charts

        Returns:
            Dictionary mapping chart names to file paths; empty when there are no zones
        """
        if not result.zones:
            logger.info("No power zone data available for charts")
            return {}

        charts = {}
        metrics = {
            'zone_balance': ('Left/Right Balance by Power Zone', lambda zone: zone.balance),
            'zone_torque_effectiveness': ('Torque Effectiveness by Power Zone', lambda zone: zone.torque_effectiveness),
            'zone_pedal_smoothness': ('Pedal Smoothness by Power Zone', lambda zone: zone.pedal_smoothness),
        }
        for name, (title, getter) in metrics.items():
            path = self._create_side_by_side_chart(result, getter, title, f"{prefix}_{name}")
            if path:
                charts[name] = path
        return charts

    def _create_side_by_side_chart(self, result: PowerAnalysisResult,
                                   getter: Callable[[PowerZoneAggregate], Optional[SidePair]],
                                   title: str, file_stem: str) -> Optional[str]:
        """Create a grouped left/right bar chart for one metric.

        Args:
            result: Analysis result
            getter: Extracts the metric pair from a zone
            title: Chart title
            file_stem: Output file name without extension

        Returns:
            Path to the saved chart, or None if no zone has the metric
        """
        zones = [zone for zone in result.zones if getter(zone) is not None]
        if not zones:
            logger.debug(f"Skipping chart '{title}': no zone data")
            return None

        labels = [f"{zone.zone_id}\n{zone.power_range}" for zone in zones]
        left = [getter(zone).left for zone in zones]
        right = [getter(zone).right for zone in zones]
        x = np.arange(len(zones))
        width = 0.38

        fig, ax = plt.subplots(figsize=(10, 5))
        left_bars = ax.bar(x - width / 2, left, width, label='Left', color=LEFT_COLOR)
        right_bars = ax.bar(x + width / 2, right, width, label='Right', color=RIGHT_COLOR)
        ax.bar_label(left_bars, fmt='%d%%', fontsize=8)
        ax.bar_label(right_bars, fmt='%d%%', fontsize=8)

        ax.set_xticks(x)
        ax.set_xticklabels(labels)
        ax.set_ylabel('%')
        ax.set_ylim(0, max(left + right) * 1.15)
        ax.set_title(title)
        ax.legend()

        filepath = self.output_dir / f"{file_stem}.{CHART_FORMAT}"
        fig.tight_layout()
        fig.savefig(filepath, dpi=CHART_DPI)
        plt.close(fig)

        return str(filepath)
