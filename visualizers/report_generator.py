"""Report generator for power analysis results."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import jinja2

from models.results import PowerAnalysisResult, SidePair

logger = logging.getLogger(__name__)

TEMPLATES = {
    'text': 'power_report.txt',
    'markdown': 'power_report.md',
    'html': 'power_report.html',
}


class ReportGenerator:
    """Generate power analysis reports in various formats."""

    def __init__(self, template_dir: Path = None):
        """Initialize report generator.

        Args:
            template_dir: Directory containing report templates
        """
        self.template_dir = template_dir or Path(__file__).parent / 'templates'

        # Initialize Jinja2 environment
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(self.template_dir),
            autoescape=jinja2.select_autoescape(['html', 'xml']),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

        # Add custom filters
        self.jinja_env.filters['format_watts'] = self._format_watts
        self.jinja_env.filters['format_pair'] = self._format_pair
        self.jinja_env.filters['format_split'] = self._format_split

    def generate_report(self, result: PowerAnalysisResult, format: str = 'text',
                        source: Optional[str] = None, charts: Optional[Dict[str, str]] = None) -> str:
        """Render a power analysis report.

        Args:
            result: Analysis result
            format: Report format ('text', 'markdown', 'html', 'json')
            source: Name of the analyzed file, shown in titles
            charts: Chart name to image path mapping, embedded in HTML reports

        Returns:
            Rendered report content as a string
        """
        if format == 'json':
            return json.dumps(result.to_dict(), indent=2)
        if format not in TEMPLATES:
            raise ValueError(f"Unsupported format: {format}")

        template = self.jinja_env.get_template(TEMPLATES[format])
        return template.render(
            result=result,
            source=source,
            charts=charts or {},
            generated_at=datetime.now().isoformat(timespec='seconds'),
        )

    def generate_batch_summary(self, results: List[Tuple[str, PowerAnalysisResult]]) -> str:
        """Render a Markdown table summarizing several analyzed files.

        Args:
            results: (file name, result) pairs

        Returns:
            Markdown summary table
        """
        lines = [
            '| File | Avg Power | Threshold | Balance | Torque | Smoothness | Zones |',
            '|---|---|---|---|---|---|---|',
        ]
        for name, result in results:
            lines.append(
                f"| {name} | {result.average_power} W | {self._format_watts(result.threshold_power, ' W')} | "
                f"{self._format_split(result.balance)} | {self._format_split(result.torque_effectiveness)} | "
                f"{self._format_split(result.pedal_smoothness)} | {len(result.zones)} |"
            )
        return '\n'.join(lines) + '\n'

    @staticmethod
    def _format_watts(value: Any, unit: str = '') -> str:
        if value is None:
            return 'n/a'
        value = float(value)
        text = f"{value:.0f}" if value.is_integer() else f"{value:.1f}"
        return f"{text}{unit}"

    @staticmethod
    def _format_pair(pair: Optional[SidePair], title: str, missing_title: str) -> str:
        if pair is None:
            return f"{missing_title}: Not available"
        return f"{title}:\n   Left:  {pair.left}%\n   Right: {pair.right}%"

    @staticmethod
    def _format_split(pair: Optional[SidePair]) -> str:
        if pair is None:
            return 'n/a'
        return f"L {pair.left}% / R {pair.right}%"
