#!/usr/bin/env python3
"""Main entry point for Pedal Power Analyser application."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from fitparse.utils import FitParseError

from config import settings
from analyzers.power_analyzer import PowerAnalyzer
from models.results import PowerAnalysisResult
from parsers.fit_parser import FitDecoder, FitFileValidationError, inspect_fields, validate_fit_file
from visualizers.chart_generator import ChartGenerator
from visualizers.report_generator import ReportGenerator

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Set up logging configuration.

    Args:
        verbose: Enable verbose logging
    """
    level = logging.DEBUG if verbose else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format=settings.LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)]
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Analyze pedalling power balance from FIT files',
        formatter_class=argparse.RawTextHelpFormatter,
        epilog=(
            'Examples:\n'
            '  %(prog)s analyze path/to/ride.fit\n'
            '  %(prog)s analyze ride.fit --format json --output ride.json\n'
            '  %(prog)s batch --directory data/ --output-dir reports/\n'
            '  %(prog)s inspect ride.fit\n'
            '  %(prog)s serve --port 3000\n'
            '  %(prog)s config --show'
        )
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Analyze command
    analyze_parser = subparsers.add_parser('analyze', help='Analyze a single FIT file')
    analyze_parser.add_argument('file', type=str, help='Path to the FIT file')
    analyze_parser.add_argument(
        '--format', choices=['text', 'json', 'markdown', 'html'], default=settings.DEFAULT_REPORT_FORMAT,
        help='Output format'
    )
    analyze_parser.add_argument('--output', '-o', type=str, help='Write the report to this file instead of stdout')
    analyze_parser.add_argument(
        '--ftp', type=int, help='Threshold power (W) used when the file carries none'
    )
    analyze_parser.add_argument('--charts', action='store_true', help='Generate power zone charts')
    analyze_parser.add_argument(
        '--chart-dir', type=str, default=str(settings.REPORTS_DIR / 'charts'), help='Directory for charts'
    )

    # Batch command
    batch_parser = subparsers.add_parser('batch', help='Analyze all FIT files in a directory')
    batch_parser.add_argument(
        '--directory', '-d', required=True, type=str, help='Directory containing FIT files'
    )
    batch_parser.add_argument('--pattern', default='*.fit', help='File pattern to match (default: *.fit)')
    batch_parser.add_argument(
        '--output-dir', type=str, default=str(settings.REPORTS_DIR), help='Output directory for reports'
    )
    batch_parser.add_argument(
        '--format', choices=['json', 'markdown', 'html'], default='json', help='Report format'
    )
    batch_parser.add_argument(
        '--ftp', type=int, help='Threshold power (W) used when a file carries none'
    )

    # Inspect command
    inspect_parser = subparsers.add_parser('inspect', help='Show raw balance, torque and smoothness fields')
    inspect_parser.add_argument('file', type=str, help='Path to the FIT file')

    # Serve command
    serve_parser = subparsers.add_parser('serve', help='Run the HTTP API')
    serve_parser.add_argument('--host', default=settings.API_HOST, help='Bind address')
    serve_parser.add_argument('--port', type=int, default=settings.API_PORT, help='Port to listen on')

    # Config command
    config_parser = subparsers.add_parser('config', help='Manage configuration')
    config_parser.add_argument(
        '--show', action='store_true', help='Show current configuration'
    )

    return parser.parse_args(argv)


class PowerAnalyser:
    """Main application class."""

    def __init__(self):
        """Initialize the analyser."""
        self.settings = settings
        self.decoder = FitDecoder()
        self.power_analyzer = PowerAnalyzer()
        self.report_generator = ReportGenerator()

    def _threshold_override(self, args: argparse.Namespace) -> Optional[int]:
        return getattr(args, 'ftp', None) or self.settings.FTP

    def analyze_file(self, file_path: Path, args: argparse.Namespace) -> PowerAnalysisResult:
        """Analyze a single FIT file.

        Args:
            file_path: Path to FIT file
            args: Command line arguments including analysis overrides

        Returns:
            Analysis result
        """
        logger.info(f"Analyzing file: {file_path}")
        path = validate_fit_file(file_path)
        activity = self.decoder.decode_file(path)
        return self.power_analyzer.analyze_activity(activity, threshold_override=self._threshold_override(args))

    def batch_analyze_directory(self, directory: Path,
                                args: argparse.Namespace) -> List[Tuple[Path, PowerAnalysisResult]]:
        """Analyze all FIT files in a directory.

        Args:
            directory: Directory containing FIT files
            args: Command line arguments including analysis overrides

        Returns:
            List of (file path, analysis result) pairs for files that parsed
        """
        logger.info(f"Analyzing directory: {directory}")

        results = []
        for file_path in sorted(directory.rglob(getattr(args, 'pattern', '*.fit'))):
            try:
                results.append((file_path, self.analyze_file(file_path, args)))
            except Exception as e:
                logger.error(f"Error analyzing {file_path}: {e}")
        return results

    def write_batch_reports(self, results: List[Tuple[Path, PowerAnalysisResult]],
                            args: argparse.Namespace) -> Path:
        """Write one report per file plus a summary table.

        Args:
            results: (file path, analysis result) pairs
            args: Command line arguments with output directory and format

        Returns:
            Path of the summary report
        """
        output_dir = Path(args.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        extensions = {'json': 'json', 'markdown': 'md', 'html': 'html'}

        for file_path, result in results:
            report = self.report_generator.generate_report(result, format=args.format, source=file_path.name)
            report_path = output_dir / f"{file_path.stem}.{extensions[args.format]}"
            report_path.write_text(report, encoding='utf-8')
            logger.info(f"Report saved to: {report_path}")

        summary_path = output_dir / 'summary.md'
        summary_path.write_text(
            self.report_generator.generate_batch_summary([(path.name, result) for path, result in results]),
            encoding='utf-8'
        )
        return summary_path

    def render(self, result: PowerAnalysisResult, file_path: Path, args: argparse.Namespace) -> str:
        """Render an analysis result, generating charts first if requested."""
        charts = {}
        if getattr(args, 'charts', False):
            chart_generator = ChartGenerator(Path(args.chart_dir))
            charts = chart_generator.generate_zone_charts(result, prefix=file_path.stem)
            for name, path in charts.items():
                logger.info(f"Chart '{name}' saved to: {path}")
        return self.report_generator.generate_report(result, format=args.format, source=file_path.name, charts=charts)

    def inspect_file(self, file_path: Path) -> dict:
        """Decode a FIT file and summarize its pedalling fields."""
        path = validate_fit_file(file_path)
        return inspect_fields(self.decoder.decode_file(path))

    def show_config(self):
        """Display current configuration."""
        print("Current Configuration:")
        print("-" * 30)
        for key, value in self.settings.get_settings_summary().items():
            print(f"{key}: {value}")


def serve(host: str, port: int):
    """Run the HTTP API under uvicorn."""
    import uvicorn

    uvicorn.run('api.server:app', host=host, port=port, log_level=settings.LOG_LEVEL.lower())


def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point."""
    args = parse_args(argv)
    setup_logging(args.verbose)

    if not args.command:
        logger.error("Please specify a command. Use --help for usage.")
        return 1

    analyser = PowerAnalyser()
    try:
        if args.command == 'analyze':
            file_path = Path(args.file).resolve()
            result = analyser.analyze_file(file_path, args)
            output = analyser.render(result, file_path, args)
            if args.output:
                Path(args.output).write_text(output, encoding='utf-8')
                logger.info(f"Report saved to: {args.output}")
            else:
                print(output, end='' if output.endswith('\n') else '\n')
            if not result.has_power_data:
                logger.warning(f"No power data found in {file_path}")

        elif args.command == 'batch':
            directory = Path(args.directory)
            if not directory.is_dir():
                logger.error(f"Directory not found: {directory}")
                return 1
            results = analyser.batch_analyze_directory(directory, args)
            if not results:
                logger.warning(f"No FIT files analyzed in {directory}")
                return 0
            summary_path = analyser.write_batch_reports(results, args)
            logger.info(f"Analysis complete! Processed {len(results)} file(s), summary at {summary_path}")

        elif args.command == 'inspect':
            print(json.dumps(analyser.inspect_file(Path(args.file)), indent=2, default=str))

        elif args.command == 'serve':
            serve(args.host, args.port)

        elif args.command == 'config':
            if args.show:
                analyser.show_config()

    except FitFileValidationError as e:
        logger.error(f"Invalid FIT file: {e}")
        return 1
    except FitParseError as e:
        logger.error(f"Error parsing FIT file: {e}")
        if args.verbose:
            logger.exception("Full traceback:")
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
