"""Configuration settings for Pedal Power Analyser."""

import os
import logging
from pathlib import Path
from typing import Any, Dict, Optional
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Logger for this module
logger = logging.getLogger(__name__)

# Base paths
BASE_DIR = Path(__file__).parent.parent
REPORTS_DIR = Path(os.getenv("REPORTS_DIR", str(BASE_DIR / "reports")))


def _optional_int(name: str) -> Optional[int]:
    """Read an optional positive integer from the environment.

    Args:
        name: Environment variable name

    Returns:
        Parsed value, or None if unset, empty or not a positive integer
    """
    raw = os.getenv(name)
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not an integer")
        return None
    return value if value > 0 else None


# File validation
SUPPORTED_FORMATS = ['.fit']
MIN_FIT_FILE_BYTES = 100  # FIT files are always larger than their header + CRC

# HTTP service
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("PORT", "3000"))
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(25 * 1024 * 1024)))

# Logging configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Report generation
DEFAULT_REPORT_FORMAT = "text"
CHART_DPI = 150
CHART_FORMAT = "png"

# Threshold power fallback used when a file carries none (can be overridden via CLI)
FTP = _optional_int("FTP")


def get_settings_summary() -> Dict[str, Any]:
    """Get the current configuration as a dictionary."""
    return {
        'FTP': FTP,
        'LOG_LEVEL': LOG_LEVEL,
        'API_HOST': API_HOST,
        'API_PORT': API_PORT,
        'MAX_UPLOAD_BYTES': MAX_UPLOAD_BYTES,
        'MIN_FIT_FILE_BYTES': MIN_FIT_FILE_BYTES,
        'REPORTS_DIR': REPORTS_DIR,
    }
