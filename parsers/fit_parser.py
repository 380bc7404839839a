"""FIT file decoder producing telemetry samples and a session summary."""

import io
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pandas as pd

from fitparse import FitFile
from fitparse.utils import FitParseError

from models.telemetry import BalanceReading, DecodedActivity, SampleRecord, SessionSummary, balance_from_flag
from config.settings import MIN_FIT_FILE_BYTES, SUPPORTED_FORMATS

logger = logging.getLogger(__name__)

# Record balance is a uint8: bit 7 flags the right leg, bits 0-6 hold the percentage
RECORD_BALANCE_RIGHT_FLAG = 0x80
RECORD_BALANCE_MASK = 0x7F
# Session balance is a uint16: bit 15 flags the right leg, bits 0-13 hold percentage * 100
SESSION_BALANCE_RIGHT_FLAG = 0x8000
SESSION_BALANCE_MASK = 0x3FFF

INSPECT_KEYWORDS = ('balance', 'torque', 'smoothness', 'effectiveness', 'zone', 'power')


class FitFileValidationError(ValueError):
    """Raised when a path does not look like a FIT file."""


@dataclass(frozen=True)
class DecoderConfig:
    """Options handed to fitparse for each decode."""

    check_crc: bool = False
    record_message: str = 'record'
    session_message: str = 'session'


def validate_fit_file(file_path: Union[str, Path]) -> Path:
    """Check that a path points at a plausible FIT file.

    Args:
        file_path: Path to check

    Returns:
        The path as a Path object

    Raises:
        FitFileValidationError: If the file is missing, not a .fit file or too small
    """
    path = Path(file_path)
    if not path.is_file():
        raise FitFileValidationError(f"File not found: {path}")
    if path.suffix.lower() not in SUPPORTED_FORMATS:
        raise FitFileValidationError(f"Unsupported file format: {path.suffix or '(none)'}")
    size = path.stat().st_size
    if size <= MIN_FIT_FILE_BYTES:
        raise FitFileValidationError(f"File too small to be a FIT file: {size} bytes")
    return path


def is_fit_file(file_path: Union[str, Path]) -> bool:
    """Check if a path points at a plausible FIT file."""
    try:
        validate_fit_file(file_path)
    except (FitFileValidationError, OSError):
        return False
    return True


def _clean(value: Any) -> Any:
    """Map NaN cells left by the record DataFrame to None."""
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def _decode_balance(raw: Any, right_flag: int, mask: int, scale: float) -> Optional[BalanceReading]:
    """Decode a raw left_right_balance field.

    Args:
        raw: Field value as returned by fitparse
        right_flag: Bit marking the value as right-leg referenced
        mask: Bits holding the percentage
        scale: Divisor applied to the masked value

    Returns:
        Balance reading, or None if the value is absent or invalid
    """
    raw = _clean(raw)
    if raw is None:
        return None
    if isinstance(raw, str):
        # fitparse substitutes enum names for the two named raw values
        if raw == 'right':
            return balance_from_flag(0, True)
        return None

    try:
        raw = int(raw)
    except (TypeError, ValueError):
        logger.debug(f"Ignoring unreadable balance value: {raw!r}")
        return None

    if (raw & mask) == mask:
        return None
    value = (raw & mask) / scale
    if value > 100:
        return None
    return balance_from_flag(value, bool(raw & right_flag))


def _to_int(value: Any) -> Optional[int]:
    value = _clean(value)
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _to_float(value: Any) -> Optional[float]:
    value = _clean(value)
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class FitDecoder:
    """Decoder for FIT files built on fitparse."""

    def __init__(self, config: Optional[DecoderConfig] = None):
        """Initialize FIT decoder.

        Args:
            config: Decoder options, defaults to DecoderConfig()
        """
        self.config = config or DecoderConfig()

    def decode_file(self, file_path: Union[str, Path]) -> DecodedActivity:
        """Read and decode a FIT file from disk.

        Args:
            file_path: Path to the FIT file

        Returns:
            DecodedActivity with samples and session summary
        """
        path = Path(file_path)
        logger.info(f"Decoding FIT file: {path}")
        return self.decode(path.read_bytes())

    def decode(self, data: bytes) -> DecodedActivity:
        """Decode FIT bytes.

        Args:
            data: Raw FIT file contents

        Returns:
            DecodedActivity with samples and session summary

        Raises:
            FitParseError: If fitparse cannot decode the data
        """
        try:
            fit_file = FitFile(io.BytesIO(data), check_crc=self.config.check_crc)
            session_fields = self._extract_session(fit_file)
            records = [self._message_to_dict(message)
                       for message in fit_file.get_messages(self.config.record_message)]
        except FitParseError as e:
            logger.error(f"Failed to decode FIT data: {e}")
            raise

        df = self._records_to_dataframe(records)
        samples = tuple(self._row_to_sample(row) for row in df.to_dict('records'))
        session = self._build_session(session_fields) if session_fields else None

        logger.info(f"Decoded {len(samples)} records, session summary {'found' if session else 'missing'}")
        return DecodedActivity(samples=samples, session=session, raw_data=df, session_fields=session_fields)

    @staticmethod
    def _message_to_dict(message) -> Dict[str, Any]:
        data = {}
        for field in message:
            if field.name and field.value is not None:
                data[field.name] = field.value
        return data

    def _extract_session(self, fit_file) -> Dict[str, Any]:
        """Extract fields of the first session message.

        Args:
            fit_file: fitparse FitFile

        Returns:
            Dictionary of session fields, empty if the file has no session
        """
        for message in fit_file.get_messages(self.config.session_message):
            return self._message_to_dict(message)
        return {}

    @staticmethod
    def _records_to_dataframe(records: List[Dict[str, Any]]) -> pd.DataFrame:
        """Convert record dictionaries to a DataFrame ordered by timestamp."""
        if not records:
            return pd.DataFrame()

        df = pd.DataFrame(records)
        if 'timestamp' in df.columns:
            df['timestamp'] = pd.to_datetime(df['timestamp'])
            df = df.sort_values('timestamp', kind='stable')
            df = df.reset_index(drop=True)
        return df

    @staticmethod
    def _row_to_sample(row: Dict[str, Any]) -> SampleRecord:
        timestamp = row.get('timestamp')
        if timestamp is None or pd.isna(timestamp):
            timestamp = None
        elif isinstance(timestamp, pd.Timestamp):
            timestamp = timestamp.to_pydatetime()

        return SampleRecord(
            timestamp=timestamp,
            power=_to_int(row.get('power')),
            balance=_decode_balance(row.get('left_right_balance'),
                                    RECORD_BALANCE_RIGHT_FLAG, RECORD_BALANCE_MASK, 1),
            left_torque_effectiveness=_to_float(row.get('left_torque_effectiveness')),
            right_torque_effectiveness=_to_float(row.get('right_torque_effectiveness')),
            left_pedal_smoothness=_to_float(row.get('left_pedal_smoothness')),
            right_pedal_smoothness=_to_float(row.get('right_pedal_smoothness')),
        )

    @staticmethod
    def _build_session(fields: Dict[str, Any]) -> SessionSummary:
        return SessionSummary(
            average_power=_to_float(fields.get('avg_power')),
            threshold_power=_to_float(fields.get('threshold_power')),
            balance=_decode_balance(fields.get('left_right_balance'),
                                    SESSION_BALANCE_RIGHT_FLAG, SESSION_BALANCE_MASK, 100),
        )


def inspect_fields(activity: DecodedActivity, sample_limit: int = 10) -> Dict[str, Any]:
    """Summarize the balance, torque, smoothness and zone fields of a decoded file.

    Args:
        activity: Decoded activity
        sample_limit: Number of raw balance values to include

    Returns:
        Dictionary with session fields, per-field record statistics and raw balance samples
    """
    df = activity.raw_data if activity.raw_data is not None else pd.DataFrame()

    session_fields = {
        name: value for name, value in activity.session_fields.items()
        if any(keyword in name.lower() for keyword in INSPECT_KEYWORDS)
    }

    record_fields = {}
    for column in df.columns:
        if not any(keyword in column.lower() for keyword in INSPECT_KEYWORDS):
            continue
        try:
            values = pd.to_numeric(df[column], errors='coerce')
        except (TypeError, ValueError):
            # Array fields such as power phase angles
            record_fields[column] = {'count': int(df[column].notna().sum())}
            continue
        values = values[values > 0]
        stats = {'count': int(values.count())}
        if not values.empty:
            stats.update({
                'min': float(values.min()),
                'max': float(values.max()),
                'mean': round(float(values.mean()), 1),
            })
        record_fields[column] = stats

    balance_samples = []
    if 'left_right_balance' in df.columns:
        balance_samples = [_clean(value) for value in df['left_right_balance'].dropna().head(sample_limit)]

    return {
        'record_count': len(activity.samples),
        'power_record_count': activity.power_sample_count,
        'session_fields': session_fields,
        'record_fields': record_fields,
        'balance_samples': balance_samples,
    }
