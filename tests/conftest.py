import sys
from datetime import datetime, timedelta
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Make the project modules importable when running from the tests directory
sys.path.insert(0, str(Path(__file__).parent.parent))

from models.telemetry import LeftReferenced, RightReferenced, SampleRecord, SessionSummary


def make_sample(power=None, balance=None, torque=None, smoothness=None, offset=0):
    """Build a SampleRecord from (left, right) tuples for torque and smoothness."""
    torque = torque or (None, None)
    smoothness = smoothness or (None, None)
    return SampleRecord(
        timestamp=datetime(2025, 10, 18, 8, 0, 0) + timedelta(seconds=offset),
        power=power,
        balance=balance,
        left_torque_effectiveness=torque[0],
        right_torque_effectiveness=torque[1],
        left_pedal_smoothness=smoothness[0],
        right_pedal_smoothness=smoothness[1],
    )


def make_field(name, value):
    field = MagicMock()
    field.name = name
    field.value = value
    return field


def make_message(values):
    """Mimic a fitparse DataMessage, which iterates over its fields."""
    message = MagicMock()
    fields = [make_field(name, value) for name, value in values.items()]
    message.__iter__.side_effect = lambda: iter(fields)
    return message


@pytest.fixture
def ride_samples():
    """A short ride at a 200W threshold touching Z1, Z2, Z4 and Z6."""
    return [
        make_sample(100, LeftReferenced(52), (70, 72), (20, 22), offset=0),   # Z1
        make_sample(104, RightReferenced(47), (74, 76), (24, 26), offset=1),  # Z1
        make_sample(120, LeftReferenced(50), (80, 0), (30, 31), offset=2),    # Z2, one-sided torque
        make_sample(130, RightReferenced(49), None, None, offset=3),          # Z2
        make_sample(190, LeftReferenced(48), (60, 64), None, offset=4),       # Z4
        make_sample(250, RightReferenced(45), (50, 52), (15, 17), offset=5),  # Z6
        make_sample(0, LeftReferenced(70), (90, 90), (40, 40), offset=6),     # coasting
        make_sample(180, None, (66, 68), (18, 20), offset=7),                 # no balance
    ]


@pytest.fixture
def threshold_session():
    return SessionSummary(average_power=None, threshold_power=200)


@pytest.fixture
def fake_fit_file(tmp_path):
    """A file that passes path validation but is not decodable."""
    path = tmp_path / "ride.fit"
    path.write_bytes(b"\x0e\x10" + b"\x00" * 200)
    return path
