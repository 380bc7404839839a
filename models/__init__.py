"""Data models for Pedal Power Analyser."""

from .telemetry import (
    BalanceReading,
    DecodedActivity,
    LeftReferenced,
    RightReferenced,
    SampleRecord,
    SessionSummary,
    balance_from_flag,
)
from .results import ActivityAggregate, NormalizedBalance, PowerAnalysisResult, PowerZoneAggregate, SidePair
from .zones import POWER_ZONES, ZoneCalculator, ZoneDefinition

__all__ = [
    'BalanceReading',
    'DecodedActivity',
    'LeftReferenced',
    'RightReferenced',
    'SampleRecord',
    'SessionSummary',
    'balance_from_flag',
    'ActivityAggregate',
    'NormalizedBalance',
    'PowerAnalysisResult',
    'PowerZoneAggregate',
    'SidePair',
    'POWER_ZONES',
    'ZoneCalculator',
    'ZoneDefinition',
]
