"""Analyzers for FIT power data."""

from .balance import normalize_balance
from .power_analyzer import PowerAnalyzer, analyze

__all__ = ['normalize_balance', 'PowerAnalyzer', 'analyze']
