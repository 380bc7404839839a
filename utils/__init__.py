"""Utility helpers for Pedal Power Analyser."""
