"""Configuration for Pedal Power Analyser."""
