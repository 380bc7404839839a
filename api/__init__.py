"""HTTP interface for Pedal Power Analyser."""
