"""Recover contribution-heatmap calendars from screenshots."""

__version__ = "0.1.0"
