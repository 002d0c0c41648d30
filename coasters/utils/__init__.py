"""Configuration and clock helpers."""

from .clock import MINUTES_PER_DAY, format_clock, parse_clock
from .config import MonitorSettings, get_config

__all__ = [
    "MINUTES_PER_DAY",
    "format_clock",
    "parse_clock",
    "MonitorSettings",
    "get_config",
]
