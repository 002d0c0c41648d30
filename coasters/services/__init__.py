"""
Services package for the coaster monitor.

Contains the capacity model, the report renderer, the live monitor loop
and the write-side registry.
"""

from .capacity import CapacityModel, diagnose, ride_seconds
from .monitor import CoasterMonitor, MonitorState
from .registry import CoasterRegistry, validate_coaster, validate_wagon
from .report import TERMINATION_LINE, render_pass, render_report

__all__ = [
    "CapacityModel",
    "diagnose",
    "ride_seconds",
    "CoasterMonitor",
    "MonitorState",
    "CoasterRegistry",
    "validate_coaster",
    "validate_wagon",
    "TERMINATION_LINE",
    "render_pass",
    "render_report",
]
