"""
Coaster monitor Pydantic models package.

Records kept in the registry and the diagnostic reports derived from them.
"""

from .coaster import CoasterConfig, WagonConfig
from .report import DiagnosticReport, Problem, ProblemKind

__all__ = [
    # Records
    "CoasterConfig",
    "WagonConfig",

    # Diagnostics
    "DiagnosticReport",
    "Problem",
    "ProblemKind",
]
