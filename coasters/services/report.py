"""
Plain-text rendering of diagnostic reports.

A render pass is a timestamped header followed by one block per coaster
in registry order, each block ending with a blank line.
"""

from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from ..models.report import DiagnosticReport
from ..utils.clock import format_clock

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
TERMINATION_LINE = "System was turned off"


def render_report(coaster_id: int, report: DiagnosticReport) -> List[str]:
    """
    Format one coaster's report.

    Args:
        coaster_id: Registry id of the coaster
        report: Capacity model output

    Returns:
        List[str]: Block lines, the last one blank
    """
    if report.wagon_count == 0:
        wagons = f"Wagons: {report.wagon_count}"
        staff = f"Staff available: {report.staff_available}"
    else:
        wagons = f"Wagons: {report.wagon_count}/{report.required_wagons}"
        staff = f"Staff available: {report.staff_available}/{report.required_staff}"

    if report.status:
        status = "Status: OK"
    else:
        status = "Problem: " + ", ".join(report.problem_messages)

    return [
        f"[Coaster A{coaster_id}]",
        f"Operating hours: {format_clock(report.opens_at)} - {format_clock(report.closes_at)}",
        wagons,
        staff,
        f"Daily clients: {report.daily_clients}",
        status,
        "",
    ]


def render_pass(
    reports: Iterable[Tuple[int, DiagnosticReport]],
    now: Optional[datetime] = None,
) -> List[str]:
    """Format a full pass: header, blank line, then every coaster block."""
    now = now or datetime.now()
    lines = [f"[{now.strftime(TIMESTAMP_FORMAT)}]", ""]
    for coaster_id, report in reports:
        lines.extend(render_report(coaster_id, report))
    return lines
