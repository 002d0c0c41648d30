"""
Capacity model for a single coaster.

Turns a coaster's configuration and its wagon fleet into the number of
clients the fleet can serve in a day, the wagons and staff needed to meet
the client target, and the resulting list of problems.

Planning rules:
- A ride takes ceil(route_length / speed) seconds plus a fixed break
- A wagon rides as many whole times as fit in the operating window
- One staff member is needed per coaster plus a fixed crew per wagon
- The fleet should serve at least the client target and at most twice it
"""

import math
from typing import Mapping, Optional

from ..models.coaster import CoasterConfig, WagonConfig
from ..models.report import DiagnosticReport, Problem, ProblemKind
from ..utils.config import MonitorSettings

FIXED_BREAK_SECONDS = 300
STAFF_PER_WAGON = 2
BASE_STAFF = 1
SURPLUS_FACTOR = 2


def ride_seconds(route_length: int, speed: float, break_seconds: int = FIXED_BREAK_SECONDS) -> int:
    """Seconds one wagon needs to ride the route and take its break."""
    return math.ceil(route_length / speed) + break_seconds


class CapacityModel:
    """
    Pure capacity planner.

    Identical inputs always produce an identical report; the model never
    touches the store.
    """

    def __init__(self, staff_per_wagon: int = STAFF_PER_WAGON, break_seconds: int = FIXED_BREAK_SECONDS):
        self.staff_per_wagon = staff_per_wagon
        self.break_seconds = break_seconds

    @classmethod
    def from_settings(cls, settings: MonitorSettings) -> "CapacityModel":
        return cls(staff_per_wagon=settings.staff_per_wagon, break_seconds=settings.break_seconds)

    def daily_clients(self, coaster: CoasterConfig, fleet: Mapping[int, WagonConfig]) -> int:
        """Clients the whole fleet can carry within one operating window."""
        operating_seconds = coaster.operating_seconds
        clients = 0
        for wagon in fleet.values():
            rides_per_day = operating_seconds // ride_seconds(
                coaster.route_length, wagon.speed, self.break_seconds
            )
            clients += wagon.capacity * rides_per_day
        return clients

    @staticmethod
    def wagon_delta(client_gap: int, clients_per_wagon: int) -> int:
        """
        Wagons needed to close a client gap.

        A fleet whose average wagon serves nobody gives no basis for the
        division, so the delta is a flat single wagon.
        """
        if clients_per_wagon == 0:
            return 1
        return -(-client_gap // clients_per_wagon)

    def diagnose(self, coaster: CoasterConfig, fleet: Mapping[int, WagonConfig]) -> DiagnosticReport:
        """
        Diagnose one coaster.

        Args:
            coaster: Coaster configuration
            fleet: The coaster's wagons keyed by wagon id, possibly empty

        Returns:
            DiagnosticReport: Throughput, required fleet and staff, problems
        """
        wagon_count = len(fleet)
        daily_clients = self.daily_clients(coaster, fleet)
        problems = []
        required_wagons: Optional[int] = None
        required_staff: Optional[int] = None

        if wagon_count == 0:
            problems.append(Problem(kind=ProblemKind.NO_WAGONS))
        else:
            required_wagons = wagon_count
            required_staff = BASE_STAFF + self.staff_per_wagon * wagon_count
            clients_per_wagon = daily_clients // wagon_count

            if daily_clients < coaster.client_target:
                extra = self.wagon_delta(coaster.client_target - daily_clients, clients_per_wagon)
                required_wagons += extra
                required_staff += self.staff_per_wagon * extra

            ceiling = coaster.client_target * SURPLUS_FACTOR
            if daily_clients > ceiling:
                excess = self.wagon_delta(daily_clients - ceiling, clients_per_wagon)
                required_wagons -= excess
                required_staff -= self.staff_per_wagon * excess

            if required_staff > coaster.staff_available:
                problems.append(Problem(
                    kind=ProblemKind.STAFF_SHORTAGE,
                    amount=required_staff - coaster.staff_available,
                ))
            elif required_staff < coaster.staff_available:
                problems.append(Problem(
                    kind=ProblemKind.STAFF_SURPLUS,
                    amount=coaster.staff_available - required_staff,
                ))

            if required_wagons > wagon_count:
                problems.append(Problem(
                    kind=ProblemKind.WAGON_SHORTAGE,
                    amount=required_wagons - wagon_count,
                ))
            elif required_wagons < wagon_count:
                problems.append(Problem(
                    kind=ProblemKind.WAGON_SURPLUS,
                    amount=wagon_count - required_wagons,
                ))

        return DiagnosticReport(
            opens_at=coaster.opens_at,
            closes_at=coaster.closes_at,
            daily_clients=daily_clients,
            wagon_count=wagon_count,
            required_wagons=required_wagons,
            staff_available=coaster.staff_available,
            required_staff=required_staff,
            problems=problems,
        )


def diagnose(coaster: CoasterConfig, fleet: Mapping[int, WagonConfig]) -> DiagnosticReport:
    """Diagnose a coaster with the default planning constants."""
    return CapacityModel().diagnose(coaster, fleet)
