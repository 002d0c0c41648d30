"""
Diagnostic report models produced by the capacity model.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProblemKind(str, Enum):
    """Kinds of staffing and fleet problems a coaster can have."""
    NO_WAGONS = "no_wagons"
    STAFF_SHORTAGE = "staff_shortage"
    STAFF_SURPLUS = "staff_surplus"
    WAGON_SHORTAGE = "wagon_shortage"
    WAGON_SURPLUS = "wagon_surplus"


_PROBLEM_TEMPLATES = {
    ProblemKind.NO_WAGONS: "No wagons",
    ProblemKind.STAFF_SHORTAGE: "Short by {amount} staff",
    ProblemKind.STAFF_SURPLUS: "Surplus of {amount} staff",
    ProblemKind.WAGON_SHORTAGE: "Short by {amount} wagons",
    ProblemKind.WAGON_SURPLUS: "Surplus of {amount} wagons",
}


class Problem(BaseModel):
    """A single mismatch between what a coaster has and what it needs."""
    model_config = ConfigDict(frozen=True)

    kind: ProblemKind
    amount: int = Field(default=0, ge=0, description="Size of the shortage or surplus")

    @property
    def message(self) -> str:
        return _PROBLEM_TEMPLATES[self.kind].format(amount=self.amount)


class DiagnosticReport(BaseModel):
    """
    Capacity diagnosis of one coaster.

    Required wagon and staff counts are None when the fleet is empty,
    since there is no per-wagon throughput to plan from.
    """
    model_config = ConfigDict(frozen=True)

    opens_at: int = Field(..., description="Opening minute of the day")
    closes_at: int = Field(..., description="Closing minute of the day")
    daily_clients: int = Field(..., ge=0, description="Clients the fleet can serve per day")
    wagon_count: int = Field(..., ge=0, description="Wagons in the fleet")
    required_wagons: Optional[int] = Field(None, description="Wagons needed for the client target")
    staff_available: int = Field(..., ge=0, description="Staff on duty")
    required_staff: Optional[int] = Field(None, description="Staff needed for the required wagons")
    problems: List[Problem] = Field(default_factory=list)

    @property
    def status(self) -> bool:
        """True when the coaster has no problems."""
        return not self.problems

    @property
    def problem_messages(self) -> List[str]:
        return [problem.message for problem in self.problems]
