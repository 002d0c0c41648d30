"""
Coaster and wagon record models.

These are the already-validated records kept in the registry; the write-side
boundary turns raw input into them and the store decodes them back.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class CoasterConfig(BaseModel):
    """
    Configuration of one coaster.

    Opening hours are minutes of the day. Records are replaced as a whole,
    never edited in place.
    """
    model_config = ConfigDict(frozen=True)

    staff_available: int = Field(..., ge=0, description="Staff on duty for this coaster")
    client_target: int = Field(..., ge=0, description="Clients expected per day")
    route_length: int = Field(..., gt=0, description="Route length in meters")
    opens_at: int = Field(..., ge=0, le=1439, description="Opening minute of the day")
    closes_at: int = Field(..., ge=0, le=1439, description="Closing minute of the day")

    @model_validator(mode="after")
    def check_operating_window(self) -> "CoasterConfig":
        """Closing time must come after opening time."""
        if self.closes_at <= self.opens_at:
            raise ValueError("closes_at must be later than opens_at")
        return self

    @property
    def operating_seconds(self) -> int:
        """Length of the operating window in seconds."""
        return (self.closes_at - self.opens_at) * 60


class WagonConfig(BaseModel):
    """One wagon of a coaster's fleet."""
    model_config = ConfigDict(frozen=True)

    capacity: int = Field(..., gt=0, description="Seats per ride")
    speed: float = Field(..., gt=0, allow_inf_nan=False, description="Speed in meters per second")
