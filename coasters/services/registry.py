"""
Write side of the coaster registry.

Validates raw coaster and wagon input at the boundary, stores whole records
and bumps the change counter exactly once per mutation so running monitors
pick the change up. Every mutation is followed by a capacity check of the
touched coaster, and problems are written to the error log.
"""

import logging
import math
from typing import Dict, Optional

from ..cache.store import ChangeDetectionStore
from ..errors import CoasterNotFoundError, RangeError, WagonNotFoundError
from ..models.coaster import CoasterConfig, WagonConfig
from ..utils.clock import format_clock, parse_clock
from .capacity import CapacityModel

logger = logging.getLogger(__name__)


def validate_coaster(
    staff_available: int,
    client_target: int,
    route_length: int,
    opens_at: str,
    closes_at: str,
) -> CoasterConfig:
    """
    Build a coaster record from raw input.

    Args:
        staff_available: Staff on duty
        client_target: Clients expected per day
        route_length: Route length in meters
        opens_at: Opening clock string ("H", "HH", "H:MM" or "HH:MM")
        closes_at: Closing clock string

    Returns:
        CoasterConfig: Validated record

    Raises:
        FormatError: If a clock string is malformed
        RangeError: If a value is out of range or the window is empty
    """
    opens = parse_clock(opens_at)
    closes = parse_clock(closes_at)

    if closes <= opens:
        raise RangeError(f"Closing time {closes_at} must be later than opening time {opens_at}")
    if route_length <= 0:
        raise RangeError(f"Route length must be positive, got {route_length}")
    if staff_available < 0:
        raise RangeError(f"Staff count cannot be negative, got {staff_available}")
    if client_target < 0:
        raise RangeError(f"Client target cannot be negative, got {client_target}")

    return CoasterConfig(
        staff_available=staff_available,
        client_target=client_target,
        route_length=route_length,
        opens_at=opens,
        closes_at=closes,
    )


def validate_wagon(coaster: CoasterConfig, capacity: int, speed: float) -> WagonConfig:
    """
    Build a wagon record for a coaster from raw input.

    Raises:
        RangeError: If capacity is not positive, speed is not a positive finite
            number, or the wagon cannot ride the whole route within the
            coaster's operating window
    """
    if capacity <= 0:
        raise RangeError(f"Wagon capacity must be positive, got {capacity}")
    if not math.isfinite(speed) or speed <= 0:
        raise RangeError(f"Wagon speed must be a positive number, got {speed}")
    if math.ceil(coaster.route_length / speed) > coaster.operating_seconds:
        raise RangeError("Wagon cannot ride the whole route within operating hours")

    return WagonConfig(capacity=capacity, speed=speed)


class CoasterRegistry:
    """
    Mutations of coasters and fleets in a ChangeDetectionStore.

    Ids come from per-collection sequences in the store, so an id is never
    reused after its record is deleted.
    """

    def __init__(self, store: ChangeDetectionStore, capacity_model: Optional[CapacityModel] = None):
        self.store = store
        self.keys = store.keys
        self.capacity_model = capacity_model or CapacityModel()

    async def get_coasters(self) -> Dict[int, CoasterConfig]:
        return await self.store.get_coasters()

    async def get_coaster(self, coaster_id: int) -> CoasterConfig:
        coaster = await self.store.get_coaster(coaster_id)
        if coaster is None:
            raise CoasterNotFoundError(coaster_id)
        return coaster

    async def get_wagons(self, coaster_id: int) -> Dict[int, WagonConfig]:
        await self.get_coaster(coaster_id)
        return await self.store.get_fleet(coaster_id)

    async def add_coaster(
        self,
        staff_available: int,
        client_target: int,
        route_length: int,
        opens_at: str,
        closes_at: str,
    ) -> int:
        """
        Register a new coaster with an empty fleet.

        Returns:
            int: The new coaster id
        """
        coaster = validate_coaster(staff_available, client_target, route_length, opens_at, closes_at)
        coaster_id = await self.store.next_id(self.keys.coaster_sequence)
        await self.store.put(self.keys.registry, coaster_id, coaster)
        logger.info(f"Created coaster {coaster_id}")

        await self._committed(coaster_id, coaster)
        return coaster_id

    async def update_coaster(
        self,
        coaster_id: int,
        staff_available: Optional[int] = None,
        client_target: Optional[int] = None,
        opens_at: Optional[str] = None,
        closes_at: Optional[str] = None,
    ) -> CoasterConfig:
        """
        Replace a coaster's staff, client target or opening hours.

        The route length is fixed at creation and always carried over.

        Raises:
            CoasterNotFoundError: If the coaster does not exist
            RangeError: If no field is given or the new values are invalid
        """
        if staff_available is None and client_target is None and opens_at is None and closes_at is None:
            raise RangeError("Nothing to update")

        current = await self.get_coaster(coaster_id)
        coaster = validate_coaster(
            staff_available=current.staff_available if staff_available is None else staff_available,
            client_target=current.client_target if client_target is None else client_target,
            route_length=current.route_length,
            opens_at=format_clock(current.opens_at) if opens_at is None else opens_at,
            closes_at=format_clock(current.closes_at) if closes_at is None else closes_at,
        )
        await self.store.put(self.keys.registry, coaster_id, coaster)
        logger.info(f"Updated coaster {coaster_id}")

        await self._committed(coaster_id, coaster)
        return coaster

    async def delete_coaster(self, coaster_id: int) -> None:
        """Remove a coaster together with its fleet."""
        await self.get_coaster(coaster_id)
        await self.store.drop(self.keys.fleet(coaster_id))
        await self.store.remove(self.keys.registry, coaster_id)
        logger.info(f"Deleted coaster {coaster_id}")

        await self.store.increment()

    async def add_wagon(self, coaster_id: int, capacity: int, speed: float) -> int:
        """
        Add a wagon to a coaster's fleet.

        Returns:
            int: The new wagon id, unique within the coaster
        """
        coaster = await self.get_coaster(coaster_id)
        wagon = validate_wagon(coaster, capacity, speed)
        wagon_id = await self.store.next_id(self.keys.wagon_sequence(coaster_id))
        await self.store.put(self.keys.fleet(coaster_id), wagon_id, wagon)
        logger.info(f"Added wagon {wagon_id} to coaster {coaster_id}")

        await self._committed(coaster_id, coaster)
        return wagon_id

    async def delete_wagon(self, coaster_id: int, wagon_id: int) -> None:
        """
        Remove a wagon from a coaster's fleet.

        Raises:
            CoasterNotFoundError: If the coaster does not exist
            WagonNotFoundError: If the wagon is not in the fleet
        """
        coaster = await self.get_coaster(coaster_id)
        if not await self.store.remove(self.keys.fleet(coaster_id), wagon_id):
            raise WagonNotFoundError(wagon_id)
        logger.info(f"Deleted wagon {wagon_id} from coaster {coaster_id}")

        await self._committed(coaster_id, coaster)

    async def _committed(self, coaster_id: int, coaster: CoasterConfig) -> None:
        await self.store.increment()

        fleet = await self.store.get_fleet(coaster_id)
        report = self.capacity_model.diagnose(coaster, fleet)
        if not report.status:
            logger.error(f"Coaster {coaster_id} - Problem: {', '.join(report.problem_messages)}")
