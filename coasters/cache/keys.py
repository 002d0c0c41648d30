"""
Store key layout for one deployment namespace.

Every key is the namespace prefix followed by a fixed suffix, so several
environments can share a single Valkey database.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class StoreKeys:
    """
    Builder for the namespaced keys of the coaster registry.

    Example:
        StoreKeys("production_").fleet(3)
        # Returns: "production_wagons_3"
    """

    prefix: str = ""

    @property
    def registry(self) -> str:
        """Hash of coaster id -> coaster record."""
        return f"{self.prefix}coaster"

    @property
    def change_counter(self) -> str:
        """Version stamp bumped once per mutation."""
        return f"{self.prefix}courses_stere"

    @property
    def coaster_sequence(self) -> str:
        """Last coaster id handed out."""
        return f"{self.prefix}coaster_seq"

    def fleet(self, coaster_id: int) -> str:
        """Hash of wagon id -> wagon record for one coaster."""
        return f"{self.prefix}wagons_{coaster_id}"

    def wagon_sequence(self, coaster_id: int) -> str:
        """Last wagon id handed out for one coaster."""
        return f"{self.prefix}wagons_{coaster_id}_seq"
