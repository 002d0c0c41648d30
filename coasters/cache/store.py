"""
Change-detection store over the shared Valkey instance.

Coasters and fleets live in hashes keyed by record id, with JSON record
bodies. A single counter per namespace is bumped after every mutation and
acts as a cheap version stamp: readers poll it instead of subscribing to
change events, and always re-read full state when it moves.

Nothing ties a hash read to a counter read; a reader may see a bump a
little before or after the data it stands for. One stale poll is corrected
by the next one.
"""

import asyncio
import json
import logging
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel
from valkey.exceptions import ConnectionError, ResponseError, TimeoutError

from ..models.coaster import CoasterConfig, WagonConfig
from .client import ValkeyClient
from .config import ValkeyConnectionError
from .keys import StoreKeys

logger = logging.getLogger(__name__)

# Failures a reader should treat as "store unavailable right now".
STORE_ERRORS = (ValkeyConnectionError, ConnectionError, TimeoutError, ResponseError)

# Records another writer left undecodable: bad JSON, a body failing model
# validation or a non-numeric id. All of them surface as ValueError.
RECORD_ERRORS = (ValueError,)

RecordT = TypeVar("RecordT", bound=BaseModel)

CoasterSnapshot = List[Tuple[int, CoasterConfig, Dict[int, WagonConfig]]]


class ChangeDetectionStore:
    """
    Namespaced access to the coaster registry, the fleets and the change counter.

    Features:
    - Hash collections returned as id-ordered dicts, empty when absent
    - Atomic counter increment and snapshot read
    - Atomic id sequences that never hand out an id twice
    """

    def __init__(self, valkey_client: ValkeyClient, namespace_prefix: str = ""):
        """
        Initialize the store.

        Args:
            valkey_client: ValkeyClient instance for store operations
            namespace_prefix: Prefix of every key owned by this deployment
        """
        self.valkey = valkey_client
        self.keys = StoreKeys(namespace_prefix)

    async def _call(self, command: str, *args: Any, **kwargs: Any) -> Any:
        await self.valkey.ensure_connection()
        method = getattr(self.valkey.client, command)
        return await asyncio.to_thread(method, *args, **kwargs)

    # Read side

    async def get_all(self, collection_key: str) -> Dict[int, Dict[str, Any]]:
        """
        Read a whole hash collection.

        Args:
            collection_key: Registry or fleet key

        Returns:
            Dict[int, Dict[str, Any]]: Decoded records ordered by id, empty if absent
        """
        raw = await self._call("hgetall", collection_key) or {}
        records = {int(record_id): json.loads(body) for record_id, body in raw.items()}
        return dict(sorted(records.items()))

    async def get(self, counter_key: Optional[str] = None) -> int:
        """Read the change counter, 0 when it was never incremented."""
        value = await self._call("get", counter_key or self.keys.change_counter)
        return int(value) if value is not None else 0

    async def increment(self, counter_key: Optional[str] = None) -> int:
        """Atomically add 1 to the change counter and return the new value."""
        value = int(await self._call("incr", counter_key or self.keys.change_counter))
        logger.debug(f"Change counter is now {value}")
        return value

    async def get_coasters(self) -> Dict[int, CoasterConfig]:
        return self._decode(await self.get_all(self.keys.registry), CoasterConfig)

    async def get_coaster(self, coaster_id: int) -> Optional[CoasterConfig]:
        body = await self._call("hget", self.keys.registry, str(coaster_id))
        if body is None:
            return None
        return CoasterConfig.model_validate(json.loads(body))

    async def get_fleet(self, coaster_id: int) -> Dict[int, WagonConfig]:
        return self._decode(await self.get_all(self.keys.fleet(coaster_id)), WagonConfig)

    async def snapshot(self) -> CoasterSnapshot:
        """
        Pull the registry, then each coaster's fleet.

        Returns:
            CoasterSnapshot: (id, coaster, fleet) triples in registry order
        """
        coasters = await self.get_coasters()
        result = []
        for coaster_id, coaster in coasters.items():
            fleet = await self.get_fleet(coaster_id)
            result.append((coaster_id, coaster, fleet))
        return result

    @staticmethod
    def _decode(records: Dict[int, Dict[str, Any]], model: Type[RecordT]) -> Dict[int, RecordT]:
        return {record_id: model.model_validate(body) for record_id, body in records.items()}

    # Write side

    async def next_id(self, sequence_key: str) -> int:
        """Hand out the next id of a collection; deleted ids are never reissued."""
        return int(await self._call("incr", sequence_key))

    async def put(self, collection_key: str, record_id: int, record: BaseModel) -> None:
        """Store a whole record, replacing any previous version."""
        await self._call("hset", collection_key, str(record_id), record.model_dump_json())

    async def remove(self, collection_key: str, record_id: int) -> bool:
        """Delete one record; returns False when it did not exist."""
        return bool(await self._call("hdel", collection_key, str(record_id)))

    async def drop(self, collection_key: str) -> None:
        """Delete a whole collection."""
        await self._call("delete", collection_key)
