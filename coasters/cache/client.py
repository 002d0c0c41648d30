"""
Pooled Valkey connection for the coaster store.

The store calls ensure_connection() before every command. A connection
that has not been checked for ping_interval seconds is pinged first, and a
failed ping drops the pool and reconnects with exponential backoff, so a
monitor outlives a restarted Valkey server.
"""

import asyncio
import logging
import time
from typing import Optional

import valkey
from valkey.connection import ConnectionPool
from valkey.exceptions import ConnectionError, TimeoutError

from .config import ValkeyConfig, ValkeyConnectionError

logger = logging.getLogger(__name__)


class ValkeyClient:
    """Valkey connection with lazy reconnection and bounded retries."""

    def __init__(self, config: Optional[ValkeyConfig] = None, max_connection_attempts: int = 5):
        """
        Args:
            config: Connection settings, read from the environment when omitted
            max_connection_attempts: Attempts before connect() gives up
        """
        self.config = config or ValkeyConfig.from_env()
        self.max_connection_attempts = max_connection_attempts
        self._client: Optional[valkey.Valkey] = None
        self._pool: Optional[ConnectionPool] = None
        self._last_ping = 0.0

        logger.info(f"Using {self.config}")

    async def connect(self) -> None:
        """
        Open the pool and ping the server, retrying with exponential backoff.

        Raises:
            ValkeyConnectionError: If every attempt failed
        """
        if self._client is not None:
            return

        for attempt in range(1, self.max_connection_attempts + 1):
            self._pool = ConnectionPool(**self.config.to_connection_pool_kwargs())
            self._client = valkey.Valkey(connection_pool=self._pool)
            try:
                await self._ping()
                logger.info(f"Connected to Valkey at {self.config.host}:{self.config.port}")
                return
            except ValkeyConnectionError as e:
                self._release()
                logger.warning(f"Valkey connection attempt {attempt} failed: {e}")
                if attempt == self.max_connection_attempts:
                    raise ValkeyConnectionError(
                        f"Failed to connect to Valkey after {attempt} attempts. Last error: {e}"
                    ) from e

            delay = min(self.config.retry_delay * 2 ** (attempt - 1), self.config.max_retry_delay)
            logger.info(f"Retrying connection in {delay:.1f} seconds...")
            await asyncio.sleep(delay)

    async def disconnect(self) -> None:
        """Close every pooled connection."""
        if self._pool is not None:
            self._release()
            logger.info("Disconnected from Valkey server")

    async def ensure_connection(self) -> None:
        """
        Make sure .client is usable, reconnecting when a stale connection fails its ping.

        Raises:
            ValkeyConnectionError: If no connection can be established
        """
        if self._client is not None and time.monotonic() - self._last_ping >= self.config.ping_interval:
            try:
                await self._ping()
            except ValkeyConnectionError as e:
                logger.warning(f"Valkey connection lost, reconnecting: {e}")
                self._release()
        await self.connect()

    async def _ping(self) -> None:
        try:
            result = await asyncio.to_thread(self._client.ping)
        except (ConnectionError, TimeoutError, OSError) as e:
            raise ValkeyConnectionError(f"Ping failed: {e}") from e
        if not result:
            raise ValkeyConnectionError("Ping returned False")
        self._last_ping = time.monotonic()

    def _release(self) -> None:
        pool, self._pool, self._client = self._pool, None, None
        if pool is not None:
            pool.disconnect()

    @property
    def client(self) -> valkey.Valkey:
        """
        The underlying valkey client.

        Raises:
            ValkeyConnectionError: If connect() has not succeeded
        """
        if self._client is None:
            raise ValkeyConnectionError("Client not connected. Call connect() first.")
        return self._client

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.disconnect()
