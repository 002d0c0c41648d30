"""
Shared fixtures: an in-memory stand-in for the Valkey client.
"""

import threading

import pytest
from valkey.exceptions import ConnectionError

from coasters.cache.store import ChangeDetectionStore
from coasters.models import CoasterConfig, WagonConfig


class MockValkeyCommands:
    """The subset of valkey commands used by the store, kept in plain dicts."""

    def __init__(self):
        self.strings = {}
        self.hash_data = {}
        self.fail = False
        self.calls = []
        self._lock = threading.Lock()

    def _record(self, name, *args):
        if self.fail:
            raise ConnectionError("Connection refused")
        self.calls.append((name,) + args)

    def ping(self):
        self._record("ping")
        return True

    def get(self, key):
        self._record("get", key)
        return self.strings.get(key)

    def incr(self, key):
        self._record("incr", key)
        with self._lock:
            value = int(self.strings.get(key, 0)) + 1
            self.strings[key] = str(value)
        return value

    def hgetall(self, key):
        self._record("hgetall", key)
        return dict(self.hash_data.get(key, {}))

    def hget(self, key, field):
        self._record("hget", key, field)
        return self.hash_data.get(key, {}).get(field)

    def hset(self, key, field, value):
        self._record("hset", key, field)
        self.hash_data.setdefault(key, {})[field] = value
        return 1

    def hdel(self, key, field):
        self._record("hdel", key, field)
        collection = self.hash_data.get(key, {})
        if field not in collection:
            return 0
        del collection[field]
        if not collection:
            del self.hash_data[key]
        return 1

    def delete(self, key):
        self._record("delete", key)
        removed = int(key in self.hash_data) + int(key in self.strings)
        self.hash_data.pop(key, None)
        self.strings.pop(key, None)
        return removed


class MockValkeyClient:
    """Mock ValkeyClient exposing ensure_connection() and .client."""

    def __init__(self):
        self.commands = MockValkeyCommands()

    async def ensure_connection(self):
        """Mock connection check."""
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        pass

    @property
    def client(self):
        return self.commands


@pytest.fixture
def mock_valkey_client():
    return MockValkeyClient()


@pytest.fixture
def store(mock_valkey_client):
    return ChangeDetectionStore(mock_valkey_client, namespace_prefix="test_")


@pytest.fixture
def coaster():
    """9:00-17:00, 1000 m route."""
    return CoasterConfig(
        staff_available=3,
        client_target=1000,
        route_length=1000,
        opens_at=540,
        closes_at=1020,
    )


@pytest.fixture
def wagon():
    """20 seats at 10 m/s: 400 s per ride including the break."""
    return WagonConfig(capacity=20, speed=10.0)
