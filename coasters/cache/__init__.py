"""
Storage layer for the coaster monitor.

This module contains the Valkey client configuration, the namespaced key
layout and the change-detection store used by the monitor loop.
"""

from .config import ValkeyConfig, ValkeyConnectionError
from .client import ValkeyClient
from .keys import StoreKeys
from .store import ChangeDetectionStore, RECORD_ERRORS, STORE_ERRORS

__all__ = [
    # Configuration
    "ValkeyConfig",
    "ValkeyConnectionError",

    # Client
    "ValkeyClient",

    # Store
    "StoreKeys",
    "ChangeDetectionStore",
    "STORE_ERRORS",
    "RECORD_ERRORS",
]
