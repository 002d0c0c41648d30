"""
Connection settings for the shared Valkey instance holding the registry.

Values come from VALKEY_* environment variables; a .env file in the working
directory is loaded on import.
"""

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from dotenv import load_dotenv

load_dotenv()


@dataclass
class ValkeyConfig:
    """Where the store lives and how hard to try reaching it."""

    host: str = "localhost"
    port: int = 6379
    password: Optional[str] = None
    database: int = 0
    max_connections: int = 10
    socket_timeout: float = 5.0
    socket_connect_timeout: float = 5.0
    retry_on_timeout: bool = True
    # Seconds an idle connection is trusted before the next command pings it
    ping_interval: float = 30.0
    retry_delay: float = 1.0
    max_retry_delay: float = 30.0

    @classmethod
    def from_env(cls) -> "ValkeyConfig":
        return cls(
            host=os.getenv("VALKEY_HOST", "localhost"),
            port=int(os.getenv("VALKEY_PORT", "6379")),
            password=os.getenv("VALKEY_PASSWORD") or None,
            database=int(os.getenv("VALKEY_DATABASE", "0")),
            max_connections=int(os.getenv("VALKEY_MAX_CONNECTIONS", "10")),
            socket_timeout=float(os.getenv("VALKEY_SOCKET_TIMEOUT", "5.0")),
            socket_connect_timeout=float(os.getenv("VALKEY_SOCKET_CONNECT_TIMEOUT", "5.0")),
            retry_on_timeout=os.getenv("VALKEY_RETRY_ON_TIMEOUT", "true").lower() == "true",
            ping_interval=float(os.getenv("VALKEY_PING_INTERVAL", "30")),
        )

    def to_connection_pool_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for valkey.ConnectionPool; responses are decoded to str."""
        kwargs = {
            "host": self.host,
            "port": self.port,
            "db": self.database,
            "socket_timeout": self.socket_timeout,
            "socket_connect_timeout": self.socket_connect_timeout,
            "retry_on_timeout": self.retry_on_timeout,
            "decode_responses": True,
            "max_connections": self.max_connections,
        }
        if self.password:
            kwargs["password"] = self.password
        return kwargs

    def __str__(self) -> str:
        password = "***" if self.password else "None"
        return f"ValkeyConfig(host={self.host}, port={self.port}, db={self.database}, password={password})"


class ValkeyConnectionError(Exception):
    """Raised when the store cannot be reached."""
