"""
Environment configuration loader with validation for the coaster monitor.
"""

import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class MonitorSettings(BaseModel):
    """Configuration model for the coaster monitor with validation."""

    # Store namespace
    namespace_prefix: str = Field(
        default="development_",
        description="Prefix prepended to every store key of this deployment",
    )

    # Monitor loop timing
    poll_interval: float = Field(
        default=0.1, gt=0, description="Change counter polling interval in seconds"
    )
    total_duration: float = Field(
        default=600.0, gt=0, description="Monitor lifetime in seconds"
    )

    # Capacity model constants
    staff_per_wagon: int = Field(
        default=2, ge=0, description="Staff needed to operate one wagon"
    )
    break_seconds: int = Field(
        default=300, ge=0, description="Fixed turnaround break after every ride"
    )

    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard levels."""
        if v.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"Log level must be one of: {VALID_LOG_LEVELS}")
        return v.upper()

    @field_validator("total_duration")
    @classmethod
    def validate_total_duration(cls, v: float, info) -> float:
        """Ensure the monitor lives for at least one polling interval."""
        poll_interval = info.data.get("poll_interval")
        if poll_interval is not None and v < poll_interval:
            raise ValueError("Total duration must not be shorter than the poll interval")
        return v


def _default_namespace() -> str:
    namespace = os.getenv("COASTER_NAMESPACE")
    if namespace is not None:
        return namespace
    return f"{os.getenv('CI_ENV', 'development')}_"


def load_config(env_file: Optional[str] = None) -> MonitorSettings:
    """
    Load configuration from environment variables and .env file.

    Args:
        env_file: Optional path to .env file. If None, looks for .env in current directory.

    Returns:
        MonitorSettings: Validated configuration object

    Raises:
        ValueError: If configuration is invalid
    """
    if env_file is None:
        env_file = ".env"

    if os.path.exists(env_file):
        load_dotenv(env_file)

    config_data: Dict[str, Any] = {
        "namespace_prefix": _default_namespace(),
        "poll_interval": float(os.getenv("MONITOR_POLL_INTERVAL", "0.1")),
        "total_duration": float(os.getenv("MONITOR_TOTAL_DURATION", "600")),
        "staff_per_wagon": int(os.getenv("COASTER_STAFF_PER_WAGON", "2")),
        "break_seconds": int(os.getenv("COASTER_BREAK_SECONDS", "300")),
        "log_level": os.getenv("MONITOR_LOG_LEVEL", "INFO"),
    }

    try:
        return MonitorSettings(**config_data)
    except Exception as e:
        raise ValueError(f"Configuration validation failed: {e}") from e


# Global configuration instance
_config: Optional[MonitorSettings] = None


def get_config() -> MonitorSettings:
    """
    Get the global configuration instance, loading it if necessary.

    Returns:
        MonitorSettings: The global configuration object
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config
