"""Configuration contract for zonecore.

Pydantic-validated settings for the ambient parts of the library (logging,
default zone set). The permission rules themselves (bit layout, 32-bit
ceiling, zone-name limits) are fixed constants and not configurable.

Direct os.environ/os.getenv usage is limited to load_config_from_env().
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .permissions.constants import DEFAULT_ACCESS_ZONES


class LogLevel(str, Enum):
    """Standard log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ZoneCoreConfig(BaseModel):
    """Settings for a host application embedding zonecore."""

    # Logging
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level",
    )
    log_json: bool = Field(
        default=False,
        description="Use JSON log format (default: plain text)",
    )
    redact_secrets: bool = Field(
        default=True,
        description="Redact secret-looking values from log output",
    )

    # Service identification
    service_name: Optional[str] = Field(
        default=None,
        description="Name of the host service, used as a logger name",
    )

    # Zones
    default_zones: tuple[str, ...] = Field(
        default=DEFAULT_ACCESS_ZONES,
        description="Zones the host application seeds for new roles",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Convert string to LogLevel enum."""
        if isinstance(v, LogLevel):
            return v
        if isinstance(v, str):
            try:
                return LogLevel[v.upper()]
            except KeyError:
                raise ValueError(f"Invalid log level: {v}. Must be one of {[e.value for e in LogLevel]}")
        raise ValueError(f"Log level must be string or LogLevel enum, got {type(v)}")

    @field_validator("default_zones")
    @classmethod
    def validate_default_zones(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Every default zone must be a valid zone name."""
        from .permissions.validation import is_valid_zone_name

        invalid = [zone for zone in v if not is_valid_zone_name(zone)]
        if invalid:
            raise ValueError(f"Invalid zone names in default_zones: {invalid}")
        if len(set(v)) != len(v):
            raise ValueError("default_zones must not contain duplicates")
        return v

    model_config = {
        "use_enum_values": True,
        "extra": "forbid",  # Prevent accidental extra fields
    }


def load_config_from_env() -> ZoneCoreConfig:
    """Load configuration from environment variables.

    Environment variables:
    - LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - LOG_JSON: Use JSON log format (true/false, default: false)
    - LOG_REDACT: Redact secrets in logs (true/false, default: true)
    - SERVICE_NAME: Host service name
    - ZONECORE_DEFAULT_ZONES: Comma-separated default zone list

    Returns:
        ZoneCoreConfig instance with values from environment or defaults.
    """
    import os

    kwargs: dict[str, object] = {
        "log_level": os.getenv("LOG_LEVEL", "INFO"),
        "log_json": os.getenv("LOG_JSON", "false").lower() in ("true", "1", "yes"),
        "redact_secrets": os.getenv("LOG_REDACT", "true").lower() in ("true", "1", "yes"),
        "service_name": os.getenv("SERVICE_NAME"),
    }

    zones_raw = os.getenv("ZONECORE_DEFAULT_ZONES", "")
    zones = tuple(z.strip() for z in zones_raw.split(",") if z.strip())
    if zones:
        kwargs["default_zones"] = zones

    return ZoneCoreConfig(**kwargs)


__all__ = [
    "LogLevel",
    "ZoneCoreConfig",
    "load_config_from_env",
]
