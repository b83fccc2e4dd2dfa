"""Centralized logging utilities for zonecore.

This module provides:
- Logging configuration from ZoneCoreConfig
- Safe preview utilities for untrusted values (user ids, zone names, bitfields)
- Secret redaction
- Structured logging with principal / zone context

Library modules only call ``logging.getLogger(__name__)``; handlers are
installed by the host through ``setup_logging()``.
"""

from __future__ import annotations

import json
import logging
import re
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from .config import ZoneCoreConfig


# Patterns for detecting secrets (common patterns to redact)
SECRET_PATTERNS = [
    r'(?i)(?:password|passwd|pwd|secret|token|key|api[_-]?key|auth[_-]?token)\s*[:=]\s*["\']?([^"\'\s]+)',
    r'(?i)(?:bearer|basic)\s+([a-zA-Z0-9+/=]+)',
    r'(?i)(?:sk-|pk-)[a-zA-Z0-9]{32,}',
    r'[a-f0-9]{32,}',  # Long hex strings (could be hashes or keys)
]

# Context keys bound by ZoneCoreLoggerAdapter
CONTEXT_KEYS = ("principal_id", "zone")

_RESERVED_RECORD_KEYS = frozenset(
    {
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "message", "pathname", "process", "processName", "relativeCreated",
        "thread", "threadName", "taskName", "exc_info", "exc_text", "stack_info",
        *CONTEXT_KEYS,
    }
)


def safe_preview(value: Any, limit: int = 240) -> str:
    """Create a safe, length-bounded preview of a value for logging.

    Converts any value to a single-line string, normalizes whitespace and
    truncates to ``limit`` characters.

    Args:
        value: The value to preview (any type)
        limit: Maximum length of the preview (default: 240)

    Returns:
        A safe, truncated string representation
    """
    if value is None:
        return ""

    if isinstance(value, str):
        s = value
    elif isinstance(value, (dict, list)):
        try:
            s = json.dumps(value, default=str, ensure_ascii=False)
        except (TypeError, ValueError):
            s = str(value)
    else:
        s = str(value)

    s = " ".join(s.split())

    if len(s) > limit:
        return s[: limit - 1] + "…"

    return s


def redact_secrets(text: str, replacement: str = "[REDACTED]") -> str:
    """Redact secret patterns (API keys, tokens, passwords, long hex) from text."""
    if not isinstance(text, str):
        return text

    result = text
    for pattern in SECRET_PATTERNS:
        result = re.sub(pattern, replacement, result, flags=re.IGNORECASE | re.DOTALL)

    return result


def safe_log_value(value: Any, limit: int = 240, redact: bool = True) -> str:
    """Create a safe log value with preview and optional redaction.

    This is the function to use when logging caller-supplied data such as
    user ids or zone names.
    """
    preview = safe_preview(value, limit=limit)
    if redact:
        preview = redact_secrets(preview)
    return preview


class ZoneCoreFormatter(logging.Formatter):
    """Formatter that adds principal/zone context and optional JSON output."""

    def __init__(
        self,
        include_context: bool = True,
        json_format: bool = True,
        redact_secrets: bool = True,
        *args: Any,
        **kwargs: Any,
    ):
        super().__init__(*args, **kwargs)
        self.include_context = include_context
        self.json_format = json_format
        self.redact_secrets = redact_secrets

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record."""
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context: dict[str, str] = {}
        if self.include_context:
            for key in CONTEXT_KEYS:
                value = getattr(record, key, None)
                if value is not None:
                    context[key] = safe_log_value(value, redact=self.redact_secrets)
            log_data.update(context)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_KEYS:
                log_data[key] = safe_log_value(value, redact=self.redact_secrets)

        if self.redact_secrets:
            log_data["message"] = redact_secrets(log_data["message"])

        if self.json_format:
            return json.dumps(log_data, default=str, ensure_ascii=False)

        parts = [
            f"[{log_data['timestamp']}]",
            f"{log_data['level']}",
            f"{log_data['logger']}",
        ]
        for key, value in context.items():
            parts.append(f"{key}={value}")
        parts.append(f": {log_data['message']}")
        return " ".join(parts)


class ZoneCoreLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds ``principal_id`` and ``zone`` to log records.

    Usage:
        logger = get_zone_logger(__name__, principal_id=user["id"])
        logger.info("Checked access", zone="billing")
    """

    def __init__(
        self,
        logger: logging.Logger,
        principal_id: Optional[str] = None,
        zone: Optional[str] = None,
    ):
        super().__init__(logger, {})
        self.principal_id = principal_id
        self.zone = zone

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        """Move context kwargs into ``extra`` for the formatter."""
        principal_id = kwargs.pop("principal_id", self.principal_id)
        zone = kwargs.pop("zone", self.zone)

        extra = kwargs.get("extra", {})
        if principal_id:
            extra["principal_id"] = principal_id
        if zone:
            extra["zone"] = zone
        kwargs["extra"] = extra

        return msg, kwargs


def setup_logging(
    config: Optional["ZoneCoreConfig"] = None,
    json_format: Optional[bool] = None,
    redact_secrets: Optional[bool] = None,
) -> None:
    """Configure the root logger for a host embedding zonecore.

    Args:
        config: ZoneCoreConfig instance (if None, loads from environment)
        json_format: Override ``config.log_json``
        redact_secrets: Override ``config.redact_secrets``
    """
    from .config import LogLevel, load_config_from_env

    if config is None:
        config = load_config_from_env()

    level_map = {
        LogLevel.DEBUG: logging.DEBUG,
        LogLevel.INFO: logging.INFO,
        LogLevel.WARNING: logging.WARNING,
        LogLevel.ERROR: logging.ERROR,
        LogLevel.CRITICAL: logging.CRITICAL,
    }
    log_level = level_map.get(config.log_level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(
        ZoneCoreFormatter(
            include_context=True,
            json_format=config.log_json if json_format is None else json_format,
            redact_secrets=config.redact_secrets if redact_secrets is None else redact_secrets,
        )
    )
    root_logger.addHandler(console_handler)

    if config.service_name:
        logging.getLogger(config.service_name).setLevel(log_level)


def get_zone_logger(
    name: str,
    principal_id: Optional[str] = None,
    zone: Optional[str] = None,
) -> ZoneCoreLoggerAdapter:
    """Get a logger adapter bound to a principal and/or zone.

    Example:
        logger = get_zone_logger(__name__, principal_id="u1")
        logger.debug("Access granted", zone="content")
    """
    logger = logging.getLogger(name)
    return ZoneCoreLoggerAdapter(logger, principal_id=principal_id, zone=zone)


__all__ = [
    "safe_preview",
    "redact_secrets",
    "safe_log_value",
    "ZoneCoreFormatter",
    "ZoneCoreLoggerAdapter",
    "setup_logging",
    "get_zone_logger",
]
