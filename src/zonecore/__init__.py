from .config import LogLevel, ZoneCoreConfig, load_config_from_env
from .exceptions import (
    AccessDeniedError,
    ConfigurationError,
    ForbiddenError,
    InvalidPermissionError,
    UnauthorizedError,
    ZoneCoreError,
    error_registry,
    register_error,
)
from .logging import (
    safe_preview,
    redact_secrets,
    safe_log_value,
    ZoneCoreFormatter,
    ZoneCoreLoggerAdapter,
    setup_logging,
    get_zone_logger,
)
from .permissions import *  # noqa: F401,F403
from .permissions import __all__ as _permissions_all

__version__ = "0.1.0"

__all__ = [
    'ZoneCoreConfig',
    'LogLevel',
    'load_config_from_env',
    'ZoneCoreError',
    'InvalidPermissionError',
    'AccessDeniedError',
    'UnauthorizedError',
    'ForbiddenError',
    'ConfigurationError',
    'error_registry',
    'register_error',
    'safe_preview',
    'redact_secrets',
    'safe_log_value',
    'ZoneCoreFormatter',
    'ZoneCoreLoggerAdapter',
    'setup_logging',
    'get_zone_logger',
    *_permissions_all,
]
