"""Unified exception hierarchy for zonecore.

All errors raised by the library inherit from ZoneCoreError. This module provides:
- Base exception hierarchy with stable error codes
- ErrorRegistry for protocol mapping
- gRPC status mapping for host services

Usage in host applications:
    from zonecore.exceptions import (
        ZoneCoreError,
        InvalidPermissionError,
        UnauthorizedError,
        ForbiddenError,
    )

Hosts may define thin subclasses for application-specific errors:
    @register_error("BILLING_LOCKED")
    class BillingLockedError(ForbiddenError):
        code = "BILLING_LOCKED"
"""

from __future__ import annotations

import logging
from typing import Any, Callable, TypeVar, cast

__all__ = [
    # Base hierarchy
    "ZoneCoreError",
    "InvalidPermissionError",
    "AccessDeniedError",
    "UnauthorizedError",
    "ForbiddenError",
    "ConfigurationError",
    # Registry
    "ErrorRegistry",
    "error_registry",
    "register_error",
    # gRPC helpers
    "get_grpc_status_code",
]

logger = logging.getLogger(__name__)


# ---- Exception Hierarchy ----------------------------------------------------


class ZoneCoreError(Exception):
    """Base exception for zonecore.

    Attributes:
        code: Stable error code string for protocol mapping (e.g. "INVALID_PERMISSION").
        message: Human-readable error description.
        details: Additional context as keyword arguments.
    """

    code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"

    def __init__(self, message: str | None = None, code: str | None = None, **kwargs: Any) -> None:
        self.message = message or self.message
        self.code = code or self.code
        self.details = kwargs
        super().__init__(self.message)


class InvalidPermissionError(ZoneCoreError):
    """A bitfield or zone name failed validation.

    ``context`` names the place the value came from, e.g.
    ``"permission for zone 'content'"``. The message only ever embeds the
    offending value, a fixed reason phrase and that context.
    """

    code: str = "INVALID_PERMISSION"
    message: str = "Invalid permission"

    def __init__(self, message: str | None = None, context: str | None = None, **kwargs: Any) -> None:
        self.context = context
        super().__init__(message, **kwargs)


class AccessDeniedError(ZoneCoreError):
    """Permission evaluation denied the request."""

    code: str = "ACCESS_DENIED"
    message: str = "Access denied"


class UnauthorizedError(AccessDeniedError):
    """Raised by ``assert_access`` when the caller's roles are insufficient."""

    code: str = "UNAUTHORIZED"
    message: str = "Not authenticated"


class ForbiddenError(AccessDeniedError):
    """Raised by ``assert_data_access`` when neither ownership nor roles grant access."""

    code: str = "FORBIDDEN"
    message: str = "Unauthorized"


class ConfigurationError(ZoneCoreError):
    """Invalid library configuration (e.g. an extended permission set)."""

    code: str = "CONFIGURATION_ERROR"


# ---- Error Registry for Protocol Mapping ------------------------------------

_E = TypeVar("_E", bound=type[ZoneCoreError])


class ErrorRegistry:
    """Registry for mapping internal errors to external protocol codes."""

    def __init__(self) -> None:
        self._errors: dict[str, type[ZoneCoreError]] = {}

    def register(self, code: str, error_cls: type[ZoneCoreError]) -> None:
        self._errors[code] = error_cls

    def get(self, code: str) -> type[ZoneCoreError] | None:
        return self._errors.get(code)

    def all(self) -> dict[str, type[ZoneCoreError]]:
        return dict(self._errors)


error_registry = ErrorRegistry()


def register_error(code: str) -> Callable[[_E], _E]:
    """Decorator to register a custom error type.

    Usage:
        @register_error("MY_CUSTOM_ERROR")
        class MyCustomError(ZoneCoreError):
            code = "MY_CUSTOM_ERROR"
    """

    def decorator(cls: _E) -> _E:
        error_registry.register(code, cls)
        return cls

    return cast(Callable[[_E], _E], decorator)


# Register base errors
error_registry.register("INTERNAL_ERROR", ZoneCoreError)
error_registry.register("INVALID_PERMISSION", InvalidPermissionError)
error_registry.register("ACCESS_DENIED", AccessDeniedError)
error_registry.register("UNAUTHORIZED", UnauthorizedError)
error_registry.register("FORBIDDEN", ForbiddenError)
error_registry.register("CONFIGURATION_ERROR", ConfigurationError)


# ---- gRPC Status Mapping ----------------------------------------------------


def get_grpc_status_code(error: ZoneCoreError) -> Any:
    """Map ZoneCoreError to gRPC status code.

    Returns grpc.StatusCode value for the given error type.
    Import grpc locally to avoid hard dependency at module level.
    """
    import grpc

    error_to_status = {
        "INVALID_PERMISSION": grpc.StatusCode.INVALID_ARGUMENT,
        "UNAUTHORIZED": grpc.StatusCode.UNAUTHENTICATED,
        "FORBIDDEN": grpc.StatusCode.PERMISSION_DENIED,
        "ACCESS_DENIED": grpc.StatusCode.PERMISSION_DENIED,
        "CONFIGURATION_ERROR": grpc.StatusCode.FAILED_PRECONDITION,
    }
    status = error_to_status.get(error.code)
    if status is None:
        logger.debug("No gRPC mapping for error code %s, using INTERNAL", error.code)
        return grpc.StatusCode.INTERNAL
    return status
