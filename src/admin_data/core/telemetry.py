# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Telemetry infrastructure for the admin data-access layer.

Provides request logging through the standard :mod:`logging` module and an
extensible hook system for custom telemetry providers. Hooks are injected
through configuration; there is no ambient event channel.
"""

from __future__ import annotations

import logging
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import (
    Any,
    Dict,
    Generator,
    List,
    Optional,
    Protocol,
    Union,
    runtime_checkable,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Configuration
# ============================================================================


@dataclass(frozen=True)
class TelemetryConfig:
    """Configuration for request logging and hooks.

    Telemetry is opt-in. When enabled, every HTTP call made by the client is
    logged and dispatched to the configured hooks.

    Example:
        Request logging::

            config = DataAccessConfig(
                telemetry=TelemetryConfig(enable_logging=True, log_level="DEBUG")
            )

        Custom hook::

            config = DataAccessConfig(
                telemetry=TelemetryConfig(hooks=[MyTimingHook()])
            )
    """

    enable_logging: bool = False
    log_level: str = "WARNING"
    logger_name: str = "admin_data.requests"

    hooks: List["TelemetryHook"] = field(default_factory=list)


# ============================================================================
# Context Objects
# ============================================================================


@dataclass
class RequestContext:
    """Context passed to telemetry hooks for each HTTP request."""

    request_id: str
    method: str
    url: str
    operation: str  # e.g. "list", "count", "post", "delete", "fixtures"
    section: Optional[str] = None

    start_time: float = field(default_factory=time.perf_counter)

    # Custom data bag for hooks to share state
    custom_data: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ResponseContext:
    """Response information passed to telemetry hooks."""

    status_code: int
    duration_ms: float
    response_size: Optional[int] = None


# ============================================================================
# Hook Protocol
# ============================================================================


@runtime_checkable
class TelemetryHook(Protocol):
    """Protocol for custom telemetry hooks.

    All methods are optional - implement only what you need.

    Example:
        class TimingHook:
            def __init__(self, statsd):
                self.statsd = statsd

            def on_request_end(self, request: RequestContext, response: ResponseContext):
                self.statsd.timing(f"admin.{request.section}.{request.operation}", response.duration_ms)
    """

    def on_request_start(self, context: RequestContext) -> None:
        """Called before each HTTP request is sent."""
        ...

    def on_request_end(self, request: RequestContext, response: ResponseContext) -> None:
        """Called after each HTTP request completes with a response."""
        ...

    def on_request_error(self, request: RequestContext, error: Exception) -> None:
        """Called when a request fails (timeout, network or HTTP error)."""
        ...


# ============================================================================
# Telemetry Manager
# ============================================================================


class TelemetryManager:
    """Dispatches request lifecycle events to the logger and hooks.

    This class is internal and not part of the public API.
    """

    def __init__(self, config: Optional[TelemetryConfig] = None) -> None:
        self._config = config or TelemetryConfig()
        self._hooks = list(self._config.hooks)
        self._logger: Optional[logging.Logger] = None
        if self._config.enable_logging:
            self._logger = logging.getLogger(self._config.logger_name)
            self._logger.setLevel(getattr(logging, self._config.log_level.upper(), logging.WARNING))

    @contextmanager
    def trace_request(
        self,
        operation: str,
        method: str,
        url: str,
        section: Optional[str] = None,
    ) -> Generator[RequestContext, None, None]:
        """Create a traced request context.

        Usage:
            with telemetry.trace_request("list", "GET", url, section="users") as ctx:
                response = await http._request(...)
                telemetry.record_response(ctx, response.status_code)
        """
        ctx = RequestContext(
            request_id=str(uuid.uuid4()),
            method=method,
            url=url,
            operation=operation,
            section=section,
        )
        self._dispatch("on_request_start", ctx)
        try:
            yield ctx
        except Exception as e:
            if self._logger:
                self._logger.warning(
                    "%s %s %s failed: %s",
                    ctx.operation,
                    ctx.method,
                    ctx.url,
                    e,
                    extra={"request_id": ctx.request_id},
                )
            self._dispatch("on_request_error", ctx, e)
            raise

    def record_response(
        self,
        ctx: RequestContext,
        status_code: int,
        response_size: Optional[int] = None,
    ) -> None:
        """Log the response and dispatch it to hooks."""
        duration_ms = (time.perf_counter() - ctx.start_time) * 1000
        response = ResponseContext(
            status_code=status_code,
            duration_ms=duration_ms,
            response_size=response_size,
        )
        if self._logger:
            level = logging.WARNING if status_code >= 400 else logging.DEBUG
            self._logger.log(
                level,
                f"{ctx.operation} {ctx.method} {status_code} {duration_ms:.1f}ms",
                extra={"request_id": ctx.request_id, "section": ctx.section},
            )
        self._dispatch("on_request_end", ctx, response)

    def _dispatch(self, name: str, *args: Any) -> None:
        for hook in self._hooks:
            handler = getattr(hook, name, None)
            if handler is None:
                continue
            try:
                handler(*args)
            except Exception:
                # Hooks must not break requests
                logger.exception("Telemetry hook %r failed in %s", hook, name)


# ============================================================================
# No-op Manager for when telemetry is disabled
# ============================================================================


class NoOpTelemetryManager:
    """No-op telemetry manager when telemetry is disabled."""

    @contextmanager
    def trace_request(
        self,
        operation: str,
        method: str,
        url: str,
        section: Optional[str] = None,
    ) -> Generator[RequestContext, None, None]:
        yield RequestContext(
            request_id=str(uuid.uuid4()),
            method=method,
            url=url,
            operation=operation,
            section=section,
        )

    def record_response(self, *args: Any, **kwargs: Any) -> None:
        pass


def create_telemetry_manager(
    config: Optional[TelemetryConfig],
) -> Union[TelemetryManager, NoOpTelemetryManager]:
    """Factory to create appropriate telemetry manager."""
    if config is None:
        return NoOpTelemetryManager()
    if not (config.enable_logging or config.hooks):
        return NoOpTelemetryManager()
    return TelemetryManager(config)


__all__ = [
    "TelemetryConfig",
    "TelemetryHook",
    "TelemetryManager",
    "NoOpTelemetryManager",
    "RequestContext",
    "ResponseContext",
    "create_telemetry_manager",
]
