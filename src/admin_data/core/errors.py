# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Structured error types for the admin data-access layer.

Every failure raised by the package derives from :class:`DataAccessError`.
Callers tell errors apart by class or by the discriminant flags
``is_timeout``, ``is_network_error`` and ``is_http_error``, never by matching
message text.
"""

from __future__ import annotations

import datetime as _dt
from typing import Any, Dict, Optional

from ._error_codes import NETWORK_CONNECT, TIMEOUT_WALL_CLOCK, _http_subcode


class DataAccessError(Exception):
    """Base structured error for the data-access layer."""

    is_timeout = False
    is_network_error = False
    is_http_error = False

    def __init__(
        self,
        message: str,
        *,
        code: str,
        subcode: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        source: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.subcode = subcode
        self.status_code = status_code
        self.details = details or {}
        self.source = source or "client"
        self.timestamp = _dt.datetime.now(_dt.timezone.utc).isoformat().replace("+00:00", "Z")

    def with_context(self, message: Optional[str] = None, **details: Any) -> "DataAccessError":
        """Replace the message and merge call-site details; returns ``self`` for re-raising.

        :param message: New user-facing message. ``None`` keeps the current one.
        :param details: Extra context (section, adapter, url, ...) merged into :attr:`details`.
        """
        if message is not None:
            self.message = message
            self.args = (message,)
        self.details.update({k: v for k, v in details.items() if v is not None})
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "code": self.code,
            "subcode": self.subcode,
            "status_code": self.status_code,
            "details": self.details,
            "source": self.source,
            "timestamp": self.timestamp,
        }

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:  # pragma: no cover
        return f"{self.__class__.__name__}(code={self.code!r}, subcode={self.subcode!r}, message={self.message!r})"


class ConfigurationError(DataAccessError):
    def __init__(self, message: str, *, subcode: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="configuration_error", subcode=subcode, details=details, source="client")


class ValidationError(DataAccessError):
    """Malformed caller input. Filter input is currently coerced rather than rejected."""

    def __init__(self, message: str, *, subcode: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="validation_error", subcode=subcode, details=details, source="client")


class JsonParseError(DataAccessError):
    def __init__(self, message: str, *, subcode: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="json_parse_error", subcode=subcode, details=details, source="client")


class FixtureError(DataAccessError):
    def __init__(self, message: str, *, subcode: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="fixture_error", subcode=subcode, details=details, source="client")


class RequestTimeoutError(DataAccessError):
    """The wall-clock timeout fired and the in-flight call was aborted.

    :param timeout_ms: Timeout that fired, in milliseconds.
    """

    is_timeout = True

    def __init__(self, timeout_ms: int, *, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.timeout_ms = timeout_ms
        d = dict(details or {})
        d["timeout_ms"] = timeout_ms
        super().__init__(
            message or f"Request timed out after {_format_seconds(timeout_ms)} seconds",
            code="timeout_error",
            subcode=TIMEOUT_WALL_CLOCK,
            details=d,
            source="client",
        )


class NetworkError(DataAccessError):
    is_network_error = True

    def __init__(self, message: str = "Network error: Unable to connect to server", *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="network_error", subcode=NETWORK_CONNECT, details=details, source="client")


class HttpError(DataAccessError):
    """Non-2xx response.

    :param status_code: HTTP status code.
    :param status_text: Reason phrase (``"Not Found"``), empty when the server sent none.
    :param body_excerpt: Leading part of a non-JSON error body, if any.
    """

    is_http_error = True

    def __init__(
        self,
        message: str,
        status_code: int,
        status_text: str = "",
        body_excerpt: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.status_text = status_text
        d = dict(details or {})
        d["status_text"] = status_text
        if body_excerpt is not None:
            d["body_excerpt"] = body_excerpt
        super().__init__(
            message,
            code="http_error",
            subcode=_http_subcode(status_code),
            status_code=status_code,
            details=d,
            source="server",
        )


def _format_seconds(timeout_ms: int) -> str:
    seconds = timeout_ms / 1000
    return str(int(seconds)) if float(seconds).is_integer() else str(seconds)


__all__ = [
    "DataAccessError",
    "ConfigurationError",
    "ValidationError",
    "JsonParseError",
    "FixtureError",
    "RequestTimeoutError",
    "NetworkError",
    "HttpError",
]
