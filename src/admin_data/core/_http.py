# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Async HTTP client with a bounded wall-clock timeout and typed failures.

This module provides :class:`~admin_data.core._http._HttpClient`, a wrapper
around :class:`httpx.AsyncClient` that runs exactly one call per request under
a wall-clock timeout and turns every failure into a
:class:`~admin_data.core.errors.DataAccessError` subclass. There is no retry.
"""

from __future__ import annotations

import asyncio
import datetime as _dt
import json
import logging
from typing import Any, Dict, Iterable, Optional, Tuple, Union

import httpx

from ._error_codes import JSON_BODY_UNSERIALIZABLE, JSON_RESPONSE_INVALID
from .config import DEFAULT_HTTP_TIMEOUT
from .errors import HttpError, JsonParseError, NetworkError, RequestTimeoutError, ValidationError

logger = logging.getLogger(__name__)

QueryParams = Union[Dict[str, Any], Iterable[Tuple[str, Any]], None]

_BODY_EXCERPT_LIMIT = 500


class _HttpClient:
    """
    HTTP client with wall-clock timeout handling and optional client injection.

    :param timeout: Wall-clock timeout per call in seconds. Default is 20.0.
    :type timeout: :class:`float` | None
    :param client: Optional :class:`httpx.AsyncClient` for connection pooling. When
        provided, the caller owns it and :meth:`aclose` leaves it open.
    :type client: :class:`httpx.AsyncClient` | None
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.timeout = timeout if timeout is not None else DEFAULT_HTTP_TIMEOUT
        self._client = client
        self._owns_client = client is None

    @property
    def timeout_ms(self) -> int:
        return int(round(self.timeout * 1000))

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            # The wall-clock timeout below is the only one that applies.
            self._client = httpx.AsyncClient(timeout=None)
            self._owns_client = True
        return self._client

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: QueryParams = None,
        json_body: Any = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> httpx.Response:
        """
        Execute one HTTP request under a wall-clock timeout.

        :param method: HTTP method (GET, POST, DELETE, ...).
        :type method: :class:`str`
        :param url: Fully qualified target URL.
        :type url: :class:`str`
        :param params: Query parameters as a dict or ordered pairs.
        :param json_body: JSON-serializable body; ``None`` sends no body.
        :param headers: Extra headers.
        :param timeout: Per-call override of the wall-clock timeout in seconds.
        :return: The successful (2xx) response.
        :rtype: :class:`httpx.Response`
        :raises ~admin_data.core.errors.RequestTimeoutError: The timeout fired; the call was cancelled.
        :raises ~admin_data.core.errors.NetworkError: The connection could not be made.
        :raises ~admin_data.core.errors.HttpError: The server answered with a non-2xx status.
        :raises ~admin_data.core.errors.ValidationError: ``json_body`` cannot be serialized.
        """
        seconds = timeout if timeout is not None else self.timeout
        timeout_ms = int(round(seconds * 1000))
        final_headers = {"Cache-Control": "no-store"}
        if json_body is not None:
            final_headers["Content-Type"] = "application/json"
        final_headers.update(headers or {})

        kwargs: Dict[str, Any] = {"headers": final_headers}
        if params:
            kwargs["params"] = list(params.items()) if isinstance(params, dict) else list(params)
        if json_body is not None:
            kwargs["content"] = _encode_body(json_body, url)

        client = self._get_client()
        logger.debug("%s %s (timeout=%sms)", method.upper(), url, timeout_ms)
        try:
            response = await asyncio.wait_for(client.request(method, url, **kwargs), timeout=seconds)
        except asyncio.TimeoutError:
            raise RequestTimeoutError(timeout_ms, details={"url": url}) from None
        except httpx.TimeoutException as exc:
            raise RequestTimeoutError(timeout_ms, details={"url": url}) from exc
        except httpx.TransportError as exc:
            raise NetworkError(details={"url": url, "reason": str(exc)}) from exc

        if response.is_success:
            return response
        raise _http_error_from_response(response, url)

    async def aclose(self) -> None:
        """
        Close the HTTP client and release resources.

        Only a client created here is closed. Safe to call multiple times.
        """
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None


def _json_default(value: Any) -> Any:
    if isinstance(value, (_dt.datetime, _dt.date, _dt.time)):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _encode_body(body: Any, url: str) -> str:
    """Serialize a request body; dates and times become ISO 8601 strings."""
    try:
        return json.dumps(body, default=_json_default)
    except (TypeError, ValueError) as exc:
        raise ValidationError(
            f"Request body is not JSON serializable: {exc}",
            subcode=JSON_BODY_UNSERIALIZABLE,
            details={"url": url},
        ) from exc


def _http_error_from_response(response: httpx.Response, url: str) -> HttpError:
    """Build an :class:`HttpError`, preferring the body's ``message`` then ``error`` field."""
    status_text = response.reason_phrase or "Unknown Error"
    message = f"HTTP {response.status_code}: {status_text}"
    body_excerpt: Optional[str] = None
    try:
        data = response.json()
    except ValueError:
        data = None
        text = response.text or ""
        if text:
            body_excerpt = text[:_BODY_EXCERPT_LIMIT]
    if isinstance(data, dict):
        for key in ("message", "error"):
            candidate = data.get(key)
            if isinstance(candidate, str) and candidate:
                message = candidate
                break
            if isinstance(candidate, dict) and isinstance(candidate.get("message"), str):
                message = candidate["message"]
                break
    return HttpError(
        message,
        status_code=response.status_code,
        status_text=status_text,
        body_excerpt=body_excerpt,
        details={"url": url},
    )


def read_json(response: httpx.Response, url: str) -> Any:
    """Decode a JSON body; an empty body decodes to ``None``.

    :raises ~admin_data.core.errors.JsonParseError: The body is not valid JSON.
    """
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError as exc:
        raise JsonParseError(
            f"Invalid JSON in response from {url}: {exc}",
            subcode=JSON_RESPONSE_INVALID,
            details={"url": url, "status_code": response.status_code},
        ) from exc
