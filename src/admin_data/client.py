# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Union

import httpx

from .adapters.base import AdapterStrategy, SectionAdapter
from .adapters.registry import AdapterRegistry
from .core._error_codes import CONFIG_DECLARATIONS_MISSING, CONFIG_ENDPOINT_MISSING
from .core._http import _HttpClient, read_json
from .core.config import DataAccessConfig
from .core.endpoints import EndpointResolver
from .core.errors import (
    ConfigurationError,
    DataAccessError,
    HttpError,
    NetworkError,
    RequestTimeoutError,
    _format_seconds,
)
from .core.results import RequestPlan, ResultEnvelope
from .core.telemetry import create_telemetry_manager
from .data._fixtures import FixtureLoader, FixtureSource
from .data._mock_engine import MockFilterEngine
from .models.pagination import PaginationSpec

logger = logging.getLogger(__name__)


class DataAccessClient:
    """
    Single entry point for admin list, count and mutation calls.

    For each call the client picks the section's adapter, resolves the section's
    endpoint and either calls the backend through the adapter or, when no endpoint
    is configured, loads the section's fixtures and filters them in memory. Both
    paths return the same :class:`~admin_data.core.results.ResultEnvelope`.

    **Async context manager (recommended)**::

        async with DataAccessClient(config) as client:
            page = await client.get("orders", filters={"status": "Active"}, pagination={"limit": 5})
            total = await client.get_total_count("orders", {"status": "Active"})

    **Without context manager**: the HTTP client is created lazily on first use;
    call :meth:`aclose` when done.

    :param config: Immutable configuration. Defaults to
        :meth:`~admin_data.core.config.DataAccessConfig.from_env`.
    :type config: ~admin_data.core.config.DataAccessConfig or None
    :param adapters: Adapter registry, or extra strategies merged over the built-in ones.
    :type adapters: ~admin_data.adapters.AdapterRegistry or Mapping or None
    :param http_client: Caller-owned :class:`httpx.AsyncClient`; it is not closed by :meth:`aclose`.
    :type http_client: :class:`httpx.AsyncClient` or None
    :param fixtures: In-memory fixtures, ``{section: list-of-records | DataFrame}``,
        consulted before ``config.fixtures_path``.
    :type fixtures: Mapping or None
    """

    def __init__(
        self,
        config: Optional[DataAccessConfig] = None,
        *,
        adapters: Union[AdapterRegistry, Mapping[str, AdapterStrategy], None] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        fixtures: Optional[Mapping[str, FixtureSource]] = None,
    ) -> None:
        self._config = config or DataAccessConfig.from_env()
        self._adapters = adapters if isinstance(adapters, AdapterRegistry) else AdapterRegistry(adapters)
        self._http = _HttpClient(timeout=self._config.timeout_seconds, client=http_client)
        self._telemetry = create_telemetry_manager(self._config.telemetry)
        self._resolver = EndpointResolver(
            self._config.endpoint_declarations,
            self._config.endpoints,
            self._config.environment,
            self._config.use_endpoints,
        )
        self._fixtures = FixtureLoader(
            self._config.fixtures_path,
            http=self._http,
            fixtures=fixtures,
            telemetry=self._telemetry,
        )

    @property
    def config(self) -> DataAccessConfig:
        return self._config

    async def __aenter__(self) -> "DataAccessClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Release the HTTP client if this instance created it. Safe to call multiple times."""
        await self._http.aclose()

    # ------------------------------------------------------------------ reads

    async def get(
        self,
        section: str,
        filters: Optional[Mapping[str, Any]] = None,
        pagination: Union[PaginationSpec, Mapping[str, Any], None] = None,
    ) -> ResultEnvelope:
        """
        Fetch one page of ``section``.

        :param section: Section name, possibly hierarchical (``"developer/scylla-db"``).
        :type section: :class:`str`
        :param filters: Filter values; empty values are ignored.
        :type filters: Mapping or None
        :param pagination: :class:`~admin_data.models.pagination.PaginationSpec` or a mapping
            with ``limit``, ``offset``, ``nextToken``, ``sortField``, ``sortDirection``.
        :return: The normalized page.
        :rtype: ~admin_data.core.results.ResultEnvelope

        :raises ~admin_data.core.errors.ConfigurationError: No endpoint declarations are configured.
        :raises ~admin_data.core.errors.HttpError: The backend answered with a non-2xx status.
        :raises ~admin_data.core.errors.RequestTimeoutError: The backend did not answer in time.
        :raises ~admin_data.core.errors.NetworkError: The backend could not be reached.
        :raises ~admin_data.core.errors.FixtureError: No endpoint and no fixture for the section.
        """
        filters = dict(filters or {})
        spec = PaginationSpec.from_mapping(pagination)
        adapter = self._adapters.get(section, self._config.environment)
        logger.debug("GET section=%s adapter=%s", section, adapter.name)

        if not self._resolver.has_declarations:
            raise ConfigurationError(
                f"Endpoint declarations are missing for section: {section}",
                subcode=CONFIG_DECLARATIONS_MISSING,
                details={"section": section},
            )

        if self._resolver.resolve(section):
            plan = adapter.build_list_request(filters, spec)
            raw = await self._call("list", section, adapter, plan)
            return adapter.transform_list_response(raw, filters, spec)

        records = await self._fixtures.load(section)
        engine = MockFilterEngine(self._config.filters.for_section(section))
        return engine.apply(records, filters, spec)

    async def get_total_count(self, section: str, filters: Optional[Mapping[str, Any]] = None) -> Optional[int]:
        """
        Total number of records of ``section`` matching ``filters``.

        Never raises. Without endpoint declarations the result is ``None``. A
        failed remote count falls back to counting the filtered fixtures; when
        that fails too the result is ``None``. Sections whose adapter derives
        the count from the list call also return ``None``.

        :rtype: :class:`int` or None
        """
        filters = dict(filters or {})
        if not self._resolver.has_declarations:
            logger.warning("Endpoint declarations are missing, no count for section: %s", section)
            return None
        try:
            adapter = self._adapters.get(section, self._config.environment)
            plan = adapter.build_count_request(filters)
            if plan is None:
                return None
            if self._resolver.resolve(section):
                try:
                    raw = await self._call("count", section, adapter, plan)
                    return adapter.transform_count_response(raw)
                except DataAccessError as exc:
                    logger.warning("Count request failed for %s, counting fixtures instead: %s", section, exc)
            return await self._local_count(section, filters)
        except Exception as exc:
            logger.warning("get_total_count failed for %s: %s", section, exc)
            return None

    async def _local_count(self, section: str, filters: Mapping[str, Any]) -> Optional[int]:
        try:
            records = await self._fixtures.load(section)
        except DataAccessError as exc:
            logger.warning("Fixture count failed for %s: %s", section, exc)
            return None
        engine = MockFilterEngine(self._config.filters.for_section(section))
        return len(engine.filter_records(records, filters))

    # -------------------------------------------------------------- mutations

    async def post(self, section: str, suffix: str, body: Optional[Dict[str, Any]] = None) -> Any:
        """
        POST ``body`` to ``<section endpoint>/<suffix>``.

        :return: Decoded JSON response, or ``None`` for an empty body.
        :raises ~admin_data.core.errors.ConfigurationError: The section has no endpoint.
        """
        return await self._mutate("POST", section, suffix, body)

    async def delete(self, section: str, suffix: str, body: Optional[Dict[str, Any]] = None) -> Any:
        """
        DELETE ``<section endpoint>/<suffix>``, optionally with a JSON body.

        :return: Decoded JSON response, or ``None`` for an empty body.
        :raises ~admin_data.core.errors.ConfigurationError: The section has no endpoint.
        """
        return await self._mutate("DELETE", section, suffix, body)

    async def _mutate(self, method: str, section: str, suffix: str, body: Optional[Dict[str, Any]]) -> Any:
        if not self._resolver.resolve(section):
            raise ConfigurationError(
                f"No endpoint configured for section: {section}",
                subcode=CONFIG_ENDPOINT_MISSING,
                details={"section": section, "suffix": suffix},
            )
        adapter = self._adapters.get(section, self._config.environment)
        plan = RequestPlan(method=method, url_suffix=suffix, body=body)
        return await self._call(method.lower(), section, adapter, plan)

    def resolve_endpoint(self, section: str, suffix: str = "", *parts: Any) -> str:
        """Resolved URL for ``section`` (plus suffix and path parts), or ``""`` when fixture-backed."""
        return self._resolver.resolve(section, suffix, *parts)

    # ------------------------------------------------------------- internals

    async def _call(self, operation: str, section: str, adapter: SectionAdapter, plan: RequestPlan) -> Any:
        url = self._resolver.resolve(section, plan.url_suffix)
        display_url = str(httpx.URL(url, params=list(plan.query_params))) if plan.query_params else url
        try:
            with self._telemetry.trace_request(operation, plan.method, display_url, section=section) as ctx:
                response = await self._http._request(
                    plan.method,
                    url,
                    params=plan.query_params,
                    json_body=plan.body,
                )
                self._telemetry.record_response(ctx, response.status_code, len(response.content))
            return read_json(response, display_url)
        except DataAccessError as exc:
            raise _enrich(exc, display_url).with_context(section=section, adapter=adapter.name, url=display_url)


def _enrich(exc: DataAccessError, url: str) -> DataAccessError:
    """Replace the transport message with one naming the failing URL."""
    if isinstance(exc, HttpError):
        status = exc.status_code or 0
        exc.details.setdefault("server_message", exc.message)
        if status == 404:
            return exc.with_context(f"Endpoint not found: {url}")
        if status >= 500:
            return exc.with_context(f"Internal server error ({status}): {exc.status_text or 'Server Error'}")
        return exc.with_context(f"API error ({status}): {exc.status_text or 'Request Failed'}")
    if isinstance(exc, RequestTimeoutError):
        return exc.with_context(f"Request timed out after {_format_seconds(exc.timeout_ms)} seconds: {url}")
    if isinstance(exc, NetworkError):
        return exc.with_context(f"Network error: Unable to connect to {url}")
    return exc


__all__ = ["DataAccessClient"]
