# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

from ..models.filters import FilterRegistry
from .telemetry import TelemetryConfig

DEFAULT_ENVIRONMENT = "dev"
DEFAULT_HTTP_TIMEOUT = 20.0


@dataclass(frozen=True)
class EndpointTable:
    """
    Process-wide base URL per environment plus a section -> route table.

    :param base: Environment name -> base URL (``{"prod": "https://api.example.com"}``).
    :type base: :class:`~collections.abc.Mapping`
    :param routes: Section -> path (``{"users": "/users"}``). Unlisted sections use ``/<section>``.
    :type routes: :class:`~collections.abc.Mapping`
    """

    base: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    routes: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "EndpointTable":
        data = data or {}
        return cls(
            base=MappingProxyType(dict(data.get("base") or {})),
            routes=MappingProxyType(dict(data.get("routes") or {})),
        )


@dataclass(frozen=True)
class DataAccessConfig:
    """
    Configuration settings for data-access operations.

    All mappings are frozen at construction; a config instance is shared
    read-only by any number of concurrent calls.

    :param environment: Current environment key (``dev``, ``stage``, ``prod``). Default is ``dev``.
    :type environment: str
    :param use_endpoints: When True, sections without an explicit endpoint declaration are
        routed through :attr:`endpoints` instead of falling back to fixtures (default: False).
    :type use_endpoints: bool
    :param http_timeout: Wall-clock timeout per HTTP call in seconds (default: 20.0).
    :type http_timeout: float or None
    :param fixtures_path: Directory or ``http(s)`` base URL holding ``<section>/data.json`` fixtures.
    :type fixtures_path: str or None
    :param endpoint_declarations: Per-page declaration of remotely backed sections,
        ``{section: {env: {"endpoint": str}}}``. ``None`` means no declaration exists at all.
    :type endpoint_declarations: Mapping or None
    :param endpoints: Base URL and route tables.
    :type endpoints: EndpointTable
    :param filters: Filter descriptors per section.
    :type filters: FilterRegistry
    :param telemetry: Logging and request hook settings.
    :type telemetry: TelemetryConfig or None
    """

    environment: str = DEFAULT_ENVIRONMENT
    use_endpoints: bool = False
    http_timeout: Optional[float] = None
    fixtures_path: Optional[str] = None
    endpoint_declarations: Optional[Mapping[str, Any]] = None
    endpoints: EndpointTable = field(default_factory=EndpointTable)
    filters: FilterRegistry = field(default_factory=FilterRegistry)
    telemetry: Optional[TelemetryConfig] = None

    def __post_init__(self) -> None:
        if self.endpoint_declarations is not None and not isinstance(self.endpoint_declarations, MappingProxyType):
            object.__setattr__(self, "endpoint_declarations", MappingProxyType(dict(self.endpoint_declarations)))

    @property
    def timeout_seconds(self) -> float:
        return self.http_timeout if self.http_timeout is not None else DEFAULT_HTTP_TIMEOUT

    @classmethod
    def from_env(cls, **overrides: Any) -> "DataAccessConfig":
        """
        Create a configuration instance from ``ADMIN_DATA_*`` environment variables.

        Reads ``ADMIN_DATA_ENV``, ``ADMIN_DATA_USE_ENDPOINTS``, ``ADMIN_DATA_HTTP_TIMEOUT``
        and ``ADMIN_DATA_FIXTURES``. Keyword overrides win over the environment.

        :return: Configuration instance.
        :rtype: ~admin_data.core.config.DataAccessConfig
        """
        values: dict = {
            "environment": os.environ.get("ADMIN_DATA_ENV") or DEFAULT_ENVIRONMENT,
            "use_endpoints": os.environ.get("ADMIN_DATA_USE_ENDPOINTS", "").strip().lower() in ("1", "true", "yes", "on"),
            "http_timeout": _float_or_none(os.environ.get("ADMIN_DATA_HTTP_TIMEOUT")),
            "fixtures_path": os.environ.get("ADMIN_DATA_FIXTURES") or None,
        }
        values.update(overrides)
        return cls(**values)


def _float_or_none(value: Optional[str]) -> Optional[float]:
    if value is None or not value.strip():
        return None
    try:
        return float(value)
    except ValueError:
        return None


__all__ = ["DataAccessConfig", "EndpointTable", "DEFAULT_HTTP_TIMEOUT"]
