# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Section -> endpoint URL resolution."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from ..models.filters import reduce_section
from .config import EndpointTable

_ABSOLUTE_PREFIXES = ("http://", "https://")


class EndpointResolver:
    """
    Resolve a section to a fully qualified URL, or ``""`` meaning "use local fixtures".

    Resolution order:

    1. No endpoint declarations at all -> ``""``.
    2. Section config under the full key, then the reduced key.
    3. A non-blank ``endpoint`` for the current environment: absolute URLs are used
       verbatim; relative paths are joined onto the environment base URL.
    4. Otherwise, when ``use_endpoints`` is set: base URL + route (default ``/<section>``).
    5. Otherwise ``""``.

    Any suffix is appended with exactly one slash between parts.

    :param declarations: ``{section: {env: {"endpoint": str}}}`` or ``None``.
    :param endpoints: Base URL and route tables.
    :param environment: Current environment key.
    :param use_endpoints: Route undeclared sections through the global tables.
    """

    def __init__(
        self,
        declarations: Optional[Mapping[str, Any]],
        endpoints: EndpointTable,
        environment: str,
        use_endpoints: bool = False,
    ) -> None:
        self._declarations = declarations
        self._endpoints = endpoints
        self._environment = environment
        self._use_endpoints = use_endpoints

    @property
    def has_declarations(self) -> bool:
        return self._declarations is not None

    def section_config(self, section: str) -> Optional[Mapping[str, Any]]:
        """Declared config for ``section`` (full key first, then reduced key)."""
        if self._declarations is None:
            return None
        cfg = self._declarations.get(section)
        if not cfg:
            cfg = self._declarations.get(reduce_section(section))
        return cfg if isinstance(cfg, Mapping) else None

    def declared_endpoint(self, section: str) -> str:
        """The current environment's declared endpoint for ``section``, stripped, or ``""``."""
        cfg = self.section_config(section)
        env_cfg = cfg.get(self._environment) if cfg else None
        if not isinstance(env_cfg, Mapping):
            return ""
        return str(env_cfg.get("endpoint") or "").strip()

    def base_url(self) -> str:
        return str(self._endpoints.base.get(self._environment) or "")

    def resolve(self, section: str, suffix: str = "", *parts: Any) -> str:
        """
        Resolve the URL for ``section`` with an optional suffix.

        :param section: Section name, possibly hierarchical.
        :type section: :class:`str`
        :param suffix: Path appended to the section endpoint (``"count"``, ``"fetchUsers"``).
        :type suffix: :class:`str`
        :param parts: Extra path segments (e.g. a record id) appended after the suffix.
        :return: Fully qualified URL, or ``""`` when the section is fixture-backed.
        :rtype: :class:`str`
        """
        if self._declarations is None:
            return ""

        url = ""
        declared = self.declared_endpoint(section)
        if declared:
            if declared.startswith(_ABSOLUTE_PREFIXES):
                url = declared
            else:
                url = join_url(self.base_url(), declared)
        elif self._use_endpoints:
            routes = self._endpoints.routes
            route = routes.get(section) or routes.get(reduce_section(section)) or f"/{section}"
            url = join_url(self.base_url(), route)

        if not url:
            return ""
        return join_url(url, suffix, *parts)


def join_url(base: str, *parts: Any) -> str:
    """Join URL parts with exactly one slash at each boundary; empty parts are skipped."""
    url = base or ""
    for part in parts:
        if part is None:
            continue
        text = str(part)
        if not text:
            continue
        if not url:
            url = text if text.startswith("/") else "/" + text
            continue
        url = url.rstrip("/") + "/" + text.lstrip("/")
    return url


__all__ = ["EndpointResolver", "join_url"]
