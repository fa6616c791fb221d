# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Loading of ``<section>/data.json`` fixture arrays from a directory, a URL or memory."""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Union

from ..core._error_codes import FIXTURE_NOT_ARRAY, FIXTURE_NOT_FOUND, JSON_FIXTURE_INVALID
from ..core._http import _HttpClient, read_json
from ..core.endpoints import join_url
from ..core.errors import FixtureError, HttpError, JsonParseError, RequestTimeoutError, _format_seconds
from ..core.telemetry import NoOpTelemetryManager, TelemetryManager
from ..models.filters import reduce_section

if TYPE_CHECKING:
    import pandas as pd

logger = logging.getLogger(__name__)

DEFAULT_FIXTURES_PATH = "page"
FIXTURE_FILE = "data.json"

FixtureSource = Union[List[Dict[str, Any]], "pd.DataFrame"]


class FixtureLoader:
    """
    Resolve and read the fixture array of a section.

    Lookup order: in-memory fixtures (full section key, then the reduced key),
    then ``<source>/<section>/data.json`` where ``source`` is a local directory
    or an ``http(s)`` base URL.

    :param source: Directory or base URL. Default is ``page``.
    :type source: :class:`str` | None
    :param http: HTTP client used when ``source`` is a URL.
    :type http: :class:`~admin_data.core._http._HttpClient` | None
    :param fixtures: In-memory fixtures, ``{section: list-of-records | DataFrame}``.
        Every load returns a fresh copy of the records.
    :type fixtures: :class:`~collections.abc.Mapping` | None
    :param telemetry: Request telemetry for URL-backed fixtures.
    """

    def __init__(
        self,
        source: Optional[str] = None,
        *,
        http: Optional[_HttpClient] = None,
        fixtures: Optional[Mapping[str, FixtureSource]] = None,
        telemetry: Union[TelemetryManager, NoOpTelemetryManager, None] = None,
    ) -> None:
        self.source = source or DEFAULT_FIXTURES_PATH
        self._http = http
        self._fixtures = dict(fixtures or {})
        self._telemetry = telemetry or NoOpTelemetryManager()

    @property
    def is_remote(self) -> bool:
        return self.source.startswith(("http://", "https://"))

    def location(self, section: str) -> str:
        """Path or URL of the fixture file for ``section``."""
        if self.is_remote:
            return join_url(self.source, section, FIXTURE_FILE)
        return str(Path(self.source) / section / FIXTURE_FILE)

    async def load(self, section: str) -> List[Dict[str, Any]]:
        """
        Return the fixture records of ``section``.

        :raises ~admin_data.core.errors.FixtureError: The file is missing or does not hold a JSON array.
        :raises ~admin_data.core.errors.JsonParseError: The file is not valid JSON.
        :raises ~admin_data.core.errors.HttpError: A URL source answered with a non-2xx status.
        :raises ~admin_data.core.errors.RequestTimeoutError: A URL source timed out.
        """
        in_memory = self._in_memory(section)
        if in_memory is not None:
            return in_memory
        where = self.location(section)
        data = await self._load_remote(section, where) if self.is_remote else self._load_file(where)
        if not isinstance(data, list):
            raise FixtureError(
                f"Fixture is not a JSON array: {where}",
                subcode=FIXTURE_NOT_ARRAY,
                details={"path": where, "section": section},
            )
        logger.debug("Loaded %d fixture records from %s", len(data), where)
        return data

    def _in_memory(self, section: str) -> Optional[List[Dict[str, Any]]]:
        data = self._fixtures.get(section)
        if data is None:
            data = self._fixtures.get(reduce_section(section))
        if data is None:
            return None
        if isinstance(data, list):
            return copy.deepcopy(data)
        from ..utils._pandas import dataframe_to_records

        return copy.deepcopy(dataframe_to_records(data))

    def _load_file(self, path: str) -> Any:
        file = Path(path)
        if not file.is_file():
            raise FixtureError(f"Data file not found: {path}", subcode=FIXTURE_NOT_FOUND, details={"path": path})
        try:
            with file.open("r", encoding="utf-8") as fh:
                return json.load(fh)
        except json.JSONDecodeError as exc:
            raise JsonParseError(
                f"Invalid JSON in data file {path}: {exc}",
                subcode=JSON_FIXTURE_INVALID,
                details={"path": path},
            ) from exc

    async def _load_remote(self, section: str, url: str) -> Any:
        if self._http is None:
            self._http = _HttpClient()
        try:
            with self._telemetry.trace_request("fixtures", "GET", url, section=section) as ctx:
                response = await self._http._request("GET", url)
                self._telemetry.record_response(ctx, response.status_code, len(response.content))
            return read_json(response, url)
        except HttpError as exc:
            if exc.status_code == 404:
                raise exc.with_context(f"Data file not found: {url}", path=url)
            if exc.status_code is not None and exc.status_code >= 500:
                raise exc.with_context(
                    f"Server error ({exc.status_code}): {exc.status_text or 'Internal Server Error'}", path=url
                )
            raise exc.with_context(path=url)
        except RequestTimeoutError as exc:
            raise exc.with_context(
                f"Request timed out after {_format_seconds(exc.timeout_ms)} seconds while loading: {url}", path=url
            )


__all__ = ["FixtureLoader", "DEFAULT_FIXTURES_PATH"]
