# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Adapter strategy records and the shared default behavior.

An adapter has four operations. A section's :class:`AdapterStrategy` may
override any of them; operations left unset use the defaults in this module.
Every operation receives the bound :class:`SectionAdapter` first so it can read
the section name and environment.
"""

from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..core.results import RequestPlan, ResultEnvelope
from ..models.pagination import PaginationSpec

Filters = Mapping[str, Any]

ListRequestBuilder = Callable[["SectionAdapter", Filters, PaginationSpec], RequestPlan]
CountRequestBuilder = Callable[["SectionAdapter", Filters], Optional[RequestPlan]]
ListResponseTransform = Callable[["SectionAdapter", Any, Filters, PaginationSpec], ResultEnvelope]
CountResponseTransform = Callable[["SectionAdapter", Any], Optional[int]]

# Keys that only steer paging and never change which records match.
PAGINATION_KEYS = frozenset({"nextToken", "next_token", "limit", "offset", "pagination"})


@dataclass(frozen=True)
class AdapterStrategy:
    """
    Per-section overrides. ``None`` means "use the default".

    :param build_list_request: ``(adapter, filters, pagination) -> RequestPlan``.
    :param build_count_request: ``(adapter, filters) -> RequestPlan | None``; a ``None``
        plan means the count is derived from the list call.
    :param transform_list_response: ``(adapter, raw, filters, pagination) -> ResultEnvelope``.
    :param transform_count_response: ``(adapter, raw) -> int | None``.
    """

    build_list_request: Optional[ListRequestBuilder] = None
    build_count_request: Optional[CountRequestBuilder] = None
    transform_list_response: Optional[ListResponseTransform] = None
    transform_count_response: Optional[CountResponseTransform] = None


class SectionAdapter:
    """
    A strategy bound to one section and environment.

    :param name: Registry key the strategy was found under (``"default"`` when none matched).
    :param strategy: Section overrides.
    :param section: Reduced section name.
    :param environment: Current environment key.
    """

    def __init__(self, name: str, strategy: AdapterStrategy, section: str, environment: str) -> None:
        self.name = name
        self.strategy = strategy
        self.section = section
        self.environment = environment

    def __repr__(self) -> str:
        return f"SectionAdapter(name={self.name!r}, section={self.section!r}, environment={self.environment!r})"

    def build_list_request(self, filters: Optional[Filters], pagination: PaginationSpec) -> RequestPlan:
        fn = self.strategy.build_list_request or default_list_request
        return fn(self, filters or {}, pagination)

    def build_count_request(self, filters: Optional[Filters]) -> Optional[RequestPlan]:
        fn = self.strategy.build_count_request or default_count_request
        return fn(self, filters or {})

    def transform_list_response(self, raw: Any, filters: Optional[Filters], pagination: PaginationSpec) -> ResultEnvelope:
        fn = self.strategy.transform_list_response or default_list_response
        return fn(self, raw, filters or {}, pagination)

    def transform_count_response(self, raw: Any) -> Optional[int]:
        fn = self.strategy.transform_count_response or default_count_response
        return fn(self, raw)


# ----------------------------------------------------------------- helpers


def is_empty(value: Any) -> bool:
    """``None``, ``""`` and empty collections carry no constraint."""
    if value is None or value == "":
        return True
    return isinstance(value, (list, tuple, set, frozenset, dict)) and len(value) == 0


def non_empty(filters: Filters, exclude: Iterable[str] = ()) -> Dict[str, Any]:
    skip = set(exclude)
    return {k: v for k, v in filters.items() if k not in skip and not is_empty(v)}


def query_value(value: Any) -> str:
    """Render a filter value for a query string (``True`` -> ``"true"``, lists comma-joined, dates ISO 8601)."""
    if isinstance(value, (_dt.datetime, _dt.date)):
        return value.isoformat()
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple, set, frozenset)):
        return ",".join(query_value(v) for v in value)
    return str(value)


def query_pairs(pairs: Iterable[Tuple[str, Any]]) -> Tuple[Tuple[str, str], ...]:
    """Ordered ``(name, str)`` pairs, dropping empty values."""
    return tuple((k, query_value(v)) for k, v in pairs if not is_empty(v))


def as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def first_int(data: Mapping[str, Any], *keys: str) -> Optional[int]:
    for k in keys:
        v = as_int(data.get(k))
        if v is not None:
            return v
    return None


def apply_local_filters(
    items: Sequence[Dict[str, Any]],
    filters: Filters,
    email_fields: Sequence[str] = ("email",),
    country_fields: Sequence[str] = ("country",),
) -> Tuple[List[Dict[str, Any]], bool]:
    """
    Apply the ``email`` and ``country`` filters backends do not support.

    ``email`` is a case-insensitive substring match; ``country`` is a
    case-insensitive substring match that also looks in ``data.country``.

    :return: The kept items and whether any filter was applied.
    """
    out = list(items)
    applied = False
    email = filters.get("email")
    if not is_empty(email):
        needle = str(email).lower()
        out = [i for i in out if isinstance(i, Mapping) and needle in _first_text(i, email_fields).lower()]
        applied = True
    country = filters.get("country")
    if not is_empty(country):
        needle = str(country).upper()
        out = [i for i in out if isinstance(i, Mapping) and needle in _country_of(i, country_fields).upper()]
        applied = True
    return out, applied


def _first_text(item: Mapping[str, Any], fields: Sequence[str]) -> str:
    for f in fields:
        v = item.get(f)
        if v:
            return str(v)
    return ""


def _country_of(item: Mapping[str, Any], fields: Sequence[str]) -> str:
    value = _first_text(item, fields)
    if value:
        return value
    data = item.get("data")
    if isinstance(data, Mapping) and data.get("country"):
        return str(data["country"])
    return ""


# ---------------------------------------------------------------- defaults


def default_list_request(adapter: SectionAdapter, filters: Filters, pagination: PaginationSpec) -> RequestPlan:
    """POST ``{env, section, **non-empty filters, pagination}``."""
    body: Dict[str, Any] = {"env": adapter.environment, "section": adapter.section}
    body.update(non_empty(filters, exclude=("pagination",)))
    body["pagination"] = pagination.to_dict()
    return RequestPlan(method="POST", body=body)


def default_count_request(adapter: SectionAdapter, filters: Filters) -> Optional[RequestPlan]:
    """GET ``count`` with the non-empty, non-paging filters as query parameters."""
    return RequestPlan(
        method="GET",
        url_suffix="count",
        query_params=query_pairs(non_empty(filters, exclude=PAGINATION_KEYS).items()),
    )


def default_list_response(adapter: SectionAdapter, raw: Any, filters: Filters, pagination: PaginationSpec) -> ResultEnvelope:
    """Pass ``items`` (or a bare list) through, then apply the unsupported filters locally."""
    if isinstance(raw, list):
        items: List[Dict[str, Any]] = list(raw)
        total: Optional[int] = len(items)
        data: Mapping[str, Any] = {}
    elif isinstance(raw, Mapping):
        data = raw
        items = list(raw.get("items") or []) if isinstance(raw.get("items"), list) else []
        total = first_int(raw, "total", "count", "totalCount")
    else:
        return ResultEnvelope()

    items, applied = apply_local_filters(items, filters)
    if applied and total is not None:
        total = len(items)
    return ResultEnvelope(
        items=items,
        total=total,
        next_cursor=data.get("nextCursor"),
        prev_cursor=data.get("prevCursor"),
        next_token=data.get("nextToken"),
    )


def default_count_response(adapter: SectionAdapter, raw: Any) -> Optional[int]:
    """A raw number, else ``count``, ``totalCount`` or ``total``."""
    number = as_int(raw)
    if number is not None:
        return number
    if isinstance(raw, Mapping):
        return first_int(raw, "count", "totalCount", "total")
    return None


DEFAULT_STRATEGY = AdapterStrategy()


__all__ = [
    "AdapterStrategy",
    "SectionAdapter",
    "DEFAULT_STRATEGY",
    "PAGINATION_KEYS",
    "default_list_request",
    "default_count_request",
    "default_list_response",
    "default_count_response",
    "apply_local_filters",
    "non_empty",
    "query_pairs",
    "query_value",
]
