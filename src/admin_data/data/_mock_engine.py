# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
In-memory filter, sort and paginate over fixture records.

This module provides :class:`MockFilterEngine`, which applies a filter set to a
list of loosely-typed records the way a backend would: the comparison for each
filter is chosen from its descriptor (or from the shape of the value), field
names are bridged through :mod:`admin_data.data._naming`, and the result is
windowed with :func:`admin_data.core.results.paginate`.
"""

from __future__ import annotations

import datetime as _dt
import locale
import logging
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from ..core.results import ResultEnvelope, paginate
from ..models.filters import FilterDescriptor, MatchMode
from ..models.pagination import PaginationSpec
from ._naming import candidate_values, resolve_field

logger = logging.getLogger(__name__)

# Keys that carry pagination or routing, never record predicates.
IGNORED_KEYS = frozenset(
    {
        "env",
        "section",
        "pagination",
        "limit",
        "offset",
        "nextToken",
        "next_token",
        "sortField",
        "sort_field",
        "sortDirection",
        "sort_direction",
        "show_total_count",
    }
)

# Select placeholders meaning "no constraint".
SENTINEL_VALUES = frozenset({"Any", "All"})

CREATED_FIELDS = ("createdAt", "created_at", "created", "createdOn", "created_on")

_LOWER_SUFFIXES = ("_from", "_min")
_UPPER_SUFFIXES = ("_to", "_max")
_NUMERIC_SUFFIXES = ("_min", "_max")

# Epoch numbers above this are milliseconds.
_EPOCH_MS_THRESHOLD = 1e11

Filters = Optional[Mapping[str, Any]]


class MockFilterEngine:
    """
    Filter, sort and paginate fixture records.

    :param descriptors: Filter descriptors of the section; they select the match
        mode per filter key. Keys without a descriptor are matched by value shape.
    :type descriptors: :class:`~collections.abc.Iterable` of
        :class:`~admin_data.models.filters.FilterDescriptor`

    Example::

        engine = MockFilterEngine(registry.for_section("orders"))
        envelope = engine.apply(records, {"status": "Active"}, PaginationSpec(limit=5))
    """

    def __init__(self, descriptors: Iterable[FilterDescriptor] = ()) -> None:
        self._descriptors: Dict[str, FilterDescriptor] = {d.name: d for d in descriptors}

    def apply(
        self,
        records: Iterable[Mapping[str, Any]],
        filters: Filters = None,
        pagination: Union[PaginationSpec, Mapping[str, Any], None] = None,
    ) -> ResultEnvelope:
        """Filter, then sort, then cut the page window. ``total`` is the filtered count."""
        spec = PaginationSpec.from_mapping(pagination)
        matched = self.filter_records(records, filters)
        ordered = self.sort_records(matched, spec)
        return paginate(ordered, spec)

    def filter_records(self, records: Iterable[Mapping[str, Any]], filters: Filters = None) -> List[Dict[str, Any]]:
        """Return the records matching every active filter, in input order."""
        predicates = self._build_predicates(filters or {})
        out = [r for r in records if isinstance(r, Mapping) and all(p(r) for p in predicates)]
        logger.debug("mock filter: %d predicates, %d matches", len(predicates), len(out))
        return out

    def sort_records(
        self,
        records: List[Dict[str, Any]],
        pagination: Union[PaginationSpec, Mapping[str, Any], None] = None,
    ) -> List[Dict[str, Any]]:
        """Sort by ``pagination.sort_field``; records without the field go last in either direction."""
        spec = PaginationSpec.from_mapping(pagination)
        if not spec.sort_field:
            return list(records)
        present: List[Tuple[Any, Dict[str, Any]]] = []
        missing: List[Dict[str, Any]] = []
        for r in records:
            value = resolve_field(r, spec.sort_field)
            if value is None or value == "":
                missing.append(r)
            else:
                present.append((value, r))
        key = _sort_key([v for v, _ in present])
        present.sort(key=lambda pair: key(pair[0]), reverse=spec.descending)
        return [r for _, r in present] + missing

    # ----------------------------------------------------------- predicates

    def _build_predicates(self, filters: Mapping[str, Any]) -> List[Callable[[Mapping[str, Any]], bool]]:
        predicates: List[Callable[[Mapping[str, Any]], bool]] = []
        for key, value in filters.items():
            if key in IGNORED_KEYS or _is_empty(value):
                continue
            if key == "q":
                needle = str(value).lower()
                predicates.append(lambda r, n=needle: _search(r, n))
                continue
            bound = _range_bound(key)
            if bound is not None:
                field_names, is_upper, numeric_suffix = bound
                numeric = numeric_suffix or self._is_number(key) or any(self._is_number(f) for f in field_names)
                predicates.append(
                    lambda r, f=field_names, v=value, u=is_upper, n=numeric: _in_range(r, f, v, u, n)
                )
                continue
            mode = self._match_mode(key, value)
            predicates.append(lambda r, k=key, v=value, m=mode: _matches(r, k, v, m))
        return predicates

    def _match_mode(self, key: str, value: Any) -> MatchMode:
        descriptor = self._descriptors.get(key)
        if descriptor is not None and descriptor.default_match_mode is not None:
            return descriptor.default_match_mode
        if isinstance(value, (list, tuple, set, frozenset)):
            return MatchMode.ANY_OF
        if isinstance(value, (bool, int, float)):
            return MatchMode.EQUALITY
        return MatchMode.SUBSTRING

    def _is_number(self, name: str) -> bool:
        descriptor = self._descriptors.get(name)
        return descriptor is not None and (descriptor.type or "").lower() == "number"


# --------------------------------------------------------------- matching


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value == "" or value in SENTINEL_VALUES
    if isinstance(value, (list, tuple, set, frozenset)):
        return len(value) == 0
    return False


def _as_list(value: Any) -> List[Any]:
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


def _text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value).lower()


def _to_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    return None


def _to_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def _equal(record_value: Any, filter_value: Any) -> bool:
    rb, fb = _to_bool(record_value), _to_bool(filter_value)
    if rb is not None and fb is not None:
        return rb == fb
    rn, fn = _to_number(record_value), _to_number(filter_value)
    if rn is not None and fn is not None and not (isinstance(record_value, str) and isinstance(filter_value, str)):
        return rn == fn
    return _text(record_value) == _text(filter_value)


def _matches(record: Mapping[str, Any], key: str, value: Any, mode: MatchMode) -> bool:
    wanted = _as_list(value)
    for raw in candidate_values(record, key):
        found = _as_list(raw)
        if mode is MatchMode.SUBSTRING:
            if any(_text(w) in _text(f) for w in wanted for f in found if not isinstance(f, (dict, list))):
                return True
        elif mode is MatchMode.EXACT:
            if any(_text(w) == _text(f) for w in wanted for f in found):
                return True
        elif mode is MatchMode.EQUALITY:
            if any(_equal(f, w) for w in wanted for f in found):
                return True
        elif mode is MatchMode.ANY_OF:
            if {_text(f) for f in found} & {_text(w) for w in wanted}:
                return True
        elif mode is MatchMode.RANGE:
            day = _parse_datetime(value)
            got = _parse_datetime(raw)
            if day is not None and got is not None and got.date() == day.date():
                return True
    return False


def _search(record: Any, needle: str) -> bool:
    return any(needle in text for text in _primitive_texts(record))


def _primitive_texts(value: Any) -> Iterator[str]:
    if isinstance(value, Mapping):
        for v in value.values():
            yield from _primitive_texts(v)
    elif isinstance(value, (list, tuple)):
        for v in value:
            yield from _primitive_texts(v)
    elif value is not None:
        yield _text(value)


# ------------------------------------------------------------------ ranges


def _range_bound(key: str) -> Optional[Tuple[Tuple[str, ...], bool, bool]]:
    """``(field candidates, is_upper, numeric_by_suffix)`` for a range key, else ``None``."""
    if key == "from":
        return CREATED_FIELDS, False, False
    if key == "to":
        return CREATED_FIELDS, True, False
    for suffix in _LOWER_SUFFIXES + _UPPER_SUFFIXES:
        if key.endswith(suffix) and len(key) > len(suffix):
            return (key[: -len(suffix)],), suffix in _UPPER_SUFFIXES, suffix in _NUMERIC_SUFFIXES
    return None


def _in_range(
    record: Mapping[str, Any],
    fields: Tuple[str, ...],
    bound: Any,
    is_upper: bool,
    numeric: bool,
) -> bool:
    raw = _first_field(record, fields)
    if raw is None:
        return False

    bound_number = _to_number(bound)
    if numeric or (bound_number is not None and isinstance(raw, (int, float)) and not isinstance(raw, bool)):
        value = _to_number(raw)
        if value is None or bound_number is None:
            return False
        return value <= bound_number if is_upper else value >= bound_number

    value_dt = _parse_datetime(raw)
    bound_dt = _parse_datetime(bound)
    if value_dt is None or bound_dt is None:
        return False
    if is_upper:
        bound_dt = _dt.datetime.combine(bound_dt.date(), _dt.time(23, 59, 59, 999000))
        return value_dt <= bound_dt
    return value_dt >= bound_dt


def _first_field(record: Mapping[str, Any], fields: Tuple[str, ...]) -> Any:
    for name in fields:
        value = resolve_field(record, name)
        if value is not None and value != "":
            return value
    return None


def _parse_datetime(value: Any) -> Optional[_dt.datetime]:
    """Parse ISO-8601 text, ``datetime``/``date`` or epoch numbers into a naive UTC datetime."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, _dt.datetime):
        return _naive_utc(value)
    if isinstance(value, _dt.date):
        return _dt.datetime.combine(value, _dt.time())
    if isinstance(value, (int, float)):
        seconds = value / 1000.0 if abs(value) > _EPOCH_MS_THRESHOLD else float(value)
        try:
            return _dt.datetime.fromtimestamp(seconds, tz=_dt.timezone.utc).replace(tzinfo=None)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return _naive_utc(_dt.datetime.fromisoformat(text))
        except ValueError:
            return None
    return None


def _naive_utc(value: _dt.datetime) -> _dt.datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(_dt.timezone.utc).replace(tzinfo=None)


# ----------------------------------------------------------------- sorting


def _sort_key(values: List[Any]) -> Callable[[Any], Any]:
    if values and all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in values):
        return float
    if values and all(isinstance(v, str) for v in values):
        return locale.strxfrm
    return str


__all__ = ["MockFilterEngine", "IGNORED_KEYS", "SENTINEL_VALUES", "CREATED_FIELDS"]
