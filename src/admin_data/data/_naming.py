# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Field-name bridging between filter keys and record keys.

Filter keys come from UI metadata (``user_name``) while fixture records may use
any casing convention (``userName``, ``user-name``). Lookups try a fixed list of
candidate spellings and take the first key that is present.
"""

from __future__ import annotations

import re
from typing import Any, Iterator, List, Mapping

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_SEPARATORS = re.compile(r"[-_\s]+")


def to_snake_case(name: str) -> str:
    """``userName`` / ``user-name`` -> ``user_name``."""
    if not name:
        return name
    return _SEPARATORS.sub("_", _CAMEL_BOUNDARY.sub("_", name)).lower()


def to_camel_case(name: str) -> str:
    """``user_name`` / ``user-name`` -> ``userName``. Already-camel names are returned unchanged."""
    parts = [p for p in _SEPARATORS.split(name or "") if p]
    if len(parts) <= 1:
        return name
    return parts[0][:1].lower() + parts[0][1:] + "".join(p[:1].upper() + p[1:] for p in parts[1:])


def candidate_keys(name: str) -> List[str]:
    """
    Candidate record keys for a filter name, in lookup order.

    Order: as-is, snake_case, camelCase, then the hyphen/underscore swap.
    Duplicates are removed; the result is deterministic for a given name.

    :param name: Filter key.
    :type name: :class:`str`
    :rtype: :class:`list` of :class:`str`
    """
    swapped = name.replace("-", "_") if "-" in name else name.replace("_", "-")
    out: List[str] = []
    for key in (name, to_snake_case(name), to_camel_case(name), swapped):
        if key and key not in out:
            out.append(key)
    return out


def candidate_values(record: Mapping[str, Any], name: str) -> Iterator[Any]:
    """Yield every defined (non-``None``) value of ``record`` under the candidate keys of ``name``."""
    if not isinstance(record, Mapping):
        return
    for key in candidate_keys(name):
        value = record.get(key)
        if value is not None:
            yield value


def resolve_field(record: Mapping[str, Any], name: str) -> Any:
    """First defined value of ``record`` under the candidate keys of ``name``, else ``None``."""
    return next(candidate_values(record, name), None)


__all__ = ["candidate_keys", "candidate_values", "resolve_field", "to_snake_case", "to_camel_case"]
