# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Filter descriptor models and the read-only section -> descriptors registry."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple


class MatchMode(str, Enum):
    """How a filter value is compared against a record field."""

    EXACT = "exact"
    SUBSTRING = "substring"
    RANGE = "range"
    EQUALITY = "equality"
    ANY_OF = "any_of"


# Descriptor type -> default match mode. Types not listed fall back to the
# value-shape inference in the mock engine.
_TYPE_MATCH_MODES: Dict[str, MatchMode] = {
    "select": MatchMode.EXACT,
    "radio": MatchMode.EXACT,
    "date": MatchMode.RANGE,
    "checkbox": MatchMode.EQUALITY,
    "boolean": MatchMode.EQUALITY,
    "toggle": MatchMode.EQUALITY,
    "checks": MatchMode.ANY_OF,
    "number": MatchMode.EQUALITY,
}


@dataclass(frozen=True)
class FilterDescriptor:
    """
    Metadata describing one filter field of a section.

    :param name: Filter key as sent by the UI (e.g. ``"user_name"``, ``"created_from"``).
    :type name: :class:`str`
    :param type: Widget type: ``text``, ``select``, ``radio``, ``toggle``, ``checkbox``,
        ``boolean``, ``date``, ``checks`` or ``number``.
    :type type: :class:`str`
    :param match_mode: Explicit comparison mode; overrides the type default.
    :type match_mode: :class:`MatchMode` | None
    :param label: Display label (unused by the core).
    :type label: :class:`str` | None
    :param options: Select options (unused by the core).
    :type options: :class:`tuple`
    """

    name: str
    type: str = "text"
    match_mode: Optional[MatchMode] = None
    label: Optional[str] = None
    options: Tuple[Any, ...] = ()

    @property
    def default_match_mode(self) -> Optional[MatchMode]:
        """Explicit mode, else the default for :attr:`type`, else ``None``."""
        if self.match_mode is not None:
            return self.match_mode
        return _TYPE_MATCH_MODES.get((self.type or "").lower())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FilterDescriptor":
        """Build a descriptor from its declarative form (``{"type", "name", "matchMode", ...}``)."""
        raw_mode = data.get("matchMode", data.get("match_mode"))
        mode: Optional[MatchMode] = None
        if raw_mode:
            try:
                mode = MatchMode(str(raw_mode).lower())
            except ValueError:
                mode = None
        options = data.get("options") or ()
        return cls(
            name=str(data.get("name", "")),
            type=str(data.get("type") or "text"),
            match_mode=mode,
            label=data.get("label"),
            options=tuple(options),
        )


class FilterRegistry:
    """
    Read-only mapping of section -> ordered filter descriptors.

    Lookups accept hierarchical section names (``"developer/mysql"``); the full
    key is tried first, then the last path segment.

    Example::

        registry = FilterRegistry.from_mapping({
            "users": [
                {"type": "text", "name": "q"},
                {"type": "select", "name": "role"},
            ]
        })
        registry.descriptor("users", "role").default_match_mode  # MatchMode.EXACT
    """

    def __init__(self, sections: Optional[Mapping[str, Iterable[FilterDescriptor]]] = None) -> None:
        frozen = {name: tuple(descs) for name, descs in (sections or {}).items()}
        self._sections: Mapping[str, Tuple[FilterDescriptor, ...]] = MappingProxyType(frozen)

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Iterable[Any]]]) -> "FilterRegistry":
        sections: Dict[str, List[FilterDescriptor]] = {}
        for section, descriptors in (data or {}).items():
            items: List[FilterDescriptor] = []
            for d in descriptors or ():
                if isinstance(d, FilterDescriptor):
                    items.append(d)
                elif isinstance(d, Mapping) and d.get("name"):
                    items.append(FilterDescriptor.from_dict(d))
            sections[section] = items
        return cls(sections)

    def for_section(self, section: str) -> Tuple[FilterDescriptor, ...]:
        """Descriptors for ``section`` (full key, then reduced key); empty when unknown."""
        if section in self._sections:
            return self._sections[section]
        return self._sections.get(reduce_section(section), ())

    def descriptor(self, section: str, name: str) -> Optional[FilterDescriptor]:
        for d in self.for_section(section):
            if d.name == name:
                return d
        return None

    def __contains__(self, section: object) -> bool:
        return isinstance(section, str) and bool(
            section in self._sections or reduce_section(section) in self._sections
        )

    def __iter__(self) -> Iterator[str]:
        return iter(self._sections)

    def __len__(self) -> int:
        return len(self._sections)


def reduce_section(section: str) -> str:
    """Return the last path segment of a hierarchical section name."""
    return (section or "").rstrip("/").split("/")[-1]


__all__ = ["MatchMode", "FilterDescriptor", "FilterRegistry", "reduce_section"]
