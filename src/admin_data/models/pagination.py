# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Pagination parameters shared by the remote and fixture paths."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

DEFAULT_LIMIT = 50


@dataclass(frozen=True)
class PaginationSpec:
    """
    Page window requested by a caller.

    Offset/limit is canonical. ``next_token`` is an opaque value echoed back to
    token-paginated backends and never interpreted here.

    :param limit: Page size. Default is 50.
    :type limit: :class:`int`
    :param offset: Zero-based index of the first item. Default is 0.
    :type offset: :class:`int`
    :param next_token: Opaque continuation token from a previous response.
    :type next_token: :class:`str` | None
    :param sort_field: Record field to sort by before windowing.
    :type sort_field: :class:`str` | None
    :param sort_direction: ``"asc"`` or ``"desc"``.
    :type sort_direction: :class:`str`
    """

    limit: int = DEFAULT_LIMIT
    offset: int = 0
    next_token: Optional[str] = None
    sort_field: Optional[str] = None
    sort_direction: str = "asc"

    @property
    def descending(self) -> bool:
        return self.sort_direction == "desc"

    @classmethod
    def from_mapping(cls, data: Union["PaginationSpec", Mapping[str, Any], None]) -> "PaginationSpec":
        """Coerce a loosely-typed mapping into a spec.

        Accepts camelCase or snake_case keys. Values that cannot be coerced fall
        back to defaults instead of raising.
        """
        if isinstance(data, PaginationSpec):
            return data
        data = data or {}
        limit = _to_int(data.get("limit"), DEFAULT_LIMIT)
        if limit <= 0:
            limit = DEFAULT_LIMIT
        offset = max(0, _to_int(data.get("offset"), 0))
        token = _first(data, "nextToken", "next_token")
        sort_field = _first(data, "sortField", "sort_field", "sortBy", "sort_by")
        direction = str(_first(data, "sortDirection", "sort_direction", "sortOrder") or "asc").lower()
        return cls(
            limit=limit,
            offset=offset,
            next_token=str(token) if token not in (None, "") else None,
            sort_field=str(sort_field) if sort_field not in (None, "") else None,
            sort_direction="desc" if direction in ("desc", "descending", "-1") else "asc",
        )

    def to_dict(self) -> Dict[str, Any]:
        """Wire form sent to backends inside request bodies (``{"limit", "offset", ...}``)."""
        out: Dict[str, Any] = {"limit": self.limit, "offset": self.offset}
        if self.next_token:
            out["nextToken"] = self.next_token
        if self.sort_field:
            out["sortField"] = self.sort_field
            out["sortDirection"] = self.sort_direction
        return out


def _to_int(value: Any, default: int) -> int:
    if value is None or value == "" or isinstance(value, bool):
        return default
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default


def _first(data: Mapping[str, Any], *keys: str) -> Any:
    for k in keys:
        v = data.get(k)
        if v not in (None, ""):
            return v
    return None


__all__ = ["PaginationSpec", "DEFAULT_LIMIT"]
