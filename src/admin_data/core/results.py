# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Request and result types for data-access operations.

- :class:`RequestPlan`: method, URL suffix, query string and body built by an adapter for one call
- :class:`ResultEnvelope`: the single normalized shape every list query returns
- :func:`paginate`: offset/limit window shared by the fixture path and client-side paginating adapters

Example::

    envelope = await client.get("orders", filters={"status": "Active"}, pagination={"limit": 5})
    print(envelope.total)        # 10
    print(envelope.next_cursor)  # 5
    for item in envelope:
        print(item["id"])
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from ..models.pagination import PaginationSpec

if TYPE_CHECKING:
    import pandas as pd


@dataclass(frozen=True)
class RequestPlan:
    """
    Description of one HTTP call, built fresh by an adapter and never persisted.

    :param method: HTTP method (``"GET"``, ``"POST"``, ...).
    :type method: :class:`str`
    :param url_suffix: Path appended to the resolved section endpoint (``"count"``, ``"fetchUsers"``).
    :type url_suffix: :class:`str`
    :param query_params: Ordered ``(name, value)`` pairs for the query string.
    :type query_params: :class:`tuple`
    :param body: JSON body, or ``None`` for no body.
    :type body: :class:`dict` | None
    :param flags: Adapter hints that do not change the wire call.
    :type flags: :class:`dict`
    """

    method: str = "POST"
    url_suffix: str = ""
    query_params: Tuple[Tuple[str, str], ...] = ()
    body: Optional[Dict[str, Any]] = None
    flags: Mapping[str, Any] = field(default_factory=dict)

    def param(self, name: str) -> Optional[str]:
        """First query value for ``name``, or ``None``."""
        for k, v in self.query_params:
            if k == name:
                return v
        return None

    def param_names(self) -> List[str]:
        return [k for k, _ in self.query_params]


@dataclass
class ResultEnvelope:
    """
    Normalized list result.

    :param items: Records in the current page.
    :type items: :class:`list` of :class:`dict`
    :param total: Number of matching records across all pages, ``None`` when unknown.
    :type total: :class:`int` | None
    :param next_cursor: Cursor for the next page (offset or backend cursor), ``None`` on the last page.
    :param prev_cursor: Cursor for the previous page, ``None`` on the first page.
    :param next_token: Opaque continuation token echoed from token-paginated backends.
    :type next_token: :class:`str` | None
    """

    items: List[Dict[str, Any]] = field(default_factory=list)
    total: Optional[int] = None
    next_cursor: Any = None
    prev_cursor: Any = None
    next_token: Optional[str] = None

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def to_dict(self) -> Dict[str, Any]:
        """Wire form with camelCase keys (``items``, ``total``, ``nextCursor``, ``prevCursor``)."""
        out: Dict[str, Any] = {
            "items": list(self.items),
            "total": self.total,
            "nextCursor": self.next_cursor,
            "prevCursor": self.prev_cursor,
        }
        if self.next_token is not None:
            out["nextToken"] = self.next_token
        return out

    def to_dataframe(self) -> "pd.DataFrame":
        """Return the page items as a pandas DataFrame (one row per record)."""
        from ..utils._pandas import records_to_dataframe

        return records_to_dataframe(self.items)


def paginate(
    items: Sequence[Dict[str, Any]],
    pagination: PaginationSpec,
    *,
    next_token: Optional[str] = None,
) -> ResultEnvelope:
    """Cut an offset/limit window out of a fully materialized collection.

    ``total`` is the size of the whole collection, independent of the window.
    ``next_cursor`` is the end index while more items remain; ``prev_cursor`` is
    ``max(0, offset - limit)`` once past the first page.
    """
    offset = pagination.offset
    limit = pagination.limit
    total = len(items)
    end = min(offset + limit, total)
    return ResultEnvelope(
        items=list(items[offset:end]),
        total=total,
        next_cursor=end if end < total else None,
        prev_cursor=max(0, offset - limit) if offset > 0 else None,
        next_token=next_token,
    )


__all__ = ["RequestPlan", "ResultEnvelope", "paginate"]
