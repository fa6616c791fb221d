# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Built-in adapter strategies for the admin backends."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from ..core.results import RequestPlan, ResultEnvelope, paginate
from ..models.pagination import PaginationSpec
from .base import (
    PAGINATION_KEYS,
    AdapterStrategy,
    Filters,
    SectionAdapter,
    apply_local_filters,
    default_list_response,
    first_int,
    is_empty,
    non_empty,
    query_pairs,
)


def _body(adapter: SectionAdapter, pagination: PaginationSpec, fields: Dict[str, Any]) -> Dict[str, Any]:
    body: Dict[str, Any] = {"env": adapter.environment, "section": adapter.section}
    body.update({k: v for k, v in fields.items() if not is_empty(v)})
    body["pagination"] = pagination.to_dict()
    return body


def _next_token(filters: Filters, pagination: PaginationSpec) -> Optional[str]:
    token = filters.get("nextToken") or filters.get("next_token") or pagination.next_token
    return str(token) if token else None


def _items_and_count(raw: Any, key: str) -> Tuple[List[Dict[str, Any]], int]:
    data = raw if isinstance(raw, dict) else {}
    items = data.get(key) if isinstance(data.get(key), list) else []
    # A zero or missing count falls back to the page length.
    return list(items), first_int(data, "count") or len(items)


# ---------------------------------------------------------------- products


def products_list_request(adapter: SectionAdapter, filters: Filters, pagination: PaginationSpec) -> RequestPlan:
    tags = filters.get("tags")
    fields = {
        "q": filters.get("q"),
        "category": filters.get("category"),
        "status": filters.get("status"),
        "type": filters.get("type"),
        "in_stock": True if filters.get("inStock") is True else None,
        "promo_only": True if filters.get("promo") is True else None,
        "sku": filters.get("sku"),
        "price_min": filters.get("price_from"),
        "price_max": filters.get("price_to"),
        "tags": tags if isinstance(tags, list) else None,
    }
    return RequestPlan(method="POST", body=_body(adapter, pagination, fields))


# ------------------------------------------------------------------ orders


def orders_list_request(adapter: SectionAdapter, filters: Filters, pagination: PaginationSpec) -> RequestPlan:
    fields = {
        "query": filters.get("q"),
        "status": filters.get("status"),
        "channel": filters.get("channel"),
        "from": filters.get("from"),
        "to": filters.get("to"),
    }
    return RequestPlan(method="POST", body=_body(adapter, pagination, fields))


# ------------------------------------------------------------------- users


def users_list_request(adapter: SectionAdapter, filters: Filters, pagination: PaginationSpec) -> RequestPlan:
    params = query_pairs(
        [
            ("q", filters.get("q")),
            ("role", filters.get("role")),
            ("status", filters.get("status")),
            ("limit", pagination.limit),
            ("offset", pagination.offset),
        ]
    )
    return RequestPlan(method="GET", url_suffix="fetchUsers", query_params=params)


def users_list_response(adapter: SectionAdapter, raw: Any, filters: Filters, pagination: PaginationSpec) -> ResultEnvelope:
    """``{users, count}`` -> envelope."""
    items, total = _items_and_count(raw, "users")
    return ResultEnvelope(items=items, total=total)


# ------------------------------------------------------------------- media

MEDIA_FILTERS = (
    "title",
    "media_type",
    "status",
    "visibility",
    "owner_user_id",
    "featured",
    "coming_soon",
    "created_from",
    "created_to",
    "file_size_min",
    "file_size_max",
    "file_extension",
    "file_name",
    "description",
)


def media_list_request(adapter: SectionAdapter, filters: Filters, pagination: PaginationSpec) -> RequestPlan:
    pairs = [(name, filters.get(name)) for name in MEDIA_FILTERS]
    pairs += [("limit", pagination.limit), ("offset", pagination.offset)]
    return RequestPlan(method="GET", url_suffix="fetchMediaItems", query_params=query_pairs(pairs))


def media_list_response(adapter: SectionAdapter, raw: Any, filters: Filters, pagination: PaginationSpec) -> ResultEnvelope:
    """``{items, count, nextCursor, prevCursor}`` -> envelope."""
    items, total = _items_and_count(raw, "items")
    data = raw if isinstance(raw, dict) else {}
    return ResultEnvelope(
        items=items,
        total=total,
        next_cursor=data.get("nextCursor"),
        prev_cursor=data.get("prevCursor"),
    )


# ----------------------------------------------- user-blocks, moderation


def _total_count_request(suffix: str):
    def build(adapter: SectionAdapter, filters: Filters, pagination: PaginationSpec) -> RequestPlan:
        pairs: List[Tuple[str, Any]] = list(non_empty(filters, exclude=PAGINATION_KEYS | {"show_total_count"}).items())
        pairs.append(("show_total_count", "1"))
        pairs.append(("limit", pagination.limit))
        if pagination.offset:
            pairs.append(("offset", pagination.offset))
        pairs.append(("nextToken", _next_token(filters, pagination)))
        return RequestPlan(method="GET", url_suffix=suffix, query_params=query_pairs(pairs))

    build.__name__ = f"{suffix}_list_request"
    return build


user_blocks_list_request = _total_count_request("listUserBlocks")
moderation_list_request = _total_count_request("fetchModerations")


# -------------------------------------------------------------- kyc-shufti

_SESSION_RENAMES = (
    ("reference", "referenceId"),
    ("userEmail", "email"),
    ("userCountry", "country"),
    ("created_at", "createdAt"),
    ("appLocale", "locale"),
    ("verificationMode", "mode"),
)


def kyc_list_request(adapter: SectionAdapter, filters: Filters, pagination: PaginationSpec) -> RequestPlan:
    pairs: List[Tuple[str, Any]] = []
    q = filters.get("q")
    if not is_empty(q):
        q = str(q)
        pairs.append(("reference" if q.startswith("ref-") else "userId", q))
    status = filters.get("status")
    if status != "Any":
        pairs.append(("status", status))
    pairs.append(("dateFrom", filters.get("from")))
    pairs.append(("dateTo", filters.get("to")))
    pairs.append(("limit", pagination.limit))
    token = _next_token(filters, pagination)
    if token:
        pairs.append(("nextToken", token))
    else:
        pairs.append(("offset", pagination.offset))
    return RequestPlan(method="GET", query_params=query_pairs(pairs))


def kyc_count_request(adapter: SectionAdapter, filters: Filters) -> Optional[RequestPlan]:
    # The list call returns every session; its total is the count.
    return None


def _session_to_item(session: Dict[str, Any]) -> Dict[str, Any]:
    item = dict(session)
    for source, target in _SESSION_RENAMES:
        if session.get(source) is not None:
            item[target] = session[source]
    item["lastEvent"] = session.get("lastEvent") or session.get("status")
    return item


def kyc_list_response(adapter: SectionAdapter, raw: Any, filters: Filters, pagination: PaginationSpec) -> ResultEnvelope:
    """``{sessions, nextToken}`` -> envelope, filtered and paginated client-side."""
    sessions = raw.get("sessions") if isinstance(raw, dict) else None
    if not isinstance(sessions, list):
        return default_list_response(adapter, raw, filters, pagination)
    items = [_session_to_item(s) for s in sessions if isinstance(s, dict)]
    items, _ = apply_local_filters(
        items,
        filters,
        email_fields=("email", "userEmail"),
        country_fields=("country", "userCountry"),
    )
    return paginate(items, pagination, next_token=raw.get("nextToken"))


BUILTIN_STRATEGIES = {
    "products": AdapterStrategy(build_list_request=products_list_request),
    "orders": AdapterStrategy(build_list_request=orders_list_request),
    "users": AdapterStrategy(build_list_request=users_list_request, transform_list_response=users_list_response),
    "media": AdapterStrategy(build_list_request=media_list_request, transform_list_response=media_list_response),
    "user-blocks": AdapterStrategy(build_list_request=user_blocks_list_request),
    "moderation": AdapterStrategy(build_list_request=moderation_list_request),
    "kyc-shufti": AdapterStrategy(
        build_list_request=kyc_list_request,
        build_count_request=kyc_count_request,
        transform_list_response=kyc_list_response,
    ),
}


__all__ = ["BUILTIN_STRATEGIES", "MEDIA_FILTERS"]
