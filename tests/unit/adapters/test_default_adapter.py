# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Tests for the default adapter strategy."""

from datetime import date, datetime

import pytest

from admin_data.adapters.base import DEFAULT_STRATEGY, SectionAdapter, query_value
from admin_data.models.pagination import PaginationSpec


@pytest.fixture
def adapter():
    return SectionAdapter("default", DEFAULT_STRATEGY, "subscriptions", "dev")


class TestListRequest:
    def test_post_with_env_section_filters_and_pagination(self, adapter):
        plan = adapter.build_list_request(
            {"status": "Active", "q": "", "tags": [], "plan": None, "trial": False},
            PaginationSpec(limit=10, offset=20),
        )
        assert plan.method == "POST"
        assert plan.url_suffix == ""
        assert plan.query_params == ()
        assert plan.body == {
            "env": "dev",
            "section": "subscriptions",
            "status": "Active",
            "trial": False,
            "pagination": {"limit": 10, "offset": 20},
        }

    def test_none_filters(self, adapter):
        plan = adapter.build_list_request(None, PaginationSpec())
        assert plan.body == {"env": "dev", "section": "subscriptions", "pagination": {"limit": 50, "offset": 0}}


class TestCountRequest:
    def test_count_omits_next_token(self, adapter):
        plan = adapter.build_count_request({"status": "Active", "nextToken": "abc"})
        assert plan.method == "GET"
        assert plan.url_suffix == "count"
        assert plan.param_names() == ["status"]
        assert plan.param("nextToken") is None

    def test_count_omits_pagination_only_keys(self, adapter):
        plan = adapter.build_count_request(
            {"q": "x", "limit": 5, "offset": 10, "next_token": "t", "pagination": {"limit": 5}, "flag": True}
        )
        assert plan.query_params == (("q", "x"), ("flag", "true"))


class TestListResponse:
    def test_items_envelope(self, adapter):
        raw = {"items": [{"id": 1}], "total": 7, "nextCursor": "c2", "prevCursor": None, "nextToken": "t"}
        env = adapter.transform_list_response(raw, {}, PaginationSpec())
        assert env.items == [{"id": 1}]
        assert env.total == 7
        assert env.next_cursor == "c2"
        assert env.next_token == "t"

    @pytest.mark.parametrize("key", ["total", "count", "totalCount"])
    def test_total_aliases(self, adapter, key):
        env = adapter.transform_list_response({"items": [], key: 3}, {}, PaginationSpec())
        assert env.total == 3

    def test_bare_list(self, adapter):
        env = adapter.transform_list_response([{"id": 1}, {"id": 2}], {}, PaginationSpec())
        assert len(env) == 2
        assert env.total == 2

    def test_unexpected_shape(self, adapter):
        env = adapter.transform_list_response(None, {}, PaginationSpec())
        assert env.items == []
        assert env.total is None

    def test_local_email_and_country_filters_recompute_total(self, adapter):
        raw = {
            "items": [
                {"id": 1, "email": "Ann@Example.com", "country": "us"},
                {"id": 2, "email": "bob@example.com", "data": {"country": "US"}},
                {"id": 3, "email": "cy@other.org", "country": "US"},
                {"id": 4, "email": "dee@example.com", "country": "DE"},
            ],
            "total": 40,
        }
        env = adapter.transform_list_response(raw, {"email": "EXAMPLE", "country": "us"}, PaginationSpec())
        assert [i["id"] for i in env.items] == [1, 2]
        assert env.total == 2

    def test_local_filters_skip_non_dict_items(self, adapter):
        raw = {"items": ["loose", 7, None, {"id": 1, "email": "a@example.com", "country": "US"}], "total": 4}
        env = adapter.transform_list_response(raw, {"email": "example", "country": "us"}, PaginationSpec())
        assert env.items == [{"id": 1, "email": "a@example.com", "country": "US"}]
        assert env.total == 1

    def test_non_dict_items_kept_without_local_filters(self, adapter):
        env = adapter.transform_list_response({"items": ["a", "b"]}, {}, PaginationSpec())
        assert env.items == ["a", "b"]

    def test_total_left_alone_without_local_filters(self, adapter):
        env = adapter.transform_list_response({"items": [{"id": 1}], "total": 40}, {"status": "x"}, PaginationSpec())
        assert env.total == 40


class TestCountResponse:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            (12, 12),
            (0, 0),
            ({"count": 3}, 3),
            ({"totalCount": 4}, 4),
            ({"total": 5}, 5),
            ({"count": 0, "total": 9}, 0),
            ({}, None),
            (None, None),
            ("12", None),
            (True, None),
        ],
    )
    def test_count_shapes(self, adapter, raw, expected):
        assert adapter.transform_count_response(raw) == expected


def test_query_value():
    assert query_value(True) == "true"
    assert query_value(["a", "b"]) == "a,b"
    assert query_value(5) == "5"
    assert query_value(date(2024, 3, 1)) == "2024-03-01"
    assert query_value(datetime(2024, 3, 1, 8, 30)) == "2024-03-01T08:30:00"
