# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Tests for section -> URL resolution."""

import pytest

from admin_data.core.config import EndpointTable
from admin_data.core.endpoints import EndpointResolver, join_url

TABLE = EndpointTable.from_mapping(
    {
        "base": {"dev": "https://dev.example.com/", "prod": "https://api.example.com"},
        "routes": {"users": "/v2/users", "mysql": "/db/mysql"},
    }
)


def resolver(declarations, environment="dev", use_endpoints=False):
    return EndpointResolver(declarations, TABLE, environment, use_endpoints)


class TestResolve:
    def test_no_declarations_means_fixtures(self):
        r = resolver(None, use_endpoints=True)
        assert r.has_declarations is False
        assert r.resolve("users") == ""

    def test_empty_declarations_without_use_endpoints(self):
        r = resolver({})
        assert r.has_declarations is True
        assert r.resolve("users") == ""

    def test_absolute_endpoint_used_verbatim(self):
        r = resolver({"kyc-shufti": {"dev": {"endpoint": "https://kyc.example.net/sessions"}}})
        assert r.resolve("kyc-shufti") == "https://kyc.example.net/sessions"

    def test_relative_endpoint_joined_with_one_slash(self):
        r = resolver({"orders": {"dev": {"endpoint": "orders/list"}}})
        assert r.resolve("orders") == "https://dev.example.com/orders/list"
        r = resolver({"orders": {"dev": {"endpoint": "/orders/list"}}})
        assert r.resolve("orders") == "https://dev.example.com/orders/list"

    def test_blank_endpoint_is_ignored(self):
        r = resolver({"orders": {"dev": {"endpoint": "   "}}})
        assert r.resolve("orders") == ""

    def test_other_environment_only(self):
        r = resolver({"orders": {"prod": {"endpoint": "/orders"}}})
        assert r.resolve("orders") == ""
        assert resolver({"orders": {"prod": {"endpoint": "/orders"}}}, environment="prod").resolve("orders") == (
            "https://api.example.com/orders"
        )

    def test_reduced_key_declaration(self):
        r = resolver({"scylla-db": {"dev": {"endpoint": "/scylla"}}})
        assert r.resolve("developer/scylla-db") == "https://dev.example.com/scylla"

    def test_full_key_declaration_wins(self):
        r = resolver(
            {
                "developer/scylla-db": {"dev": {"endpoint": "/full"}},
                "scylla-db": {"dev": {"endpoint": "/reduced"}},
            }
        )
        assert r.resolve("developer/scylla-db") == "https://dev.example.com/full"

    @pytest.mark.parametrize(
        "section, expected",
        [
            ("users", "https://dev.example.com/v2/users"),
            ("developer/mysql", "https://dev.example.com/db/mysql"),
            ("orders", "https://dev.example.com/orders"),
        ],
    )
    def test_use_endpoints_routes(self, section, expected):
        assert resolver({}, use_endpoints=True).resolve(section) == expected

    def test_declaration_wins_over_routes(self):
        r = resolver({"users": {"dev": {"endpoint": "https://users.example.org"}}}, use_endpoints=True)
        assert r.resolve("users") == "https://users.example.org"

    def test_suffix_and_parts(self):
        r = resolver({"users": {"dev": {"endpoint": "https://users.example.org/"}}})
        assert r.resolve("users", "count") == "https://users.example.org/count"
        assert r.resolve("users", "/deleteUser", "u1") == "https://users.example.org/deleteUser/u1"
        assert r.resolve("users", "", 42) == "https://users.example.org/42"

    def test_suffix_on_unresolved_section(self):
        assert resolver({}).resolve("orders", "count") == ""


class TestJoinUrl:
    def test_single_slash_boundaries(self):
        assert join_url("https://a.example/", "/b/", "c") == "https://a.example/b/c"

    def test_empty_parts_skipped(self):
        assert join_url("https://a.example", "", None, "x") == "https://a.example/x"

    def test_empty_base(self):
        assert join_url("", "users") == "/users"
