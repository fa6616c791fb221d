# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Tests for the structured error taxonomy."""

import pytest

from admin_data.core._error_codes import (
    ALL_HTTP_SUBCODES,
    CONFIG_DECLARATIONS_MISSING,
    HTTP_429,
    _http_subcode,
)
from admin_data.core.errors import (
    ConfigurationError,
    DataAccessError,
    FixtureError,
    HttpError,
    JsonParseError,
    NetworkError,
    RequestTimeoutError,
    ValidationError,
)


def test_all_errors_derive_from_base():
    for err in (
        ConfigurationError("x"),
        ValidationError("x"),
        JsonParseError("x"),
        FixtureError("x"),
        RequestTimeoutError(1000),
        NetworkError(),
        HttpError("x", 500),
    ):
        assert isinstance(err, DataAccessError)


@pytest.mark.parametrize(
    "err, code",
    [
        (ConfigurationError("x"), "configuration_error"),
        (ValidationError("x"), "validation_error"),
        (JsonParseError("x"), "json_parse_error"),
        (FixtureError("x"), "fixture_error"),
        (RequestTimeoutError(1000), "timeout_error"),
        (NetworkError(), "network_error"),
        (HttpError("x", 400), "http_error"),
    ],
)
def test_codes(err, code):
    assert err.code == code


def test_discriminant_flags():
    assert (RequestTimeoutError(1).is_timeout, RequestTimeoutError(1).is_http_error) == (True, False)
    assert NetworkError().is_network_error is True
    assert HttpError("x", 404).is_http_error is True
    assert ConfigurationError("x").is_timeout is False


def test_timeout_message_fractional_seconds():
    assert str(RequestTimeoutError(1500)) == "Request timed out after 1.5 seconds"
    assert RequestTimeoutError(1500).details["timeout_ms"] == 1500


def test_http_error_fields():
    err = HttpError("Too many", 429, status_text="Too Many Requests", details={"url": "u"})
    assert err.subcode == HTTP_429
    assert err.status_text == "Too Many Requests"
    assert err.details == {"url": "u", "status_text": "Too Many Requests"}
    assert err.source == "server"


def test_with_context_replaces_message_and_merges_details():
    err = ConfigurationError("old", subcode=CONFIG_DECLARATIONS_MISSING, details={"a": 1})
    same = err.with_context("new", section="orders", adapter=None)
    assert same is err
    assert str(err) == "new"
    assert err.args == ("new",)
    assert err.details == {"a": 1, "section": "orders"}


def test_with_context_keeps_message_when_none():
    err = NetworkError()
    err.with_context(url="https://x")
    assert str(err) == "Network error: Unable to connect to server"
    assert err.details["url"] == "https://x"


def test_to_dict():
    d = FixtureError("missing", details={"path": "p"}).to_dict()
    assert d["message"] == "missing"
    assert d["code"] == "fixture_error"
    assert d["source"] == "client"
    assert d["details"] == {"path": "p"}
    assert d["timestamp"].endswith("Z")


def test_http_subcodes():
    assert _http_subcode(404) == "http_404"
    assert _http_subcode(499) == "http_499"
    assert "http_500" in ALL_HTTP_SUBCODES
