# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Tests for the async HTTP client: timeouts, connection failures, HTTP errors and JSON decoding."""

import asyncio
import json
from datetime import date, datetime

import httpx
import pytest

from admin_data.core._error_codes import (
    HTTP_404,
    HTTP_500,
    JSON_BODY_UNSERIALIZABLE,
    JSON_RESPONSE_INVALID,
    NETWORK_CONNECT,
    TIMEOUT_WALL_CLOCK,
)
from admin_data.core._http import _HttpClient, read_json
from admin_data.core.errors import HttpError, JsonParseError, NetworkError, RequestTimeoutError, ValidationError
from tests.unit.test_helpers import RecordingHandler

URL = "https://api.example.com/orders"


def client_for(handler, timeout=5):
    return _HttpClient(timeout=timeout, client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


class TestSuccess:
    async def test_returns_response_and_sends_headers(self):
        handler = RecordingHandler([(200, {"items": []})])
        http = client_for(handler)
        resp = await http._request("POST", URL, json_body={"env": "dev"})
        assert resp.status_code == 200
        req = handler.last
        assert req.method == "POST"
        assert req.headers["Cache-Control"] == "no-store"
        assert req.headers["Content-Type"] == "application/json"
        assert json.loads(req.content) == {"env": "dev"}

    async def test_get_has_no_content_type(self):
        handler = RecordingHandler([(200, [])])
        await client_for(handler)._request("GET", URL, params=(("status", "Active"), ("limit", "5")))
        assert "Content-Type" not in handler.last.headers
        assert list(handler.last.url.params.multi_items()) == [("status", "Active"), ("limit", "5")]

    async def test_dict_params(self):
        handler = RecordingHandler([(200, [])])
        await client_for(handler)._request("GET", URL, params={"q": "x"})
        assert handler.last.url.params["q"] == "x"

    async def test_extra_headers_override(self):
        handler = RecordingHandler([(204, None)])
        await client_for(handler)._request("DELETE", URL, headers={"Cache-Control": "no-cache"})
        assert handler.last.headers["Cache-Control"] == "no-cache"


class TestBodyEncoding:
    async def test_dates_become_iso_strings(self):
        handler = RecordingHandler([(200, {})])
        body = {"from": date(2024, 3, 1), "to": datetime(2024, 3, 31, 23, 59, 59), "tags": {"new"}}
        await client_for(handler)._request("POST", URL, json_body=body)
        assert handler.last_json() == {"from": "2024-03-01", "to": "2024-03-31T23:59:59", "tags": ["new"]}

    async def test_unserializable_body_raises_validation_error(self):
        handler = RecordingHandler([(200, {})])
        with pytest.raises(ValidationError) as ei:
            await client_for(handler)._request("POST", URL, json_body={"blob": object()})
        err = ei.value
        assert err.subcode == JSON_BODY_UNSERIALIZABLE
        assert err.details["url"] == URL
        assert handler.requests == []


class TestTimeout:
    def test_default_timeout_is_twenty_seconds(self):
        assert _HttpClient().timeout_ms == 20000

    def test_twenty_second_message(self):
        err = RequestTimeoutError(20000)
        assert str(err) == "Request timed out after 20 seconds"
        assert err.timeout_ms == 20000
        assert err.is_timeout is True

    async def test_never_resolving_call_is_cancelled(self):
        cancelled = asyncio.Event()

        async def never(request):
            try:
                await asyncio.sleep(3600)
            except asyncio.CancelledError:
                cancelled.set()
                raise

        http = client_for(never, timeout=0.05)
        with pytest.raises(RequestTimeoutError) as ei:
            await http._request("GET", URL)
        err = ei.value
        assert err.timeout_ms == 50
        assert err.subcode == TIMEOUT_WALL_CLOCK
        assert err.details["url"] == URL
        assert cancelled.is_set()

    async def test_per_call_timeout_override(self):
        async def never(request):
            await asyncio.sleep(3600)

        http = client_for(never, timeout=30)
        with pytest.raises(RequestTimeoutError) as ei:
            await http._request("GET", URL, timeout=0.02)
        assert ei.value.timeout_ms == 20

    async def test_transport_timeout_maps_to_timeout_error(self):
        def raise_timeout(request):
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(RequestTimeoutError):
            await client_for(raise_timeout)._request("GET", URL)


class TestNetwork:
    async def test_connect_error(self):
        def refuse(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(NetworkError) as ei:
            await client_for(refuse)._request("GET", URL)
        err = ei.value
        assert str(err) == "Network error: Unable to connect to server"
        assert err.is_network_error is True
        assert err.is_http_error is False
        assert err.subcode == NETWORK_CONNECT


class TestHttpErrors:
    async def test_message_from_body_message(self):
        handler = RecordingHandler([(400, {"message": "status is invalid", "error": "bad"})])
        with pytest.raises(HttpError) as ei:
            await client_for(handler)._request("GET", URL)
        assert str(ei.value) == "status is invalid"
        assert ei.value.status_code == 400

    async def test_message_from_body_error(self):
        handler = RecordingHandler([(409, {"error": "already blocked"})])
        with pytest.raises(HttpError) as ei:
            await client_for(handler)._request("POST", URL, json_body={})
        assert str(ei.value) == "already blocked"

    async def test_message_from_nested_error(self):
        handler = RecordingHandler([(422, {"error": {"code": "x", "message": "nested"}})])
        with pytest.raises(HttpError) as ei:
            await client_for(handler)._request("GET", URL)
        assert str(ei.value) == "nested"

    async def test_fallback_message_and_excerpt(self):
        handler = RecordingHandler([(500, "<html>boom</html>")])
        with pytest.raises(HttpError) as ei:
            await client_for(handler)._request("GET", URL)
        err = ei.value
        assert str(err) == "HTTP 500: Internal Server Error"
        assert err.subcode == HTTP_500
        assert err.status_text == "Internal Server Error"
        assert err.details["body_excerpt"] == "<html>boom</html>"
        assert err.source == "server"
        assert err.is_http_error is True

    async def test_404_subcode(self):
        handler = RecordingHandler([(404, None)])
        with pytest.raises(HttpError) as ei:
            await client_for(handler)._request("GET", URL)
        d = ei.value.to_dict()
        assert d["code"] == "http_error"
        assert d["subcode"] == HTTP_404
        assert d["status_code"] == 404
        assert d["details"]["url"] == URL

    async def test_unmapped_status_subcode(self):
        handler = RecordingHandler([(418, None)])
        with pytest.raises(HttpError) as ei:
            await client_for(handler)._request("GET", URL)
        assert ei.value.subcode == "http_418"


class TestReadJson:
    def test_decodes(self):
        assert read_json(httpx.Response(200, json={"a": 1}), URL) == {"a": 1}

    def test_empty_body_is_none(self):
        assert read_json(httpx.Response(204), URL) is None

    def test_invalid_json(self):
        with pytest.raises(JsonParseError) as ei:
            read_json(httpx.Response(200, text="not json"), URL)
        assert ei.value.subcode == JSON_RESPONSE_INVALID
        assert ei.value.details["status_code"] == 200


class TestClientOwnership:
    async def test_injected_client_is_not_closed(self):
        inner = httpx.AsyncClient(transport=httpx.MockTransport(RecordingHandler([])))
        http = _HttpClient(client=inner)
        await http.aclose()
        assert inner.is_closed is False
        await inner.aclose()

    async def test_owned_client_is_closed(self):
        http = _HttpClient()
        inner = http._get_client()
        await http.aclose()
        assert inner.is_closed is True
        await http.aclose()
