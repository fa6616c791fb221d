# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Shared test utilities for unit tests.

Provides a recording ``httpx.MockTransport`` handler and a client factory to
reduce duplication across test files.
"""

import json

import httpx

from admin_data.client import DataAccessClient


class RecordingHandler:
    """Mock transport handler that replays pre-configured responses.

    Args:
        responses: List of ``(status_code, body)`` tuples returned in sequence.
            ``body`` is a dict/list (sent as JSON), a string (sent as text) or
            ``None`` (empty body).

    Attributes:
        requests: Every :class:`httpx.Request` received, in order.
    """

    def __init__(self, responses=None):
        self._responses = list(responses or [])
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        if not self._responses:
            raise AssertionError("No more responses")
        status, body = self._responses.pop(0)
        if body is None:
            return httpx.Response(status)
        if isinstance(body, (dict, list)):
            return httpx.Response(status, json=body)
        return httpx.Response(status, text=body)

    @property
    def last(self):
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.content.decode("utf-8"))

    def last_params(self):
        return list(self.last.url.params.multi_items())


def make_client(config, responses=None, **kwargs):
    """Build a client whose HTTP calls go to a :class:`RecordingHandler`.

    Returns ``(client, handler)``.
    """
    handler = RecordingHandler(responses)
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return DataAccessClient(config, http_client=http, **kwargs), handler
