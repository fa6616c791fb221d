# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

# HTTP subcode constants
HTTP_400 = "http_400"
HTTP_401 = "http_401"
HTTP_403 = "http_403"
HTTP_404 = "http_404"
HTTP_409 = "http_409"
HTTP_422 = "http_422"
HTTP_429 = "http_429"
HTTP_500 = "http_500"
HTTP_502 = "http_502"
HTTP_503 = "http_503"
HTTP_504 = "http_504"

_HTTP_STATUS_TO_SUBCODE = {
    400: HTTP_400,
    401: HTTP_401,
    403: HTTP_403,
    404: HTTP_404,
    409: HTTP_409,
    422: HTTP_422,
    429: HTTP_429,
    500: HTTP_500,
    502: HTTP_502,
    503: HTTP_503,
    504: HTTP_504,
}

ALL_HTTP_SUBCODES = set(_HTTP_STATUS_TO_SUBCODE.values())

# Configuration subcodes
CONFIG_DECLARATIONS_MISSING = "config_declarations_missing"
CONFIG_ENDPOINT_MISSING = "config_endpoint_missing"

# Transport subcodes
TIMEOUT_WALL_CLOCK = "timeout_wall_clock"
NETWORK_CONNECT = "network_connect"

# Payload subcodes
JSON_RESPONSE_INVALID = "json_response_invalid"
JSON_FIXTURE_INVALID = "json_fixture_invalid"
JSON_BODY_UNSERIALIZABLE = "json_body_unserializable"

# Fixture subcodes
FIXTURE_NOT_FOUND = "fixture_not_found"
FIXTURE_NOT_ARRAY = "fixture_not_array"


def _http_subcode(status: int) -> str:
    """Map an HTTP status to its subcode, falling back to ``http_<status>``."""
    return _HTTP_STATUS_TO_SUBCODE.get(status, f"http_{status}")
