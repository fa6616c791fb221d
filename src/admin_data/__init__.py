# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Client-side data access for admin list pages.

:class:`DataAccessClient` turns a section name, filter values and pagination
into a normalized :class:`~admin_data.core.results.ResultEnvelope`, calling the
section's backend through its adapter or filtering local fixtures when no
endpoint is configured.
"""

__version__ = "0.1.0"

from .adapters import AdapterRegistry, AdapterStrategy
from .client import DataAccessClient
from .core.config import DataAccessConfig, EndpointTable
from .core.errors import (
    ConfigurationError,
    DataAccessError,
    FixtureError,
    HttpError,
    JsonParseError,
    NetworkError,
    RequestTimeoutError,
    ValidationError,
)
from .core.results import RequestPlan, ResultEnvelope
from .models import FilterDescriptor, FilterRegistry, MatchMode, PaginationSpec

__all__ = [
    "DataAccessClient",
    "DataAccessConfig",
    "EndpointTable",
    "AdapterRegistry",
    "AdapterStrategy",
    "FilterDescriptor",
    "FilterRegistry",
    "MatchMode",
    "PaginationSpec",
    "RequestPlan",
    "ResultEnvelope",
    "DataAccessError",
    "ConfigurationError",
    "ValidationError",
    "JsonParseError",
    "FixtureError",
    "RequestTimeoutError",
    "NetworkError",
    "HttpError",
]
