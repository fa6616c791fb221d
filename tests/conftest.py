# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Shared pytest fixtures and configuration for admin data-access tests.

This module provides common test fixtures, sample records, and configuration
that can be used across all test modules.
"""

import pytest

from admin_data.core.config import DataAccessConfig, EndpointTable
from admin_data.models.filters import FilterRegistry

BASE_URL = "https://api.example.com"


@pytest.fixture
def orders_records():
    """25 order records, 10 of them Active."""
    records = []
    for i in range(25):
        records.append(
            {
                "id": f"ord-{i:03d}",
                "status": "Active" if i % 5 in (0, 2) else ("Cancelled" if i % 2 else "Pending"),
                "channel": "web" if i % 3 == 0 else "mobile",
                "amount": 10 * (i + 1),
                "createdAt": f"2024-03-{(i % 28) + 1:02d}T10:00:00Z",
                "customer": {"email": f"buyer{i}@example.com", "country": "US" if i < 12 else "DE"},
            }
        )
    return records


@pytest.fixture
def endpoint_table():
    return EndpointTable.from_mapping(
        {
            "base": {"prod": "https://prod.example.com", "dev": BASE_URL},
            "routes": {"users": "/users"},
        }
    )


@pytest.fixture
def fixture_config(endpoint_table):
    """Declarations exist but declare nothing for the test sections: everything is fixture-backed."""
    return DataAccessConfig(
        environment="dev",
        endpoint_declarations={},
        endpoints=endpoint_table,
        filters=FilterRegistry.from_mapping(
            {
                "orders": [
                    {"type": "text", "name": "q"},
                    {"type": "select", "name": "status"},
                    {"type": "select", "name": "channel"},
                    {"type": "date", "name": "from"},
                    {"type": "date", "name": "to"},
                ]
            }
        ),
    )


@pytest.fixture
def remote_config(endpoint_table):
    """Every section routed to the dev base URL."""
    return DataAccessConfig(
        environment="dev",
        use_endpoints=True,
        endpoint_declarations={},
        endpoints=endpoint_table,
        http_timeout=5,
    )
