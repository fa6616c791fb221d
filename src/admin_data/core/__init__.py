# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Core infrastructure components for the admin data-access layer.

This module contains the foundational components including configuration,
endpoint resolution, HTTP transport, result types and error handling.
"""

from .results import RequestPlan, ResultEnvelope, paginate

__all__ = ["RequestPlan", "ResultEnvelope", "paginate"]
