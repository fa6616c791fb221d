# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Data models and type definitions for the admin data-access layer.

This module contains filter descriptors, the filter registry and pagination
parameters used throughout the package.
"""

from .filters import FilterDescriptor, FilterRegistry, MatchMode
from .pagination import PaginationSpec

__all__ = ["FilterDescriptor", "FilterRegistry", "MatchMode", "PaginationSpec"]
