# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Utilities for the admin data-access layer.

This module contains helper functions such as the pandas integration.
"""

__all__ = []
