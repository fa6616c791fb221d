# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Per-section request builders and response normalizers."""

from .base import AdapterStrategy, SectionAdapter
from .registry import AdapterRegistry

__all__ = ["AdapterRegistry", "AdapterStrategy", "SectionAdapter"]
