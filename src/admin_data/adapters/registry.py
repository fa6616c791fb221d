# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Section -> adapter strategy lookup."""

from __future__ import annotations

import logging
from typing import Dict, Iterator, Mapping, Optional

from ..models.filters import reduce_section
from .base import DEFAULT_STRATEGY, AdapterStrategy, SectionAdapter
from .sections import BUILTIN_STRATEGIES

logger = logging.getLogger(__name__)

DEFAULT_ADAPTER = "default"


class AdapterRegistry:
    """
    Registry of adapter strategies keyed by section name.

    Lookup reduces the section to its last path segment and tries the reduced
    key, then the raw key, then falls back to the default strategy.

    :param strategies: Extra strategies merged over the built-in ones.
    :type strategies: :class:`~collections.abc.Mapping` | None
    :param include_builtins: Start from the built-in admin strategies. Default is True.
    :type include_builtins: :class:`bool`

    Example::

        registry = AdapterRegistry()
        registry.register("invoices", AdapterStrategy(build_list_request=my_builder))
        adapter = registry.get("billing/invoices", environment="prod")
    """

    def __init__(
        self,
        strategies: Optional[Mapping[str, AdapterStrategy]] = None,
        *,
        include_builtins: bool = True,
    ) -> None:
        self._strategies: Dict[str, AdapterStrategy] = dict(BUILTIN_STRATEGIES) if include_builtins else {}
        for name, strategy in (strategies or {}).items():
            self.register(name, strategy)

    def register(self, name: str, strategy: AdapterStrategy) -> None:
        """Add or replace the strategy for ``name``."""
        if not isinstance(strategy, AdapterStrategy):
            raise TypeError(f"strategy for {name!r} must be an AdapterStrategy, got {type(strategy).__name__}")
        self._strategies[name] = strategy

    def get(self, section: str, environment: str) -> SectionAdapter:
        """Bind the strategy for ``section`` to the reduced section name and environment."""
        reduced = reduce_section(section)
        for key in (reduced, section):
            strategy = self._strategies.get(key)
            if strategy is not None:
                return SectionAdapter(key, strategy, reduced, environment)
        return SectionAdapter(DEFAULT_ADAPTER, DEFAULT_STRATEGY, reduced, environment)

    def __contains__(self, name: object) -> bool:
        return name in self._strategies

    def __iter__(self) -> Iterator[str]:
        return iter(self._strategies)


__all__ = ["AdapterRegistry", "DEFAULT_ADAPTER"]
