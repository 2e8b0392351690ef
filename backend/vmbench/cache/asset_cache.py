"""In-memory asset cache that can short-circuit a loader chain."""

from __future__ import annotations

import logging
from copy import deepcopy
from typing import Any, Callable, Dict, Hashable, Optional

from ..engine import Interceptor
from ..middleware.chain import settle

LOGGER = logging.getLogger(__name__)


class AssetCache:
    """Stores loaded assets for reuse across loads of the same key."""

    def __init__(self) -> None:
        self._cache: Dict[Hashable, Any] = {}
        self.hits = 0
        self.misses = 0

    def get(self, key: Hashable) -> Optional[Any]:
        """Return a copy of the cached asset if available."""

        asset = self._cache.get(key)
        return deepcopy(asset) if asset is not None else None

    def set(self, key: Hashable, asset: Any) -> None:
        self._cache[key] = deepcopy(asset)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._cache

    def __len__(self) -> int:
        return len(self._cache)

    def interceptor(self, key_fn: Callable[[list], Hashable]) -> Interceptor:
        """Build a middleware that answers from the cache without calling ``next``."""

        def cached_load(args: list, next_: Callable[[list], Any]) -> Any:
            key = key_fn(args)
            if key in self._cache:
                self.hits += 1
                LOGGER.debug("Cache hit for asset %r", key)
                return self._resolved(self.get(key))
            self.misses += 1
            return self._store(key, next_(args))

        return cached_load

    @staticmethod
    async def _resolved(asset: Any) -> Any:
        return asset

    async def _store(self, key: Hashable, result: Any) -> Any:
        asset = await settle(result)
        self.set(key, asset)
        return asset
