from __future__ import annotations

import numpy as np

from .exceptions import NotFoundError
from .storage.base import Storage
from .types import Prompt


class RandomSelector:
    def __init__(self, storage: Storage, rng: np.random.Generator | None = None):
        self._storage = storage
        self._rng = rng or np.random.default_rng()

    async def select(self, category: str | None = None) -> Prompt:
        candidates = await self._storage.get_prompts(category or None)
        if not candidates:
            if category:
                raise NotFoundError(f"No prompts found for category {category!r}")
            raise NotFoundError("No prompts available")
        return candidates[int(self._rng.integers(len(candidates)))]
