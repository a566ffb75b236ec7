from __future__ import annotations

import logging

from .exceptions import CategoryConflictError, PersistenceError, ValidationError
from .storage.base import Storage
from .types import Category

logger = logging.getLogger(__name__)


class CategoryResolver:
    """Connect-or-create for category names.

    Lookup by exact name, create when absent, and when a concurrent run wins
    the insert race (uniqueness violation) re-read and return its row.
    """

    def __init__(self, storage: Storage):
        self._storage = storage

    async def resolve(self, name: str, subcategories: list[str] | None = None) -> Category:
        category = await self._get_or_create(name)
        for sub in subcategories or []:
            if sub.strip() and sub.strip() != category.name:
                await self._get_or_create(sub, parent_id=category.id)
        return category

    async def _get_or_create(self, name: str, parent_id: str | None = None) -> Category:
        name = name.strip()
        if not name:
            raise ValidationError("category name is required")
        existing = await self._storage.get_category_by_name(name)
        if existing:
            return existing
        try:
            created = await self._storage.create_category(name, parent_id)
        except CategoryConflictError:
            winner = await self._storage.get_category_by_name(name)
            if winner is None:
                raise PersistenceError(f"Category {name!r} conflicted on create but is not readable")
            logger.info("Category %r created concurrently, using existing row %s", name, winner.id)
            return winner
        logger.info("Created category %r (parent=%s)", name, parent_id)
        return created
