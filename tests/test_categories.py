import asyncio

import pytest

from memory_prompts.categories import CategoryResolver
from memory_prompts.exceptions import CategoryConflictError, ValidationError


class RacingStore:
    """Wraps a real store and lets a rival create the category between our
    lookup and our insert, the way a concurrent run would."""

    def __init__(self, store):
        self._store = store
        self.raced: set[str] = set()

    async def get_category_by_name(self, name):
        if name not in self.raced:
            self.raced.add(name)
            await self._store.create_category(name)
            return None
        return await self._store.get_category_by_name(name)

    async def create_category(self, name, parent_id=None):
        return await self._store.create_category(name, parent_id)


@pytest.mark.asyncio
async def test_resolve_twice_returns_same_identity(storage):
    resolver = CategoryResolver(storage)
    first = await resolver.resolve("Familia")
    second = await resolver.resolve("Familia")

    assert first.id == second.id
    assert first.parent_id is None


@pytest.mark.asyncio
async def test_subcategories_created_under_category(storage):
    resolver = CategoryResolver(storage)
    infancia = await resolver.resolve("Infancia", ["Escuela", "Juegos"])

    roots = await storage.list_root_categories()
    assert [c.name for c in roots] == ["Infancia"]
    assert [c.name for c in roots[0].children] == ["Escuela", "Juegos"]
    assert all(c.parent_id == infancia.id for c in roots[0].children)


@pytest.mark.asyncio
async def test_existing_subcategory_keeps_its_parent(storage):
    resolver = CategoryResolver(storage)
    infancia = await resolver.resolve("Infancia", ["Escuela"])
    await resolver.resolve("Familia", ["Escuela"])

    escuela = await storage.get_category_by_name("Escuela")
    assert escuela.parent_id == infancia.id


@pytest.mark.asyncio
async def test_conflict_on_create_returns_concurrent_winner(storage):
    racing = RacingStore(storage)
    resolved = await CategoryResolver(racing).resolve("Viajes")

    stored = await storage.get_category_by_name("Viajes")
    assert resolved.id == stored.id
    with pytest.raises(CategoryConflictError):
        await storage.create_category("Viajes")


@pytest.mark.asyncio
async def test_parallel_resolves_agree(storage):
    resolver = CategoryResolver(storage)
    results = await asyncio.gather(*(resolver.resolve("Música") for _ in range(5)))
    assert len({c.id for c in results}) == 1


@pytest.mark.asyncio
async def test_blank_name_rejected(storage):
    with pytest.raises(ValidationError):
        await CategoryResolver(storage).resolve("  ")
