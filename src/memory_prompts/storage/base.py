from __future__ import annotations

from typing import Protocol

from ..types import BulkWriteResult, Category, Event, Prompt


class Storage(Protocol):
    async def get_category_by_name(self, name: str) -> Category | None: ...

    async def create_category(self, name: str, parent_id: str | None = None) -> Category: ...

    async def list_root_categories(self) -> list[Category]: ...

    async def save_prompt(self, prompt: Prompt, category_ids: list[str]) -> Prompt: ...

    async def save_prompts(self, prompts: list[Prompt], category_ids: list[str]) -> BulkWriteResult: ...

    async def get_prompt(self, prompt_id: str) -> Prompt | None: ...

    async def get_prompts(
        self,
        category: str | None = None,
        *,
        with_events: bool = False,
        newest_first: bool = False,
    ) -> list[Prompt]: ...

    async def search_prompts_by_keyword(self, keyword: str) -> list[Prompt]: ...

    async def save_event(self, event: Event) -> Event: ...

    async def get_events(self, prompt_id: str) -> list[Event]: ...

    async def close(self) -> None: ...
