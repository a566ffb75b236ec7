from __future__ import annotations

import asyncio
import hmac
import logging
from pathlib import Path
from typing import Any

import numpy as np

from .analytics import summarize
from .categories import CategoryResolver
from .config import Settings
from .events import EventRecorder
from .exceptions import AuthorizationError, ValidationError
from .generation import TextGenerator, validate_request
from .keywords import KeywordExtractor
from .retrieval import RandomSelector
from .storage.base import Storage
from .storage.sqlite_store import SQLiteStore
from .types import Category, ChatCallable, Event, GenerationRequest, Prompt, SummaryReport, WriteMode
from .writer import PersistenceWriter

logger = logging.getLogger(__name__)


class PromptService:
    """Generation pipeline plus the read/admin operations over one store."""

    def __init__(
        self,
        llm: ChatCallable,
        storage: Storage | None = None,
        *,
        db_path: str | Path | None = None,
        settings: Settings | None = None,
        keyword_llm: ChatCallable | None = None,
        rng: np.random.Generator | None = None,
    ):
        self._settings = settings or Settings()
        self._owns_storage = storage is None
        self._storage = storage if storage is not None else SQLiteStore(db_path or self._settings.db_path)

        self._generator = TextGenerator(llm, self._settings.generation_temperature)
        self._extractor = KeywordExtractor(keyword_llm or llm, self._settings.keyword_temperature)
        self._resolver = CategoryResolver(self._storage)
        self._writer = PersistenceWriter(
            self._storage, self._extractor, self._resolver,
            source=self._settings.source, model=self._settings.model,
        )
        self._selector = RandomSelector(self._storage, rng)
        self._events = EventRecorder(self._storage)

    @property
    def storage(self) -> Storage:
        return self._storage

    async def generate(
        self,
        category: str,
        language: str = "es",
        amount: int = 5,
        subcategories: list[str] | None = None,
        *,
        mode: WriteMode = "per_item",
        dry_run: bool = False,
    ) -> list[Prompt]:
        if mode not in ("bulk", "per_item"):
            raise ValidationError(f"Unknown write mode: {mode!r}")
        request = validate_request(
            GenerationRequest(category, language, amount, list(subcategories or []))
        )
        texts = await self._generator.generate_texts(request)
        logger.info("Generated %d prompts for %r", len(texts), request.category)

        if dry_run:
            return await self._writer.build_records(texts, request)
        if mode == "bulk":
            result = await self._writer.write_bulk(texts, request)
            return result.inserted
        return await self._writer.write_each(texts, request)

    async def select_random(self, category: str | None = None) -> Prompt:
        return await self._selector.select(category)

    async def record_event(self, prompt_id: str, type: str, metadata: Any = None) -> Event:
        return await self._events.record(prompt_id, type, metadata)

    async def list_categories(self) -> list[Category]:
        return await self._storage.list_root_categories()

    async def search_by_keyword(self, keyword: str) -> list[Prompt]:
        if not keyword:
            raise ValidationError("keyword is required")
        return await self._storage.search_prompts_by_keyword(keyword)

    def _authorize(self, credential: str | None) -> None:
        expected = self._settings.require_admin_key()
        if not credential or not hmac.compare_digest(credential.encode(), expected.encode()):
            logger.warning("Rejected admin request with missing or invalid credential")
            raise AuthorizationError("Valid admin API key required")

    async def admin_list_all(self, credential: str | None) -> list[Prompt]:
        self._authorize(credential)
        return await self._storage.get_prompts(with_events=True, newest_first=True)

    async def admin_summary(self, credential: str | None) -> SummaryReport:
        self._authorize(credential)
        return summarize(await self._storage.get_prompts())

    async def close(self) -> None:
        if self._owns_storage:
            await self._storage.close()

    # ── Sync wrappers ──

    def _run_sync(self, coro):
        async def run():
            try:
                return await coro
            finally:
                # the connection belongs to this event loop
                await self.close()

        return asyncio.run(run())

    def generate_sync(
        self,
        category: str,
        language: str = "es",
        amount: int = 5,
        subcategories: list[str] | None = None,
        *,
        mode: WriteMode = "per_item",
        dry_run: bool = False,
    ) -> list[Prompt]:
        return self._run_sync(
            self.generate(category, language, amount, subcategories, mode=mode, dry_run=dry_run)
        )

    def select_random_sync(self, category: str | None = None) -> Prompt:
        return self._run_sync(self.select_random(category))

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.close()
