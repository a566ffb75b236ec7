from __future__ import annotations

import logging

from .categories import CategoryResolver
from .exceptions import PersistenceError
from .keywords import KeywordExtractor
from .storage.base import Storage
from .types import BulkWriteResult, GenerationRequest, Prompt, _now

logger = logging.getLogger(__name__)


class PersistenceWriter:
    def __init__(
        self,
        storage: Storage,
        extractor: KeywordExtractor,
        resolver: CategoryResolver,
        source: str = "openai",
        model: str = "gpt-4",
    ):
        self._storage = storage
        self._extractor = extractor
        self._resolver = resolver
        self._source = source
        self._model = model

    def _record(self, text: str, keywords: list[str], request: GenerationRequest) -> Prompt:
        return Prompt(
            text=text,
            language=request.language,
            keywords=keywords,
            categories=[request.category],
            subcategories=list(request.subcategories),
            source=self._source,
            model=self._model,
            created_at=_now(),
        )

    async def build_records(self, texts: list[str], request: GenerationRequest) -> list[Prompt]:
        # one keyword call in flight at a time per run
        records = []
        for text in texts:
            keywords = await self._extractor.extract(text)
            records.append(self._record(text, keywords, request))
        return records

    async def write_bulk(self, texts: list[str], request: GenerationRequest) -> BulkWriteResult:
        records = await self.build_records(texts, request)
        if not records:
            return BulkWriteResult()
        category = await self._resolver.resolve(request.category, request.subcategories)
        result = await self._storage.save_prompts(records, [category.id])
        logger.info(
            "Bulk insert for %r: %d inserted, %d failed",
            request.category, len(result.inserted), len(result.failed),
        )
        return result

    async def write_each(self, texts: list[str], request: GenerationRequest) -> list[Prompt]:
        saved: list[Prompt] = []
        for text in texts:
            keywords = await self._extractor.extract(text)
            record = self._record(text, keywords, request)
            try:
                category = await self._resolver.resolve(request.category, request.subcategories)
                await self._storage.save_prompt(record, [category.id])
            except PersistenceError as exc:
                logger.error("Failed to save prompt %r: %s", text, exc)
                continue
            saved.append(record)
        logger.info("Saved %d of %d prompts for %r", len(saved), len(texts), request.category)
        return saved
