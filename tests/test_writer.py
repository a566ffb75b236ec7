import asyncio
import json

import pytest

from memory_prompts.categories import CategoryResolver
from memory_prompts.exceptions import PersistenceError
from memory_prompts.keywords import KeywordExtractor
from memory_prompts.types import GenerationRequest
from memory_prompts.writer import PersistenceWriter


class FlakyStore:
    """Delegates to a real store but fails saving prompts whose text is listed."""

    def __init__(self, store, fail_on: set[str]):
        self._store = store
        self._fail_on = fail_on

    def __getattr__(self, name):
        return getattr(self._store, name)

    async def save_prompt(self, prompt, category_ids):
        if prompt.text in self._fail_on:
            raise PersistenceError("disk I/O error")
        return await self._store.save_prompt(prompt, category_ids)


def _writer(store, llm):
    return PersistenceWriter(store, KeywordExtractor(llm), CategoryResolver(store), source="openai", model="gpt-4")


@pytest.mark.asyncio
async def test_per_item_failure_does_not_stop_batch(storage, mock_llm, caplog):
    flaky = FlakyStore(storage, {"¿Dos?"})
    request = GenerationRequest("Familia")

    saved = await _writer(flaky, mock_llm).write_each(["¿Uno?", "¿Dos?", "¿Tres?"], request)

    assert [p.text for p in saved] == ["¿Uno?", "¿Tres?"]
    assert [p.text for p in await storage.get_prompts()] == ["¿Uno?", "¿Tres?"]
    assert "disk I/O error" in caplog.text


@pytest.mark.asyncio
async def test_per_item_records_carry_tags_and_keywords(storage, mock_llm):
    request = GenerationRequest("Infancia", "en", 2, ["Escuela"])
    [saved] = await _writer(storage, mock_llm).write_each(["¿Tu maestra?"], request)

    loaded = await storage.get_prompt(saved.id)
    assert loaded.language == "en"
    assert loaded.keywords == ["familia", "recuerdos", "infancia"]
    assert loaded.categories == ["Infancia"]
    assert loaded.subcategories == ["Escuela"]
    assert (loaded.source, loaded.model) == ("openai", "gpt-4")


@pytest.mark.asyncio
async def test_bulk_reports_inserted_records(storage, mock_llm):
    request = GenerationRequest("Familia")
    result = await _writer(storage, mock_llm).write_bulk(["¿Uno?", "¿Dos?"], request)

    assert len(result.inserted) == 2
    assert result.failed == []
    assert sorted(p.id for p in await storage.get_prompts("Familia")) == sorted(result.inserted_ids)


@pytest.mark.asyncio
async def test_bulk_with_no_texts_writes_nothing(storage, mock_llm):
    result = await _writer(storage, mock_llm).write_bulk([], GenerationRequest("Familia"))
    assert result.inserted == []
    assert await storage.get_category_by_name("Familia") is None


@pytest.mark.asyncio
async def test_keyword_calls_are_sequential(storage):
    in_flight = 0
    peak = 0

    async def llm(messages, temperature):
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0)
        in_flight -= 1
        return json.dumps(["uno"])

    records = await _writer(storage, llm).build_records(["a", "b", "c"], GenerationRequest("Familia"))
    assert [r.keywords for r in records] == [["uno"]] * 3
    assert peak == 1
