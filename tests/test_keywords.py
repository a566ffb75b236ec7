import json
import logging

import pytest

from memory_prompts.keywords import KeywordExtractor


@pytest.mark.asyncio
async def test_valid_array_returned_verbatim(mock_llm):
    mock_llm.responses["palabras clave"] = json.dumps(["familia", "casa", "abuela"])
    keywords = await KeywordExtractor(mock_llm).extract("¿Cómo era la casa de tu abuela?")

    assert keywords == ["familia", "casa", "abuela"]
    assert mock_llm.calls[0][1] == 0.3
    assert "¿Cómo era la casa de tu abuela?" in mock_llm.calls[0][0][-1]["content"]


@pytest.mark.asyncio
async def test_code_fenced_array_is_decoded(mock_llm):
    mock_llm.responses["palabras clave"] = '```json\n["escuela", "amigos", "juegos"]\n```'
    assert await KeywordExtractor(mock_llm).extract("¿A qué jugabas?") == ["escuela", "amigos", "juegos"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "raw",
    [
        "familia, casa, abuela",
        '{"keywords": ["familia"]}',
        '"familia"',
        '["familia", 3]',
        "Lo siento, no puedo ayudar con eso.",
        "",
    ],
)
async def test_undecodable_response_yields_empty_list(mock_llm, caplog, raw):
    mock_llm.responses["palabras clave"] = raw
    with caplog.at_level(logging.WARNING, logger="memory_prompts.keywords"):
        keywords = await KeywordExtractor(mock_llm).extract("¿Quién te cuidaba?")

    assert keywords == []
    assert "Could not parse keywords" in caplog.text


@pytest.mark.asyncio
async def test_upstream_failure_yields_empty_list(mock_llm, caplog):
    mock_llm.responses["palabras clave"] = TimeoutError("model timed out")
    with caplog.at_level(logging.WARNING, logger="memory_prompts.keywords"):
        keywords = await KeywordExtractor(mock_llm).extract("¿Quién te cuidaba?")

    assert keywords == []
    assert "model timed out" in caplog.text


@pytest.mark.asyncio
async def test_long_array_is_capped_at_five(mock_llm):
    mock_llm.responses["palabras clave"] = json.dumps(list("abcdefg"))
    assert await KeywordExtractor(mock_llm).extract("texto") == list("abcde")
