from __future__ import annotations

import logging

from .exceptions import ParseError
from .llm import build_messages, decode_or_default, invoke, is_string_list
from .prompts import EXTRACT_KEYWORDS, KEYWORD_SYSTEM
from .types import MAX_KEYWORDS, ChatCallable

logger = logging.getLogger(__name__)


class KeywordExtractor:
    """Best-effort keyword tagging. Never raises: any failure yields ``[]``."""

    def __init__(self, llm: ChatCallable, temperature: float = 0.3):
        self._llm = llm
        self._temperature = temperature

    async def extract(self, text: str) -> list[str]:
        messages = build_messages(KEYWORD_SYSTEM, EXTRACT_KEYWORDS.format(text=text))
        try:
            raw = await invoke(self._llm, messages, self._temperature)
        except Exception as exc:
            logger.warning("Keyword extraction call failed for %r: %s", text, exc)
            return []

        def warn(exc: ParseError) -> None:
            logger.warning("Could not parse keywords for %r: %s (raw=%r)", text, exc, exc.raw)

        keywords = decode_or_default(raw, [], validate=is_string_list, on_error=warn)
        return keywords[:MAX_KEYWORDS]
