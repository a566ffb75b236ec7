from __future__ import annotations

import logging
import re

from .exceptions import GenerationError, ValidationError
from .llm import build_messages, invoke
from .prompts import GENERATE_QUESTIONS, GENERATION_SYSTEM, LANGUAGE_NAMES, SUBCATEGORY_FOCUS
from .types import LANGUAGES, ChatCallable, GenerationRequest

logger = logging.getLogger(__name__)

_ENUMERATION = re.compile(r"^\s*\d+[.)](?:\s+|$)")


def normalize_output(raw: str) -> list[str]:
    """Split model output into prompt texts, dropping "1." / "2)" markers and blank lines."""
    texts = []
    for line in raw.splitlines():
        text = _ENUMERATION.sub("", line, count=1).strip()
        if text:
            texts.append(text)
    return texts


def validate_request(request: GenerationRequest) -> GenerationRequest:
    if not isinstance(request.category, str) or not request.category.strip():
        raise ValidationError("category is required")
    if request.language not in LANGUAGES:
        raise ValidationError(f"language must be one of {', '.join(LANGUAGES)}")
    if isinstance(request.amount, bool) or not isinstance(request.amount, int) or request.amount < 1:
        raise ValidationError("amount must be a positive integer")
    if not all(isinstance(s, str) for s in request.subcategories):
        raise ValidationError("subcategories must be strings")
    return GenerationRequest(
        category=request.category.strip(),
        language=request.language,
        amount=request.amount,
        subcategories=[s.strip() for s in request.subcategories if s.strip()],
    )


class TextGenerator:
    def __init__(self, llm: ChatCallable, temperature: float = 0.8):
        self._llm = llm
        self._temperature = temperature

    def build_instruction(self, request: GenerationRequest) -> str:
        focus = ""
        if request.subcategories:
            focus = SUBCATEGORY_FOCUS.format(subcategories=", ".join(request.subcategories))
        return GENERATE_QUESTIONS.format(
            amount=request.amount,
            language_name=LANGUAGE_NAMES[request.language],
            category=request.category,
            focus=focus,
        )

    async def generate(self, request: GenerationRequest) -> str:
        messages = build_messages(GENERATION_SYSTEM, self.build_instruction(request))
        try:
            return await invoke(self._llm, messages, self._temperature)
        except Exception as exc:
            raise GenerationError(f"Prompt generation failed: {exc}") from exc

    async def generate_texts(self, request: GenerationRequest) -> list[str]:
        raw = await self.generate(request)
        texts = normalize_output(raw)
        if len(texts) != request.amount:
            logger.info("Requested %d prompts for %r, model returned %d", request.amount, request.category, len(texts))
        return texts
