from __future__ import annotations

import os
from typing import Callable, Coroutine

from ..types import Message

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1/chat/completions"


def _build_payload(model: str, messages: list[Message], temperature: float) -> dict:
    return {
        "model": model,
        "messages": messages,
        "temperature": temperature,
    }


def _headers(api_key: str) -> dict:
    return {"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"}


def create_openrouter_async_client(model: str, api_key: str | None = None) -> Callable[[list[Message], float], Coroutine]:
    import httpx
    key = api_key or os.environ["OPENROUTER_API_KEY"]

    async def call(messages: list[Message], temperature: float) -> str:
        async with httpx.AsyncClient() as client:
            resp = await client.post(
                OPENROUTER_BASE_URL, json=_build_payload(model, messages, temperature),
                headers=_headers(key), timeout=120,
            )
            resp.raise_for_status()
            return resp.json()["choices"][0]["message"]["content"]

    return call
