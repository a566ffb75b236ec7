from __future__ import annotations

from typing import Callable, Coroutine

from ..types import Message

OLLAMA_BASE_URL = "http://localhost:11434/api/chat"


def _build_payload(model: str, messages: list[Message], temperature: float) -> dict:
    return {
        "model": model,
        "messages": messages,
        "options": {"temperature": temperature},
        "stream": False,
    }


def create_ollama_async_client(model: str, base_url: str = OLLAMA_BASE_URL) -> Callable[[list[Message], float], Coroutine]:
    import httpx

    async def call(messages: list[Message], temperature: float) -> str:
        async with httpx.AsyncClient() as client:
            resp = await client.post(base_url, json=_build_payload(model, messages, temperature), timeout=300)
            resp.raise_for_status()
            return resp.json()["message"]["content"]

    return call
