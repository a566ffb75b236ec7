from __future__ import annotations

from typing import Callable, Coroutine

from ..types import Message


def _split_system(messages: list[Message]) -> tuple[str, list[Message]]:
    system = "\n\n".join(m["content"] for m in messages if m["role"] == "system")
    return system, [m for m in messages if m["role"] != "system"]


def create_anthropic_async_client(model: str, max_tokens: int = 4096, **kwargs) -> Callable[[list[Message], float], Coroutine]:
    from anthropic import AsyncAnthropic
    client = AsyncAnthropic(**kwargs)

    async def call(messages: list[Message], temperature: float) -> str:
        system, chat = _split_system(messages)
        resp = await client.messages.create(
            model=model, max_tokens=max_tokens, system=system,
            messages=chat, temperature=temperature,
        )
        return resp.content[0].text

    return call
