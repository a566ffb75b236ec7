from __future__ import annotations

from typing import Callable, Coroutine

from ..types import Message


def create_openai_async_client(model: str, **kwargs) -> Callable[[list[Message], float], Coroutine]:
    from openai import AsyncOpenAI
    client = AsyncOpenAI(**kwargs)

    async def call(messages: list[Message], temperature: float) -> str:
        resp = await client.chat.completions.create(
            model=model, messages=messages, temperature=temperature
        )
        return resp.choices[0].message.content or ""

    return call
