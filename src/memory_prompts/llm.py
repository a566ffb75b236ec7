from __future__ import annotations

import inspect
import json
import re
from typing import Any, Callable, TypeVar

from .exceptions import ParseError
from .types import ChatCallable, Message

T = TypeVar("T")


async def invoke(llm: ChatCallable, messages: list[Message], temperature: float) -> str:
    result = llm(messages, temperature)
    if inspect.isawaitable(result):
        result = await result
    return result or ""


def build_messages(system: str, user: str) -> list[Message]:
    return [
        {"role": "system", "content": system},
        {"role": "user", "content": user},
    ]


def strip_code_fence(raw: str) -> str:
    cleaned = re.sub(r"^```(?:json)?\s*", "", raw.strip())
    return re.sub(r"\s*```$", "", cleaned)


def decode_json(raw: str, validate: Callable[[Any], bool] | None = None) -> Any:
    cleaned = strip_code_fence(raw)
    try:
        value = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Invalid JSON: {exc}", raw) from exc
    if validate is not None and not validate(value):
        raise ParseError(f"Unexpected JSON shape: {type(value).__name__}", raw)
    return value


def decode_or_default(
    raw: str,
    default: T,
    validate: Callable[[Any], bool] | None = None,
    on_error: Callable[[ParseError], None] | None = None,
) -> T:
    try:
        return decode_json(raw, validate)
    except ParseError as exc:
        if on_error is not None:
            on_error(exc)
        return default


def is_string_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) for v in value)
