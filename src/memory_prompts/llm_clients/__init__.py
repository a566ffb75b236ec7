from __future__ import annotations

from ..config import Settings
from ..types import ChatCallable
from .anthropic import create_anthropic_async_client
from .ollama import create_ollama_async_client
from .openai import create_openai_async_client
from .openrouter import create_openrouter_async_client


def create_chat_client(settings: Settings) -> ChatCallable:
    key = settings.require_model_key()
    if settings.provider == "openai":
        return create_openai_async_client(settings.model, api_key=key)
    if settings.provider == "anthropic":
        return create_anthropic_async_client(settings.model, api_key=key)
    if settings.provider == "openrouter":
        return create_openrouter_async_client(settings.model, api_key=key)
    return create_ollama_async_client(settings.model)


__all__ = [
    "create_chat_client",
    "create_openai_async_client",
    "create_anthropic_async_client",
    "create_openrouter_async_client",
    "create_ollama_async_client",
]
