from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from .exceptions import ConfigurationError

DEFAULT_DB_DIR = Path.home() / ".memory_prompts"

PROVIDER_KEY_ENV = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "openrouter": "OPENROUTER_API_KEY",
    "ollama": None,
}


@dataclass
class Settings:
    db_path: Path = field(default_factory=lambda: DEFAULT_DB_DIR / "prompts.db")
    provider: str = "openai"
    model: str = "gpt-4"
    source: str = "openai"
    model_api_key: str | None = None
    admin_api_key: str | None = None
    log_level: str = "INFO"
    generation_temperature: float = 0.8
    keyword_temperature: float = 0.3

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> Settings:
        load_dotenv(env_file)
        provider = os.getenv("MEMORY_PROMPTS_PROVIDER", "openai").lower()
        if provider not in PROVIDER_KEY_ENV:
            raise ConfigurationError(f"Unknown model provider: {provider}")
        key_env = PROVIDER_KEY_ENV[provider]
        db_path = os.getenv("MEMORY_PROMPTS_DB")
        return cls(
            db_path=Path(db_path) if db_path else DEFAULT_DB_DIR / "prompts.db",
            provider=provider,
            model=os.getenv("MEMORY_PROMPTS_MODEL", "gpt-4"),
            source=os.getenv("MEMORY_PROMPTS_SOURCE", provider),
            model_api_key=os.getenv(key_env) if key_env else None,
            admin_api_key=os.getenv("ADMIN_API_KEY") or None,
            log_level=os.getenv("MEMORY_PROMPTS_LOG_LEVEL", "INFO").upper(),
        )

    def require_model_key(self) -> str | None:
        key_env = PROVIDER_KEY_ENV.get(self.provider)
        if key_env and not self.model_api_key:
            raise ConfigurationError(f"Missing {key_env} in the environment (.env)")
        return self.model_api_key

    def require_admin_key(self) -> str:
        if not self.admin_api_key:
            raise ConfigurationError("Missing ADMIN_API_KEY in the environment (.env)")
        return self.admin_api_key

    def secrets(self) -> list[str]:
        return [s for s in (self.model_api_key, self.admin_api_key) if s]
