from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Literal, Union, get_args
from uuid import uuid4

Message = dict[str, str]
ChatCallable = Callable[[list[Message], float], Union[str, Awaitable[str]]]

Language = Literal["es", "en"]
EventType = Literal["fetched", "used"]
WriteMode = Literal["bulk", "per_item"]

LANGUAGES: tuple[str, ...] = get_args(Language)
EVENT_TYPES: tuple[str, ...] = get_args(EventType)
MAX_KEYWORDS = 5


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _id() -> str:
    return uuid4().hex


@dataclass
class Category:
    id: str = field(default_factory=_id)
    name: str = ""
    parent_id: str | None = None
    children: list[Category] = field(default_factory=list)


@dataclass
class Event:
    id: str = field(default_factory=_id)
    prompt_id: str = ""
    type: EventType = "fetched"
    metadata: Any = None
    created_at: datetime = field(default_factory=_now)


@dataclass
class Prompt:
    id: str = field(default_factory=_id)
    text: str = ""
    language: Language = "es"
    keywords: list[str] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)
    subcategories: list[str] = field(default_factory=list)
    source: str = "openai"
    model: str = "gpt-4"
    created_at: datetime = field(default_factory=_now)
    events: list[Event] = field(default_factory=list)


@dataclass
class GenerationRequest:
    category: str
    language: Language = "es"
    amount: int = 5
    subcategories: list[str] = field(default_factory=list)


@dataclass
class BulkWriteResult:
    inserted: list[Prompt] = field(default_factory=list)
    failed: list[tuple[Prompt, Exception]] = field(default_factory=list)

    @property
    def inserted_ids(self) -> list[str]:
        return [p.id for p in self.inserted]


@dataclass
class PromptRef:
    id: str
    text: str
    language: str
    created_at: datetime


@dataclass
class CategorySummary:
    name: str
    count: int = 0
    prompts: list[PromptRef] = field(default_factory=list)


@dataclass
class SummaryReport:
    total_prompts: int = 0
    total_categories: int = 0
    summary: list[CategorySummary] = field(default_factory=list)
    breakdown: dict[str, CategorySummary] = field(default_factory=dict)
