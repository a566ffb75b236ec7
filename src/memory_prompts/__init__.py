from .analytics import summarize
from .categories import CategoryResolver
from .config import Settings
from .events import EventRecorder
from .exceptions import (
    AuthorizationError,
    CategoryConflictError,
    ConfigurationError,
    GenerationError,
    NotFoundError,
    ParseError,
    PersistenceError,
    PromptPipelineError,
    UpstreamModelError,
    ValidationError,
)
from .generation import TextGenerator, normalize_output
from .keywords import KeywordExtractor
from .retrieval import RandomSelector
from .service import PromptService
from .storage.sqlite_store import SQLiteStore
from .types import (
    BulkWriteResult,
    Category,
    CategorySummary,
    Event,
    GenerationRequest,
    Prompt,
    PromptRef,
    SummaryReport,
)
from .writer import PersistenceWriter

__all__ = [
    "PromptService",
    "TextGenerator",
    "normalize_output",
    "KeywordExtractor",
    "CategoryResolver",
    "PersistenceWriter",
    "RandomSelector",
    "EventRecorder",
    "summarize",
    "SQLiteStore",
    "Settings",
    "Prompt",
    "Category",
    "Event",
    "GenerationRequest",
    "BulkWriteResult",
    "PromptRef",
    "CategorySummary",
    "SummaryReport",
    "PromptPipelineError",
    "ConfigurationError",
    "UpstreamModelError",
    "GenerationError",
    "ParseError",
    "NotFoundError",
    "ValidationError",
    "PersistenceError",
    "CategoryConflictError",
    "AuthorizationError",
]
