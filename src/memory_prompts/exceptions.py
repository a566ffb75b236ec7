"""Exception hierarchy for the prompt pipeline.

Every failure raised by this package derives from :class:`PromptPipelineError`
so callers can catch one base class while still telling the categories apart.
"""

from __future__ import annotations


class PromptPipelineError(Exception):
    """Base exception for prompt pipeline failures."""


class ConfigurationError(PromptPipelineError):
    """Raised when a required credential or setting is missing."""


class UpstreamModelError(PromptPipelineError):
    """Raised when a call to the generative model fails."""


class GenerationError(UpstreamModelError):
    """Raised when the prompt generation call fails (auth, network, quota)."""


class ParseError(PromptPipelineError):
    """Raised when model output cannot be decoded into the expected shape."""

    def __init__(self, message: str, raw: str = ""):
        super().__init__(message)
        self.raw = raw


class NotFoundError(PromptPipelineError):
    """Raised when no prompt or category matches a lookup."""


class ValidationError(PromptPipelineError):
    """Raised when input is rejected before any side effect."""


class PersistenceError(PromptPipelineError):
    """Raised when a store read or write fails."""


class CategoryConflictError(PersistenceError):
    """Raised when creating a category whose name already exists."""

    def __init__(self, name: str):
        super().__init__(f"Category already exists: {name!r}")
        self.name = name


class AuthorizationError(PromptPipelineError):
    """Raised when the admin credential is missing or does not match."""


__all__ = [
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
