from .generation import GENERATE_QUESTIONS, GENERATION_SYSTEM, LANGUAGE_NAMES, SUBCATEGORY_FOCUS
from .keywords import EXTRACT_KEYWORDS, KEYWORD_SYSTEM

__all__ = [
    "GENERATE_QUESTIONS",
    "GENERATION_SYSTEM",
    "LANGUAGE_NAMES",
    "SUBCATEGORY_FOCUS",
    "EXTRACT_KEYWORDS",
    "KEYWORD_SYSTEM",
]
