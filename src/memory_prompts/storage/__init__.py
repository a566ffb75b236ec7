from .base import Storage
from .sqlite_store import SQLiteStore

__all__ = ["Storage", "SQLiteStore"]
