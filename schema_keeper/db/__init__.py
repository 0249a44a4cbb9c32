"""
SQLite-backed collaborators: an execution engine and a version store
"""

from .sqlite_engine import SQLiteEngine
from .version_store import SQLiteVersionStore

__all__ = ["SQLiteEngine", "SQLiteVersionStore"]
