"""Storage layer for the grading engine.

Provides a SQLite-backed source of common distractors, the known wrong
answers used to spot common misconceptions.
"""

from pathlib import Path

from .connection import DEFAULT_DB_PATH, get_connection, init_schema
from .sqlite import SQLiteDistractorRepository

__all__ = [
    # SQLite implementations
    "SQLiteDistractorRepository",
    # Connection utilities
    "get_connection",
    "init_schema",
    "DEFAULT_DB_PATH",
    # Factory functions
    "get_distractor_repo",
]


def get_distractor_repo(db_path: Path = DEFAULT_DB_PATH) -> SQLiteDistractorRepository:
    """Get a SQLiteDistractorRepository, creating the schema if needed."""
    init_schema(db_path)
    return SQLiteDistractorRepository(db_path)
