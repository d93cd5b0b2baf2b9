"""Database connection management and schema initialization."""

import sqlite3
from pathlib import Path

DEFAULT_DB_PATH = Path(__file__).parent.parent / "data" / "distractors.db"

SCHEMA_SQL = """
-- Known wrong answers, keyed by the correct answer they are mistaken for
CREATE TABLE IF NOT EXISTS common_distractors (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    correct_answer TEXT NOT NULL,
    distractor TEXT NOT NULL,
    reason TEXT
);

CREATE INDEX IF NOT EXISTS idx_common_distractors_answer
    ON common_distractors(correct_answer COLLATE NOCASE);
"""


def get_connection(db_path: Path = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Get a database connection with appropriate settings.

    Args:
        db_path: Path to the SQLite database file.

    Returns:
        A configured sqlite3 Connection object.
    """
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def init_schema(db_path: Path = DEFAULT_DB_PATH) -> None:
    """Initialize the database schema if it doesn't exist.

    Args:
        db_path: Path to the SQLite database file.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = get_connection(db_path)
    try:
        conn.executescript(SCHEMA_SQL)
        conn.commit()
    finally:
        conn.close()
