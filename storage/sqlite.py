"""SQLite implementation of the distractor source."""

import logging
from pathlib import Path

from .connection import DEFAULT_DB_PATH, get_connection
from exercises.distractors import DistractorSource

logger = logging.getLogger(__name__)


class SQLiteDistractorRepository(DistractorSource):
    """Common distractors read from the ``common_distractors`` table.

    Lookups ignore case and surrounding whitespace of the correct answer.
    A connection is opened per call.
    """

    def __init__(self, db_path: Path = DEFAULT_DB_PATH):
        self.db_path = db_path

    def get_common_distractors(self, correct_answer: str) -> list[str]:
        """Get distractors recorded for a correct answer."""
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                """SELECT distractor FROM common_distractors
                WHERE correct_answer = ? COLLATE NOCASE ORDER BY id""",
                (correct_answer.strip(),),
            )
            distractors = [row["distractor"] for row in cursor.fetchall()]
        finally:
            conn.close()

        logger.debug(
            "Found %d distractors for %r in %s",
            len(distractors),
            correct_answer,
            self.db_path,
        )
        return distractors

    def add_distractor(
        self,
        correct_answer: str,
        distractor: str,
        reason: str | None = None,
    ) -> None:
        """Record a distractor for a correct answer."""
        conn = get_connection(self.db_path)
        try:
            conn.execute(
                """INSERT INTO common_distractors (correct_answer, distractor, reason)
                VALUES (?, ?, ?)""",
                (correct_answer.strip(), distractor, reason),
            )
            conn.commit()
        finally:
            conn.close()

    def get_all_as_dict(self) -> dict[str, list[dict]]:
        """Get all distractors grouped by correct answer."""
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                """SELECT correct_answer, distractor, reason
                FROM common_distractors ORDER BY id"""
            )
            result: dict[str, list[dict]] = {}
            for row in cursor.fetchall():
                result.setdefault(row["correct_answer"], []).append(
                    {"distractor": row["distractor"], "reason": row["reason"]}
                )
            return result
        finally:
            conn.close()
