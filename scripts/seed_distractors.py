#!/usr/bin/env python3
"""Load common distractors from JSON into the SQLite database.

The JSON file maps each correct answer to a list of distractors. A
distractor is either a string or an object with "distractor" and an
optional "reason".

Usage:
    python scripts/seed_distractors.py DISTRACTORS_JSON [--db PATH] [--force]

Options:
    --db        Database path (default: data/distractors.db)
    --force     Delete existing distractors before loading
"""

import argparse
import json
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from storage.connection import DEFAULT_DB_PATH, get_connection, init_schema


def seed_distractors(conn, json_path: Path) -> int:
    """Insert distractors from a JSON file.

    Args:
        conn: SQLite connection.
        json_path: Path to the distractors JSON file.

    Returns:
        Number of records inserted.
    """
    with open(json_path) as f:
        entries = json.load(f)

    count = 0
    for correct_answer, distractors in entries.items():
        for entry in distractors:
            if isinstance(entry, str):
                entry = {"distractor": entry}
            conn.execute(
                """INSERT INTO common_distractors (correct_answer, distractor, reason)
                VALUES (?, ?, ?)""",
                (correct_answer.strip(), entry["distractor"], entry.get("reason")),
            )
            count += 1

    print(f"  Loaded {count} distractors from {json_path.name}")
    return count


def main():
    parser = argparse.ArgumentParser(description="Load common distractors into SQLite")
    parser.add_argument("json_path", type=Path, help="Distractors JSON file")
    parser.add_argument("--db", type=Path, default=DEFAULT_DB_PATH, help="Database path")
    parser.add_argument(
        "--force", action="store_true", help="Delete existing distractors first"
    )
    args = parser.parse_args()

    if not args.json_path.exists():
        print(f"Error: {args.json_path} not found")
        sys.exit(1)

    print(f"Seeding database at {args.db}")
    init_schema(args.db)

    conn = get_connection(args.db)
    try:
        if args.force:
            conn.execute("DELETE FROM common_distractors")
            print("  Cleared existing distractors")
        seed_distractors(conn, args.json_path)
        conn.commit()
        print(f"Seeding complete: {args.db}")

    except (OSError, ValueError, KeyError, TypeError) as e:
        conn.rollback()
        print(f"Seeding failed: {e}")
        sys.exit(1)

    finally:
        conn.close()


if __name__ == "__main__":
    main()
