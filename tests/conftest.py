"""Shared pytest fixtures for the grading engine test suite."""

import pytest

import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from models import (
    ErrorPattern,
    ExerciseQuestion,
    UserLearningProfile,
)
from storage import init_schema, get_connection


@pytest.fixture
def mc_question() -> ExerciseQuestion:
    """Create a multiple choice question with two author hints."""
    return ExerciseQuestion(
        id="mc1",
        question_text="Which word is a verb?",
        type="multiple_choice",
        question_data={"options": ["run", "table", "blue", "quickly"]},
        correct_answer="run",
        hints=["It describes an action.", "You can do it with your legs."],
        points=2,
        explanation="Verbs describe actions.",
    )


@pytest.fixture
def fib_question() -> ExerciseQuestion:
    """Create a fill-in-blank question with four blanks."""
    return ExerciseQuestion(
        id="fib1",
        question_text="Complete the sentence.",
        type="fill_in_blank",
        question_data={
            "template": "She {blank1} to school and {blank2} her {blank3} at {blank4}.",
            "blanks": [
                {"id": "blank1", "position": 1, "acceptable_answers": ["walks"]},
                {"id": "blank2", "position": 2, "acceptable_answers": ["does"]},
                {"id": "blank3", "position": 3, "acceptable_answers": ["homework"]},
                {"id": "blank4", "position": 4, "acceptable_answers": ["night"]},
            ],
        },
        points=4,
    )


@pytest.fixture
def single_blank_question() -> ExerciseQuestion:
    """Create a fill-in-blank question with one blank and an author hint."""
    return ExerciseQuestion(
        id="fib2",
        question_text="Fill in the verb.",
        type="fill_in_blank",
        question_data={
            "template": "The boy is {blank1} to the park.",
            "blanks": [
                {"id": "blank1", "position": 1, "acceptable_answers": ["running"]},
            ],
        },
        hints=["Use the -ing form."],
    )


@pytest.fixture
def dnd_question() -> ExerciseQuestion:
    """Create a drag-and-drop question sorting words by part of speech."""
    return ExerciseQuestion(
        id="dnd1",
        question_text="Sort the words.",
        type="drag_and_drop",
        question_data={
            "items": [
                {"id": "i1", "content": "cat", "category": "noun"},
                {"id": "i2", "content": "jump", "category": "verb"},
                {"id": "i3", "content": "happy", "category": "adjective"},
                {"id": "i4", "content": "dog", "category": "noun"},
            ],
            "targets": [
                {"id": "nouns", "label": "Nouns", "accepts_category": "noun"},
                {"id": "verbs", "label": "Verbs", "accepts_category": "verb"},
                {"id": "adjectives", "label": "Adjectives", "accepts_category": "adjective"},
            ],
        },
        correct_answer={"nouns": ["i1", "i4"], "verbs": ["i2"], "adjectives": ["i3"]},
        points=4,
    )


@pytest.fixture
def sb_question() -> ExerciseQuestion:
    """Create a sentence builder question."""
    return ExerciseQuestion(
        id="sb1",
        question_text="Build the sentence.",
        type="sentence_builder",
        question_data={"words": ["dog", "the", "is", "running"]},
        correct_answer="The dog is running",
        points=2,
    )


@pytest.fixture
def all_questions(mc_question, fib_question, dnd_question, sb_question) -> list[ExerciseQuestion]:
    return [mc_question, fib_question, dnd_question, sb_question]


@pytest.fixture
def visual_profile() -> UserLearningProfile:
    """Create a visual learner who keeps making grammar mistakes."""
    return UserLearningProfile(
        user_id="learner1",
        preferred_hint_style="visual",
        success_rate=0.6,
        common_mistakes=[ErrorPattern(type="grammar", frequency=3)],
    )


@pytest.fixture
def test_db_path(tmp_path) -> Path:
    """Create a temporary database path for testing."""
    db_path = tmp_path / "test_distractors.db"
    init_schema(db_path)
    return db_path


@pytest.fixture
def populated_test_db(test_db_path) -> Path:
    """Create a test database populated with sample distractors."""
    conn = get_connection(test_db_path)
    try:
        rows = [
            ("run", "table", "Confuses nouns with verbs"),
            ("run", "quickly", "Picks the adverb"),
            ("Their", "There", None),
        ]
        conn.executemany(
            """INSERT INTO common_distractors (correct_answer, distractor, reason)
            VALUES (?, ?, ?)""",
            rows,
        )
        conn.commit()
    finally:
        conn.close()

    return test_db_path
