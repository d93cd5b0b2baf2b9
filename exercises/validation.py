"""Answer validation: scoring a response for any supported question type.

Validation never raises. A malformed question, answer key or response is
turned into a zero-score outcome whose ``error_details`` explain the
problem, so one bad question cannot break a grading batch.
"""

import logging
from collections.abc import Sequence
from typing import Any

from exercises.config import ValidationOptions
from exercises.registry import (
    QUESTION_HANDLERS,
    get_question_handler,
    max_points_of,
    parse_question,
)
from exercises.results import ValidationOutcome
from models import ExerciseQuestion, QuestionType

logger = logging.getLogger(__name__)

REMEDIATION_THRESHOLD = 0.6  # Accuracy below this suggests remediation
ENRICHMENT_THRESHOLD = 0.9  # Accuracy at or above this suggests enrichment

VALIDATION_ERROR_FEEDBACK = (
    "An error occurred while validating your answer. Please try again."
)


def validate_exercise_response(
    question: ExerciseQuestion | dict[str, Any],
    user_response: Any,
    options: ValidationOptions | None = None,
) -> ValidationOutcome:
    """Validate a response based on the question type.

    Args:
        question: The question, or a raw mapping to validate first.
        user_response: The learner's answer, shaped for the question type.
        options: Grading options. Defaults to partial credit enabled,
            per-blank case sensitivity and flexible word order.

    Returns:
        The score for this response.
    """
    options = options or ValidationOptions()
    try:
        parsed = parse_question(question)
        handler = get_question_handler(parsed)
        return handler.validate(user_response, options)
    except (ValueError, TypeError, KeyError) as exc:
        question_id = question.id if isinstance(question, ExerciseQuestion) else (
            question.get("id") if isinstance(question, dict) else None
        )
        logger.warning("Could not validate response for question %s: %s", question_id, exc)
        return ValidationOutcome(
            is_correct=False,
            points=0.0,
            max_points=max_points_of(question),
            feedback=VALIDATION_ERROR_FEEDBACK,
            error_details=[str(exc) or type(exc).__name__],
        )


def generate_hint(
    question: ExerciseQuestion,
    user_response: Any = None,
    hint_level: int = 1,
) -> str:
    """Return the author's hint at ``hint_level`` (1-based), or a generic one."""
    if 1 <= hint_level <= len(question.hints):
        return question.hints[hint_level - 1]

    handler_class = QUESTION_HANDLERS.get(question.type)
    if handler_class is None:
        return "Take your time and think about what you learned in this lesson."
    return handler_class.generic_hint


def _accuracy(results: Sequence[ValidationOutcome]) -> float | None:
    if not results:
        return None
    return sum(1 for r in results if r.is_correct) / len(results)


def needs_remediation(results: Sequence[ValidationOutcome]) -> bool:
    """Check if performance across a set of results suggests remediation."""
    accuracy = _accuracy(results)
    return accuracy is not None and accuracy < REMEDIATION_THRESHOLD


def is_eligible_for_enrichment(results: Sequence[ValidationOutcome]) -> bool:
    """Check if performance across a set of results suggests enrichment."""
    accuracy = _accuracy(results)
    return accuracy is not None and accuracy >= ENRICHMENT_THRESHOLD


def is_empty_answer(answer: Any) -> bool:
    """Check if an answer is missing: None, blank text, or an empty collection."""
    if answer is None:
        return True
    if isinstance(answer, str):
        return answer.strip() == ""
    if isinstance(answer, (list, tuple, dict, set)):
        return len(answer) == 0
    return False


def lint_question(question: ExerciseQuestion) -> list[str]:
    """Check a question for authoring problems.

    Returns:
        List of problems, empty if the question looks complete.
    """
    errors: list[str] = []
    data = question.question_data

    if not question.question_text.strip():
        errors.append("Question text is required")

    has_blank_answers = question.type == QuestionType.FILL_IN_BLANK and any(
        b.acceptable_answers for b in data.blanks
    )
    if is_empty_answer(question.correct_answer) and not has_blank_answers:
        errors.append("Correct answer is required")

    if question.type == QuestionType.MULTIPLE_CHOICE:
        if len(data.options) < 2:
            errors.append("Multiple choice questions need at least 2 options")
    elif question.type == QuestionType.FILL_IN_BLANK:
        if "{blank" not in data.template:
            errors.append("Fill in blank questions need a template with blanks")
        answer_key = question.correct_answer if isinstance(question.correct_answer, dict) else {}
        for blank in data.blanks:
            if not blank.acceptable_answers and not answer_key.get(blank.id):
                errors.append(f"Blank {blank.id} has no acceptable answers")
    elif question.type == QuestionType.DRAG_AND_DROP:
        if not data.items or not data.targets:
            errors.append("Drag and drop questions need items and targets")
    elif question.type == QuestionType.SENTENCE_BUILDER:
        if len(data.words) < 3:
            errors.append("Sentence builder questions need at least 3 words")

    return errors
