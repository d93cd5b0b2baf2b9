"""Answer analysis: a diagnostic pass explaining why an answer is wrong."""

import logging

from exercises.config import ValidationOptions
from exercises.distractors import NO_DISTRACTORS, DistractorSource
from exercises.registry import get_question_handler
from exercises.results import AnswerAnalysis, ErrorSeverity, ErrorType
from models import FeedbackContext

logger = logging.getLogger(__name__)


def analyze_answer(
    context: FeedbackContext,
    distractors: DistractorSource | None = None,
    options: ValidationOptions | None = None,
) -> AnswerAnalysis:
    """Diagnose the answer in a feedback context.

    Uses the same per-type dispatch as validation but reports the kind and
    severity of the error, what the learner got right, and a partial credit
    that rewards near misses.

    Args:
        context: The submission and its surroundings.
        distractors: Source of known wrong answers for common-misconception
            detection. Defaults to an empty source.
        options: Grading options, so that answers the validator accepts are
            diagnosed as correct. Defaults to ValidationOptions().

    Returns:
        The analysis. Malformed input yields a major "incorrect" analysis.
    """
    distractors = distractors or NO_DISTRACTORS
    options = options or ValidationOptions()
    try:
        handler = get_question_handler(context.question)
        analysis = handler.analyze(
            context.user_answer, context.expected_answer, distractors, options
        )
    except (ValueError, TypeError, KeyError) as exc:
        logger.warning("Could not analyze answer for question %s: %s", context.question.id, exc)
        return AnswerAnalysis(
            error_type=ErrorType.INCORRECT,
            error_severity=ErrorSeverity.MAJOR,
            specific_issues=[str(exc) or type(exc).__name__],
        )

    logger.debug(
        "Question %s analyzed: correct=%s error_type=%s credit=%.2f",
        context.question.id,
        analysis.is_correct,
        analysis.error_type,
        analysis.partial_credit,
    )
    return analysis
