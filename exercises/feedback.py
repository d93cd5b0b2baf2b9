"""Feedback composition: turning a diagnosis into a message for the learner.

The composer analyzes the answer, picks a feedback type and base wording,
then layers on adaptive extras (related concepts, profile-aware wording,
visual aid placeholders), an encouragement line and a suggested next step.
"""

import logging
from types import MappingProxyType
from typing import Any

from exercises.analysis import analyze_answer
from exercises.config import FeedbackOptions, ValidationOptions
from exercises.distractors import DistractorSource
from exercises.registry import QUESTION_HANDLERS, parse_question
from exercises.results import (
    AnswerAnalysis,
    ErrorSeverity,
    ErrorType,
    FeedbackType,
    GeneratedFeedback,
    SubmissionResult,
    ValidationOutcome,
)
from exercises.validation import validate_exercise_response
from models import ExerciseQuestion, FeedbackContext, UserLearningProfile

logger = logging.getLogger(__name__)

PARTIAL_FEEDBACK_THRESHOLD = 0.5

ENCOURAGEMENTS = MappingProxyType({
    "formal": (
        "Please review the material and try again.",
        "Consider the question from a different perspective.",
        "Take your time to think through the answer.",
    ),
    "casual": (
        "No worries! Give it another shot.",
        "You've got this! Try again.",
        "Almost there, keep going!",
    ),
    "encouraging": (
        "Great effort! You're getting closer.",
        "Keep it up! Learning takes practice.",
        "You're doing great! Each attempt helps you learn.",
    ),
})

RELATED_CONCEPTS = MappingProxyType({
    ErrorType.SPELLING: ("Letter patterns", "Common misspellings"),
    ErrorType.GRAMMAR: ("Verb conjugation", "Subject-verb agreement", "Tense usage"),
    ErrorType.WORD_ORDER: ("Sentence structure", "Word order rules"),
    ErrorType.MISPLACEMENT: ("Word categories", "Parts of speech"),
    ErrorType.COMMON_MISCONCEPTION: ("Common errors", "Similar concepts"),
})

VISUAL_GUIDE_SUFFIX = " Check the visual guide below."
RECURRING_PATTERN_SUFFIX = " This relates to a pattern we've seen before."
ELLIPSIS = "..."


def _feedback_type(analysis: AnswerAnalysis) -> FeedbackType:
    if analysis.is_correct:
        return "correct"
    if analysis.partial_credit > PARTIAL_FEEDBACK_THRESHOLD:
        return "partial"
    return "incorrect"


def _correct_title(hints_used: int, attempt_number: int) -> str:
    if hints_used == 0 and attempt_number == 1:
        return "Perfect!"
    if hints_used == 0:
        return "Excellent!"
    if hints_used == 1:
        return "Good job!"
    return "Correct!"


def _incorrect_message(analysis: AnswerAnalysis, attempt_number: int) -> str:
    if analysis.common_mistake:
        return "This is a common mistake. Let's think about it differently."
    if attempt_number == 1:
        return "Not quite. Take another look at the question."
    if attempt_number == 2:
        return "Still not right. Consider using a hint."
    return "Keep trying! You're learning."


def _partial_details(analysis: AnswerAnalysis) -> str | None:
    parts = []
    if analysis.strengths:
        parts.append(f"Correct: {', '.join(analysis.strengths)}")
    if analysis.specific_issues:
        parts.append(f"To improve: {', '.join(analysis.specific_issues)}")
    return " | ".join(parts) or None


def _base_feedback(
    feedback_type: FeedbackType,
    context: FeedbackContext,
    analysis: AnswerAnalysis,
) -> GeneratedFeedback:
    if feedback_type == "correct":
        return GeneratedFeedback(
            type=feedback_type,
            title=_correct_title(context.hints_used, context.attempt_number),
            message="Well done! You got it right.",
            details=(
                f"Strengths: {', '.join(analysis.strengths)}" if analysis.strengths else None
            ),
            confidence=1.0,
        )

    if feedback_type == "partial":
        title = "Almost there!"
        message = f"You got {round(analysis.partial_credit * 100)}% correct."
        details = _partial_details(analysis)
    else:
        title = "Not quite right"
        message = _incorrect_message(analysis, context.attempt_number)
        details = (
            f"Issues: {'; '.join(analysis.specific_issues)}"
            if analysis.specific_issues
            else None
        )

    return GeneratedFeedback(
        type=feedback_type,
        title=title,
        message=message,
        details=details,
        severity=analysis.error_severity,
        confidence=1.0,
    )


def _personalize(message: str, profile: UserLearningProfile, analysis: AnswerAnalysis) -> str:
    if profile.preferred_hint_style == "visual" and analysis.error_severity != ErrorSeverity.MINOR:
        message += VISUAL_GUIDE_SUFFIX
    if profile.has_mistake(analysis.error_type):
        message += RECURRING_PATTERN_SUFFIX
    return message


def _add_adaptive_elements(
    feedback: GeneratedFeedback,
    context: FeedbackContext,
    analysis: AnswerAnalysis,
    options: FeedbackOptions,
) -> None:
    if options.enable_related_concepts and analysis.error_type is not None:
        concepts = RELATED_CONCEPTS.get(analysis.error_type)
        if concepts:
            feedback.related_concepts = list(concepts)

    if context.user_profile is not None:
        feedback.message = _personalize(feedback.message, context.user_profile, analysis)

    if options.enable_visual_aids and (
        analysis.error_severity == ErrorSeverity.MAJOR or context.attempt_number > 2
    ):
        error_type = analysis.error_type.value if analysis.error_type else "general"
        feedback.visual_aid = f"Visual aid for {context.question.type.value} - {error_type}"


def _encouragement(attempt_number: int, tone: str) -> str:
    messages = ENCOURAGEMENTS.get(tone, ENCOURAGEMENTS["encouraging"])
    return messages[min(attempt_number - 1, len(messages) - 1)]


def _next_steps(
    feedback_type: FeedbackType,
    analysis: AnswerAnalysis,
    context: FeedbackContext,
) -> str:
    if feedback_type == "correct":
        return "Move on to the next question."
    if context.attempt_number >= 3 and context.hints_used == 0:
        return "Consider using a hint for guidance."
    if analysis.error_type == ErrorType.SPELLING:
        return "Check your spelling carefully."
    if analysis.error_type == ErrorType.GRAMMAR:
        return "Review the grammatical rules for this type of question."
    handler_class = QUESTION_HANDLERS.get(context.question.type)
    if handler_class is not None:
        return handler_class.review_suggestion
    return "Review your answer and try again."


def _truncate(text: str, limit: int | None) -> str:
    if limit is None or len(text) <= limit:
        return text
    return text[: limit - len(ELLIPSIS)].rstrip() + ELLIPSIS


def _align_with_outcome(analysis: AnswerAnalysis, outcome: ValidationOutcome) -> AnswerAnalysis:
    """Make the diagnosis agree with the score on whether the answer is correct."""
    if analysis.is_correct == outcome.is_correct:
        return analysis

    logger.warning(
        "Diagnosis (correct=%s) disagrees with the score (correct=%s); following the score",
        analysis.is_correct,
        outcome.is_correct,
    )
    if outcome.is_correct:
        return AnswerAnalysis(is_correct=True, partial_credit=1.0, strengths=analysis.strengths)
    return AnswerAnalysis(
        partial_credit=outcome.partial_credit or 0.0,
        error_type=ErrorType.INCORRECT,
        error_severity=ErrorSeverity.MINOR,
        specific_issues=outcome.error_details or [],
    )


def generate_feedback(
    context: FeedbackContext,
    options: FeedbackOptions | None = None,
    distractors: DistractorSource | None = None,
    validation_options: ValidationOptions | None = None,
) -> GeneratedFeedback:
    """Compose feedback for a submission.

    Args:
        context: The submission, attempt number, hint usage and profile.
        options: Composition options. Defaults to adaptive, encouraging
            feedback with related concepts and visual aids.
        distractors: Source of known wrong answers for the analyzer.
        validation_options: Grading options the answer is judged under.

    Returns:
        Plain-text feedback of type correct, partial or incorrect.
    """
    analysis = analyze_answer(context, distractors, validation_options)
    return _compose(context, analysis, options or FeedbackOptions())


def _compose(
    context: FeedbackContext,
    analysis: AnswerAnalysis,
    options: FeedbackOptions,
) -> GeneratedFeedback:
    feedback_type = _feedback_type(analysis)

    feedback = _base_feedback(feedback_type, context, analysis)
    if options.enable_adaptive:
        _add_adaptive_elements(feedback, context, analysis, options)

    if options.enable_encouragement and feedback_type != "correct":
        feedback.encouragement = _encouragement(context.attempt_number, options.tone)

    feedback.next_steps = _next_steps(feedback_type, analysis, context)
    feedback.message = _truncate(feedback.message, options.max_feedback_length)

    logger.debug(
        "Feedback for question %s: %s (%s)",
        context.question.id,
        feedback.type,
        feedback.title,
    )
    return feedback


def grade_submission(
    question: ExerciseQuestion | dict[str, Any],
    user_response: Any,
    context: FeedbackContext | None = None,
    validation_options: ValidationOptions | None = None,
    feedback_options: FeedbackOptions | None = None,
    distractors: DistractorSource | None = None,
) -> SubmissionResult:
    """Score a submission and, when the question is well formed, explain it.

    The feedback is judged under the same options as the score, and its
    type is "correct" exactly when the outcome is correct. Feedback is
    omitted when the question cannot be parsed or when
    ``validation_options.provide_feedback`` is off.
    """
    validation_options = validation_options or ValidationOptions()
    outcome = validate_exercise_response(question, user_response, validation_options)
    if not validation_options.provide_feedback:
        return SubmissionResult(outcome=outcome)

    try:
        parsed = parse_question(question)
    except ValueError:
        return SubmissionResult(outcome=outcome)

    if context is None:
        context = FeedbackContext(question=parsed, user_answer=user_response)
    analysis = analyze_answer(context, distractors, validation_options)
    analysis = _align_with_outcome(analysis, outcome)
    feedback = _compose(context, analysis, feedback_options or FeedbackOptions())
    return SubmissionResult(outcome=outcome, feedback=feedback)
