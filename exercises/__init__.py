"""Grading, diagnosis, hints and feedback for grammar exercises.

This package scores learner answers for several interaction types and
explains what went wrong.

Architecture:
- Handlers own the per-type grading policy, diagnosis policy and strategy hints
- The validator scores a response; the analyzer diagnoses it
- The hint sequencer reveals hints one at a time, adapting to a learner profile
- The feedback composer turns a diagnosis into a message

Question handlers:
- MultipleChoiceHandler: Pick one or more options
- FillInBlankHandler: Type the missing words into a template
- DragAndDropHandler: Sort items into target zones
- SentenceBuilderHandler: Arrange a word bank into a sentence

Configuration:
- ValidationOptions: Partial credit, case sensitivity, strict matching
- FeedbackOptions: Adaptive extras, tone, hint cap, message length

Distractors:
- DistractorSource: Read-only source of known wrong answers
- StaticDistractorSource: In-memory source
"""

from exercises.analysis import analyze_answer
from exercises.base import (
    QuestionDataError,
    QuestionHandler,
    UnsupportedQuestionTypeError,
)
from exercises.config import FeedbackOptions, ValidationOptions
from exercises.distractors import (
    NO_DISTRACTORS,
    DistractorSource,
    StaticDistractorSource,
)
from exercises.drag_and_drop import DragAndDropHandler
from exercises.feedback import generate_feedback, grade_submission
from exercises.fill_in_blank import FillInBlankHandler
from exercises.hints import (
    generate_hint_sequence,
    get_next_hint,
    has_more_hints,
    hint_feedback,
    hints_remaining,
)
from exercises.multiple_choice import MultipleChoiceHandler
from exercises.registry import QUESTION_HANDLERS, get_question_handler, parse_question
from exercises.results import (
    AnswerAnalysis,
    ErrorSeverity,
    ErrorType,
    GeneratedFeedback,
    HintData,
    HintSequence,
    HintState,
    HintType,
    SubmissionResult,
    ValidationOutcome,
)
from exercises.sentence_builder import SentenceBuilderHandler
from exercises.validation import (
    generate_hint,
    is_eligible_for_enrichment,
    is_empty_answer,
    lint_question,
    needs_remediation,
    validate_exercise_response,
)

__all__ = [
    # Validation
    "validate_exercise_response",
    "generate_hint",
    "needs_remediation",
    "is_eligible_for_enrichment",
    "is_empty_answer",
    "lint_question",
    # Analysis
    "analyze_answer",
    # Hints
    "generate_hint_sequence",
    "get_next_hint",
    "has_more_hints",
    "hints_remaining",
    "hint_feedback",
    # Feedback
    "generate_feedback",
    "grade_submission",
    # Handlers
    "QuestionHandler",
    "MultipleChoiceHandler",
    "FillInBlankHandler",
    "DragAndDropHandler",
    "SentenceBuilderHandler",
    "QUESTION_HANDLERS",
    "get_question_handler",
    "parse_question",
    # Errors
    "QuestionDataError",
    "UnsupportedQuestionTypeError",
    # Configuration
    "ValidationOptions",
    "FeedbackOptions",
    # Distractors
    "DistractorSource",
    "StaticDistractorSource",
    "NO_DISTRACTORS",
    # Results
    "ValidationOutcome",
    "AnswerAnalysis",
    "ErrorType",
    "ErrorSeverity",
    "HintData",
    "HintType",
    "HintState",
    "HintSequence",
    "GeneratedFeedback",
    "SubmissionResult",
]
