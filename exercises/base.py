"""Abstract base class and shared utilities for question handlers."""

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel

from exercises.config import ValidationOptions
from exercises.distractors import DistractorSource
from exercises.results import AnswerAnalysis, HintData, ValidationOutcome
from models import ExerciseQuestion, QuestionType

D = TypeVar("D", bound=BaseModel)


class QuestionDataError(ValueError):
    """Question payload, correct answer or user response has the wrong shape."""


class UnsupportedQuestionTypeError(ValueError):
    """No handler is registered for a question type."""


class QuestionHandler(ABC, Generic[D]):
    """Abstract base class for question handlers.

    Each question type implements this interface to provide:
    - Grading (compact score with optional partial credit)
    - Diagnosis (why an answer is wrong)
    - Strategy hints for the hint sequencer
    - A generic fallback hint and a review suggestion

    To add a question type:
    1. Add a payload model to models.py and extend QuestionData
    2. Create a handler class extending QuestionHandler[YourPayload]
    3. Implement all abstract methods
    4. Register it in QUESTION_HANDLERS in exercises/registry.py
    """

    question_type: ClassVar[QuestionType]
    generic_hint: ClassVar[str] = (
        "Take your time and think about what you learned in this lesson."
    )
    review_suggestion: ClassVar[str] = "Review your answer and try again."

    def __init__(self, question: ExerciseQuestion):
        """Initialize handler with a question instance."""
        self.question = question
        self.data: D = question.question_data  # type: ignore[assignment]

    @property
    def max_points(self) -> float:
        return self.question.points

    @abstractmethod
    def validate(self, user_response: Any, options: ValidationOptions) -> ValidationOutcome:
        """Grade a response.

        Args:
            user_response: The learner's answer, shaped for this question type.
            options: Grading options.

        Raises:
            QuestionDataError: If the question or response is malformed.
        """
        ...

    @abstractmethod
    def analyze(
        self,
        user_answer: Any,
        correct_answer: Any,
        distractors: DistractorSource,
        options: ValidationOptions,
    ) -> AnswerAnalysis:
        """Diagnose a response.

        A response the validator accepts under ``options`` must be
        diagnosed as correct.

        Args:
            user_answer: The learner's answer, shaped for this question type.
            correct_answer: The expected answer (usually the question's own).
            distractors: Source of known wrong answers.
            options: The grading options the response was scored with.

        Raises:
            QuestionDataError: If the question or response is malformed.
        """
        ...

    @abstractmethod
    def strategy_hints(self) -> list[HintData]:
        """Return generated hints for this question type."""
        ...

    def score(
        self,
        ratio: float,
        is_correct: bool,
        options: ValidationOptions,
    ) -> tuple[float, float | None]:
        """Compute (points, partial_credit) for a correctness ratio."""
        if is_correct:
            points = self.max_points
        elif options.allow_partial_credit:
            points = ratio * self.max_points
        else:
            points = 0.0
        partial_credit = ratio if options.allow_partial_credit else None
        return round_points(points), partial_credit


def round_points(points: float) -> float:
    """Round a score to 2 decimal places."""
    return round(points, 2)


def as_string_list(value: Any, what: str) -> list[str]:
    """Coerce a single string or a list of strings to a list of strings.

    Raises:
        QuestionDataError: If the value is neither.
    """
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
        return list(value)
    raise QuestionDataError(
        f"{what} must be a string or a list of strings, got {type(value).__name__}"
    )


def as_mapping(value: Any, what: str) -> dict[str, Any]:
    """Require a mapping keyed by string IDs.

    Raises:
        QuestionDataError: If the value is not a mapping.
    """
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise QuestionDataError(f"{what} must be a mapping, got {type(value).__name__}")
    return value
