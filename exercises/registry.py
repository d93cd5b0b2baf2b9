"""Question handler registry and boundary parsing of question payloads."""

from typing import Any

from exercises.base import QuestionHandler, UnsupportedQuestionTypeError
from exercises.drag_and_drop import DragAndDropHandler
from exercises.fill_in_blank import FillInBlankHandler
from exercises.multiple_choice import MultipleChoiceHandler
from exercises.sentence_builder import SentenceBuilderHandler
from models import ExerciseQuestion, QuestionType

# Registry of question handler classes
QUESTION_HANDLERS: dict[QuestionType, type[QuestionHandler]] = {
    QuestionType.MULTIPLE_CHOICE: MultipleChoiceHandler,
    QuestionType.FILL_IN_BLANK: FillInBlankHandler,
    QuestionType.DRAG_AND_DROP: DragAndDropHandler,
    QuestionType.SENTENCE_BUILDER: SentenceBuilderHandler,
}

_SUPPORTED_TYPES = {t.value for t in QUESTION_HANDLERS}


def parse_question(question: ExerciseQuestion | dict[str, Any]) -> ExerciseQuestion:
    """Validate a raw question mapping into an ExerciseQuestion.

    Raises:
        UnsupportedQuestionTypeError: If the question type has no handler.
        pydantic.ValidationError: If the payload does not match its type.
    """
    if isinstance(question, ExerciseQuestion):
        return question
    if isinstance(question, dict):
        question_type = question.get("type")
        if isinstance(question_type, QuestionType):
            question_type = question_type.value
        if question_type not in _SUPPORTED_TYPES:
            raise UnsupportedQuestionTypeError(f"Unsupported question type: {question_type}")
    return ExerciseQuestion.model_validate(question)


def get_question_handler(question: ExerciseQuestion) -> QuestionHandler:
    """Get an initialized handler for the question's type."""
    try:
        handler_class = QUESTION_HANDLERS[question.type]
    except KeyError:
        raise UnsupportedQuestionTypeError(
            f"Unsupported question type: {question.type}"
        ) from None
    return handler_class(question)


def max_points_of(question: Any) -> float:
    """Best-effort point value of a possibly malformed question."""
    if isinstance(question, ExerciseQuestion):
        return question.points
    if isinstance(question, dict):
        points = question.get("points")
        if isinstance(points, (int, float)) and not isinstance(points, bool) and points > 0:
            return float(points)
    return 0.0
