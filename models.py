import json
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, field_validator, model_validator


class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "multiple_choice"
    FILL_IN_BLANK = "fill_in_blank"
    DRAG_AND_DROP = "drag_and_drop"
    SENTENCE_BUILDER = "sentence_builder"


# ============================================================================
# Question Data Models
# ============================================================================


class MultipleChoiceData(BaseModel):
    """Options for a multiple choice question."""

    type: Literal["multiple_choice"] = "multiple_choice"
    options: list[str]
    shuffle_options: bool = False


class Blank(BaseModel):
    """A single blank inside a fill-in-blank template.

    Examples:
        - id="blank1", position=1, acceptable_answers=["dog", "cat"]
    """

    id: str
    position: int
    acceptable_answers: list[str] = Field(default_factory=list)
    case_sensitive: bool = False


class FillInBlankData(BaseModel):
    """Template text with {blank} placeholders and their definitions."""

    type: Literal["fill_in_blank"] = "fill_in_blank"
    template: str = ""
    blanks: list[Blank]


class DragItem(BaseModel):
    id: str
    content: str
    category: str | None = None


class DropTarget(BaseModel):
    id: str
    label: str
    accepts_category: str | None = None


class DragAndDropData(BaseModel):
    """Draggable items and the labeled zones they can be dropped into."""

    type: Literal["drag_and_drop"] = "drag_and_drop"
    items: list[DragItem]
    targets: list[DropTarget]

    def item_label(self, item_id: str) -> str:
        """Display text for an item, falling back to its ID."""
        for item in self.items:
            if item.id == item_id:
                return item.content
        return item_id


class SentenceBuilderData(BaseModel):
    """Word bank for a sentence builder question."""

    type: Literal["sentence_builder"] = "sentence_builder"
    words: list[str]
    shuffle_words: bool = True
    allow_extra_words: bool = False


QuestionData = Annotated[
    Union[MultipleChoiceData, FillInBlankData, DragAndDropData, SentenceBuilderData],
    Field(discriminator="type"),
]


def _decode_json(value: Any) -> Any:
    """Decode a JSON-encoded payload, leaving structured values untouched."""
    if isinstance(value, str):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value
    return value


class ExerciseQuestion(BaseModel):
    """A published exercise question. Read-only to the grading engine."""

    id: str
    question_text: str = ""
    type: QuestionType
    question_data: QuestionData
    correct_answer: Any = None
    hints: list[str] = Field(default_factory=list)
    points: float = Field(default=1.0, gt=0)
    explanation: str | None = None

    model_config = {"frozen": True}

    @model_validator(mode="before")
    @classmethod
    def _decode_payloads(cls, data: Any) -> Any:
        """Decode JSON string payloads and tag question data with the question type."""
        if not isinstance(data, dict):
            return data

        data = dict(data)
        question_data = _decode_json(data.get("question_data"))
        question_type = data.get("type")
        if isinstance(question_type, Enum):
            question_type = question_type.value
        if isinstance(question_data, dict) and "type" not in question_data:
            question_data = {**question_data, "type": question_type}
        data["question_data"] = question_data

        if "correct_answer" in data:
            correct_answer = data["correct_answer"]
            # Plain sentences and option labels are valid JSON-less strings
            decoded = _decode_json(correct_answer)
            if isinstance(decoded, (dict, list)):
                correct_answer = decoded
            data["correct_answer"] = correct_answer

        if isinstance(data.get("hints"), str):
            data["hints"] = _decode_json(data["hints"])
        if data.get("hints") is None:
            data["hints"] = []
        return data

    @model_validator(mode="after")
    def _check_data_matches_type(self) -> "ExerciseQuestion":
        if self.question_data.type != self.type.value:
            raise ValueError(
                f"question_data is tagged {self.question_data.type!r} "
                f"but the question type is {self.type.value!r}"
            )
        return self


# ============================================================================
# Learner Profile Models
# ============================================================================


class ErrorPattern(BaseModel):
    """A recurring mistake recorded for a learner."""

    type: str
    frequency: int = Field(default=1, ge=0)
    last_occurrence: datetime = Field(default_factory=datetime.now)
    remedial_suggestion: str | None = None


class UserLearningProfile(BaseModel):
    """Longitudinal learner record, maintained outside the grading engine."""

    user_id: str
    strength_areas: list[str] = Field(default_factory=list)
    weakness_areas: list[str] = Field(default_factory=list)
    preferred_hint_style: Literal["detailed", "minimal", "visual"] = "detailed"
    average_response_time: float = Field(default=0.0, ge=0.0)
    success_rate: float = Field(default=0.0, ge=0.0, le=1.0)
    common_mistakes: list[ErrorPattern] = Field(default_factory=list)

    def has_mistake(self, mistake_type: str | None) -> bool:
        """Check whether a mistake type has been recorded for this learner."""
        if mistake_type is None:
            return False
        return any(m.type == mistake_type for m in self.common_mistakes)

    @property
    def mistake_types(self) -> set[str]:
        return {m.type for m in self.common_mistakes}


class FeedbackContext(BaseModel):
    """Everything known about one submission when composing feedback."""

    question: ExerciseQuestion
    user_answer: Any = None
    correct_answer: Any = None
    attempt_number: int = Field(default=1, ge=1)
    hints_used: int = Field(default=0, ge=0)
    time_spent: float = Field(default=0.0, ge=0.0)
    previous_attempts: list[Any] = Field(default_factory=list)
    user_profile: UserLearningProfile | None = None

    @field_validator("correct_answer", mode="before")
    @classmethod
    def _decode_correct_answer(cls, value: Any) -> Any:
        decoded = _decode_json(value)
        return decoded if isinstance(decoded, (dict, list)) else value

    @property
    def expected_answer(self) -> Any:
        """The correct answer for this submission, defaulting to the question's."""
        if self.correct_answer is not None:
            return self.correct_answer
        return self.question.correct_answer
