"""Result models produced by the grading engine.

These models are created fresh per submission (or per hint session) and are
never persisted by the engine itself.
"""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator


def clamp_credit(value: float) -> float:
    """Clamp a partial credit ratio to [0, 1]."""
    return min(1.0, max(0.0, value))


class ValidationOutcome(BaseModel):
    """Score for a single submission."""

    is_correct: bool
    points: float = Field(ge=0.0)
    max_points: float = Field(ge=0.0)
    feedback: str = ""
    partial_credit: float | None = None
    error_details: list[str] | None = None
    explanation: str | None = None

    @field_validator("partial_credit")
    @classmethod
    def _clamp_partial_credit(cls, value: float | None) -> float | None:
        return None if value is None else clamp_credit(value)

    @model_validator(mode="after")
    def _cap_points(self) -> "ValidationOutcome":
        if self.points > self.max_points:
            self.points = self.max_points
        return self


class ErrorType(str, Enum):
    SPELLING = "spelling"
    GRAMMAR = "grammar"
    WORD_ORDER = "word_order"
    MISPLACEMENT = "misplacement"
    INCORRECT = "incorrect"
    COMMON_MISCONCEPTION = "common_misconception"


class ErrorSeverity(str, Enum):
    MINOR = "minor"
    MODERATE = "moderate"
    MAJOR = "major"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    ErrorSeverity.MINOR: 0,
    ErrorSeverity.MODERATE: 1,
    ErrorSeverity.MAJOR: 2,
}


class AnswerAnalysis(BaseModel):
    """Diagnosis of a submission: what went wrong and what went right."""

    is_correct: bool = False
    partial_credit: float = 0.0
    error_type: ErrorType | None = None
    error_severity: ErrorSeverity = ErrorSeverity.MINOR
    common_mistake: bool = False
    specific_issues: list[str] = Field(default_factory=list)
    strengths: list[str] = Field(default_factory=list)

    model_config = {"validate_assignment": True}

    @field_validator("partial_credit")
    @classmethod
    def _clamp_partial_credit(cls, value: float) -> float:
        return clamp_credit(value)


# ============================================================================
# Hints
# ============================================================================


class HintType(str, Enum):
    TEXT = "text"
    VISUAL = "visual"
    EXAMPLE = "example"
    STRUCTURAL = "structural"


class HintData(BaseModel):
    """A single hint in a sequence, ordered by how much it gives away."""

    level: int = Field(ge=0)
    content: str
    type: HintType = HintType.TEXT
    reveal_percentage: int = Field(ge=0, le=100)
    category: str | None = None


class HintState(str, Enum):
    NOT_STARTED = "not_started"
    REVEALED = "revealed"
    EXHAUSTED = "exhausted"


class HintSequence(BaseModel):
    """Caller-owned hint cursor for one question attempt.

    The cursor only moves forward. Callers sharing one sequence across
    concurrent requests must serialize access themselves.
    """

    hints: list[HintData] = Field(default_factory=list)
    current_index: int = Field(default=-1, ge=-1)
    max_hints: int = Field(default=0, ge=0)
    adaptive_mode: bool = True
    revealed: list[int] = Field(default_factory=list)

    model_config = {"validate_assignment": True}

    @model_validator(mode="after")
    def _check_cursor(self) -> "HintSequence":
        if self.max_hints > len(self.hints):
            raise ValueError(
                f"max_hints ({self.max_hints}) exceeds available hints ({len(self.hints)})"
            )
        if self.current_index > self.max_hints - 1:
            raise ValueError(
                f"current_index {self.current_index} is past the last hint "
                f"(max_hints={self.max_hints})"
            )
        return self

    @property
    def state(self) -> HintState:
        if self.current_index >= self.max_hints - 1:
            return HintState.EXHAUSTED
        if self.current_index < 0:
            return HintState.NOT_STARTED
        return HintState.REVEALED


# ============================================================================
# Feedback
# ============================================================================


FeedbackType = Literal["correct", "incorrect", "partial", "hint", "explanation"]


class GeneratedFeedback(BaseModel):
    """User-facing feedback. Plain text only; rendering is up to the caller."""

    type: FeedbackType
    title: str
    message: str
    details: str | None = None
    encouragement: str | None = None
    next_steps: str | None = None
    visual_aid: str | None = None
    related_concepts: list[str] | None = None
    severity: ErrorSeverity | None = None
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)


class SubmissionResult(BaseModel):
    """Score and (optionally) feedback for one submission."""

    outcome: ValidationOutcome
    feedback: GeneratedFeedback | None = None
