"""Configuration for grading and feedback generation.

These configuration models let callers tune grading behavior, such as
partial credit and case sensitivity, and how feedback is composed.
"""

from typing import Literal

from pydantic import BaseModel, Field

# No question reveals more than three hints
MAX_HINTS = 3


class ValidationOptions(BaseModel):
    """Options for answer validation."""

    allow_partial_credit: bool = True
    # None defers to each blank's own setting
    case_sensitive: bool | None = None
    strict_matching: bool = False
    provide_feedback: bool = True


class FeedbackOptions(BaseModel):
    """Options for feedback composition and hint sequencing."""

    enable_adaptive: bool = True
    enable_encouragement: bool = True
    enable_visual_aids: bool = True
    enable_related_concepts: bool = True
    tone: Literal["formal", "casual", "encouraging"] = "encouraging"
    max_hints: int = Field(default=MAX_HINTS, ge=0, le=MAX_HINTS)
    max_feedback_length: int | None = Field(default=None, ge=10)
