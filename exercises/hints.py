"""Hint sequencing: an ordered, capped list of hints revealed one at a time.

A sequence starts with nothing revealed, gives away a little more with
each request and ends once ``max_hints`` hints have been shown. Author hints
come first, spread evenly over 33/66/100 percent of the answer, and each
question type adds its own strategy hints.
"""

import logging

from exercises.config import FeedbackOptions
from exercises.registry import get_question_handler
from exercises.results import (
    GeneratedFeedback,
    HintData,
    HintSequence,
    HintState,
    HintType,
)
from models import ExerciseQuestion, FeedbackContext

logger = logging.getLogger(__name__)

PROVIDED_HINT_CATEGORY = "provided"


def _author_hints(question: ExerciseQuestion) -> list[HintData]:
    return [
        HintData(
            level=index,
            content=content,
            type=HintType.TEXT,
            reveal_percentage=min(100, (index + 1) * 100 // 3),
            category=PROVIDED_HINT_CATEGORY,
        )
        for index, content in enumerate(question.hints)
    ]


def generate_hint_sequence(
    question: ExerciseQuestion,
    options: FeedbackOptions | None = None,
) -> HintSequence:
    """Build a fresh hint sequence for one attempt at a question.

    Args:
        question: The question being attempted.
        options: Feedback options; ``max_hints`` caps the sequence and
            ``enable_adaptive`` turns on profile-driven selection.

    Returns:
        A sequence with nothing revealed yet.
    """
    options = options or FeedbackOptions()
    hints = _author_hints(question) + get_question_handler(question).strategy_hints()
    # sorted() is stable, so author hints keep their order on ties
    hints = sorted(hints, key=lambda h: h.reveal_percentage)
    hints = [h.model_copy(update={"level": i}) for i, h in enumerate(hints)]

    sequence = HintSequence(
        hints=hints,
        max_hints=min(len(hints), options.max_hints),
        adaptive_mode=options.enable_adaptive,
    )
    logger.debug(
        "Built %d hints for question %s (showing at most %d)",
        len(hints),
        question.id,
        sequence.max_hints,
    )
    return sequence


def _select_adaptive(sequence: HintSequence, context: FeedbackContext) -> int | None:
    """Position of the hint best matching the learner's recorded mistakes."""
    profile = context.user_profile
    if profile is None or not profile.common_mistakes:
        return None
    mistake_types = profile.mistake_types
    for position in range(sequence.max_hints):
        if position in sequence.revealed:
            continue
        if sequence.hints[position].category in mistake_types:
            return position
    return None


def get_next_hint(
    sequence: HintSequence,
    context: FeedbackContext | None = None,
) -> HintData | None:
    """Advance the sequence and return the next hint to show.

    The sequence is updated in place. Once exhausted, every call returns
    None and leaves the sequence unchanged.
    """
    if sequence.state == HintState.EXHAUSTED:
        return None

    sequence.current_index += 1

    position = None
    if sequence.adaptive_mode and context is not None:
        position = _select_adaptive(sequence, context)
    if position is None:
        position = next(p for p in range(sequence.max_hints) if p not in sequence.revealed)

    sequence.revealed.append(position)
    hint = sequence.hints[position]
    logger.debug(
        "Revealed hint %d of %d (position %d, %d%%)",
        sequence.current_index + 1,
        sequence.max_hints,
        position,
        hint.reveal_percentage,
    )
    return hint


def has_more_hints(sequence: HintSequence) -> bool:
    return sequence.state != HintState.EXHAUSTED


def hints_remaining(sequence: HintSequence) -> int:
    return sequence.max_hints - (sequence.current_index + 1)


def hint_feedback(hint: HintData, sequence: HintSequence) -> GeneratedFeedback:
    """Wrap a revealed hint as feedback for display."""
    return GeneratedFeedback(
        type="hint",
        title=f"Hint {sequence.current_index + 1} of {sequence.max_hints}",
        message=hint.content,
        confidence=1.0,
    )
