"""Grammar practice UI module - terminal panels for grading results and hints."""

from ui.app import GradingUI, parse_answer
from ui.components import (
    QuestionPanel,
    OutcomePanel,
    FeedbackPanel,
    HintTable,
    WelcomeScreen,
    ProgressTracker,
)
from ui.styles import (
    BRAND_PURPLE,
    HIGHLIGHT_GOLD,
    SUCCESS_GREEN,
    PARTIAL_ORANGE,
    ERROR_RED,
    INFO_BLUE,
    MUTED_GRAY,
)

__all__ = [
    "GradingUI",
    "parse_answer",
    "QuestionPanel",
    "OutcomePanel",
    "FeedbackPanel",
    "HintTable",
    "WelcomeScreen",
    "ProgressTracker",
    "BRAND_PURPLE",
    "HIGHLIGHT_GOLD",
    "SUCCESS_GREEN",
    "PARTIAL_ORANGE",
    "ERROR_RED",
    "INFO_BLUE",
    "MUTED_GRAY",
]
