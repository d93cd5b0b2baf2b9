"""Multiple choice grading: the selection must hit one of the correct options."""

import logging
from typing import Any

from exercises.base import QuestionDataError, QuestionHandler, as_string_list
from exercises.config import ValidationOptions
from exercises.distractors import DistractorSource
from exercises.results import (
    AnswerAnalysis,
    ErrorSeverity,
    ErrorType,
    HintData,
    HintType,
    ValidationOutcome,
)
from models import MultipleChoiceData, QuestionType

logger = logging.getLogger(__name__)


def _selections(user_response: Any) -> list[str]:
    """Normalize a single or multi-valued selection. Missing answers select nothing."""
    if user_response is None:
        return []
    selections = as_string_list(user_response, "Multiple choice response")
    return [s for s in selections if s.strip()]


class MultipleChoiceHandler(QuestionHandler[MultipleChoiceData]):
    """Handler for multiple choice questions. Binary scoring, no partial credit."""

    question_type = QuestionType.MULTIPLE_CHOICE
    generic_hint = (
        "Look carefully at each option and think about what you learned in the lesson."
    )
    review_suggestion = "Reread each option and rule out the ones that cannot be right."

    def correct_answers(self, correct_answer: Any = None) -> list[str]:
        if correct_answer is None:
            correct_answer = self.question.correct_answer
        if correct_answer is None:
            raise QuestionDataError("Multiple choice question has no correct answer")
        return as_string_list(correct_answer, "Multiple choice correct answer")

    @staticmethod
    def _matches(user: str, correct: str, case_sensitive: bool) -> bool:
        if case_sensitive:
            return user.strip() == correct.strip()
        return user.strip().lower() == correct.strip().lower()

    def is_selection_correct(
        self, selections: list[str], correct: list[str], case_sensitive: bool = False
    ) -> bool:
        return any(
            self._matches(user, answer, case_sensitive)
            for user in selections
            for answer in correct
        )

    def validate(self, user_response: Any, options: ValidationOptions) -> ValidationOutcome:
        correct = self.correct_answers()
        selections = _selections(user_response)
        is_correct = self.is_selection_correct(
            selections, correct, case_sensitive=bool(options.case_sensitive)
        )

        feedback = ""
        if options.provide_feedback:
            feedback = (
                "Correct! Well done."
                if is_correct
                else "That's not quite right. Try again!"
            )

        if is_correct:
            explanation = self.question.explanation or "You selected the correct answer."
        else:
            explanation = "The correct answer was different."

        return ValidationOutcome(
            is_correct=is_correct,
            points=self.max_points if is_correct else 0.0,
            max_points=self.max_points,
            feedback=feedback,
            explanation=explanation,
        )

    def analyze(
        self,
        user_answer: Any,
        correct_answer: Any,
        distractors: DistractorSource,
        options: ValidationOptions,
    ) -> AnswerAnalysis:
        correct = self.correct_answers(correct_answer)
        selections = _selections(user_answer)
        analysis = AnswerAnalysis()

        if self.is_selection_correct(
            selections, correct, case_sensitive=bool(options.case_sensitive)
        ):
            analysis.is_correct = True
            analysis.partial_credit = 1.0
            analysis.strengths.append("Selected the correct answer")
            return analysis

        if not selections:
            analysis.error_type = ErrorType.INCORRECT
            analysis.error_severity = ErrorSeverity.MODERATE
            analysis.specific_issues.append("No option was selected")
            return analysis

        option_keys = {o.strip().lower() for o in self.data.options}
        misconceptions = [
            user
            for user in selections
            if any(distractors.is_common_distractor(answer, user) for answer in correct)
        ]
        if misconceptions:
            logger.debug(
                "Question %s: %s matched known distractors", self.question.id, misconceptions
            )
            analysis.common_mistake = True
            analysis.error_type = ErrorType.COMMON_MISCONCEPTION
            analysis.error_severity = ErrorSeverity.MODERATE
            analysis.specific_issues.append("This is a common misconception")
        else:
            analysis.error_type = ErrorType.INCORRECT
            analysis.error_severity = ErrorSeverity.MODERATE

        for user in selections:
            if option_keys and user.strip().lower() not in option_keys:
                analysis.specific_issues.append(f'"{user}" is not one of the options')
        return analysis

    def strategy_hints(self) -> list[HintData]:
        return [
            HintData(
                level=1,
                content="Consider eliminating obviously incorrect options first.",
                type=HintType.TEXT,
                reveal_percentage=20,
                category="strategy",
            )
        ]
