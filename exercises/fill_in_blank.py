"""Fill-in-blank grading: every blank is graded on its own."""

from typing import Any

from exercises.base import (
    QuestionDataError,
    QuestionHandler,
    as_mapping,
    as_string_list,
)
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
from exercises.similarity import (
    is_grammatical_variation,
    is_spelling_mistake,
    normalize_text,
)
from models import Blank, FillInBlankData, QuestionType

# Credit awarded per blank for near misses
SPELLING_CREDIT = 0.5
GRAMMAR_CREDIT = 0.7


class FillInBlankHandler(QuestionHandler[FillInBlankData]):
    """Handler for fill-in-blank questions."""

    question_type = QuestionType.FILL_IN_BLANK
    generic_hint = "Think about the grammar rules we covered. Check your spelling carefully."
    review_suggestion = "Reread the sentence around each blank before answering."

    @property
    def blanks(self) -> list[Blank]:
        """Blanks in template order."""
        if not self.data.blanks:
            raise QuestionDataError("Fill in blank question has no blanks")
        return sorted(self.data.blanks, key=lambda b: b.position)

    def responses_by_blank(self, user_response: Any) -> dict[str, str]:
        """Map blank IDs to the learner's text.

        Accepts a mapping keyed by blank ID, a list in blank order, or a
        bare string when the question has a single blank.
        """
        blanks = self.blanks
        if user_response is None:
            return {}
        if isinstance(user_response, str):
            if len(blanks) != 1:
                raise QuestionDataError(
                    f"Expected answers for {len(blanks)} blanks, got a single string"
                )
            return {blanks[0].id: user_response}
        if isinstance(user_response, (list, tuple)):
            return {
                blank.id: value
                for blank, value in zip(blanks, user_response)
                if isinstance(value, str)
            }
        responses = as_mapping(user_response, "Fill in blank response")
        return {k: v for k, v in responses.items() if isinstance(v, str)}

    def acceptable_answers(self, correct_answer: Any = None) -> dict[str, list[str]]:
        """Acceptable answers per blank: the blank's own list plus any explicit answer."""
        if correct_answer is None:
            correct_answer = self.question.correct_answer

        explicit: dict[str, Any] = {}
        if isinstance(correct_answer, dict):
            explicit = correct_answer
        elif isinstance(correct_answer, (list, tuple)):
            explicit = {b.id: answer for b, answer in zip(self.blanks, correct_answer)}
        elif isinstance(correct_answer, str) and len(self.blanks) == 1:
            explicit = {self.blanks[0].id: correct_answer}

        accepted: dict[str, list[str]] = {}
        for blank in self.blanks:
            answers = list(blank.acceptable_answers)
            if explicit.get(blank.id) is not None:
                for answer in as_string_list(explicit[blank.id], f"Answer for blank {blank.id}"):
                    if answer not in answers:
                        answers.append(answer)
            if not answers:
                raise QuestionDataError(f"Blank {blank.id} has no acceptable answers")
            accepted[blank.id] = answers
        return accepted

    @staticmethod
    def is_case_sensitive(blank: Blank, options: ValidationOptions) -> bool:
        """An explicit case_sensitive option overrides the blank's own setting."""
        if options.case_sensitive is not None:
            return options.case_sensitive
        return blank.case_sensitive

    @staticmethod
    def _blank_matches(user_answer: str, acceptable: list[str], case_sensitive: bool) -> bool:
        if case_sensitive:
            return any(user_answer == a.strip() for a in acceptable)
        return any(user_answer.lower() == a.strip().lower() for a in acceptable)

    def validate(self, user_response: Any, options: ValidationOptions) -> ValidationOutcome:
        responses = self.responses_by_blank(user_response)
        accepted = self.acceptable_answers()
        total = len(self.blanks)
        correct_blanks = 0
        error_details = []

        for blank in self.blanks:
            user_answer = (responses.get(blank.id) or "").strip()
            acceptable = accepted[blank.id]
            case_sensitive = self.is_case_sensitive(blank, options)
            if self._blank_matches(user_answer, acceptable, case_sensitive):
                correct_blanks += 1
            else:
                error_details.append(
                    f"Blank {blank.position}: Expected one of "
                    f'[{", ".join(acceptable)}], got "{user_answer}"'
                )

        is_correct = correct_blanks == total
        ratio = correct_blanks / total
        points, partial_credit = self.score(ratio, is_correct, options)

        feedback = ""
        if options.provide_feedback:
            if is_correct:
                feedback = "Perfect! All blanks are correct."
            elif correct_blanks > 0 and options.allow_partial_credit:
                feedback = (
                    f"Good progress! You got {correct_blanks} out of {total} blanks correct."
                )
            else:
                feedback = "Some answers need correction. Check your spelling and try again."

        return ValidationOutcome(
            is_correct=is_correct,
            points=points,
            max_points=self.max_points,
            feedback=feedback,
            partial_credit=partial_credit,
            error_details=error_details or None,
            explanation=f"You correctly filled in {correct_blanks} out of {total} blanks.",
        )

    def analyze(
        self,
        user_answer: Any,
        correct_answer: Any,
        distractors: DistractorSource,
        options: ValidationOptions,
    ) -> AnswerAnalysis:
        responses = self.responses_by_blank(user_answer)
        accepted = self.acceptable_answers(correct_answer)
        analysis = AnswerAnalysis()
        credit = 0.0
        worst: tuple[ErrorSeverity, ErrorType] | None = None

        def record(severity: ErrorSeverity, error_type: ErrorType) -> None:
            nonlocal worst
            if worst is None or severity.rank > worst[0].rank:
                worst = (severity, error_type)

        for blank in self.blanks:
            raw = (responses.get(blank.id) or "").strip()
            user = normalize_text(raw)
            acceptable = accepted[blank.id]
            label = f"Blank {blank.position}"

            if not user:
                analysis.specific_issues.append(f"{label}: Missing answer")
                record(ErrorSeverity.MAJOR, ErrorType.INCORRECT)
            elif self._blank_matches(raw, acceptable, self.is_case_sensitive(blank, options)):
                analysis.strengths.append(f"{label} is correct")
                credit += 1
            elif any(user == normalize_text(a) for a in acceptable):
                if any(raw.lower() == a.strip().lower() for a in acceptable):
                    analysis.specific_issues.append(f"{label}: Check capitalization")
                else:
                    analysis.specific_issues.append(f"{label}: Check punctuation")
                credit += SPELLING_CREDIT
                record(ErrorSeverity.MINOR, ErrorType.SPELLING)
            elif any(is_spelling_mistake(user, a) for a in acceptable):
                analysis.specific_issues.append(f"{label}: Spelling error")
                credit += SPELLING_CREDIT
                record(ErrorSeverity.MINOR, ErrorType.SPELLING)
            elif any(is_grammatical_variation(user, a) for a in acceptable):
                analysis.specific_issues.append(f"{label}: Grammatical variation")
                credit += GRAMMAR_CREDIT
                record(ErrorSeverity.MODERATE, ErrorType.GRAMMAR)
            else:
                analysis.specific_issues.append(f"{label}: Incorrect")
                record(ErrorSeverity.MAJOR, ErrorType.INCORRECT)

        analysis.partial_credit = credit / len(self.blanks)
        analysis.is_correct = worst is None
        if worst is not None:
            analysis.error_severity, analysis.error_type = worst
        return analysis

    def strategy_hints(self) -> list[HintData]:
        return [
            HintData(
                level=1,
                content="Look at the context around each blank for clues.",
                type=HintType.TEXT,
                reveal_percentage=20,
                category="strategy",
            ),
            HintData(
                level=2,
                content="Check the grammatical form needed (verb tense, singular/plural, etc.).",
                type=HintType.TEXT,
                reveal_percentage=40,
                category="grammar",
            ),
        ]
