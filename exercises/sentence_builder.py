"""Sentence builder grading: arrange a word bank into a sentence."""

from collections import Counter
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
from exercises.similarity import (
    find_transpositions,
    is_grammatically_plausible,
    normalize_text,
    tokenize,
    word_set_similarity,
)
from models import QuestionType, SentenceBuilderData

# Floor for a sentence that reads as valid English even if it is not the target
PLAUSIBLE_SENTENCE_CREDIT = 0.7


def _user_words(user_response: Any) -> list[str]:
    if user_response is None:
        return []
    if isinstance(user_response, str):
        return user_response.split()
    return as_string_list(user_response, "Sentence builder response")


class SentenceBuilderHandler(QuestionHandler[SentenceBuilderData]):
    """Handler for sentence builder questions."""

    question_type = QuestionType.SENTENCE_BUILDER
    generic_hint = "Think about the correct word order. Start with the subject, then the verb."
    review_suggestion = "Find the subject and the verb, then place the remaining words."

    def correct_sentences(self, correct_answer: Any = None) -> list[str]:
        """Acceptable target sentences.

        A list containing multi-word entries is a list of sentences; a list of
        single words is one sentence given word by word.
        """
        if correct_answer is None:
            correct_answer = self.question.correct_answer
        if correct_answer is None:
            raise QuestionDataError("Sentence builder question has no correct answer")

        sentences = as_string_list(correct_answer, "Sentence builder correct answer")
        if len(sentences) > 1 and not any(len(s.split()) > 1 for s in sentences):
            sentences = [" ".join(sentences)]
        sentences = [s for s in sentences if normalize_text(s)]
        if not sentences:
            raise QuestionDataError("Sentence builder correct answer is empty")
        return sentences

    def validate(self, user_response: Any, options: ValidationOptions) -> ValidationOutcome:
        correct_sentences = self.correct_sentences()
        user_sentence = normalize_text(" ".join(_user_words(user_response)))
        user_tokens = user_sentence.split() if user_sentence else []

        is_correct = False
        best_match = ""
        for correct in correct_sentences:
            normalized = normalize_text(correct)
            if options.strict_matching:
                matched = user_sentence == normalized
            else:
                matched = sorted(user_tokens) == sorted(normalized.split())
            if matched:
                is_correct = True
                best_match = correct
                break

        ratio = 1.0
        if not is_correct:
            correct_words = set(tokenize(correct_sentences[0]))
            ratio = len(set(user_tokens) & correct_words) / len(correct_words)
        points, partial_credit = self.score(ratio, is_correct, options)

        feedback = ""
        if options.provide_feedback:
            if is_correct:
                feedback = "Perfect sentence! Great job with word order and grammar."
            elif options.allow_partial_credit and ratio > 0.5:
                feedback = "You're on the right track! Check the word order and try again."
            else:
                feedback = "This sentence needs some work. Think about the correct word order."

        if is_correct:
            explanation = f'Your sentence matches the expected structure: "{best_match}"'
        else:
            explanation = f'Expected something like: "{correct_sentences[0]}"'

        return ValidationOutcome(
            is_correct=is_correct,
            points=points,
            max_points=self.max_points,
            feedback=feedback,
            partial_credit=partial_credit,
            explanation=explanation,
        )

    def analyze(
        self,
        user_answer: Any,
        correct_answer: Any,
        distractors: DistractorSource,
        options: ValidationOptions,
    ) -> AnswerAnalysis:
        raw_words = _user_words(user_answer)
        user_words = tokenize(" ".join(raw_words))
        targets = [tokenize(s) for s in self.correct_sentences(correct_answer)]
        analysis = AnswerAnalysis()

        if user_words in targets:
            analysis.is_correct = True
            analysis.partial_credit = 1.0
            analysis.strengths.append("Word order is correct")
            return analysis

        if not options.strict_matching and any(
            sorted(user_words) == sorted(t) for t in targets
        ):
            analysis.is_correct = True
            analysis.partial_credit = 1.0
            analysis.strengths.append("Uses every word of the sentence")
            return analysis

        target = max(
            targets, key=lambda t: word_set_similarity(set(user_words), set(t))
        )

        transpositions = find_transpositions(user_words, target)
        if transpositions:
            analysis.error_type = ErrorType.WORD_ORDER
            analysis.error_severity = (
                ErrorSeverity.MINOR if len(transpositions) <= 2 else ErrorSeverity.MODERATE
            )
            analysis.specific_issues.append(
                f"Word order issues: {len(transpositions)} transpositions"
            )
            analysis.partial_credit = 1 - len(transpositions) / len(target)
        else:
            analysis.error_type = ErrorType.INCORRECT
            analysis.error_severity = ErrorSeverity.MAJOR

        missing = Counter(target) - Counter(user_words)
        extra = Counter(user_words) - Counter(target)
        if missing:
            analysis.specific_issues.append(f"Missing words: {', '.join(missing.elements())}")
        if extra:
            analysis.specific_issues.append(f"Unexpected words: {', '.join(extra.elements())}")

        if is_grammatically_plausible(" ".join(raw_words)):
            analysis.strengths.append("Sentence is grammatically valid")
            analysis.partial_credit = max(analysis.partial_credit, PLAUSIBLE_SENTENCE_CREDIT)

        return analysis

    def strategy_hints(self) -> list[HintData]:
        return [
            HintData(
                level=1,
                content="Start by identifying the subject and main verb.",
                type=HintType.STRUCTURAL,
                reveal_percentage=25,
                category="structure",
            ),
            HintData(
                level=2,
                content="Think about the typical word order in English sentences.",
                type=HintType.TEXT,
                reveal_percentage=50,
                category="grammar",
            ),
        ]
