"""Tests for answer validation across all question types."""

import pytest

from exercises import (
    ValidationOptions,
    ValidationOutcome,
    generate_hint,
    is_eligible_for_enrichment,
    is_empty_answer,
    lint_question,
    needs_remediation,
    validate_exercise_response,
)
from exercises.validation import VALIDATION_ERROR_FEEDBACK
from models import ExerciseQuestion

ALL_CORRECT_FIB = {"blank1": "walks", "blank2": "does", "blank3": "homework", "blank4": "night"}
HALF_CORRECT_FIB = {"blank1": "walks", "blank2": "do", "blank3": "homework", "blank4": "day"}


def _outcome(correct: bool) -> ValidationOutcome:
    return ValidationOutcome(is_correct=correct, points=1.0 if correct else 0.0, max_points=1.0)


class TestMultipleChoiceValidation:
    """Tests for multiple choice grading."""

    def test_correct_option(self, mc_question):
        """Should award full points for the correct option."""
        result = validate_exercise_response(mc_question, "run")
        assert result.is_correct
        assert result.points == 2.0
        assert result.max_points == 2.0
        assert result.feedback == "Correct! Well done."
        assert result.explanation == "Verbs describe actions."

    def test_case_insensitive_by_default(self, mc_question):
        """Should ignore case unless asked not to."""
        assert validate_exercise_response(mc_question, "RUN").is_correct
        strict = ValidationOptions(case_sensitive=True)
        assert not validate_exercise_response(mc_question, "RUN", strict).is_correct

    def test_wrong_option_scores_zero(self, mc_question):
        """Should give no partial credit for a wrong option."""
        result = validate_exercise_response(mc_question, "table")
        assert not result.is_correct
        assert result.points == 0.0
        assert result.partial_credit is None
        assert result.feedback == "That's not quite right. Try again!"
        assert result.explanation == "The correct answer was different."

    def test_any_correct_selection_in_list(self, mc_question):
        """Should accept a multi-select response containing a correct option."""
        assert validate_exercise_response(mc_question, ["table", "run"]).is_correct

    def test_feedback_suppressed(self, mc_question):
        """Should leave feedback empty when provide_feedback is off."""
        options = ValidationOptions(provide_feedback=False)
        assert validate_exercise_response(mc_question, "run", options).feedback == ""


class TestFillInBlankValidation:
    """Tests for fill-in-blank grading."""

    def test_all_blanks_correct(self, fib_question):
        """Should award full points when every blank matches."""
        result = validate_exercise_response(fib_question, ALL_CORRECT_FIB)
        assert result.is_correct
        assert result.points == 4.0
        assert result.feedback == "Perfect! All blanks are correct."
        assert result.error_details is None
        assert result.explanation == "You correctly filled in 4 out of 4 blanks."

    def test_half_blanks_correct(self, fib_question):
        """Should award half the points for two of four blanks."""
        result = validate_exercise_response(fib_question, HALF_CORRECT_FIB)
        assert not result.is_correct
        assert result.partial_credit == 0.5
        assert result.points == 2.0
        assert result.feedback == "Good progress! You got 2 out of 4 blanks correct."
        assert result.error_details == [
            'Blank 2: Expected one of [does], got "do"',
            'Blank 4: Expected one of [night], got "day"',
        ]

    def test_no_partial_credit(self, fib_question):
        """Should score all-or-nothing when partial credit is disabled."""
        options = ValidationOptions(allow_partial_credit=False)
        result = validate_exercise_response(fib_question, HALF_CORRECT_FIB, options)
        assert result.points == 0.0
        assert result.partial_credit is None
        assert result.feedback == (
            "Some answers need correction. Check your spelling and try again."
        )

    def test_list_response_in_blank_order(self, fib_question):
        """Should accept answers as a list ordered by blank position."""
        result = validate_exercise_response(
            fib_question, ["walks", "does", "homework", "night"]
        )
        assert result.is_correct

    def test_case_sensitivity_option_overrides_blank(self, fib_question):
        """Should honour an explicit case_sensitive option over the blank default."""
        answers = {**ALL_CORRECT_FIB, "blank1": "Walks"}
        assert validate_exercise_response(fib_question, answers).is_correct
        options = ValidationOptions(case_sensitive=True)
        assert not validate_exercise_response(fib_question, answers, options).is_correct

    def test_missing_blank_counts_as_wrong(self, fib_question):
        """Should grade an unanswered blank as incorrect."""
        answers = {k: v for k, v in ALL_CORRECT_FIB.items() if k != "blank3"}
        result = validate_exercise_response(fib_question, answers)
        assert result.partial_credit == 0.75
        assert result.points == 3.0

    def test_correct_answer_extends_acceptable_answers(self):
        """Should accept answers from the question's correct_answer mapping too."""
        question = ExerciseQuestion(
            id="fib3",
            type="fill_in_blank",
            question_data={
                "template": "I {b1} tea.",
                "blanks": [{"id": "b1", "position": 1, "acceptable_answers": ["like"]}],
            },
            correct_answer={"b1": ["love", "enjoy"]},
        )
        assert validate_exercise_response(question, {"b1": "enjoy"}).is_correct
        assert validate_exercise_response(question, "like").is_correct


class TestDragAndDropValidation:
    """Tests for drag-and-drop grading."""

    def test_all_items_placed_correctly(self, dnd_question):
        """Should award full points when every item is in its zone."""
        response = {"nouns": ["i1", "i4"], "verbs": ["i2"], "adjectives": ["i3"]}
        result = validate_exercise_response(dnd_question, response)
        assert result.is_correct
        assert result.points == 4.0
        assert result.feedback == "Excellent! All items are placed correctly."

    def test_all_items_wrong(self, dnd_question):
        """Should give no credit when every item is misplaced."""
        response = {"nouns": ["i3"], "verbs": ["i1", "i4"], "adjectives": ["i2"]}
        result = validate_exercise_response(dnd_question, response)
        assert not result.is_correct
        assert result.partial_credit == 0.0
        assert result.points == 0.0
        assert result.feedback == "Some items are in the wrong places. Try moving them around."

    def test_partial_placement(self, dnd_question):
        """Should award credit for the items placed correctly."""
        response = {"nouns": ["i1", "i4"], "adjectives": ["i2"]}
        result = validate_exercise_response(dnd_question, response)
        assert result.partial_credit == 0.5
        assert result.points == 2.0
        assert result.feedback == "Good work! You placed 2 out of 4 items correctly."
        assert 'Target "Adjectives": Incorrectly placed items: jump' in result.error_details
        assert 'Target "Verbs": Missing items: jump' in result.error_details

    def test_single_item_ids_accepted(self, dnd_question):
        """Should accept a bare item ID for a zone holding one item."""
        response = {"nouns": ["i1", "i4"], "verbs": "i2", "adjectives": "i3"}
        assert validate_exercise_response(dnd_question, response).is_correct

    def test_categories_used_without_answer_key(self, dnd_question):
        """Should derive placements from accepted categories when no key is given."""
        question = dnd_question.model_copy(update={"correct_answer": None})
        response = {"nouns": ["i1", "i4"], "verbs": ["i2"], "adjectives": ["i3"]}
        assert validate_exercise_response(question, response).is_correct

    def test_repeated_item_counts_once(self):
        """Should not credit the same item twice for dropping it twice."""
        question = ExerciseQuestion(
            id="dnd-dup",
            type="drag_and_drop",
            question_data={
                "items": [{"id": "a", "content": "A"}, {"id": "b", "content": "B"}],
                "targets": [{"id": "z1", "label": "Z1"}, {"id": "z2", "label": "Z2"}],
            },
            correct_answer={"z1": ["a"], "z2": ["b"]},
            points=2,
        )
        result = validate_exercise_response(question, {"z1": ["a", "a"]})
        assert not result.is_correct
        assert result.partial_credit == 0.5
        assert result.points == 1.0


class TestSentenceBuilderValidation:
    """Tests for sentence builder grading."""

    def test_any_order_accepted_when_not_strict(self, sb_question):
        """Should accept the right words in a different order by default."""
        result = validate_exercise_response(sb_question, ["dog", "the", "is", "running"])
        assert result.is_correct
        assert result.points == 2.0
        assert result.explanation == (
            'Your sentence matches the expected structure: "The dog is running"'
        )

    def test_strict_requires_exact_order(self, sb_question):
        """Should reject a reordered sentence under strict matching."""
        options = ValidationOptions(strict_matching=True)
        result = validate_exercise_response(
            sb_question, ["dog", "the", "is", "running"], options
        )
        assert not result.is_correct
        assert result.explanation == 'Expected something like: "The dog is running"'

    def test_strict_exact_order(self, sb_question):
        """Should accept the exact sentence under strict matching."""
        options = ValidationOptions(strict_matching=True)
        result = validate_exercise_response(
            sb_question, ["The", "dog", "is", "running"], options
        )
        assert result.is_correct

    def test_word_overlap_partial_credit(self, sb_question):
        """Should award credit for the share of target words used."""
        result = validate_exercise_response(sb_question, ["the", "dog", "runs"])
        assert not result.is_correct
        assert result.partial_credit == 0.5
        assert result.points == 1.0
        assert result.feedback == (
            "This sentence needs some work. Think about the correct word order."
        )

    def test_alternative_sentences(self):
        """Should accept any of several correct sentences."""
        question = ExerciseQuestion(
            id="sb2",
            type="sentence_builder",
            question_data={"words": ["today", "I", "swim"]},
            correct_answer=["I swim today", "Today I swim"],
        )
        options = ValidationOptions(strict_matching=True)
        assert validate_exercise_response(question, "today I swim", options).is_correct


class TestScoringInvariants:
    """Points always fall in [0, max_points] and correct answers get full marks."""

    @pytest.mark.parametrize(
        "index, response",
        [
            (0, "run"),
            (0, "blue"),
            (0, None),
            (1, ALL_CORRECT_FIB),
            (1, HALF_CORRECT_FIB),
            (1, {}),
            (2, {"nouns": ["i1", "i4"], "verbs": ["i2"], "adjectives": ["i3"]}),
            (2, {"nouns": ["i1", "i2", "i3", "i4"]}),
            (3, ["dog", "the", "is", "running"]),
            (3, ["cat"]),
        ],
    )
    def test_points_bounds(self, all_questions, index, response):
        """Should keep points within bounds for any response."""
        result = validate_exercise_response(all_questions[index], response)
        assert 0.0 <= result.points <= result.max_points
        if result.is_correct:
            assert result.points == result.max_points

    def test_validation_is_idempotent(self, all_questions):
        """Should return the same outcome for the same input."""
        for question in all_questions:
            first = validate_exercise_response(question, ["dog", "the"])
            second = validate_exercise_response(question, ["dog", "the"])
            assert first == second


class TestMalformedInput:
    """Malformed questions and responses become zero-score outcomes."""

    def test_unsupported_question_type(self):
        """Should report an unsupported type instead of raising."""
        result = validate_exercise_response(
            {"id": "x", "type": "essay", "question_data": {}, "points": 3}, "text"
        )
        assert not result.is_correct
        assert result.points == 0.0
        assert result.max_points == 3.0
        assert result.feedback == VALIDATION_ERROR_FEEDBACK
        assert result.error_details == ["Unsupported question type: essay"]

    def test_question_data_missing_fields(self):
        """Should report a payload that doesn't match its type."""
        result = validate_exercise_response(
            {"id": "x", "type": "multiple_choice", "question_data": {}}, "a"
        )
        assert not result.is_correct
        assert result.error_details

    def test_json_encoded_question_data(self):
        """Should decode question data given as a JSON string."""
        question = {
            "id": "mc2",
            "type": "multiple_choice",
            "question_data": '{"options": ["a", "b"]}',
            "correct_answer": "a",
        }
        assert validate_exercise_response(question, "a").is_correct

    def test_wrong_response_shape(self, dnd_question):
        """Should reject a drag-and-drop response that is not a mapping."""
        result = validate_exercise_response(dnd_question, ["i1", "i2"])
        assert not result.is_correct
        assert result.points == 0.0
        assert result.max_points == 4.0
        assert "must be a mapping" in result.error_details[0]

    def test_missing_correct_answer(self):
        """Should report a multiple choice question without an answer key."""
        question = ExerciseQuestion(
            id="mc3", type="multiple_choice", question_data={"options": ["a", "b"]}
        )
        result = validate_exercise_response(question, "a")
        assert not result.is_correct
        assert result.error_details == ["Multiple choice question has no correct answer"]

    def test_single_string_for_many_blanks(self, fib_question):
        """Should reject a single string when there are several blanks."""
        result = validate_exercise_response(fib_question, "walks")
        assert result.points == 0.0
        assert result.error_details


class TestGenerateHint:
    """Tests for generate_hint."""

    def test_author_hint_by_level(self, mc_question):
        """Should return the author's hint at a 1-based level."""
        assert generate_hint(mc_question, hint_level=1) == "It describes an action."
        assert generate_hint(mc_question, hint_level=2) == "You can do it with your legs."

    def test_generic_hint_past_author_hints(self, mc_question):
        """Should fall back to the type's generic hint."""
        assert generate_hint(mc_question, hint_level=3).startswith("Look carefully at each option")

    def test_generic_hint_without_author_hints(self, sb_question):
        """Should use the sentence builder's generic hint."""
        assert generate_hint(sb_question) == (
            "Think about the correct word order. Start with the subject, then the verb."
        )


class TestAggregates:
    """Tests for remediation and enrichment recommendations."""

    def test_low_accuracy_needs_remediation(self):
        """Should recommend remediation below 60% accuracy."""
        results = [_outcome(True), _outcome(False), _outcome(False)]
        assert needs_remediation(results)
        assert not is_eligible_for_enrichment(results)

    def test_high_accuracy_is_eligible_for_enrichment(self):
        """Should recommend enrichment at 90% accuracy or above."""
        results = [_outcome(True)] * 9 + [_outcome(False)]
        assert is_eligible_for_enrichment(results)
        assert not needs_remediation(results)

    def test_middle_accuracy_recommends_neither(self):
        """Should recommend nothing between the thresholds."""
        results = [_outcome(True)] * 3 + [_outcome(False)]
        assert not needs_remediation(results)
        assert not is_eligible_for_enrichment(results)

    def test_empty_results_recommend_neither(self):
        """Should recommend nothing without results."""
        assert not needs_remediation([])
        assert not is_eligible_for_enrichment([])


class TestQuestionHelpers:
    """Tests for is_empty_answer and lint_question."""

    @pytest.mark.parametrize("answer", [None, "", "   ", [], {}])
    def test_empty_answers(self, answer):
        """Should treat missing and blank answers as empty."""
        assert is_empty_answer(answer)

    @pytest.mark.parametrize("answer", ["a", ["a"], {"b": "x"}, 0])
    def test_non_empty_answers(self, answer):
        """Should treat anything else as an answer."""
        assert not is_empty_answer(answer)

    def test_complete_questions_pass_lint(self, all_questions):
        """Should find no problems in well-formed questions."""
        for question in all_questions:
            assert lint_question(question) == []

    def test_lint_reports_problems(self):
        """Should list every authoring problem it finds."""
        question = ExerciseQuestion(
            id="bad",
            type="sentence_builder",
            question_data={"words": ["hi"]},
        )
        assert lint_question(question) == [
            "Question text is required",
            "Correct answer is required",
            "Sentence builder questions need at least 3 words",
        ]
