"""Drag-and-drop grading: items are sorted into labeled target zones."""

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
from models import DragAndDropData, QuestionType


class DragAndDropHandler(QuestionHandler[DragAndDropData]):
    """Handler for drag-and-drop questions.

    Responses and correct answers are both mappings of target zone ID to the
    item ID (or list of item IDs) placed there.
    """

    question_type = QuestionType.DRAG_AND_DROP
    generic_hint = (
        "Consider which category each item belongs to. "
        "Some items might fit in multiple places."
    )
    review_suggestion = "Look at what each target zone accepts before moving items."

    @property
    def total_items(self) -> int:
        if not self.data.items or not self.data.targets:
            raise QuestionDataError("Drag and drop question needs items and targets")
        return len(self.data.items)

    def correct_placements(self, correct_answer: Any = None) -> dict[str, list[str]]:
        """Item IDs expected in each target zone.

        Zones missing from the answer key accept the items whose category
        matches the zone's accepted category.
        """
        if correct_answer is None:
            correct_answer = self.question.correct_answer
        answer_key = as_mapping(correct_answer, "Drag and drop correct answer")

        placements: dict[str, list[str]] = {}
        for target in self.data.targets:
            if answer_key.get(target.id) is not None:
                placements[target.id] = as_string_list(
                    answer_key[target.id], f"Correct items for target {target.id}"
                )
            elif target.accepts_category:
                placements[target.id] = [
                    item.id
                    for item in self.data.items
                    if item.category == target.accepts_category
                ]
            else:
                placements[target.id] = []

        if not any(placements.values()):
            raise QuestionDataError("Drag and drop question has no correct placements")
        return placements

    def user_placements(self, user_response: Any) -> dict[str, list[str]]:
        response = as_mapping(user_response, "Drag and drop response")
        placements: dict[str, list[str]] = {}
        for target_id, items in response.items():
            if items is None:
                continue
            item_ids = as_string_list(items, f"Items placed in {target_id}")
            # An item dropped twice into one zone is still one placement
            placements[target_id] = list(dict.fromkeys(item_ids))
        return placements

    def validate(self, user_response: Any, options: ValidationOptions) -> ValidationOutcome:
        total = self.total_items
        expected = self.correct_placements()
        placed = self.user_placements(user_response)
        correct_ids: set[str] = set()
        error_details = []

        for target in self.data.targets:
            correct_items = expected[target.id]
            user_items = placed.get(target.id, [])

            correct_ids.update(i for i in user_items if i in correct_items)

            incorrectly_placed = [i for i in user_items if i not in correct_items]
            if incorrectly_placed:
                labels = ", ".join(self.data.item_label(i) for i in incorrectly_placed)
                error_details.append(
                    f'Target "{target.label}": Incorrectly placed items: {labels}'
                )

            missing = [i for i in correct_items if i not in user_items]
            if missing:
                labels = ", ".join(self.data.item_label(i) for i in missing)
                error_details.append(f'Target "{target.label}": Missing items: {labels}')

        # Items that belong to no zone are correct when left out
        placed_ids = {i for items in placed.values() for i in items}
        expected_ids = {i for items in expected.values() for i in items}
        correct_placements = len(correct_ids) + sum(
            1
            for item in self.data.items
            if item.id not in expected_ids and item.id not in placed_ids
        )
        is_correct = correct_placements == total and not error_details
        ratio = correct_placements / total
        points, partial_credit = self.score(ratio, is_correct, options)

        feedback = ""
        if options.provide_feedback:
            if is_correct:
                feedback = "Excellent! All items are placed correctly."
            elif correct_placements > 0 and options.allow_partial_credit:
                feedback = (
                    f"Good work! You placed {correct_placements} out of {total} items correctly."
                )
            else:
                feedback = "Some items are in the wrong places. Try moving them around."

        return ValidationOutcome(
            is_correct=is_correct,
            points=points,
            max_points=self.max_points,
            feedback=feedback,
            partial_credit=partial_credit,
            error_details=error_details or None,
            explanation=f"You correctly placed {correct_placements} out of {total} items.",
        )

    def analyze(
        self,
        user_answer: Any,
        correct_answer: Any,
        distractors: DistractorSource,
        options: ValidationOptions,
    ) -> AnswerAnalysis:
        total = self.total_items
        expected = self.correct_placements(correct_answer)
        placed = self.user_placements(user_answer)
        labels = {t.id: t.label for t in self.data.targets}

        expected_zone = {
            item_id: target_id
            for target_id, item_ids in expected.items()
            for item_id in item_ids
        }
        actual_zones: dict[str, list[str]] = {}
        for target_id, item_ids in placed.items():
            for item_id in item_ids:
                actual_zones.setdefault(item_id, []).append(target_id)

        analysis = AnswerAnalysis()
        correct_count = 0
        for item in self.data.items:
            expected_target = expected_zone.get(item.id)
            actual = actual_zones.get(item.id, [])
            if expected_target is None:
                if actual:
                    where = ", ".join(f'"{labels.get(t, t)}"' for t in actual)
                    analysis.specific_issues.append(
                        f'"{item.content}" does not belong in {where}'
                    )
                else:
                    correct_count += 1
            elif actual == [expected_target]:
                correct_count += 1
                analysis.strengths.append(f'"{item.content}" correctly placed')
            elif not actual:
                analysis.specific_issues.append(
                    f'"{item.content}" should be in "{labels[expected_target]}", '
                    "but was not placed"
                )
            else:
                where = ", ".join(f'"{labels.get(t, t)}"' for t in actual)
                analysis.specific_issues.append(
                    f'"{item.content}" should be in "{labels[expected_target]}", not {where}'
                )

        analysis.partial_credit = correct_count / total
        analysis.is_correct = correct_count == total
        if not analysis.is_correct:
            analysis.error_type = ErrorType.MISPLACEMENT
            analysis.error_severity = (
                ErrorSeverity.MINOR if analysis.partial_credit > 0.5 else ErrorSeverity.MODERATE
            )
        return analysis

    def strategy_hints(self) -> list[HintData]:
        return [
            HintData(
                level=1,
                content="Group similar items together first.",
                type=HintType.TEXT,
                reveal_percentage=20,
                category="strategy",
            )
        ]
