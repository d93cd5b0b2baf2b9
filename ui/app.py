from rich.console import Console
from rich.text import Text
from rich.panel import Panel
from typing import Any, Optional, List

from exercises.results import GeneratedFeedback, HintSequence, ValidationOutcome
from models import ExerciseQuestion, QuestionType
from ui.components import (
    QuestionPanel,
    OutcomePanel,
    FeedbackPanel,
    HintTable,
    WelcomeScreen,
    ProgressTracker,
)
from ui.styles import (
    DEFAULT_THEME,
    ERROR_RED,
    INFO_BLUE,
    MUTED_GRAY,
)

QUIT = "quit"
HINT = "hint"


class GradingUI:
    """Main UI orchestrator for grading and practice sessions."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(theme=DEFAULT_THEME)
        self._progress_tracker: Optional[ProgressTracker] = None

    def show_welcome(self, question_count: int, total_points: float) -> None:
        """Display the welcome screen and wait for user to press Enter."""
        self.console.print(WelcomeScreen(question_count, total_points))
        self.console.print()
        self.console.input(Text("Press Enter to start...", style=f"bold {MUTED_GRAY}"))

    def show_session_complete(
        self, tracker: ProgressTracker, recommendation: Optional[str] = None
    ) -> None:
        """Display session completion summary."""
        self.console.print(tracker.render_session_summary(recommendation))

    def show_question(
        self,
        question: ExerciseQuestion,
        question_number: int = 0,
        total_questions: int = 0,
    ) -> None:
        """Display a question."""
        progress_percent = (
            (question_number / total_questions * 100) if total_questions > 0 else 0
        )
        self.console.print(
            QuestionPanel(question, question_number, total_questions, progress_percent)
        )
        self.console.print()

    def get_answer(self, question: ExerciseQuestion) -> Any:
        """Prompt until the user types a well-formed answer, 'h' or 'q'.

        Returns:
            QUIT, HINT, or the answer shaped for the question type.
        """
        while True:
            user_input = self.console.input(
                Text("Your answer: ", style=f"bold {MUTED_GRAY}")
            ).strip()

            if user_input.lower() == "q":
                return QUIT
            if user_input.lower() == "h":
                return HINT

            answer = parse_answer(question, user_input)
            if answer is not None:
                return answer

            self.console.print(
                Text("That answer doesn't fit this question. Try again.\n", style=ERROR_RED)
            )

    def show_outcome(self, outcome: ValidationOutcome) -> None:
        """Display the score for a submission."""
        self.console.print(OutcomePanel(outcome))
        self.console.print()

    def show_feedback(self, feedback: GeneratedFeedback) -> None:
        """Display generated feedback or a hint."""
        self.console.print(FeedbackPanel(feedback))
        self.console.print()

    def show_hint(self, feedback: GeneratedFeedback) -> None:
        self.show_feedback(feedback)

    def show_hint_sequence(self, sequence: HintSequence) -> None:
        """Display every hint in a sequence, marking the ones that will be shown."""
        self.console.print(HintTable(sequence.hints, sequence.max_hints))
        self.console.print()

    def show_error(self, message: str) -> None:
        """Display an error message."""
        self.console.print(
            Panel(
                Text(f"Error: {message}", style=ERROR_RED),
                title="Error",
                border_style=ERROR_RED,
            )
        )

    def show_info(self, message: str) -> None:
        """Display an informational message."""
        self.console.print(Text(message, style=INFO_BLUE))

    def show_quit_message(self) -> None:
        """Display the quit message."""
        self.console.print()
        self.console.print(Text("Goodbye! Keep practicing.", style=MUTED_GRAY))

    def create_progress_tracker(self, total: int) -> ProgressTracker:
        """Create a new progress tracker for a session."""
        self._progress_tracker = ProgressTracker(total)
        return self._progress_tracker

    def update_progress(self, outcome: ValidationOutcome) -> None:
        """Update the progress tracker with a new result."""
        if self._progress_tracker:
            self._progress_tracker.update(outcome)

    def get_progress_tracker(self) -> Optional[ProgressTracker]:
        """Get the current progress tracker."""
        return self._progress_tracker

    def clear_screen(self) -> None:
        """Clear the terminal screen."""
        self.console.clear()


def _parse_letters(text: str, count: int) -> Optional[List[int]]:
    letters = text.replace(",", " ").upper().split()
    if not letters:
        return None
    indexes = [ord(letter) - 65 for letter in letters if len(letter) == 1]
    if len(indexes) != len(letters) or not all(0 <= i < count for i in indexes):
        return None
    return indexes


def parse_answer(question: ExerciseQuestion, text: str) -> Any:
    """Turn typed input into an answer shaped for the question type.

    Returns:
        The answer, or None if the input doesn't fit the question.
    """
    data = question.question_data
    if not text:
        return None

    if question.type == QuestionType.MULTIPLE_CHOICE:
        indexes = _parse_letters(text, len(data.options))
        if indexes is None:
            return None
        selected = [data.options[i] for i in indexes]
        return selected[0] if len(selected) == 1 else selected

    if question.type == QuestionType.FILL_IN_BLANK:
        answers = [part.strip() for part in text.split(",")]
        if len(answers) != len(data.blanks):
            return None
        blanks = sorted(data.blanks, key=lambda b: b.position)
        return {blank.id: answer for blank, answer in zip(blanks, answers)}

    if question.type == QuestionType.DRAG_AND_DROP:
        placements: dict[str, list[str]] = {}
        for pair in text.replace(",", " ").split():
            number, letter = pair[:-1], pair[-1].upper()
            if not number.isdigit():
                return None
            item_index, target_index = int(number) - 1, ord(letter) - 65
            if not (0 <= item_index < len(data.items) and 0 <= target_index < len(data.targets)):
                return None
            target_id = data.targets[target_index].id
            placements.setdefault(target_id, []).append(data.items[item_index].id)
        return placements

    if question.type == QuestionType.SENTENCE_BUILDER:
        tokens = text.split()
        if all(t.isdigit() for t in tokens):
            numbers = [int(t) for t in tokens]
            if not all(1 <= n <= len(data.words) for n in numbers):
                return None
            return [data.words[n - 1] for n in numbers]
        return tokens

    return None
