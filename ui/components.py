from rich.text import Text
from rich.panel import Panel
from rich.table import Table
from rich.style import Style
from rich.align import Align
from rich.columns import Columns
from rich import box
from typing import Optional, List

from exercises.results import GeneratedFeedback, HintData, ValidationOutcome
from models import ExerciseQuestion, QuestionType
from ui.styles import (
    BRAND_PURPLE,
    HIGHLIGHT_GOLD,
    SUCCESS_GREEN,
    ERROR_RED,
    INFO_BLUE,
    MUTED_GRAY,
    TEXT_WHITE,
    create_welcome_banner,
    get_credit_style,
    get_feedback_color,
    get_severity_style,
)

INPUT_INSTRUCTIONS = {
    QuestionType.MULTIPLE_CHOICE: "Type a letter, e.g. A (or A C for several)",
    QuestionType.FILL_IN_BLANK: "Type the missing words, separated by commas",
    QuestionType.DRAG_AND_DROP: "Pair item numbers with target letters, e.g. 1A 2B 3A",
    QuestionType.SENTENCE_BUILDER: "Type the sentence, or word numbers in order (e.g. 2 1 3)",
}


def _progress_bar(percent: float, width: int = 30) -> str:
    filled = int(width * percent / 100)
    remaining = width - filled
    bar = "█" * filled + "░" * remaining
    return f"[{bar}] {percent:.0f}%"


class QuestionPanel:
    """A styled panel for displaying a question and its answer choices."""

    def __init__(
        self,
        question: ExerciseQuestion,
        question_number: int = 0,
        total_questions: int = 0,
        progress_percent: float = 0.0,
    ):
        self.question = question
        self.question_number = question_number
        self.total_questions = total_questions
        self.progress_percent = progress_percent

    def render(self) -> Panel:
        content = Text()

        if self.total_questions > 0:
            content.append(_progress_bar(self.progress_percent), Style(color=MUTED_GRAY))
            content.append("\n")
            content.append(
                f"Question {self.question_number}/{self.total_questions}\n",
                Style(color=MUTED_GRAY),
            )

        content.append(self.question.question_text, Style(color=BRAND_PURPLE, bold=True))
        content.append("\n\n")
        self._append_body(content)

        subtitle = INPUT_INSTRUCTIONS[self.question.type] + ", 'h' for a hint, 'q' to quit"

        return Panel(
            Align.left(content),
            title="Grammar Practice",
            subtitle=subtitle,
            border_style=BRAND_PURPLE,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def _append_body(self, content: Text) -> None:
        data = self.question.question_data
        label_style = Style(color=HIGHLIGHT_GOLD, bold=True)
        text_style = Style(color=TEXT_WHITE)

        if self.question.type == QuestionType.MULTIPLE_CHOICE:
            for i, option in enumerate(data.options):
                content.append(f"{chr(65 + i)}. ", label_style)
                content.append(option, text_style)
                content.append("\n")

        elif self.question.type == QuestionType.FILL_IN_BLANK:
            content.append(data.template or "", text_style)
            content.append("\n")
            content.append(f"{len(data.blanks)} blank(s)", Style(color=MUTED_GRAY))

        elif self.question.type == QuestionType.DRAG_AND_DROP:
            content.append("Items:\n", Style(color=MUTED_GRAY))
            for i, item in enumerate(data.items):
                content.append(f"  {i + 1}. ", label_style)
                content.append(item.content, text_style)
                content.append("\n")
            content.append("Targets:\n", Style(color=MUTED_GRAY))
            for i, target in enumerate(data.targets):
                content.append(f"  {chr(65 + i)}. ", label_style)
                content.append(target.label, text_style)
                content.append("\n")

        elif self.question.type == QuestionType.SENTENCE_BUILDER:
            for i, word in enumerate(data.words):
                content.append(f"{i + 1}. ", label_style)
                content.append(word, text_style)
                content.append("   ")

    def __rich__(self) -> Panel:
        return self.render()


class OutcomePanel:
    """A styled panel for displaying the score of a submission."""

    def __init__(self, outcome: ValidationOutcome):
        self.outcome = outcome

    def render(self) -> Panel:
        outcome = self.outcome
        content = Text()

        if outcome.is_correct:
            content.append("✓ ", Style(color=SUCCESS_GREEN, bold=True))
            content.append("Correct!\n", Style(color=SUCCESS_GREEN, bold=True))
        else:
            content.append("✗ ", Style(color=ERROR_RED, bold=True))
            content.append("Not quite!\n", Style(color=ERROR_RED, bold=True))

        share = outcome.points / outcome.max_points if outcome.max_points else 0.0
        content.append("\n")
        content.append("Score: ", Style(color=MUTED_GRAY))
        content.append(
            f"{outcome.points:g} / {outcome.max_points:g}", get_credit_style(share)
        )
        if outcome.partial_credit is not None and not outcome.is_correct:
            content.append(
                f"  ({outcome.partial_credit * 100:.0f}% partial credit)",
                Style(color=MUTED_GRAY),
            )

        if outcome.feedback:
            content.append("\n\n")
            content.append(outcome.feedback, Style(color=TEXT_WHITE))

        if outcome.error_details:
            content.append("\n\n")
            content.append("Details:\n", Style(color=HIGHLIGHT_GOLD, bold=True))
            for detail in outcome.error_details:
                content.append(f"  • {detail}\n", Style(color=ERROR_RED))

        if outcome.explanation:
            content.append("\n")
            content.append("Explanation:\n", Style(color=HIGHLIGHT_GOLD, bold=True))
            content.append(outcome.explanation, Style(color=TEXT_WHITE))

        return Panel(
            Align.left(content),
            title="Result",
            border_style=SUCCESS_GREEN if outcome.is_correct else ERROR_RED,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class FeedbackPanel:
    """A styled panel for displaying generated feedback or a hint."""

    def __init__(self, feedback: GeneratedFeedback):
        self.feedback = feedback

    def render(self) -> Panel:
        feedback = self.feedback
        color = get_feedback_color(feedback.type)
        content = Text()

        content.append(feedback.message, Style(color=TEXT_WHITE, bold=True))

        if feedback.details:
            content.append("\n\n")
            content.append(feedback.details, Style(color=MUTED_GRAY))

        if feedback.encouragement:
            content.append("\n\n")
            content.append(feedback.encouragement, Style(color=SUCCESS_GREEN))

        if feedback.related_concepts:
            content.append("\n\n")
            content.append("Related concepts: ", Style(color=HIGHLIGHT_GOLD, bold=True))
            content.append(", ".join(feedback.related_concepts), Style(color=INFO_BLUE))

        if feedback.visual_aid:
            content.append("\n")
            content.append(f"[{feedback.visual_aid}]", Style(color=MUTED_GRAY, italic=True))

        if feedback.next_steps:
            content.append("\n\n")
            content.append("Next: ", Style(color=HIGHLIGHT_GOLD, bold=True))
            content.append(feedback.next_steps, Style(color=TEXT_WHITE))

        subtitle = None
        if feedback.severity is not None:
            subtitle = Text(
                f"severity: {feedback.severity.value}",
                style=get_severity_style(feedback.severity.value),
            )

        return Panel(
            Align.left(content),
            title=feedback.title,
            subtitle=subtitle,
            border_style=color,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class HintTable:
    """A styled table listing a question's hint sequence."""

    def __init__(self, hints: List[HintData], max_hints: int):
        self.hints = hints
        self.max_hints = max_hints

    def render(self) -> Panel:
        table = Table(
            show_header=True,
            header_style=Style(color=BRAND_PURPLE, bold=True),
            border_style=MUTED_GRAY,
            row_styles=[Style(), Style(dim=True)],
            box=box.HEAVY,
        )

        table.add_column("Level", justify="center")
        table.add_column("Reveal", justify="right")
        table.add_column("Type", style=Style(color=INFO_BLUE))
        table.add_column("Category", style=Style(color=MUTED_GRAY))
        table.add_column("Hint", style=Style(color=TEXT_WHITE))

        for position, hint in enumerate(self.hints):
            level_style = (
                Style(color=HIGHLIGHT_GOLD, bold=True)
                if position < self.max_hints
                else Style(color=MUTED_GRAY)
            )
            table.add_row(
                Text(str(hint.level), style=level_style),
                f"{hint.reveal_percentage}%",
                hint.type.value,
                hint.category or "",
                hint.content,
            )

        return Panel(
            Align.center(table),
            title="Hint Sequence",
            subtitle=f"Showing at most {self.max_hints}",
            border_style=HIGHLIGHT_GOLD,
            box=box.HEAVY,
            padding=(1, 1),
        )

    def __rich__(self) -> Panel:
        return self.render()


class WelcomeScreen:
    """Welcome screen with banner and session info."""

    def __init__(self, question_count: int, total_points: float):
        self.question_count = question_count
        self.total_points = total_points

    def render(self) -> Panel:
        banner = create_welcome_banner()
        banner.append("\n\n")
        banner.append(
            "Type 'h' for a hint or 'q' to quit at any time.\n", Style(color=MUTED_GRAY)
        )

        stats = Table(
            show_header=False,
            border_style=MUTED_GRAY,
            box=box.ROUNDED,
        )
        stats.add_column("Label", justify="center")
        stats.add_column("Value", justify="center")

        stats.add_row(
            Text("Questions", style=Style(color=MUTED_GRAY)),
            Text(str(self.question_count), style=Style(color=HIGHLIGHT_GOLD, bold=True)),
        )
        stats.add_row(
            Text("Points", style=Style(color=MUTED_GRAY)),
            Text(f"{self.total_points:g}", style=Style(color=HIGHLIGHT_GOLD, bold=True)),
        )

        return Panel(
            Columns(
                [Align.center(banner), Align.center(stats)],
                align="center",
                padding=(3, 3),
            ),
            border_style=BRAND_PURPLE,
            box=box.HEAVY,
            padding=(2, 3),
        )

    def __rich__(self) -> Panel:
        return self.render()


class ProgressTracker:
    """Track and display session progress."""

    def __init__(self, total: int):
        self.total = total
        self.outcomes: List[ValidationOutcome] = []

    def update(self, outcome: ValidationOutcome):
        self.outcomes.append(outcome)

    @property
    def current(self) -> int:
        return len(self.outcomes)

    @property
    def correct_count(self) -> int:
        return sum(1 for o in self.outcomes if o.is_correct)

    @property
    def points(self) -> float:
        return sum(o.points for o in self.outcomes)

    @property
    def max_points(self) -> float:
        return sum(o.max_points for o in self.outcomes)

    @property
    def progress_percent(self) -> float:
        if self.total == 0:
            return 100.0
        return (self.current / self.total) * 100

    def render_session_summary(self, recommendation: Optional[str] = None) -> Panel:
        accuracy = (self.correct_count / self.current * 100) if self.current > 0 else 0

        stats = Table(
            show_header=False,
            border_style=MUTED_GRAY,
            box=box.SIMPLE,
        )
        stats.add_column("Label", style=Style(color=MUTED_GRAY))
        stats.add_column("Value", justify="right")

        stats.add_row("Completed", f"{self.current}/{self.total}")
        stats.add_row(
            "Correct",
            Text(f"{self.correct_count}", style=Style(color=SUCCESS_GREEN)),
        )
        stats.add_row(
            "Points",
            Text(f"{self.points:g}/{self.max_points:g}", style=Style(color=INFO_BLUE)),
        )
        stats.add_row(
            "Accuracy",
            Text(f"{accuracy:.0f}%", style=Style(color=HIGHLIGHT_GOLD, bold=True)),
        )

        content = Text()
        content.append("Session Complete!\n\n", Style(color=BRAND_PURPLE, bold=True))
        content.append(f"Progress: {_progress_bar(self.progress_percent)}\n", Style(color=MUTED_GRAY))
        if recommendation:
            content.append("\n")
            content.append(recommendation, Style(color=INFO_BLUE))
            content.append("\n")

        return Panel(
            Columns(
                [Align.center(content), Align.center(stats)],
                align="center",
                padding=(0, 1),
            ),
            title="Session Summary",
            border_style=HIGHLIGHT_GOLD,
            box=box.HEAVY,
            padding=(2, 3),
        )

    def __rich__(self) -> Panel:
        return self.render_session_summary()
