import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from exercises import (
    FeedbackOptions,
    ValidationOptions,
    generate_hint_sequence,
    get_next_hint,
    grade_submission,
    has_more_hints,
    hint_feedback,
    is_eligible_for_enrichment,
    needs_remediation,
    parse_question,
)
from exercises.config import MAX_HINTS
from exercises.distractors import DistractorSource
from models import ExerciseQuestion, FeedbackContext, UserLearningProfile
from storage import DEFAULT_DB_PATH, get_distractor_repo
from ui import GradingUI
from ui.app import HINT, QUIT

logger = logging.getLogger(__name__)

MAX_PRACTICE_ATTEMPTS = 3


class InputFileError(Exception):
    """A JSON input could not be read or does not have the expected shape."""


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser with subcommands."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log debug output to stderr",
    )

    parser = argparse.ArgumentParser(description="Grammar exercise grading engine")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Grade subcommand
    grade_parser = subparsers.add_parser(
        "grade", parents=[common], help="Grade one answer"
    )
    grade_parser.add_argument("question", help="Question JSON file (or inline JSON)")
    grade_parser.add_argument(
        "answer", help="Answer JSON file, inline JSON, or plain text"
    )
    grade_parser.add_argument(
        "--attempt",
        type=int,
        default=1,
        help="Attempt number, 1 or more (default: 1)",
    )
    grade_parser.add_argument(
        "--hints-used",
        type=int,
        default=0,
        help="Hints already revealed (default: 0)",
    )
    grade_parser.add_argument(
        "--strict",
        action="store_true",
        help="Require exact word order for sentence builders",
    )
    grade_parser.add_argument(
        "--case-sensitive",
        action="store_true",
        default=None,
        help="Compare fill-in-blank answers case-sensitively",
    )
    grade_parser.add_argument(
        "--no-partial-credit",
        action="store_true",
        help="Score all-or-nothing",
    )
    grade_parser.add_argument(
        "--tone",
        choices=["formal", "casual", "encouraging"],
        default="encouraging",
        help="Encouragement tone (default: encouraging)",
    )
    grade_parser.add_argument(
        "--profile",
        default=None,
        help="Learner profile JSON file (or inline JSON)",
    )
    grade_parser.add_argument(
        "--distractors-db",
        type=Path,
        default=None,
        help=f"Common distractors database (e.g. {DEFAULT_DB_PATH.name})",
    )
    grade_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON instead of panels",
    )

    # Hints subcommand
    hints_parser = subparsers.add_parser(
        "hints", parents=[common], help="Show a question's hint sequence"
    )
    hints_parser.add_argument("question", help="Question JSON file (or inline JSON)")
    hints_parser.add_argument(
        "--count",
        "-n",
        type=int,
        default=3,
        help="Maximum hints to reveal, at most 3 (default: 3)",
    )
    hints_parser.add_argument(
        "--profile",
        default=None,
        help="Learner profile JSON file (or inline JSON)",
    )

    # Practice subcommand
    practice_parser = subparsers.add_parser(
        "practice", parents=[common], help="Answer a set of questions interactively"
    )
    practice_parser.add_argument("questions", help="JSON file with a list of questions")
    practice_parser.add_argument(
        "--profile",
        default=None,
        help="Learner profile JSON file (or inline JSON)",
    )
    practice_parser.add_argument(
        "--tone",
        choices=["formal", "casual", "encouraging"],
        default="encouraging",
        help="Encouragement tone (default: encouraging)",
    )

    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def load_json(source: str) -> Any:
    """Load JSON from a file path, or parse the argument itself as JSON.

    Raises:
        InputFileError: If the file can't be read or the JSON is invalid.
    """
    path = Path(source)
    try:
        if path.is_file():
            with open(path) as f:
                return json.load(f)
        return json.loads(source)
    except (OSError, json.JSONDecodeError) as e:
        raise InputFileError(f"Could not read JSON from {source}: {e}") from e


def load_question(source: str) -> dict[str, Any]:
    question = load_json(source)
    if not isinstance(question, dict):
        raise InputFileError(f"Expected a question object in {source}")
    return question


def load_answer(source: str) -> Any:
    """Load an answer as JSON, or take the argument as a plain text answer."""
    try:
        return load_json(source)
    except InputFileError:
        if Path(source).is_file():
            raise
        return source


def load_questions(source: str) -> list[ExerciseQuestion]:
    """Load and validate a list of questions.

    Raises:
        InputFileError: If the file is not a list of valid questions.
    """
    raw = load_json(source)
    if not isinstance(raw, list):
        raise InputFileError(f"Expected a list of questions in {source}")
    try:
        return [parse_question(q) for q in raw]
    except ValueError as e:
        raise InputFileError(f"Invalid question in {source}: {e}") from e


def load_profile(source: str | None) -> UserLearningProfile | None:
    if source is None:
        return None
    try:
        return UserLearningProfile.model_validate(load_json(source))
    except ValueError as e:
        raise InputFileError(f"Invalid learner profile in {source}: {e}") from e


def load_distractors(db_path: Path | None) -> DistractorSource | None:
    if db_path is None:
        return None
    return get_distractor_repo(db_path)


def run_grade(args, ui: GradingUI) -> int:
    """Run the grade subcommand."""
    raw_question = load_question(args.question)
    answer = load_answer(args.answer)
    profile = load_profile(args.profile)
    distractors = load_distractors(args.distractors_db)

    validation_options = ValidationOptions(
        allow_partial_credit=not args.no_partial_credit,
        case_sensitive=args.case_sensitive,
        strict_matching=args.strict,
    )
    feedback_options = FeedbackOptions(tone=args.tone)

    context = None
    try:
        question = parse_question(raw_question)
    except ValueError as e:
        logger.warning("Question could not be parsed: %s", e)
    else:
        context = FeedbackContext(
            question=question,
            user_answer=answer,
            attempt_number=max(1, args.attempt),
            hints_used=max(0, args.hints_used),
            user_profile=profile,
        )

    result = grade_submission(
        raw_question,
        answer,
        context=context,
        validation_options=validation_options,
        feedback_options=feedback_options,
        distractors=distractors,
    )

    if args.json:
        ui.console.print_json(result.model_dump_json())
        return 0

    ui.show_outcome(result.outcome)
    if result.feedback is not None:
        ui.show_feedback(result.feedback)
    return 0


def run_hints(args, ui: GradingUI) -> int:
    """Run the hints subcommand."""
    try:
        question = parse_question(load_question(args.question))
    except ValueError as e:
        raise InputFileError(f"Invalid question in {args.question}: {e}") from e
    profile = load_profile(args.profile)

    max_hints = min(max(0, args.count), MAX_HINTS)
    sequence = generate_hint_sequence(question, FeedbackOptions(max_hints=max_hints))
    ui.show_hint_sequence(sequence)

    context = FeedbackContext(question=question, user_profile=profile)
    while has_more_hints(sequence):
        hint = get_next_hint(sequence, context)
        ui.show_hint(hint_feedback(hint, sequence))

    if sequence.max_hints == 0:
        ui.show_info("No hints available for this question.")
    return 0


def practice_question(
    ui: GradingUI,
    question: ExerciseQuestion,
    profile: UserLearningProfile | None,
    feedback_options: FeedbackOptions,
):
    """Run the attempts for one question.

    Returns:
        The last outcome, or None if the user quit.
    """
    sequence = generate_hint_sequence(question, feedback_options)
    outcome = None
    attempt = 1

    while attempt <= MAX_PRACTICE_ATTEMPTS:
        answer = ui.get_answer(question)

        if answer == QUIT:
            return None

        if answer == HINT:
            hint = get_next_hint(
                sequence, FeedbackContext(question=question, user_profile=profile)
            )
            if hint is None:
                ui.show_info("No more hints for this question.")
            else:
                ui.show_hint(hint_feedback(hint, sequence))
            continue

        context = FeedbackContext(
            question=question,
            user_answer=answer,
            attempt_number=attempt,
            hints_used=len(sequence.revealed),
            user_profile=profile,
        )
        result = grade_submission(
            question, answer, context=context, feedback_options=feedback_options
        )
        outcome = result.outcome
        ui.show_outcome(outcome)
        if result.feedback is not None:
            ui.show_feedback(result.feedback)

        if outcome.is_correct:
            break
        attempt += 1

    return outcome


def session_recommendation(tracker) -> str | None:
    if needs_remediation(tracker.outcomes):
        return "Consider reviewing this lesson before moving on."
    if is_eligible_for_enrichment(tracker.outcomes):
        return "Great work! You're ready for more challenging material."
    return None


def run_practice(args, ui: GradingUI) -> int:
    """Run the interactive practice session."""
    questions = load_questions(args.questions)
    profile = load_profile(args.profile)
    feedback_options = FeedbackOptions(tone=args.tone)

    if not questions:
        ui.show_error(f"No questions found in {args.questions}.")
        return 1

    ui.clear_screen()
    ui.show_welcome(len(questions), sum(q.points for q in questions))
    tracker = ui.create_progress_tracker(len(questions))

    for index, question in enumerate(questions):
        ui.show_question(question, index + 1, len(questions))
        outcome = practice_question(ui, question, profile, feedback_options)
        if outcome is None:
            ui.show_quit_message()
            break
        ui.update_progress(outcome)

    ui.show_session_complete(tracker, session_recommendation(tracker))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point with CLI routing."""
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(getattr(args, "verbose", False))

    ui = GradingUI()
    commands = {
        "grade": run_grade,
        "hints": run_hints,
        "practice": run_practice,
    }
    command = commands.get(args.command)
    if command is None:
        parser.print_help()
        return 1

    try:
        return command(args, ui)
    except InputFileError as e:
        ui.show_error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
