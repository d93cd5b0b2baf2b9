"""Read-only sources of known wrong answers ("common distractors").

The grading engine only ever reads from a distractor source. Where the data
comes from (a seeded table, a content pipeline) is up to the caller.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from types import MappingProxyType


class DistractorSource(ABC):
    """Abstract lookup of common wrong answers for a correct answer."""

    @abstractmethod
    def get_common_distractors(self, correct_answer: str) -> list[str]:
        """Get wrong answers learners commonly give instead of ``correct_answer``.

        Args:
            correct_answer: The correct answer text.

        Returns:
            List of distractor strings, empty if none are known.
        """
        ...

    def is_common_distractor(self, correct_answer: str, user_answer: str) -> bool:
        """Check if ``user_answer`` is a known distractor for ``correct_answer``."""
        user_key = user_answer.strip().lower()
        return any(
            d.strip().lower() == user_key
            for d in self.get_common_distractors(correct_answer)
        )


class StaticDistractorSource(DistractorSource):
    """Distractors held in memory. The mapping is copied and never mutated."""

    def __init__(self, distractors: Mapping[str, Iterable[str]] | None = None):
        self._distractors = MappingProxyType(
            {
                key.strip().lower(): tuple(values)
                for key, values in (distractors or {}).items()
            }
        )

    def get_common_distractors(self, correct_answer: str) -> list[str]:
        return list(self._distractors.get(correct_answer.strip().lower(), ()))


NO_DISTRACTORS = StaticDistractorSource()
