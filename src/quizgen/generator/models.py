"""Value types produced by the question generator."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Iterator, Sequence

__all__ = ["OPTION_COUNT", "Question", "QuizSet"]

OPTION_COUNT = 4


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Question:
    """A multiple-choice question with exactly four options.

    ``id`` is generated locally so views can key rows; it carries no meaning
    outside the running process and is ignored by equality.
    """

    text: str
    options: tuple[str, ...]
    correct_index: int
    id: str = field(default_factory=_new_id, compare=False)

    def __post_init__(self) -> None:
        if len(self.options) != OPTION_COUNT:
            raise ValueError(
                f"question needs exactly {OPTION_COUNT} options, "
                f"got {len(self.options)}"
            )
        if not 0 <= self.correct_index < OPTION_COUNT:
            raise ValueError(
                f"correct_index {self.correct_index} is outside 0..3"
            )

    @property
    def correct_option(self) -> str:
        return self.options[self.correct_index]

    def option_for(self, index: int) -> str | None:
        """Return the option text for ``index`` or ``None`` when out of range."""
        if 0 <= index < len(self.options):
            return self.options[index]
        return None


@dataclass(frozen=True)
class QuizSet(Sequence[Question]):
    """Ordered, immutable collection of generated questions."""

    questions: tuple[Question, ...] = ()

    def __len__(self) -> int:
        return len(self.questions)

    def __iter__(self) -> Iterator[Question]:
        return iter(self.questions)

    def __getitem__(self, index):  # type: ignore[override]
        return self.questions[index]
