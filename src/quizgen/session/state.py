"""Tagged-union session states.

Each state carries only the data valid in it, so combinations such as
"loading and completed" cannot be represented.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..generator.models import Question, QuizSet

__all__ = [
    "Idle",
    "Loading",
    "InProgress",
    "Completed",
    "Errored",
    "SessionState",
]


@dataclass(frozen=True)
class Idle:
    """Nothing generated yet; topic and count may be changed."""


@dataclass(frozen=True)
class Loading:
    topic: str
    count: int
    epoch: int


@dataclass(frozen=True)
class InProgress:
    questions: QuizSet
    current_index: int = 0
    answers: tuple[int, ...] = ()

    @property
    def current(self) -> Question:
        return self.questions[self.current_index]

    @property
    def position(self) -> int:
        """1-based number of the question on screen."""
        return self.current_index + 1

    @property
    def total(self) -> int:
        return len(self.questions)


@dataclass(frozen=True)
class Completed:
    questions: QuizSet
    answers: tuple[int, ...]


@dataclass(frozen=True)
class Errored:
    message: str
    kind: str


SessionState = Union[Idle, Loading, InProgress, Completed, Errored]
