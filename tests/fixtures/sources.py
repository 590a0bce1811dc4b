"""Question sources that bypass the network entirely."""

from __future__ import annotations

from typing import List, Sequence, Tuple

from quizgen.generator import Question, QuizSet


def make_quiz(correct_indices: Sequence[int]) -> QuizSet:
    return QuizSet(
        tuple(
            Question(
                text=f"Question {number}?",
                options=tuple(f"Q{number} option {i}" for i in range(1, 5)),
                correct_index=correct,
            )
            for number, correct in enumerate(correct_indices, start=1)
        )
    )


class FixedSource:
    """Return queued quiz sets (or raise queued errors) in order."""

    def __init__(self, *outcomes: object) -> None:
        self.outcomes = list(outcomes)
        self.calls: List[Tuple[str, int]] = []

    async def generate(self, topic: str, count: int) -> QuizSet:
        self.calls.append((topic, count))
        outcome = self.outcomes.pop(0) if self.outcomes else QuizSet()
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome  # type: ignore[return-value]
