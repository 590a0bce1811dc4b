"""Pure scoring and review helpers for finished (or partial) sessions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Optional, Sequence

from ..generator.models import Question

__all__ = [
    "Outcome",
    "QuestionReview",
    "QuizSummary",
    "review",
    "score",
    "summarize",
]

Outcome = Literal["correct", "incorrect", "unanswered"]


@dataclass(frozen=True)
class QuestionReview:
    number: int
    question: Question
    selected: Optional[int]
    selected_text: Optional[str]
    outcome: Outcome

    @property
    def correct_text(self) -> str:
        return self.question.correct_option

    @property
    def is_invalid_selection(self) -> bool:
        return self.selected is not None and self.selected_text is None


@dataclass(frozen=True)
class QuizSummary:
    total_questions: int
    answered_questions: int
    correct_answers: int

    @property
    def accuracy(self) -> float:
        if self.total_questions == 0:
            return 0.0
        return self.correct_answers / self.total_questions


def score(questions: Sequence[Question], answers: Sequence[int]) -> int:
    """Count answers matching the correct index, position by position.

    Questions beyond ``len(answers)`` are unanswered and add nothing; extra
    answers beyond ``len(questions)`` are ignored.
    """
    return sum(
        1
        for question, answer in zip(questions, answers)
        if answer == question.correct_index
    )


def review(
    questions: Sequence[Question], answers: Sequence[int]
) -> List[QuestionReview]:
    """Describe every question's result.

    An answer index that does not point at an option is kept, rendered as an
    invalid selection and counted as incorrect.
    """
    rows: List[QuestionReview] = []
    for position, question in enumerate(questions):
        if position >= len(answers):
            rows.append(
                QuestionReview(
                    number=position + 1,
                    question=question,
                    selected=None,
                    selected_text=None,
                    outcome="unanswered",
                )
            )
            continue
        selected = answers[position]
        rows.append(
            QuestionReview(
                number=position + 1,
                question=question,
                selected=selected,
                selected_text=question.option_for(selected),
                outcome=(
                    "correct"
                    if selected == question.correct_index
                    else "incorrect"
                ),
            )
        )
    return rows


def summarize(
    questions: Sequence[Question], answers: Sequence[int]
) -> QuizSummary:
    return QuizSummary(
        total_questions=len(questions),
        answered_questions=min(len(answers), len(questions)),
        correct_answers=score(questions, answers),
    )
