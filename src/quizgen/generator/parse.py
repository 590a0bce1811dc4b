"""Decode the extracted JSON array into :class:`QuizSet` values."""

from __future__ import annotations

import json
from typing import Any, List, Mapping

from ..errors import MalformedQuestionsError
from .models import OPTION_COUNT, Question, QuizSet

__all__ = ["parse_questions", "question_from_record"]


def parse_questions(candidate: str) -> QuizSet:
    """Parse ``candidate`` as a JSON array of question records.

    Records use the wire field ``correctAnswerIndex``; unknown keys are
    ignored. Any decode or schema problem raises
    :class:`MalformedQuestionsError` with ``candidate`` as the payload.
    """

    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise MalformedQuestionsError(
            f"model output is not valid JSON: {exc}", payload=candidate
        ) from exc

    if not isinstance(data, list):
        raise MalformedQuestionsError(
            f"expected a JSON array, got {type(data).__name__}",
            payload=candidate,
        )

    questions: List[Question] = []
    for position, record in enumerate(data):
        try:
            questions.append(question_from_record(record))
        except ValueError as exc:
            raise MalformedQuestionsError(
                f"question #{position + 1}: {exc}", payload=candidate
            ) from exc
    return QuizSet(tuple(questions))


def question_from_record(record: Any) -> Question:
    if not isinstance(record, Mapping):
        raise ValueError("record must be a JSON object")

    text = record.get("question")
    if not isinstance(text, str):
        raise ValueError("'question' must be a string")

    options = record.get("options")
    if not isinstance(options, list) or not all(
        isinstance(option, str) for option in options
    ):
        raise ValueError("'options' must be a list of strings")
    if len(options) != OPTION_COUNT:
        raise ValueError(
            f"'options' must hold exactly {OPTION_COUNT} entries, "
            f"got {len(options)}"
        )

    index = record.get("correctAnswerIndex")
    # bool is an int subclass; JSON true/false is not an index.
    if isinstance(index, bool) or not isinstance(index, int):
        raise ValueError("'correctAnswerIndex' must be an integer")

    return Question(text=text, options=tuple(options), correct_index=index)
