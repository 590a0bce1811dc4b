"""Quiz session state machine and scoring."""

from .controller import (
    DEFAULT_COUNTS,
    DEFAULT_TOPICS,
    QuestionSource,
    QuizController,
    user_message_for,
)
from .scoring import QuestionReview, QuizSummary, review, score, summarize
from .state import Completed, Errored, Idle, InProgress, Loading, SessionState

__all__ = [
    "DEFAULT_COUNTS",
    "DEFAULT_TOPICS",
    "QuestionSource",
    "QuizController",
    "user_message_for",
    "QuestionReview",
    "QuizSummary",
    "review",
    "score",
    "summarize",
    "Completed",
    "Errored",
    "Idle",
    "InProgress",
    "Loading",
    "SessionState",
]
