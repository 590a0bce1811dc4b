"""AI-generated multiple-choice quizzes for the terminal."""

from .errors import (
    ConfigurationError,
    GenerationError,
    InvalidEnvelopeError,
    InvalidTransitionError,
    MalformedQuestionsError,
    NoJsonFoundError,
    QuizgenError,
    TransportError,
)
from .generator import QuestionGenerator, Question, QuizSet
from .session import QuizController, score

__all__ = [
    "ConfigurationError",
    "GenerationError",
    "InvalidEnvelopeError",
    "InvalidTransitionError",
    "MalformedQuestionsError",
    "NoJsonFoundError",
    "QuizgenError",
    "TransportError",
    "QuestionGenerator",
    "Question",
    "QuizSet",
    "QuizController",
    "score",
]
