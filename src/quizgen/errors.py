"""Exception hierarchy shared across quizgen components."""

from __future__ import annotations

from typing import Optional

__all__ = [
    "QuizgenError",
    "ConfigurationError",
    "GenerationError",
    "TransportError",
    "InvalidEnvelopeError",
    "MalformedQuestionsError",
    "NoJsonFoundError",
    "InvalidTransitionError",
]


class QuizgenError(RuntimeError):
    """Base class for all quizgen failures."""


class ConfigurationError(QuizgenError):
    """Raised when required configuration is missing or invalid.

    A missing API key is reported through this error before any request is
    attempted.
    """


class GenerationError(QuizgenError):
    """Raised when a question set cannot be generated."""

    kind = "generation"


class TransportError(GenerationError):
    """Network, timeout, or non-2xx failure talking to the completion API."""

    kind = "transport"


class InvalidEnvelopeError(GenerationError):
    """The completion response was not shaped like a chat completion."""

    kind = "invalid_envelope"


class MalformedQuestionsError(GenerationError):
    """The assistant text could not be read as a list of questions.

    ``payload`` keeps the offending text for the developer log. It is never
    meant for end users.
    """

    kind = "malformed_questions"

    def __init__(self, message: str, *, payload: Optional[str] = None):
        super().__init__(message)
        self.payload = payload


class NoJsonFoundError(MalformedQuestionsError):
    """The assistant text contained no bracketed JSON array at all."""

    kind = "no_json_found"


class InvalidTransitionError(QuizgenError):
    """Raised when a session trigger fires in a state that does not accept it."""
