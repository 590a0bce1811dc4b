"""Shared testing fixtures for the quizgen test suite."""

from .openai import (  # noqa: F401
    AsyncOpenAIStub,
    connection_error,
    questions_json,
    status_error,
    validation_error,
)
from .sources import FixedSource, make_quiz  # noqa: F401

__all__ = [
    "AsyncOpenAIStub",
    "FixedSource",
    "connection_error",
    "make_quiz",
    "questions_json",
    "status_error",
    "validation_error",
]
