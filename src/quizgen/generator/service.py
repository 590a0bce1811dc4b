"""One-shot question generation against the chat completions API."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

import openai

from ..config import QuizgenConfig
from ..core.ai import load_client
from ..errors import (
    InvalidEnvelopeError,
    MalformedQuestionsError,
    TransportError,
)
from .extract import BracketSliceExtractor, JsonArrayExtractor, get_extractor
from .models import QuizSet
from .parse import parse_questions
from .prompts import build_messages

__all__ = ["DEFAULT_MODEL", "DEFAULT_TEMPERATURE", "QuestionGenerator"]

DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_TEMPERATURE = 0.7

_LOGGER = logging.getLogger("quizgen.generator")


class QuestionGenerator:
    """Turn ``(topic, count)`` into a :class:`QuizSet` with a single request.

    ``client`` is anything exposing an awaitable
    ``chat.completions.create(**kwargs)``, normally ``openai.AsyncOpenAI``.
    Nothing is retried: the first failure is raised as a
    :class:`~quizgen.errors.GenerationError` subclass.
    """

    def __init__(
        self,
        client: Any,
        *,
        model: str = DEFAULT_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
        extractor: Optional[JsonArrayExtractor] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = temperature
        self._extractor = extractor or BracketSliceExtractor()
        self._logger = logger or _LOGGER

    @classmethod
    def from_config(
        cls,
        config: QuizgenConfig,
        *,
        client: Any = None,
        logger: Optional[logging.Logger] = None,
    ) -> "QuestionGenerator":
        """Build a generator from config; raises ``ConfigurationError``
        when no client is given and the API key is missing."""
        if client is None:
            client = load_client(
                base_url=config.openai.api_base,
                timeout=float(config.openai.request_timeout_seconds),
            )
        return cls(
            client,
            model=config.openai.model,
            temperature=config.openai.temperature,
            extractor=get_extractor(config.generator.extractor),
            logger=logger,
        )

    async def generate(self, topic: str, count: int) -> QuizSet:
        self._logger.info(
            "Requesting questions",
            extra={"topic": topic, "count": count, "model": self._model},
        )
        content = await self._complete(build_messages(topic, count))
        self._logger.debug(
            "Received completion content", extra={"content": content}
        )

        try:
            quiz = parse_questions(self._extractor.extract(content))
        except MalformedQuestionsError as exc:
            self._logger.error(
                "Generated questions could not be parsed",
                extra={
                    "kind": exc.kind,
                    "reason": str(exc),
                    "payload": exc.payload,
                },
            )
            raise

        if len(quiz) != count:
            self._logger.warning(
                "Model returned a different number of questions",
                extra={"requested": count, "received": len(quiz)},
            )
        self._logger.info(
            "Generated questions", extra={"topic": topic, "count": len(quiz)}
        )
        return quiz

    async def _complete(self, messages: Sequence[Mapping[str, str]]) -> str:
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=list(messages),
                temperature=self._temperature,
            )
        except openai.APIResponseValidationError as exc:
            self._logger.error(
                "Completion response failed validation",
                extra={"reason": str(exc)},
            )
            raise InvalidEnvelopeError(
                f"unexpected completion response: {exc}"
            ) from exc
        except openai.APIError as exc:
            self._logger.error(
                "Completion request failed",
                extra={"reason": str(exc), "error_type": type(exc).__name__},
            )
            raise TransportError(f"completion request failed: {exc}") from exc
        except ValueError as exc:
            # Non-JSON response bodies surface as decode errors.
            self._logger.error(
                "Completion response was not JSON", extra={"reason": str(exc)}
            )
            raise InvalidEnvelopeError(
                f"completion response was not JSON: {exc}"
            ) from exc
        return _message_content(response)


def _message_content(response: Any) -> str:
    try:
        message = response.choices[0].message
        content = message.content
    except (AttributeError, IndexError, KeyError, TypeError) as exc:
        raise InvalidEnvelopeError(
            "completion response has no choices[0].message.content"
        ) from exc
    if not isinstance(content, str):
        raise InvalidEnvelopeError(
            "completion message content is missing or not text"
        )
    return content
