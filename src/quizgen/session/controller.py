"""State machine driving one quiz session.

Flow: ``Idle -> Loading -> InProgress -> Completed`` with ``Errored``
reachable from ``Loading``. ``reset``/``restart`` return to ``Idle`` from
anywhere. Each generation request is tagged with an epoch; a completion
whose epoch is no longer current is dropped.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import Optional, Protocol, Sequence, Type, TypeVar

from ..config import QuizgenConfig
from ..errors import GenerationError, InvalidTransitionError
from ..generator.models import QuizSet
from .scoring import QuizSummary, summarize
from .state import Completed, Errored, Idle, InProgress, Loading, SessionState

__all__ = [
    "DEFAULT_COUNTS",
    "DEFAULT_TOPICS",
    "QuestionSource",
    "QuizController",
    "user_message_for",
]

DEFAULT_TOPICS = ("geography", "animals", "history", "science")
DEFAULT_COUNTS = (3, 5, 10, 15)

_LOGGER = logging.getLogger("quizgen.session")

_GENERIC_FAILURE = "Question generation failed."
_USER_MESSAGES = {
    "transport": (
        "Question generation failed. Check your connection and try again."
    ),
    "invalid_envelope": (
        "Question generation failed. The question service sent an "
        "unexpected response."
    ),
    "malformed_questions": (
        "Question generation failed. The generated questions could not be "
        "read."
    ),
    "no_json_found": (
        "Question generation failed. The generated questions could not be "
        "read."
    ),
    "empty": "Question generation failed. No questions were returned.",
}

_S = TypeVar("_S")


class QuestionSource(Protocol):
    async def generate(self, topic: str, count: int) -> QuizSet:
        ...


def user_message_for(kind: str) -> str:
    """Map an error kind to the message shown to users."""
    return _USER_MESSAGES.get(kind, _GENERIC_FAILURE)


class QuizController:
    """Owns the session state and exposes the five user triggers.

    Triggers: :meth:`select_topic`, :meth:`select_count`,
    :meth:`start_quiz`, :meth:`select_answer` and :meth:`restart` (with
    :meth:`reset` as the error-screen spelling of the same action).
    ``start_quiz`` must be called from inside a running event loop.
    """

    def __init__(
        self,
        generator: QuestionSource,
        *,
        topics: Sequence[str] = DEFAULT_TOPICS,
        counts: Sequence[int] = DEFAULT_COUNTS,
        topic: Optional[str] = None,
        count: Optional[int] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if not topics or not counts:
            raise ValueError("topics and counts must not be empty")
        self._generator = generator
        self._topics = tuple(topics)
        self._counts = tuple(counts)
        self._topic = self._checked_topic(topic or self._topics[0])
        self._count = self._checked_count(
            count if count is not None else self._counts[0]
        )
        self._logger = logger or _LOGGER
        self._state: SessionState = Idle()
        self._epoch = 0
        self._task: Optional[asyncio.Task[None]] = None

    @classmethod
    def from_config(
        cls,
        config: QuizgenConfig,
        generator: QuestionSource,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> "QuizController":
        return cls(
            generator,
            topics=config.quiz.topics,
            counts=config.quiz.counts,
            topic=config.quiz.default_topic,
            count=config.quiz.default_count,
            logger=logger,
        )

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def topic(self) -> str:
        return self._topic

    @property
    def count(self) -> int:
        return self._count

    @property
    def topics(self) -> tuple[str, ...]:
        return self._topics

    @property
    def counts(self) -> tuple[int, ...]:
        return self._counts

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def pending(self) -> "Optional[asyncio.Task[None]]":
        """The in-flight generation task, if any."""
        return self._task

    def select_topic(self, topic: str) -> None:
        self._require(Idle, "change the topic")
        self._topic = self._checked_topic(topic)

    def select_count(self, count: int) -> None:
        self._require(Idle, "change the question count")
        self._count = self._checked_count(count)

    def start_quiz(self) -> "asyncio.Task[None]":
        """Move to ``Loading`` and schedule the generation request.

        Only valid from ``Idle``; in particular a second call while a request
        is in flight raises :class:`InvalidTransitionError`.
        """
        self._require(Idle, "start a quiz")
        loop = asyncio.get_running_loop()
        self._epoch += 1
        epoch = self._epoch
        self._state = Loading(topic=self._topic, count=self._count, epoch=epoch)
        self._logger.info(
            "Quiz generation started",
            extra={"topic": self._topic, "count": self._count, "epoch": epoch},
        )
        self._task = loop.create_task(
            self._run_generation(epoch, self._topic, self._count)
        )
        return self._task

    def select_answer(self, index: int) -> None:
        """Record ``index`` for the current question and advance.

        The index is stored as given; scoring treats out-of-range values as
        incorrect.
        """
        state = self._require(InProgress, "answer a question")
        answers = state.answers + (index,)
        if state.current_index >= state.total - 1:
            self._state = Completed(questions=state.questions, answers=answers)
            self._logger.info(
                "Quiz completed",
                extra={"summary": vars(self.summary())},
            )
        else:
            self._state = replace(
                state,
                current_index=state.current_index + 1,
                answers=answers,
            )

    def reset(self) -> None:
        """Return to the default ``Idle`` state from any state.

        An in-flight request is cancelled and its epoch invalidated, so a
        late completion cannot touch the new session. Topic and count
        selections are kept.
        """
        previous = type(self._state).__name__
        self._epoch += 1
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
        self._state = Idle()
        self._logger.info(
            "Session reset", extra={"previous_state": previous}
        )

    def restart(self) -> None:
        self.reset()

    def summary(self) -> QuizSummary:
        state = self._state
        if not isinstance(state, (InProgress, Completed)):
            raise InvalidTransitionError(
                f"no answers to summarize while {_state_name(state)}"
            )
        return summarize(state.questions, state.answers)

    async def _run_generation(self, epoch: int, topic: str, count: int) -> None:
        try:
            quiz = await self._generator.generate(topic, count)
        except GenerationError as exc:
            self._fail(epoch, exc.kind, exc)
            return
        except Exception as exc:
            self._logger.exception(
                "Unexpected error during question generation",
                extra={"epoch": epoch},
            )
            self._fail(epoch, "unexpected", exc, logged=True)
            return
        self._deliver(epoch, quiz)

    def _deliver(self, epoch: int, quiz: QuizSet) -> None:
        if self._is_stale(epoch):
            self._logger.info(
                "Discarded stale generation result",
                extra={"epoch": epoch, "current_epoch": self._epoch},
            )
            return
        self._task = None
        if len(quiz) == 0:
            self._logger.warning(
                "Generation returned no questions", extra={"epoch": epoch}
            )
            self._state = Errored(
                message=user_message_for("empty"), kind="empty"
            )
            return
        self._state = InProgress(questions=quiz)

    def _fail(
        self,
        epoch: int,
        kind: str,
        exc: BaseException,
        *,
        logged: bool = False,
    ) -> None:
        if self._is_stale(epoch):
            self._logger.info(
                "Discarded stale generation failure",
                extra={"epoch": epoch, "kind": kind},
            )
            return
        self._task = None
        if not logged:
            self._logger.error(
                "Question generation failed",
                extra={"epoch": epoch, "kind": kind, "reason": str(exc)},
            )
        self._state = Errored(message=user_message_for(kind), kind=kind)

    def _is_stale(self, epoch: int) -> bool:
        return epoch != self._epoch or not isinstance(self._state, Loading)

    def _require(self, expected: Type[_S], action: str) -> _S:
        state = self._state
        if not isinstance(state, expected):
            raise InvalidTransitionError(
                f"cannot {action} while {_state_name(state)}"
            )
        return state

    def _checked_topic(self, topic: str) -> str:
        if topic not in self._topics:
            raise ValueError(
                f"unknown topic '{topic}'; choose from "
                + ", ".join(self._topics)
            )
        return topic

    def _checked_count(self, count: int) -> int:
        if count not in self._counts:
            raise ValueError(
                f"unsupported question count {count}; choose from "
                + ", ".join(str(value) for value in self._counts)
            )
        return count


def _state_name(state: SessionState) -> str:
    return type(state).__name__.lower()
