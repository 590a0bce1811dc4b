from __future__ import annotations

import asyncio
import logging

import pytest

from fixtures import FixedSource, make_quiz, questions_json
from quizgen import config as config_mod
from quizgen.errors import (
    InvalidTransitionError,
    MalformedQuestionsError,
    TransportError,
)
from quizgen.generator import QuestionGenerator, QuizSet
from quizgen.session import (
    Completed,
    Errored,
    Idle,
    InProgress,
    Loading,
    QuizController,
    score,
    user_message_for,
)


class StubbornSource:
    """First call ignores cancellation and finishes late; later calls
    return immediately."""

    def __init__(self, late: object, fresh: QuizSet) -> None:
        self.late = late
        self.fresh = fresh
        self.calls = 0

    async def generate(self, topic: str, count: int) -> QuizSet:
        self.calls += 1
        if self.calls == 1:
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                pass
            if isinstance(self.late, BaseException):
                raise self.late
            return self.late  # type: ignore[return-value]
        return self.fresh


def _run(coro):
    return asyncio.run(coro)


def test_end_to_end_science_quiz(openai_stub):
    openai_stub.queue_content(questions_json([1, 2, 3]))
    controller = QuizController(QuestionGenerator(openai_stub))

    async def scenario():
        controller.select_topic("science")
        controller.select_count(3)
        task = controller.start_quiz()
        assert controller.state == Loading(
            topic="science", count=3, epoch=controller.epoch
        )
        await task

    _run(scenario())

    state = controller.state
    assert isinstance(state, InProgress)
    assert state.current_index == 0
    assert state.total == 3

    for answer in (1, 0, 3):
        controller.select_answer(answer)

    final = controller.state
    assert isinstance(final, Completed)
    assert final.answers == (1, 0, 3)
    assert score(final.questions, final.answers) == 2
    assert controller.summary().correct_answers == 2
    assert len(openai_stub.calls) == 1
    assert "about science" in openai_stub.calls[0]["messages"][1]["content"]


def test_answers_advance_one_question_at_a_time():
    controller = QuizController(FixedSource(make_quiz([0, 1, 2])))

    async def scenario():
        await controller.start_quiz()

    _run(scenario())
    controller.select_answer(0)

    state = controller.state
    assert isinstance(state, InProgress)
    assert state.current_index == 1
    assert state.position == 2
    assert state.answers == (0,)
    assert controller.summary().answered_questions == 1


def test_second_start_while_loading_is_rejected(openai_stub):
    openai_stub.queue_content(questions_json([0, 0, 0]))
    controller = QuizController(QuestionGenerator(openai_stub))

    async def scenario():
        openai_stub.gate = asyncio.Event()
        task = controller.start_quiz()
        await asyncio.sleep(0)
        with pytest.raises(InvalidTransitionError):
            controller.start_quiz()
        assert isinstance(controller.state, Loading)
        openai_stub.gate.set()
        await task

    _run(scenario())

    assert len(openai_stub.calls) == 1
    assert isinstance(controller.state, InProgress)


def test_start_quiz_requires_running_loop():
    controller = QuizController(FixedSource())

    with pytest.raises(RuntimeError):
        controller.start_quiz()

    assert controller.state == Idle()
    assert controller.epoch == 0


@pytest.mark.parametrize(
    ("error", "kind"),
    [
        (TransportError("connection refused"), "transport"),
        (MalformedQuestionsError("bad", payload="x"), "malformed_questions"),
        (RuntimeError("boom"), "unexpected"),
    ],
)
def test_generation_failure_moves_to_errored(error, kind):
    controller = QuizController(FixedSource(error))

    async def scenario():
        await controller.start_quiz()

    _run(scenario())

    assert controller.state == Errored(message=user_message_for(kind), kind=kind)
    assert controller.pending is None


def test_empty_result_moves_to_errored():
    controller = QuizController(FixedSource(QuizSet()))

    async def scenario():
        await controller.start_quiz()

    _run(scenario())

    state = controller.state
    assert isinstance(state, Errored)
    assert state.kind == "empty"
    assert "No questions" in state.message


def test_transport_message_suggests_connection_check():
    assert "connection" in user_message_for("transport")
    assert user_message_for("something-new") == "Question generation failed."


def test_reset_during_loading_cancels_request(openai_stub):
    openai_stub.queue_content(questions_json([0, 0, 0]))
    controller = QuizController(QuestionGenerator(openai_stub))

    async def scenario():
        openai_stub.gate = asyncio.Event()
        task = controller.start_quiz()
        await asyncio.sleep(0)
        controller.reset()
        await asyncio.gather(task, return_exceptions=True)
        return task

    task = _run(scenario())

    assert task.cancelled()
    assert len(openai_stub.calls) == 1
    assert controller.state == Idle()
    assert controller.pending is None


@pytest.mark.parametrize(
    "late", [make_quiz([1]), TransportError("late failure")]
)
def test_late_completion_from_old_epoch_is_discarded(late):
    fresh = make_quiz([2, 2])
    source = StubbornSource(late, fresh)
    controller = QuizController(source)

    async def scenario():
        first = controller.start_quiz()
        await asyncio.sleep(0)
        controller.restart()
        second = controller.start_quiz()
        await asyncio.gather(first, second, return_exceptions=True)

    _run(scenario())

    state = controller.state
    assert source.calls == 2
    assert isinstance(state, InProgress)
    assert state.questions == fresh


def test_late_completion_after_reset_leaves_idle():
    source = StubbornSource(make_quiz([1]), make_quiz([2]))
    controller = QuizController(source)

    async def scenario():
        task = controller.start_quiz()
        await asyncio.sleep(0)
        controller.reset()
        await task

    _run(scenario())

    assert controller.state == Idle()


def _drive_to(controller: QuizController, target: str) -> None:
    if target == "idle":
        return

    async def scenario():
        await controller.start_quiz()

    asyncio.run(scenario())
    if target == "completed":
        controller.select_answer(0)


@pytest.mark.parametrize(
    ("target", "source_outcome"),
    [
        ("idle", make_quiz([0])),
        ("in_progress", make_quiz([0])),
        ("completed", make_quiz([0])),
        ("errored", TransportError("down")),
    ],
)
def test_reset_returns_to_idle_from_any_state(target, source_outcome):
    controller = QuizController(FixedSource(source_outcome))
    _drive_to(controller, target)
    epoch = controller.epoch

    controller.reset()
    controller.reset()

    assert controller.state == Idle()
    assert controller.epoch == epoch + 2


def test_reset_from_loading_returns_to_idle():
    controller = QuizController(FixedSource(make_quiz([0])))

    async def scenario():
        controller.start_quiz()
        assert isinstance(controller.state, Loading)
        controller.reset()
        await asyncio.sleep(0)

    _run(scenario())

    assert controller.state == Idle()


def test_selections_survive_restart():
    controller = QuizController(FixedSource(make_quiz([0])))
    controller.select_topic("history")
    controller.select_count(10)

    async def scenario():
        await controller.start_quiz()

    _run(scenario())
    controller.select_answer(0)
    controller.restart()

    assert controller.topic == "history"
    assert controller.count == 10
    assert controller.state == Idle()


def test_out_of_range_answer_is_recorded_and_scored_incorrect():
    controller = QuizController(FixedSource(make_quiz([3])))

    async def scenario():
        await controller.start_quiz()

    _run(scenario())
    controller.select_answer(7)

    state = controller.state
    assert isinstance(state, Completed)
    assert state.answers == (7,)
    assert controller.summary().correct_answers == 0


def test_selection_is_validated_against_closed_sets():
    controller = QuizController(FixedSource())

    with pytest.raises(ValueError):
        controller.select_topic("cooking")
    with pytest.raises(ValueError):
        controller.select_count(4)

    assert controller.topic == "geography"
    assert controller.count == 3


def test_triggers_outside_their_state_raise():
    controller = QuizController(FixedSource(make_quiz([0])))

    with pytest.raises(InvalidTransitionError):
        controller.select_answer(0)
    with pytest.raises(InvalidTransitionError):
        controller.summary()

    async def scenario():
        await controller.start_quiz()

    _run(scenario())

    with pytest.raises(InvalidTransitionError):
        controller.select_topic("animals")
    with pytest.raises(InvalidTransitionError):
        controller.select_count(5)

    controller.select_answer(0)
    with pytest.raises(InvalidTransitionError):
        controller.select_answer(1)


def test_from_config_uses_configured_defaults():
    cfg = config_mod.load_config()

    controller = QuizController.from_config(cfg, FixedSource())

    assert controller.topics == cfg.quiz.topics
    assert controller.counts == cfg.quiz.counts
    assert controller.topic == "geography"
    assert controller.count == 5


def test_unexpected_failure_is_logged_once(caplog):
    controller = QuizController(FixedSource(RuntimeError("boom")))

    async def scenario():
        await controller.start_quiz()

    with caplog.at_level(logging.ERROR, logger="quizgen.session"):
        _run(scenario())

    errors = [r for r in caplog.records if r.levelno >= logging.ERROR]
    assert len(errors) == 1
    assert errors[0].getMessage() == (
        "Unexpected error during question generation"
    )
    assert errors[0].exc_info is not None
    assert controller.state.kind == "unexpected"


def test_known_failure_is_logged_with_kind(caplog):
    controller = QuizController(FixedSource(TransportError("refused")))

    async def scenario():
        await controller.start_quiz()

    with caplog.at_level(logging.ERROR, logger="quizgen.session"):
        _run(scenario())

    errors = [r for r in caplog.records if r.levelno >= logging.ERROR]
    assert len(errors) == 1
    assert errors[0].kind == "transport"
    assert errors[0].reason == "refused"
