"""Rich terminal front end for a quiz session.

The loop renders whatever state the :class:`QuizController` is in, reads one
line of input, and maps it onto a controller trigger. All session rules live
in the controller; this module only draws and translates commands.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Literal, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .session import (
    Completed,
    Errored,
    Idle,
    InProgress,
    Loading,
    QuizController,
    QuizSummary,
    review,
    summarize,
)

InputProvider = Callable[[], str]
ExitAction = Literal["quit", "interrupted"]
CommandType = Literal["topic", "count", "generate", "answer", "back", "quit"]


@dataclass(frozen=True)
class ViewCommand:
    """Normalized command parsed from one line of user input."""

    type: CommandType
    value: Optional[str] = None


@dataclass
class QuizAppResult:
    """Outcome of :func:`run_quiz_app`."""

    exit_action: ExitAction
    summaries: List[QuizSummary] = field(default_factory=list)


def parse_view_command(raw: Optional[str]) -> Optional[ViewCommand]:
    """Parse raw input into a :class:`ViewCommand`.

    Accepted forms: ``t <n|name>``, ``c <count>``, ``g``/``go``/``generate``,
    a bare option number, ``r``/``b``/``restart``/``back`` and
    ``q``/``quit``/``exit``.
    """

    if raw is None:
        return None
    text = raw.strip()
    if not text:
        return None
    head, _, rest = text.partition(" ")
    head = head.lower()
    rest = rest.strip()
    if head in {"q", "quit", "exit"}:
        return ViewCommand("quit")
    if head in {"g", "go", "generate", "start"}:
        return ViewCommand("generate")
    if head in {"r", "b", "restart", "back", "reset"}:
        return ViewCommand("back")
    if head in {"t", "topic"} and rest:
        return ViewCommand("topic", rest)
    if head in {"c", "count"} and rest:
        return ViewCommand("count", rest)
    if head.isdigit():
        return ViewCommand("answer", head)
    return None


async def run_quiz_app(
    controller: QuizController,
    console: Console,
    input_provider: InputProvider,
) -> QuizAppResult:
    """Drive ``controller`` until the user quits or input runs out."""

    result = QuizAppResult(exit_action="quit")
    while True:
        state = controller.state
        if isinstance(state, Loading):
            await _await_generation(controller, console)
            continue

        _render(console, controller)
        try:
            raw = input_provider()
        except (EOFError, KeyboardInterrupt, StopIteration):
            console.print("\n[bold yellow]Session interrupted.[/]")
            result.exit_action = "interrupted"
            return result

        command = parse_view_command(raw)
        if command is None:
            console.print("[red]Unrecognized command. Try again.[/]")
            continue
        if command.type == "quit":
            console.print("[bold yellow]Goodbye.[/]")
            return result
        _apply(controller, console, command)
        if isinstance(controller.state, Completed) and not isinstance(
            state, Completed
        ):
            result.summaries.append(controller.summary())


async def _await_generation(
    controller: QuizController, console: Console
) -> None:
    state = controller.state
    task = controller.pending
    if not isinstance(state, Loading) or task is None:
        return
    with console.status(
        f"Generating {state.count} question(s) about {state.topic}..."
    ):
        await task


def _apply(
    controller: QuizController, console: Console, command: ViewCommand
) -> None:
    state = controller.state
    if isinstance(state, Idle):
        _apply_idle(controller, console, command)
    elif isinstance(state, InProgress):
        _apply_answer(controller, console, command, state)
    elif isinstance(state, (Completed, Errored)):
        if command.type == "back":
            controller.restart()
        else:
            console.print("[red]Enter 'r' to start over or 'q' to quit.[/]")


def _apply_idle(
    controller: QuizController, console: Console, command: ViewCommand
) -> None:
    if command.type == "generate":
        controller.start_quiz()
        return
    if command.type == "topic" and command.value:
        topic = _resolve_topic(controller, command.value)
        if topic is None:
            console.print(f"[red]'{command.value}' is not a listed topic.[/]")
            return
        controller.select_topic(topic)
        return
    if command.type == "count" and command.value:
        try:
            controller.select_count(int(command.value))
        except ValueError:
            allowed = ", ".join(str(c) for c in controller.counts)
            console.print(f"[red]Question count must be one of {allowed}.[/]")
        return
    console.print("[red]Pick a topic (t), a count (c) or generate (g).[/]")


def _apply_answer(
    controller: QuizController,
    console: Console,
    command: ViewCommand,
    state: InProgress,
) -> None:
    options = state.current.options
    if command.type == "answer" and command.value:
        number = int(command.value)
        if 1 <= number <= len(options):
            controller.select_answer(number - 1)
            return
    console.print(
        f"[red]Choose an option between 1 and {len(options)}.[/]"
    )


def _resolve_topic(controller: QuizController, value: str) -> Optional[str]:
    if value.isdigit():
        index = int(value) - 1
        if 0 <= index < len(controller.topics):
            return controller.topics[index]
        return None
    lowered = value.lower()
    for topic in controller.topics:
        if topic.lower() == lowered:
            return topic
    return None


def _render(console: Console, controller: QuizController) -> None:
    state = controller.state
    if isinstance(state, Idle):
        _render_picker(console, controller)
    elif isinstance(state, InProgress):
        _render_question(console, state)
    elif isinstance(state, Completed):
        _render_results(console, state)
    elif isinstance(state, Errored):
        console.print(
            Panel(
                Text(state.message),
                title="Error",
                border_style="red",
            )
        )
        console.print(Text("r (back to start), q (quit)", style="dim"))


def _render_picker(console: Console, controller: QuizController) -> None:
    console.print()
    console.rule(Text("Quiz", style="bold cyan"))

    topics = Table(title="Topics", show_header=False, box=box.SIMPLE)
    topics.add_column("#", justify="right", style="cyan")
    topics.add_column("Topic")
    for number, topic in enumerate(controller.topics, start=1):
        label = Text(topic)
        if topic == controller.topic:
            label.stylize("bold green")
        topics.add_row(str(number), label)
    console.print(topics)

    counts = "  ".join(
        f"[bold green]{count}[/]" if count == controller.count else str(count)
        for count in controller.counts
    )
    console.print(f"Questions: {counts}")
    console.print(
        Text(
            f"Selected: {controller.topic}, {controller.count} question(s) | "
            "Commands: t <n> (topic), c <count>, g (generate), q (quit)",
            style="dim",
        )
    )


def _render_question(console: Console, state: InProgress) -> None:
    question = state.current
    header = Text.assemble(
        (f"Question {state.position}", "bold cyan"),
        (f" / {state.total}", "dim"),
    )
    console.print()
    console.rule(header)
    console.print(Text(question.text, style="bold"))

    table = Table(show_header=False, box=box.SIMPLE, expand=True)
    table.add_column("#", justify="center", style="cyan")
    table.add_column("Option")
    for number, option in enumerate(question.options, start=1):
        table.add_row(str(number), option)
    console.print(table)
    console.print(
        Text(
            f"Answered {len(state.answers)}/{state.total} | "
            f"Commands: 1-{len(question.options)}, q (quit)",
            style="dim",
        )
    )


def _render_results(console: Console, state: Completed) -> None:
    rows = review(state.questions, state.answers)
    summary = summarize(state.questions, state.answers)

    console.print()
    console.rule(Text("Quiz Results", style="bold magenta"))
    console.print(
        f"Correct answers: [bold]{summary.correct_answers}"
        f"/{summary.total_questions}[/] "
        f"({summary.accuracy * 100:.1f}%)"
    )

    table = Table(box=box.SIMPLE, expand=True)
    table.add_column("#", justify="right")
    table.add_column("Question", overflow="fold")
    table.add_column("Your answer", overflow="fold")
    table.add_column("Correct answer", overflow="fold")
    table.add_column("Result", justify="center")
    for row in rows:
        if row.outcome == "unanswered":
            yours = Text("unanswered", style="dim")
        elif row.is_invalid_selection:
            yours = Text(f"invalid choice ({row.selected})", style="red")
        else:
            style = "green" if row.outcome == "correct" else "red"
            yours = Text(row.selected_text or "", style=style)
        mark = {"correct": "✅", "incorrect": "❌", "unanswered": "—"}[
            row.outcome
        ]
        table.add_row(
            str(row.number),
            row.question.text,
            yours,
            Text(row.correct_text, style="green"),
            mark,
        )
    console.print(table)
    console.print(Text("r (play again), q (quit)", style="dim"))
