"""``quizgen play``: run an interactive quiz in the terminal."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

from rich.console import Console

from .config import load_config
from .core import configure_logger, ensure_workspace
from .core.workspace import WorkspaceError
from .errors import ConfigurationError
from .generator import QuestionGenerator
from .session import QuizController
from .view import InputProvider, run_quiz_app

EXIT_INTERRUPTED = 130


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quizgen play",
        description=(
            "Generate multiple-choice questions with the OpenAI API and "
            "answer them in the terminal."
        ),
        epilog="Requires OPENAI_API_KEY in the environment or a .env file.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to quizgen.toml (defaults to the workspace config).",
    )
    parser.add_argument(
        "--workspace",
        type=Path,
        help="Workspace root override (defaults to QUIZGEN_DATA_HOME).",
    )
    parser.add_argument("--topic", help="Preselect a configured topic.")
    parser.add_argument(
        "--count", type=int, help="Preselect a configured question count."
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Echo log records to stderr.",
    )
    return parser


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    console: Optional[Console] = None,
    input_provider: Optional[InputProvider] = None,
    client: Any = None,
) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        config = load_config(
            explicit_path=args.config, workspace_path=args.workspace
        )
        layout = ensure_workspace(path=args.workspace)
    except (ConfigurationError, WorkspaceError) as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return 2

    logger, log_path = configure_logger(
        "quizgen",
        log_dir=layout.path_for("logs"),
        level=config.logging.level,
        verbose=args.verbose or config.logging.verbose,
    )
    logger.debug(
        "play command invoked",
        extra={"config_source": config.source, "log_path": log_path},
    )

    try:
        generator = QuestionGenerator.from_config(
            config, client=client, logger=logger.getChild("generator")
        )
    except ConfigurationError as exc:
        logger.error("Refusing to start", extra={"reason": str(exc)})
        sys.stderr.write(f"Error: {exc}\n")
        return 2

    controller = QuizController.from_config(
        config, generator, logger=logger.getChild("session")
    )
    try:
        if args.topic is not None:
            controller.select_topic(args.topic)
        if args.count is not None:
            controller.select_count(args.count)
    except ValueError as exc:
        parser.error(str(exc))

    console = console or Console()
    provider = input_provider or (lambda: console.input("[bold]> [/]"))
    try:
        result = asyncio.run(run_quiz_app(controller, console, provider))
    except KeyboardInterrupt:
        console.print("\n[bold yellow]Session interrupted.[/]")
        logger.info("play command interrupted")
        return EXIT_INTERRUPTED
    logger.info(
        "play command finished",
        extra={
            "exit_action": result.exit_action,
            "sessions_completed": len(result.summaries),
        },
    )
    return EXIT_INTERRUPTED if result.exit_action == "interrupted" else 0


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
