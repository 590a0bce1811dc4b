"""``quizgen`` console entry point."""

from __future__ import annotations

import inspect
import sys
from dataclasses import dataclass
from importlib import import_module, metadata
from typing import Callable, Mapping, Optional, Sequence

DIST_NAME = "quizgen"


@dataclass(frozen=True)
class CommandSpec:
    """A subcommand implemented by ``module:function``."""

    name: str
    summary: str
    target: str
    is_tui: bool = False


_COMMAND_SPECS: Sequence[CommandSpec] = (
    CommandSpec(
        name="init",
        summary="Create the workspace and default quizgen.toml.",
        target="quizgen.workspace.cli:main",
    ),
    CommandSpec(
        name="play",
        summary="Generate a quiz and answer it in the terminal.",
        target="quizgen.play:main",
        is_tui=True,
    ),
)

COMMANDS: Mapping[str, CommandSpec] = {
    spec.name: spec for spec in _COMMAND_SPECS
}


def format_command_table() -> str:
    width = max(len(spec.name) for spec in _COMMAND_SPECS)
    lines = ["Available commands:"]
    for spec in _COMMAND_SPECS:
        suffix = " (TUI)" if spec.is_tui else ""
        lines.append(f"  {spec.name.ljust(width)}  {spec.summary}{suffix}")
    return "\n".join(lines)


def format_usage() -> str:
    return "\n".join(
        [
            "Usage: quizgen <command> [args...]",
            "Run `quizgen list` for commands or `quizgen help <name>` "
            "for details.",
            "",
            format_command_table(),
        ]
    )


def _out(text: str) -> None:
    sys.stdout.write(text + "\n")


def _err(text: str) -> None:
    sys.stderr.write(text + "\n")


def _version() -> str:
    try:
        return metadata.version(DIST_NAME)
    except metadata.PackageNotFoundError:
        return "unknown"


def _unknown(command: str) -> int:
    _err(f"Unknown command '{command}'.")
    _err(format_command_table())
    return 2


def _help(argv: Sequence[str]) -> int:
    if not argv:
        _out(format_usage())
        return 0
    spec = COMMANDS.get(argv[0])
    if spec is None:
        return _unknown(argv[0])
    _out(f"{spec.name}: {spec.summary}")
    _out(f"Run `quizgen {spec.name} --help` for command options.")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(argv if argv is not None else sys.argv[1:])
    if not args:
        _out(format_usage())
        return 2

    head, *tail = args
    if head in ("-h", "--help"):
        _out(format_usage())
        return 0
    if head in ("-V", "--version", "version"):
        _out(_version())
        return 0
    if head == "list":
        _out(format_command_table())
        return 0
    if head == "help":
        return _help(tail)

    spec = COMMANDS.get(head)
    if spec is None:
        return _unknown(head)
    return run_command(spec, tail)


def run_command(spec: CommandSpec, argv: Sequence[str]) -> int:
    """Import ``spec.target`` and call it with ``argv``.

    ``sys.argv`` is swapped for the duration so argparse renders
    ``quizgen <name>`` in usage output.
    """

    module_name, _, func_name = spec.target.partition(":")
    func = getattr(import_module(module_name), func_name)
    saved = sys.argv
    sys.argv = [f"quizgen {spec.name}", *argv]
    try:
        result = func(list(argv)) if _takes_argv(func) else func()
    except SystemExit as exc:
        return _exit_code(exc)
    finally:
        sys.argv = saved
    return result if isinstance(result, int) else 0


def _takes_argv(func: Callable[..., object]) -> bool:
    try:
        params = inspect.signature(func).parameters.values()
    except (TypeError, ValueError):
        return False
    return any(
        param.kind
        in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
            inspect.Parameter.VAR_POSITIONAL,
        )
        for param in params
    )


def _exit_code(exc: SystemExit) -> int:
    code = exc.code
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    _err(str(code))
    return 1


if __name__ == "__main__":  # pragma: no cover - manual invocation guard
    raise SystemExit(main())
