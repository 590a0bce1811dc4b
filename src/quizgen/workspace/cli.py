"""``quizgen init``: prepare the workspace and write the default config."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Mapping, Sequence

from quizgen import config as config_mod
from quizgen.core import workspace as workspace_mod
from quizgen.errors import ConfigurationError


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quizgen init",
        description=(
            "Create the quizgen workspace (config and logs directories) and "
            "write a commented quizgen.toml."
        ),
    )
    parser.add_argument(
        "--path",
        type=Path,
        help=(
            "Override the workspace root (defaults to QUIZGEN_DATA_HOME or "
            "~/.quizgen-data)."
        ),
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing quizgen.toml.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress informational output on success.",
    )
    return parser


def _status(created: Mapping[str, bool], key: str) -> str:
    return "created" if created.get(key, False) else "exists"


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(list(argv) if argv is not None else None)

    try:
        layout = workspace_mod.ensure_workspace(path=args.path)
    except workspace_mod.WorkspaceError as exc:
        sys.stderr.write(f"{exc}\n")
        return 1

    target = layout.path_for("config") / config_mod.CONFIG_FILENAME
    config_note = "kept existing"
    if args.force or not target.exists():
        try:
            config_mod.write_template(target, overwrite=args.force)
        except ConfigurationError as exc:
            sys.stderr.write(f"{exc}\n")
            return 1
        config_note = "written"

    if args.quiet:
        return 0

    lines = [f"Workspace ready at {layout.home} ({_status(layout.created, 'home')})"]
    width = max(len(name) for name in layout.directories)
    for name, directory in layout.items():
        lines.append(
            f"  {name.ljust(width)}  {directory} "
            f"({_status(layout.created, name)})"
        )
    lines.append(f"Config {config_note}: {target}")
    sys.stdout.write("\n".join(lines) + "\n")
    return 0


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
