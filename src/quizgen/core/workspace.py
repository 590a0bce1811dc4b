"""Workspace (data home) resolution for quizgen."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

WORKSPACE_ENV = "QUIZGEN_DATA_HOME"
DEFAULT_WORKSPACE = Path.home() / ".quizgen-data"

_SUBDIRS = ("config", "logs")


class WorkspaceError(RuntimeError):
    """Raised when the workspace layout cannot be prepared."""


@dataclass(frozen=True)
class WorkspaceLayout:
    """Resolved workspace root, its subdirectories and what was created."""

    home: Path
    directories: Mapping[str, Path]
    created: Mapping[str, bool]

    def path_for(self, key: str) -> Path:
        try:
            return self.directories[key]
        except KeyError as exc:
            raise KeyError(f"Unknown workspace directory '{key}'.") from exc

    def items(self) -> tuple[tuple[str, Path], ...]:
        return tuple(self.directories.items())


def resolve_home(
    *, env: Mapping[str, str] | None = None, path: Path | None = None
) -> Path:
    """Return the workspace root honouring ``path`` then ``QUIZGEN_DATA_HOME``."""

    if path is not None:
        return path.expanduser().absolute()
    env_map = os.environ if env is None else env
    custom = (env_map.get(WORKSPACE_ENV) or "").strip()
    if custom:
        return Path(custom).expanduser().absolute()
    return DEFAULT_WORKSPACE


def ensure_workspace(
    *,
    env: Mapping[str, str] | None = None,
    path: Path | None = None,
    create: bool = True,
) -> WorkspaceLayout:
    """Resolve (and by default create) the workspace directories."""

    home = resolve_home(env=env, path=path)
    if home.exists() and not home.is_dir():
        raise WorkspaceError(
            f"Configured workspace exists and is not a directory: {home}"
        )

    created: dict[str, bool] = {"home": _make_dir(home) if create else False}
    directories: dict[str, Path] = {}
    for name in _SUBDIRS:
        target = home / name
        if target.exists() and not target.is_dir():
            raise WorkspaceError(
                f"Expected workspace directory for '{name}' but found a "
                f"file: {target}"
            )
        created[name] = _make_dir(target) if create else False
        directories[name] = target

    return WorkspaceLayout(
        home=home,
        directories=MappingProxyType(directories),
        created=MappingProxyType(created),
    )


def _make_dir(path: Path) -> bool:
    existed = path.exists()
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as exc:
        raise WorkspaceError(f"Unable to prepare workspace at {path}") from exc
    try:
        path.chmod(0o700)
    except (PermissionError, NotImplementedError):
        pass
    return not existed
