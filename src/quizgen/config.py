"""Application configuration for quizgen.

Settings live in a small TOML file. Every key has a default, so a missing
file is not an error; a present file is merged over the defaults with strict
unknown-key checks and then validated into frozen dataclasses.
"""

from __future__ import annotations

import copy
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .core import workspace as workspace_mod
from .errors import ConfigurationError

__all__ = [
    "CONFIG_FILENAME",
    "CONFIG_PATH_ENV",
    "EXTRACTOR_NAMES",
    "QuizOptions",
    "OpenAIOptions",
    "GeneratorOptions",
    "LoggingOptions",
    "QuizgenConfig",
    "config_template",
    "default_tree",
    "load_config",
    "resolve_config_path",
    "write_template",
]

CONFIG_FILENAME = "quizgen.toml"
CONFIG_PATH_ENV = "QUIZGEN_CONFIG"
EXTRACTOR_NAMES = ("slice", "depth")


@dataclass(frozen=True)
class QuizOptions:
    topics: tuple[str, ...]
    counts: tuple[int, ...]
    default_topic: str
    default_count: int


@dataclass(frozen=True)
class OpenAIOptions:
    model: str
    temperature: float
    api_base: Optional[str]
    request_timeout_seconds: int


@dataclass(frozen=True)
class GeneratorOptions:
    extractor: str


@dataclass(frozen=True)
class LoggingOptions:
    level: str
    verbose: bool


@dataclass(frozen=True)
class QuizgenConfig:
    quiz: QuizOptions
    openai: OpenAIOptions
    generator: GeneratorOptions
    logging: LoggingOptions
    source: Optional[Path] = None


_DEFAULTS: Dict[str, Any] = {
    "quiz": {
        "topics": ["geography", "animals", "history", "science"],
        "counts": [3, 5, 10, 15],
        "default_topic": "geography",
        "default_count": 5,
    },
    "openai": {
        "model": "gpt-3.5-turbo",
        "temperature": 0.7,
        "api_base": None,
        "request_timeout_seconds": 60,
    },
    "generator": {
        "extractor": "slice",
    },
    "logging": {
        "level": "INFO",
        "verbose": False,
    },
}

_CONFIG_TEMPLATE = """
# quizgen configuration

[quiz]
# Closed set of topics offered in the picker
topics = ["geography", "animals", "history", "science"]
# Closed set of question counts offered in the picker
counts = [3, 5, 10, 15]
default_topic = "geography"
default_count = 5

[openai]
model = "gpt-3.5-turbo"
# Sampling temperature (0.0-2.0)
temperature = 0.7
# Optional API base override
# api_base = "https://api.openai.com/v1"
request_timeout_seconds = 60

[generator]
# How the JSON array is located in the model's reply:
#   "slice" - first '[' to last ']' (tolerant of surrounding prose)
#   "depth" - first balanced top-level array, string aware
extractor = "slice"

[logging]
level = "INFO"
verbose = false
"""


def default_tree() -> Dict[str, Any]:
    """Return a deep copy of the default configuration tree."""

    return copy.deepcopy(_DEFAULTS)


def config_template() -> str:
    return _CONFIG_TEMPLATE.strip() + "\n"


def write_template(path: Path, *, overwrite: bool = False) -> Path:
    """Write the commented default config to ``path``."""

    if path.exists() and not overwrite:
        raise ConfigurationError(f"Config already exists: {path}")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(config_template(), encoding="utf-8")
    return path


def resolve_config_path(
    *,
    explicit_path: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
    workspace_path: Optional[Path] = None,
) -> Optional[Path]:
    """Locate the config file, or ``None`` when defaults should be used.

    Lookup order: ``explicit_path`` (must exist), ``QUIZGEN_CONFIG`` (must
    exist), the workspace ``config/`` directory, then the current directory.
    """

    env_map = os.environ if env is None else env
    if explicit_path is not None:
        path = explicit_path.expanduser().resolve()
        if not path.exists():
            raise ConfigurationError(f"Config not found: {path}")
        return path

    env_override = (env_map.get(CONFIG_PATH_ENV) or "").strip()
    if env_override:
        path = Path(env_override).expanduser().resolve()
        if not path.exists():
            raise ConfigurationError(
                f"{CONFIG_PATH_ENV} points to a missing file: {path}"
            )
        return path

    home = workspace_mod.resolve_home(env=env_map, path=workspace_path)
    candidates = (
        home / "config" / CONFIG_FILENAME,
        Path.cwd() / CONFIG_FILENAME,
    )
    for candidate in candidates:
        if candidate.is_file():
            return candidate.resolve()
    return None


def load_config(
    *,
    explicit_path: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
    workspace_path: Optional[Path] = None,
) -> QuizgenConfig:
    """Load, merge and validate the quizgen configuration."""

    path = resolve_config_path(
        explicit_path=explicit_path,
        env=env,
        workspace_path=workspace_path,
    )
    tree: Mapping[str, Any] = _DEFAULTS
    if path is not None:
        tree = _overlay(_DEFAULTS, _read_toml(path))
    return build_config(tree, source=path)


def _read_toml(path: Path) -> Mapping[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except OSError as exc:
        raise ConfigurationError(
            f"Unable to read config {path}: {exc}"
        ) from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Invalid TOML in {path}: {exc}") from exc


def _overlay(
    defaults: Mapping[str, Any],
    override: Mapping[str, Any],
    *,
    prefix: str = "",
) -> Dict[str, Any]:
    """Return ``defaults`` with ``override`` applied; unknown keys are errors."""

    merged = dict(defaults)
    for key, value in override.items():
        dotted = prefix + key
        if key not in defaults:
            raise ConfigurationError(f"Unknown configuration key '{dotted}'.")
        if isinstance(defaults[key], Mapping):
            if not isinstance(value, Mapping):
                raise ConfigurationError(f"'{dotted}' must be a table.")
            merged[key] = _overlay(defaults[key], value, prefix=f"{dotted}.")
        else:
            merged[key] = value
    return merged


def build_config(
    tree: Mapping[str, Any], *, source: Optional[Path] = None
) -> QuizgenConfig:
    return QuizgenConfig(
        quiz=_build_quiz(tree["quiz"]),
        openai=_build_openai(tree["openai"]),
        generator=_build_generator(tree["generator"]),
        logging=_build_logging(tree["logging"]),
        source=source,
    )


def _build_quiz(section: Mapping[str, Any]) -> QuizOptions:
    raw_topics = section.get("topics")
    if not isinstance(raw_topics, list) or not raw_topics:
        raise ConfigurationError("'quiz.topics' must be a non-empty list.")
    topics = tuple(
        _require_string(item, field="quiz.topics[]") for item in raw_topics
    )
    if len(set(topics)) != len(topics):
        raise ConfigurationError("'quiz.topics' must not repeat entries.")

    raw_counts = section.get("counts")
    if not isinstance(raw_counts, list) or not raw_counts:
        raise ConfigurationError("'quiz.counts' must be a non-empty list.")
    counts = tuple(
        _require_positive_int(item, field="quiz.counts[]")
        for item in raw_counts
    )
    if len(set(counts)) != len(counts):
        raise ConfigurationError("'quiz.counts' must not repeat entries.")

    default_topic = _require_string(
        section.get("default_topic"), field="quiz.default_topic"
    )
    if default_topic not in topics:
        raise ConfigurationError(
            "'quiz.default_topic' must be one of quiz.topics."
        )
    default_count = _require_positive_int(
        section.get("default_count"), field="quiz.default_count"
    )
    if default_count not in counts:
        raise ConfigurationError(
            "'quiz.default_count' must be one of quiz.counts."
        )
    return QuizOptions(
        topics=topics,
        counts=counts,
        default_topic=default_topic,
        default_count=default_count,
    )


def _build_openai(section: Mapping[str, Any]) -> OpenAIOptions:
    model = _require_string(section.get("model"), field="openai.model")
    temperature = section.get("temperature")
    if isinstance(temperature, bool) or not isinstance(
        temperature, (int, float)
    ):
        raise ConfigurationError("'openai.temperature' must be a number.")
    if not 0.0 <= float(temperature) <= 2.0:
        raise ConfigurationError(
            "'openai.temperature' must be between 0.0 and 2.0."
        )
    api_base = section.get("api_base")
    if api_base is not None:
        api_base = _require_string(api_base, field="openai.api_base")
    timeout = _require_positive_int(
        section.get("request_timeout_seconds"),
        field="openai.request_timeout_seconds",
    )
    return OpenAIOptions(
        model=model,
        temperature=float(temperature),
        api_base=api_base,
        request_timeout_seconds=timeout,
    )


def _build_generator(section: Mapping[str, Any]) -> GeneratorOptions:
    extractor = _require_string(
        section.get("extractor"), field="generator.extractor"
    ).lower()
    if extractor not in EXTRACTOR_NAMES:
        raise ConfigurationError(
            "'generator.extractor' must be one of: "
            + ", ".join(EXTRACTOR_NAMES)
            + "."
        )
    return GeneratorOptions(extractor=extractor)


def _build_logging(section: Mapping[str, Any]) -> LoggingOptions:
    level = _require_string(section.get("level"), field="logging.level")
    level = level.upper()
    if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        raise ConfigurationError(
            "logging.level must be one of "
            "DEBUG, INFO, WARNING, ERROR, CRITICAL."
        )
    verbose = section.get("verbose")
    if not isinstance(verbose, bool):
        raise ConfigurationError("'logging.verbose' must be a boolean.")
    return LoggingOptions(level=level, verbose=verbose)


def _require_string(value: Any, *, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigurationError(f"'{field}' must be a non-empty string.")
    return value.strip()


def _require_positive_int(value: Any, *, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigurationError(f"'{field}' must be a positive integer.")
    return value
