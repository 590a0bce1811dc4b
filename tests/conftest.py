from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterator

import pytest

TESTS_DIR = Path(__file__).resolve().parent
ROOT = TESTS_DIR.parent
for extra in (TESTS_DIR, ROOT / "src"):
    path_str = str(extra)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)

from fixtures.openai import AsyncOpenAIStub  # noqa: E402


@pytest.fixture(autouse=True)
def _isolated_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Iterator[None]:
    """Keep workspace, config lookup and logging inside ``tmp_path``."""

    monkeypatch.setenv("QUIZGEN_DATA_HOME", str(tmp_path / "data-home"))
    monkeypatch.delenv("QUIZGEN_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    logger = logging.getLogger("quizgen")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def openai_stub() -> AsyncOpenAIStub:
    """Fake async OpenAI client; queue replies and inspect ``calls``."""

    return AsyncOpenAIStub()
