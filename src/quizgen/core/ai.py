"""OpenAI client construction."""

from __future__ import annotations

import os
from typing import Mapping, Optional

from dotenv import load_dotenv
from openai import AsyncOpenAI

from ..errors import ConfigurationError

__all__ = ["API_KEY_ENV", "load_client", "resolve_api_key"]

API_KEY_ENV = "OPENAI_API_KEY"


def resolve_api_key(env: Optional[Mapping[str, str]] = None) -> str:
    """Return the API bearer token or raise :class:`ConfigurationError`.

    When ``env`` is omitted a local ``.env`` file is loaded first and the
    process environment is consulted.
    """

    if env is None:
        load_dotenv()
        env = os.environ
    api_key = (env.get(API_KEY_ENV) or "").strip()
    if not api_key:
        raise ConfigurationError(
            f"{API_KEY_ENV} not found in environment. Set it or add to .env"
        )
    return api_key


def load_client(
    *,
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
    timeout: float = 60.0,
    env: Optional[Mapping[str, str]] = None,
) -> AsyncOpenAI:
    """Build an async OpenAI client that never retries on its own."""

    key = api_key or resolve_api_key(env)
    return AsyncOpenAI(
        api_key=key,
        base_url=base_url,
        timeout=timeout,
        max_retries=0,
    )
