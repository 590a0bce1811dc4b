"""Locate the JSON array inside free-form model output.

Models are told to answer with a bare JSON array but routinely wrap it in
prose ("Sure! Here you go: [...] Hope that helps!"). The extractors here cut
the array candidate out of such text; they do not parse or validate it.
"""

from __future__ import annotations

from typing import Dict, Protocol, Type

from ..errors import NoJsonFoundError

__all__ = [
    "JsonArrayExtractor",
    "BracketSliceExtractor",
    "BracketDepthExtractor",
    "get_extractor",
]


class JsonArrayExtractor(Protocol):
    """Return the substring of ``text`` expected to hold a JSON array."""

    def extract(self, text: str) -> str:
        """Raise :class:`NoJsonFoundError` when no candidate exists."""


class BracketSliceExtractor:
    """Slice from the first ``[`` to the last ``]``.

    Text that already starts with ``[`` is returned trimmed but otherwise
    untouched. Brackets in surrounding prose (for example "[citation]" after
    the array) end up inside the slice and make the later parse fail.
    """

    def extract(self, text: str) -> str:
        cleaned = text.strip()
        if cleaned.startswith("["):
            return cleaned
        start = cleaned.find("[")
        end = cleaned.rfind("]")
        if start == -1 or end == -1 or end < start:
            raise NoJsonFoundError(
                "no JSON array found in model output", payload=cleaned
            )
        return cleaned[start : end + 1]


class BracketDepthExtractor:
    """Return the first balanced top-level array, skipping string contents."""

    def extract(self, text: str) -> str:
        cleaned = text.strip()
        start = cleaned.find("[")
        while start != -1:
            end = _matching_bracket(cleaned, start)
            if end is not None:
                return cleaned[start : end + 1]
            start = cleaned.find("[", start + 1)
        raise NoJsonFoundError(
            "no balanced JSON array found in model output", payload=cleaned
        )


def _matching_bracket(text: str, start: int) -> int | None:
    depth = 0
    in_string = False
    escaped = False
    for pos in range(start, len(text)):
        char = text[pos]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
            if depth == 0:
                return pos
    return None


_EXTRACTORS: Dict[str, Type[JsonArrayExtractor]] = {
    "slice": BracketSliceExtractor,
    "depth": BracketDepthExtractor,
}


def get_extractor(name: str) -> JsonArrayExtractor:
    try:
        return _EXTRACTORS[name]()
    except KeyError as exc:
        known = ", ".join(sorted(_EXTRACTORS))
        raise ValueError(
            f"Unknown extractor '{name}'. Known: {known}"
        ) from exc
