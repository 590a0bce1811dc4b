"""Question generation: prompt, single request, JSON extraction, parsing."""

from .extract import (
    BracketDepthExtractor,
    BracketSliceExtractor,
    JsonArrayExtractor,
    get_extractor,
)
from .models import OPTION_COUNT, Question, QuizSet
from .parse import parse_questions
from .prompts import SYSTEM_PROMPT, build_messages, build_user_prompt
from .service import DEFAULT_MODEL, DEFAULT_TEMPERATURE, QuestionGenerator

__all__ = [
    "BracketDepthExtractor",
    "BracketSliceExtractor",
    "JsonArrayExtractor",
    "get_extractor",
    "OPTION_COUNT",
    "Question",
    "QuizSet",
    "parse_questions",
    "SYSTEM_PROMPT",
    "build_messages",
    "build_user_prompt",
    "DEFAULT_MODEL",
    "DEFAULT_TEMPERATURE",
    "QuestionGenerator",
]
