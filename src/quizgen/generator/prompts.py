"""Prompt construction for question generation."""

from __future__ import annotations

from typing import Dict, List

SYSTEM_PROMPT = (
    "You are a quiz generation AI. Respond with JSON only. Do not return "
    "explanations or any other prose; return a pure JSON array and nothing "
    "else."
)

_USER_TEMPLATE = """\
Create {count} quiz questions about {topic} in the format below. Each \
question has 4 options and exactly one of them is correct.
Return the questions as JSON. Do not include any other text.
[
    {{
        "question": "Question text",
        "options": ["Option 1", "Option 2", "Option 3", "Option 4"],
        "correctAnswerIndex": index of the correct option (a number from 0 to 3)
    }}
]"""


def build_user_prompt(topic: str, count: int) -> str:
    return _USER_TEMPLATE.format(topic=topic, count=count)


def build_messages(topic: str, count: int) -> List[Dict[str, str]]:
    """Return the system and user chat messages for one generation request."""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": build_user_prompt(topic, count)},
    ]
