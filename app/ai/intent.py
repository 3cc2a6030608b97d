"""
TASKFLOW API - Intent Classification

Keyword checks deciding whether a message is small talk about the weather
or a task command.
"""

import re

from app.ai.constants import LOCATION_PATTERN, TASK_INTENT_PATTERN, WEATHER_PATTERN


def has_task_intent(text: str) -> bool:
    return re.search(TASK_INTENT_PATTERN, text, re.IGNORECASE) is not None


def is_weather_question(text: str) -> bool:
    """Weather keyword present and no explicit task keyword."""
    return re.search(WEATHER_PATTERN, text, re.IGNORECASE) is not None and not has_task_intent(text)


def has_location(text: str) -> bool:
    return re.search(LOCATION_PATTERN, text, re.IGNORECASE) is not None


def looks_like_task_query(text: str) -> bool:
    """Decides between the keyword parser and general chat after a provider failure."""
    lower = text.lower()
    return (
        has_task_intent(text)
        or lower.startswith("add ")
        or any(word in lower for word in ("today", "tomorrow", "free", "due", "remind"))
    )
