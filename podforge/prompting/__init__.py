"""Interactive prompting: the ask/validate collector and console messages."""

from podforge.prompting.collector import (
    AnswerCollector,
    CollectorState,
    ConsolePromptIO,
    PromptIO,
    normalize_answer,
)
from podforge.prompting.messages import MessageBank

__all__ = [
    "AnswerCollector",
    "CollectorState",
    "ConsolePromptIO",
    "MessageBank",
    "PromptIO",
    "normalize_answer",
]
