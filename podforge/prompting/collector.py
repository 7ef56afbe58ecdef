"""Sequential ask/validate primitive for the configuration flow.

The collector only knows how to ask one question and validate the answer.
Which questions are asked, and in which order, is decided by the variant
selector and the configurator.
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol, TypeVar

from rich.console import Console
from rich.markup import escape

from ..errors import AnswerValidationError
from ..models import ConfigurationRecord
from .messages import MessageBank

E = TypeVar("E", bound=Enum)

SHORTHANDS: dict[str, str] = {"y": "yes", "n": "no"}


class PromptIO(Protocol):
    """Line-oriented terminal boundary used by :class:`AnswerCollector`."""

    def write(self, text: str) -> None: ...

    def read_line(self) -> str: ...


class ConsolePromptIO:
    """``PromptIO`` backed by a Rich console (blocks on ``input``)."""

    def __init__(
        self, console: Console | None = None, marker: str = MessageBank.prompt_marker
    ) -> None:
        self.console = console or Console(highlight=False)
        self.marker = marker

    def write(self, text: str) -> None:
        self.console.print(text, end="")

    def read_line(self) -> str:
        return self.console.input(self.marker)


class CollectorState(str, Enum):
    ASK_FREE_TEXT = "ask_free_text"
    ASK_ENUMERATED = "ask_enumerated"
    VALIDATED = "validated"


def normalize_answer(raw: str, candidates: list[str]) -> str | None:
    """Normalize an enumerated answer, or return ``None`` if it is rejected.

    Input is case-folded; ``y``/``n`` expand to ``yes``/``no``; empty input
    selects the first candidate.
    """
    answer = raw.strip().lower()
    answer = SHORTHANDS.get(answer, answer)
    if answer == "":
        answer = candidates[0].lower()
    if answer in (c.lower() for c in candidates):
        return answer
    return None


def format_candidates(candidates: list[str]) -> str:
    """Render ``[ *iOS* / macOS ]`` with the default candidate underlined."""
    parts = []
    for i, candidate in enumerate(candidates):
        label = escape(candidate)
        parts.append(f"[underline]{label}[/underline]" if i == 0 else label)
    return "[ " + " / ".join(parts) + " ]"


class AnswerCollector:
    """Asks free-text and enumerated questions until the answer validates.

    Free-text questions re-prompt on empty input; enumerated questions
    re-prompt with the candidate list until the normalized answer matches.
    Neither loop is bounded.  Validated answers are appended to the bound
    ``ConfigurationRecord``, if any.
    """

    def __init__(
        self,
        io: PromptIO | None = None,
        record: ConfigurationRecord | None = None,
    ) -> None:
        self.io = io or ConsolePromptIO()
        self.record = record
        self.state = CollectorState.VALIDATED

    def bind(self, record: ConfigurationRecord) -> None:
        self.record = record

    def _validated(self, question: str, answer: str) -> str:
        self.state = CollectorState.VALIDATED
        if self.record is not None:
            self.record.record_answer(question, answer)
        return answer

    # -- Free text ---------------------------------------------------------

    def ask(self, question: str) -> str:
        """Ask *question* until a non-empty answer is given."""
        self.state = CollectorState.ASK_FREE_TEXT
        while True:
            self.io.write(f"\n{escape(question)}?\n")
            answer = self.io.read_line().strip()
            if answer:
                return self._validated(question, answer)
            self.io.write("\nYou need to provide an answer.")

    # -- Enumerated --------------------------------------------------------

    def _validate(self, raw: str, candidates: list[str]) -> str:
        answer = normalize_answer(raw, candidates)
        if answer is None:
            raise AnswerValidationError(raw.strip(), candidates)
        return answer

    def ask_with_answers(self, question: str, candidates: list[str]) -> str:
        """Ask *question* until the answer matches one of *candidates*.

        Returns:
            The matching candidate, lower-cased.
        """
        if not candidates:
            raise ValueError("ask_with_answers needs at least one candidate")
        self.state = CollectorState.ASK_ENUMERATED
        self.io.write(f"\n{escape(question)}? {format_candidates(candidates)}\n")
        while True:
            raw = self.io.read_line()
            try:
                answer = self._validate(raw, candidates)
            except AnswerValidationError:
                self.io.write(f"\nPossible answers are {format_candidates(candidates)}\n")
                continue
            if not raw.strip():
                self.io.write(f"[yellow]{escape(answer)}[/yellow]\n")
            return self._validated(question, answer)

    def ask_choice(
        self,
        question: str,
        enum_cls: type[E],
        choices: list[E] | None = None,
    ) -> E:
        """Ask an enumerated question and return the chosen enum member.

        Candidate labels come from each member's ``label`` property (falling
        back to its value); *choices* restricts and orders the members offered.
        """
        members = list(choices) if choices is not None else list(enum_cls)
        labels = [getattr(m, "label", str(m.value)) for m in members]
        answer = self.ask_with_answers(question, labels)
        for member, label in zip(members, labels):
            if label.lower() == answer:
                return member
        raise AnswerValidationError(answer, labels)
