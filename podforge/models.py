"""Pydantic v2 models shared across the configuration run.

Defines the closed enumerations every interactive answer is converted to,
and the ``ConfigurationRecord`` that accumulates state for one scaffolding
run.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, PrivateAttr, field_validator

from .errors import RecordFrozenError


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Platform(str, Enum):
    """Target platform of the generated library."""
    IOS = "ios"
    MACOS = "macos"

    @property
    def label(self) -> str:
        return {"ios": "iOS", "macos": "macOS"}[self.value]


class Language(str, Enum):
    """Implementation language (only asked for iOS)."""
    SWIFT = "swift"
    OBJC = "objc"

    @property
    def label(self) -> str:
        return {"swift": "Swift", "objc": "ObjC"}[self.value]


class TestStyle(str, Enum):
    """Test framework injected into the example test target."""
    __test__ = False  # keep pytest from collecting this enum

    SPECTA = "specta"
    KIWI = "kiwi"
    QUICK = "quick"
    SWIFTCHECK = "swiftcheck"
    NONE = "none"

    @property
    def label(self) -> str:
        return {
            "specta": "Specta",
            "kiwi": "Kiwi",
            "quick": "Quick",
            "swiftcheck": "SwiftCheck",
            "none": "None",
        }[self.value]


class YesNo(str, Enum):
    YES = "yes"
    NO = "no"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    def __bool__(self) -> bool:
        return self is YesNo.YES


class Variant(str, Enum):
    """The three generation strategies."""
    MACOS_SWIFT = "MacOSSwift"
    IOS_SWIFT = "IOSSwift"
    IOS_OBJC = "IOSObjC"


# ---------------------------------------------------------------------------
# Configuration record
# ---------------------------------------------------------------------------

class Answer(BaseModel):
    """One entry of the append-only answer log."""
    question: str = Field(..., description="Question text as asked")
    value: str = Field(..., description="Validated, normalized answer")


class ConfigurationRecord(BaseModel):
    """Accumulated state for one scaffolding run.

    Created once per run, mutated by the variant strategies while they
    register packages, prefix lines and extra tokens, then frozen by the
    orchestrator before the substitution pass.
    """

    project_name: str = Field(..., description="Library name, used for renames and tokens")
    answers: list[Answer] = Field(default_factory=list)
    podfile_entries: list[str] = Field(
        default_factory=list,
        description="Pods to inject into the Podfile (insertion-ordered, unique)",
    )
    prefix_lines: list[str] = Field(
        default_factory=list,
        description="Extra lines for the shared prefix header",
    )
    extra_tokens: dict[str, str] = Field(
        default_factory=dict,
        description="Variant-specific substitution values",
    )

    _frozen: bool = PrivateAttr(default=False)

    @field_validator("project_name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("project name must not be empty")
        return value

    # -- Derived values ----------------------------------------------------

    @property
    def repo_name(self) -> str:
        """Repository name: the project name with ``+`` replaced by ``-``."""
        return self.project_name.replace("+", "-")

    @property
    def frozen(self) -> bool:
        return self._frozen

    # -- Mutators ----------------------------------------------------------

    def freeze(self) -> None:
        """Make the record read-only for the rest of the run."""
        self._frozen = True

    def _check_mutable(self) -> None:
        if self._frozen:
            raise RecordFrozenError(
                "Configuration record is read-only once substitution has started"
            )

    def record_answer(self, question: str, value: str) -> None:
        self._check_mutable()
        self.answers.append(Answer(question=question, value=value))

    def add_pod(self, name: str) -> None:
        """Register a pod; duplicates keep their first position."""
        self._check_mutable()
        if name not in self.podfile_entries:
            self.podfile_entries.append(name)

    def add_prefix_line(self, line: str) -> None:
        self._check_mutable()
        self.prefix_lines.append(line)

    def set_token(self, name: str, value: str) -> None:
        self._check_mutable()
        self.extra_tokens[name] = value
