"""Exception taxonomy for podforge.

Every fatal condition derives from ``ScaffoldError`` so the CLI entry point
can report it with a single handler.  ``ExternalProcessError`` is the one
subclass the orchestrator downgrades to a warning.
"""

from __future__ import annotations

from pathlib import Path


class ScaffoldError(Exception):
    """Base class for all podforge errors."""


class AnswerValidationError(ScaffoldError):
    """Raised when an interactive answer does not match any candidate.

    Only ever raised and caught inside the answer collector, which re-prompts.
    """

    def __init__(self, answer: str, candidates: list[str]) -> None:
        self.answer = answer
        self.candidates = candidates
        super().__init__(
            f"'{answer}' is not one of: {', '.join(candidates)}"
        )


class MissingTemplateFileError(ScaffoldError):
    """Raised when a file of the template set is missing."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(f"Template file not found: {self.path}")


class DestinationExistsError(ScaffoldError):
    """Raised when a rename would land on a path that already exists."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(f"Destination already exists: {self.path}")


class UnreadableDirectoryError(ScaffoldError):
    """Raised when the tree synchronizer cannot list a directory."""

    def __init__(self, path: str | Path, reason: str = "") -> None:
        self.path = Path(path)
        self.reason = reason
        message = f"Cannot read directory: {self.path}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class ExternalProcessError(ScaffoldError):
    """Raised when a git / pod invocation exits non-zero or times out."""

    def __init__(self, message: str, command: str = "", stderr: str = "") -> None:
        self.command = command
        self.stderr = stderr
        super().__init__(message)


class UnreachableVariantError(ScaffoldError):
    """Raised when a platform/language combination has no variant.

    Signals a logic defect: the enumerations are closed, so every answer
    the collector can produce is covered by the decision table.
    """

    def __init__(self, platform: object, language: object = None) -> None:
        self.platform = platform
        self.language = language
        super().__init__(
            f"No variant for platform={platform!r}, language={language!r}"
        )


class ManifestError(ScaffoldError):
    """Raised when an Xcode project or workspace cannot be opened or parsed."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else None
        super().__init__(message)


class DuplicateChildError(ManifestError):
    """Raised when adding a manifest child whose name already exists."""

    def __init__(self, group: str, name: str) -> None:
        self.group = group
        self.name = name
        super().__init__(f"Group '{group}' already has a child named '{name}'")


class RecordFrozenError(ScaffoldError):
    """Raised when the configuration record is mutated after substitution began."""
