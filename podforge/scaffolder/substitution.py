"""Literal ``${TOKEN}`` substitution over template files.

This is not a template language: there are no loops or
conditionals, only placeholder replacement.  Replacement happens in a single
left-to-right pass, so a value that itself contains ``${...}`` is written out
verbatim and never expanded again.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from datetime import datetime
from pathlib import Path
from types import MappingProxyType

from ..errors import MissingTemplateFileError
from ..models import ConfigurationRecord
from .identity import Identity

TOKEN_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


def token(name: str) -> str:
    """Return the delimited form of a token name: ``POD_NAME`` -> ``${POD_NAME}``."""
    return "${" + name + "}"


def find_tokens(text: str) -> list[str]:
    """Return the token names found in *text*, in order of appearance."""
    return [match.group(1) for match in TOKEN_PATTERN.finditer(text)]


def substitute_tokens(text: str, mapping: Mapping[str, str]) -> str:
    """Replace every known ``${NAME}`` in *text* with ``mapping[NAME]``.

    Tokens missing from *mapping* are left exactly as they were.
    """

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in mapping:
            return mapping[name]
        return match.group(0)

    return TOKEN_PATTERN.sub(_replace, text)


def _read_template(path: Path) -> str:
    if not path.is_file():
        raise MissingTemplateFileError(path)
    return path.read_text(encoding="utf-8")


def substitute_file(path: str | Path, mapping: Mapping[str, str]) -> Path:
    """Rewrite *path* in place with all known tokens substituted.

    Raises:
        MissingTemplateFileError: If *path* does not exist.
    """
    file_path = Path(path)
    text = _read_template(file_path)
    file_path.write_text(substitute_tokens(text, mapping), encoding="utf-8")
    return file_path


def substitute_files(paths: Iterable[str | Path], mapping: Mapping[str, str]) -> list[Path]:
    """Apply :func:`substitute_file` to a fixed list of template files.

    Every path is checked up front, so a missing file aborts the pass before
    any file has been rewritten.
    """
    file_paths = [Path(p) for p in paths]
    for file_path in file_paths:
        if not file_path.is_file():
            raise MissingTemplateFileError(file_path)
    return [substitute_file(file_path, mapping) for file_path in file_paths]


def inject_fragment(path: str | Path, name: str, fragment: str) -> Path:
    """Narrow, single-token pass: replace ``${name}`` in *path* with *fragment*."""
    return substitute_file(path, {name: fragment})


# ---------------------------------------------------------------------------
# Substitution map
# ---------------------------------------------------------------------------


def build_substitution_map(
    record: ConfigurationRecord,
    identity: Identity,
    now: datetime | None = None,
) -> Mapping[str, str]:
    """Build the read-only token map for the main substitution pass.

    Variant-specific tokens from ``record.extra_tokens`` are included but
    never override the core tokens.
    """
    now = now or datetime.now()
    values: dict[str, str] = dict(record.extra_tokens)
    values.update({
        "POD_NAME": record.project_name,
        "REPO_NAME": record.repo_name,
        "USER_NAME": identity.name,
        "USER_EMAIL": identity.email,
        "YEAR": str(now.year),
        "DATE": now.strftime("%m/%d/%Y"),
    })
    return MappingProxyType(values)
