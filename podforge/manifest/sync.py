"""Mirror a directory tree into a manifest group hierarchy.

Synchronisation only ever adds nodes.  An entry whose base name already
names a child of the current group is skipped outright (sub-groups included),
which makes re-running against a partially synchronised manifest safe: no
duplicate nodes and no duplicate target members are ever created.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any, Protocol

from ..errors import UnreadableDirectoryError
from .xcode import XcodeManifest

DEFAULT_SOURCE_EXTENSIONS: tuple[str, ...] = (".swift",)


class GroupLike(Protocol):
    """The part of a manifest group the synchronizer relies on."""

    def child_named(self, name: str) -> Any | None: ...

    def new_group(self, name: str) -> "GroupLike": ...

    def new_file_reference(self, path: str | Path) -> Any: ...


class TargetLike(Protocol):
    def add_members(self, refs: Iterable[Any]) -> Any: ...


def is_hidden(name: str) -> bool:
    """Dot-files (``.gitkeep``, ``.DS_Store``, ...) are housekeeping, never content."""
    return name.startswith(".")


def _list_directory(dir_path: Path) -> list[os.DirEntry[str]]:
    try:
        with os.scandir(dir_path) as entries:
            return list(entries)
    except OSError as exc:
        raise UnreadableDirectoryError(dir_path, exc.strerror or str(exc)) from exc


def sync_directory(
    dir_path: str | Path,
    group: GroupLike,
    target: TargetLike,
    *,
    source_extensions: Sequence[str] = DEFAULT_SOURCE_EXTENSIONS,
    relative_to: str | Path | None = None,
) -> bool:
    """Add the entries of *dir_path* missing from *group*, recursively.

    Entries are visited in directory-listing order.  Files whose suffix is in
    *source_extensions* are also added to *target*.

    Args:
        dir_path: Directory to mirror.
        group: Manifest group that mirrors *dir_path*.
        target: Build target receiving new source files.
        source_extensions: Suffixes (with the dot) of compiled sources.
        relative_to: Record file paths relative to this directory instead of
            as given.

    Returns:
        ``True`` if at least one source file was added to *target*.

    Raises:
        UnreadableDirectoryError: If any directory in the tree cannot be listed.
    """
    directory = Path(dir_path)
    base = Path(relative_to) if relative_to is not None else None
    changed = False

    for entry in _list_directory(directory):
        if is_hidden(entry.name):
            continue
        if group.child_named(entry.name) is not None:
            continue

        entry_path = directory / entry.name
        if entry.is_dir():
            child_group = group.new_group(entry.name)
            changed = sync_directory(
                entry_path,
                child_group,
                target,
                source_extensions=source_extensions,
                relative_to=base,
            ) or changed
        else:
            recorded = entry_path.relative_to(base) if base is not None else entry_path
            ref = group.new_file_reference(recorded)
            if entry_path.suffix in source_extensions:
                target.add_members([ref])
                changed = True

    return changed


def add_folder_to_manifest(
    manifest_path: str | Path,
    folder: str | Path,
    *,
    source_extensions: Sequence[str] = DEFAULT_SOURCE_EXTENSIONS,
    relative_to: str | Path | None = None,
) -> bool:
    """Synchronise *folder* into the top-level group named after it.

    The group is created when missing, the first build target receives new
    sources, and the document is saved only when something changed.

    Returns:
        Whether the manifest was changed (and saved).
    """
    folder_path = Path(folder)
    document = XcodeManifest.open(manifest_path)

    group = document.main_group.group_named(folder_path.name)
    if group is None:
        group = document.main_group.new_group(folder_path.name)

    changed = sync_directory(
        folder_path,
        group,
        document.first_target(),
        source_extensions=source_extensions,
        relative_to=relative_to,
    )
    if changed:
        document.save()
    return changed
