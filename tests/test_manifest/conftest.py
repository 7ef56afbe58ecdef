"""In-memory manifest nodes for exercising the tree synchroniser without Xcode files."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path, PurePath

import pytest

from podforge.errors import DuplicateChildError


@dataclass
class MemoryFile:
    name: str
    path: str
    kind: str = "file"


@dataclass
class MemoryGroup:
    name: str
    children: list = field(default_factory=list)
    kind: str = "group"

    def child_named(self, name: str):
        return next((child for child in self.children if child.name == name), None)

    def group_named(self, name: str):
        child = self.child_named(name)
        return child if isinstance(child, MemoryGroup) else None

    def _add(self, node):
        if self.child_named(node.name) is not None:
            raise DuplicateChildError(self.name, node.name)
        self.children.append(node)
        return node

    def new_group(self, name: str) -> "MemoryGroup":
        return self._add(MemoryGroup(name=name))

    def new_file_reference(self, path: str | Path) -> MemoryFile:
        return self._add(MemoryFile(name=PurePath(path).name, path=PurePath(path).as_posix()))

    def walk(self):
        for child in self.children:
            yield child
            if isinstance(child, MemoryGroup):
                yield from child.walk()


@dataclass
class MemoryTarget:
    name: str
    members: list = field(default_factory=list)

    def add_members(self, refs) -> int:
        added = [ref for ref in refs if ref not in self.members]
        self.members.extend(added)
        return len(added)


@pytest.fixture
def root_group() -> MemoryGroup:
    return MemoryGroup(name="root")


@pytest.fixture
def target() -> MemoryTarget:
    return MemoryTarget(name="T")
