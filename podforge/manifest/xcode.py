"""Xcode project manifests, read and written through the ``pbxproj`` library.

``XcodeManifest`` creates a minimal framework project from a Jinja2 skeleton
and wraps its main group and targets in small adapters that satisfy the
``GroupLike`` / ``TargetLike`` protocols consumed by the tree synchroniser.
Group children keep unique names; adding a duplicate raises
``DuplicateChildError``.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from pathlib import Path, PurePath
from typing import Any

from pbxproj import XcodeProject
from pbxproj.pbxextensions import FileOptions
from pbxproj.pbxsections import PBXBuildFile

from ..errors import DuplicateChildError, ManifestError
from ..templates import TemplateRenderer

PBXPROJ_FILE = "project.pbxproj"
SKELETON_TEMPLATE = "project.pbxproj.j2"
DEFAULT_DEPLOYMENT_TARGET = "12.0"

_TEMPLATE_DIR = Path(__file__).parent / "project_templates"

_SKELETON_IDS = [
    "project",
    "main_group",
    "products_group",
    "product",
    "target",
    "headers_phase",
    "sources_phase",
    "frameworks_phase",
    "project_configs",
    "target_configs",
    "project_Debug",
    "project_Release",
    "target_Debug",
    "target_Release",
]


def _new_id() -> str:
    """24 upper-case hex digits, the shape of an Xcode object id."""
    return uuid.uuid4().hex[:24].upper()


def _node_name(node: Any) -> str | None:
    """Display name of a pbxproj node: its ``name``, else its path's base name."""
    name = getattr(node, "name", None)
    if name:
        return str(name)
    path = getattr(node, "path", None)
    return PurePath(str(path)).name if path else None


# ---------------------------------------------------------------------------
# Adapters
# ---------------------------------------------------------------------------


class XcodeGroup:
    """A ``PBXGroup`` seen through the synchroniser's group interface."""

    def __init__(self, project: XcodeProject, group: Any) -> None:
        self.project = project
        self.group = group

    @property
    def name(self) -> str | None:
        return _node_name(self.group)

    def children(self) -> list[Any]:
        return [self.project.objects[child_id] for child_id in self.group.children]

    def child_named(self, name: str) -> Any | None:
        for child in self.children():
            if _node_name(child) == name:
                if child.isa == "PBXGroup":
                    return XcodeGroup(self.project, child)
                return child
        return None

    def group_named(self, name: str) -> XcodeGroup | None:
        child = self.child_named(name)
        return child if isinstance(child, XcodeGroup) else None

    def _ensure_unique(self, name: str) -> None:
        if self.child_named(name) is not None:
            raise DuplicateChildError(self.name or "<main>", name)

    def new_group(self, name: str) -> XcodeGroup:
        self._ensure_unique(name)
        group = self.project.add_group(name, parent=self.group)
        return XcodeGroup(self.project, group)

    def new_file_reference(self, path: str | Path) -> Any:
        """Add a ``PBXFileReference`` for *path*, named after its base name.

        Absolute paths are stored relative to the project's source root.
        """
        self._ensure_unique(PurePath(path).name)
        before = list(self.group.children)
        self.project.add_file(
            str(path),
            parent=self.group,
            force=True,
            file_options=FileOptions(create_build_files=False, ignore_unknown_type=True),
        )
        added = [child_id for child_id in self.group.children if child_id not in before]
        if not added:
            raise ManifestError(f"Could not add a file reference for {path}")
        return self.project.objects[added[-1]]


class XcodeTarget:
    """A native target whose sources build phase holds the member files."""

    def __init__(self, project: XcodeProject, target: Any) -> None:
        self.project = project
        self.target = target

    @property
    def name(self) -> str | None:
        return _node_name(self.target)

    def sources_phase(self) -> Any:
        for phase_id in self.target.buildPhases:
            phase = self.project.objects[phase_id]
            if phase.isa == "PBXSourcesBuildPhase":
                return phase
        raise ManifestError(f"Target '{self.name}' has no sources build phase")

    def member_ids(self) -> list[str]:
        """Ids of the file references compiled by this target."""
        phase = self.sources_phase()
        return [str(self.project.objects[build_id].fileRef) for build_id in phase.files]

    def has_member(self, ref: Any) -> bool:
        return str(ref.get_id()) in self.member_ids()

    def add_members(self, refs: Iterable[Any]) -> int:
        """Add *refs* that are not members yet; return how many were added."""
        phase = self.sources_phase()
        added = 0
        for ref in refs:
            if self.has_member(ref):
                continue
            build_file = PBXBuildFile.create(ref)
            self.project.objects[build_file.get_id()] = build_file
            phase.add_build_file(build_file)
            added += 1
        return added


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------


class XcodeManifest:
    """An ``.xcodeproj`` bundle opened for editing."""

    def __init__(self, project: XcodeProject, path: Path) -> None:
        self.project = project
        self.path = path

    @staticmethod
    def pbxproj_path(path: str | Path) -> Path:
        """``Foo.xcodeproj`` -> ``Foo.xcodeproj/project.pbxproj``."""
        bundle = Path(path)
        return bundle if bundle.name == PBXPROJ_FILE else bundle / PBXPROJ_FILE

    @classmethod
    def create(
        cls,
        path: str | Path,
        target_name: str,
        deployment_target: str = DEFAULT_DEPLOYMENT_TARGET,
    ) -> "XcodeManifest":
        """Write a fresh framework project with a single empty target and open it."""
        renderer = TemplateRenderer(_TEMPLATE_DIR)
        renderer.render_to_file(
            SKELETON_TEMPLATE,
            cls.pbxproj_path(path),
            {
                "ids": {key: _new_id() for key in _SKELETON_IDS},
                "target_name": target_name,
                "deployment_target": deployment_target,
            },
        )
        return cls.open(path)

    @classmethod
    def open(cls, path: str | Path) -> "XcodeManifest":
        """Load a project bundle (or its ``project.pbxproj``).

        Raises:
            ManifestError: If the file is missing or cannot be parsed.
        """
        pbxproj_file = cls.pbxproj_path(path)
        if not pbxproj_file.is_file():
            raise ManifestError(f"Project not found: {pbxproj_file}", path=pbxproj_file)
        try:
            project = XcodeProject.load(str(pbxproj_file))
        except Exception as exc:
            raise ManifestError(f"Invalid project {pbxproj_file}: {exc}", path=pbxproj_file) from exc
        return cls(project, pbxproj_file)

    def _root_object(self) -> Any:
        return self.project.objects[self.project.rootObject]

    @property
    def main_group(self) -> XcodeGroup:
        return XcodeGroup(self.project, self.project.objects[self._root_object().mainGroup])

    @property
    def targets(self) -> list[XcodeTarget]:
        return [
            XcodeTarget(self.project, self.project.objects[target_id])
            for target_id in self._root_object().targets
        ]

    def first_target(self) -> XcodeTarget:
        targets = self.targets
        if not targets:
            raise ManifestError("Project has no build targets", path=self.path)
        return targets[0]

    def save(self) -> Path:
        self.project.save()
        return self.path
