"""podforge configuration.

Centralised, typed configuration for a scaffolding run. All settings use
Pydantic v2 models so they can be validated at construction time and overridden
from environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


DEFAULT_TEMPLATE_FILES: list[str] = [
    "POD_LICENSE",
    "POD_README.md",
    "NAME.podspec",
    ".travis.yml",
    "Example/Podfile",
]

DEFAULT_SCAFFOLD_ASSETS: list[str] = [
    "configure",
    "_CONFIGURE.rb",
    "README.md",
    "LICENSE",
    "templates",
    "setup",
    "CODE_OF_CONDUCT.md",
]

DEFAULT_RENAMES: dict[str, str] = {
    "POD_README.md": "README.md",
    "POD_LICENSE": "LICENSE",
    "NAME.podspec": "{name}.podspec",
}


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes", "on")


class ScaffoldConfig(BaseModel):
    """Global podforge configuration.

    Holds every tuneable parameter and derived path used by the configurator.
    Instances are typically created once by the CLI entry point and then
    passed through the rest of the system.  Relative paths are resolved
    against ``root``.
    """

    root: Path = Field(default=Path("."), description="Template checkout being configured")
    template_files: list[str] = Field(
        default_factory=lambda: list(DEFAULT_TEMPLATE_FILES),
        description="Files that receive the main token substitution pass",
    )
    scaffold_assets: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SCAFFOLD_ASSETS),
        description="Scaffold-only files/folders deleted after substitution",
    )
    renames: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_RENAMES),
        description="Template renames; '{name}' expands to the project name",
    )
    podfile: str = Field(default="Example/Podfile")
    prefix_header: str = Field(default="Example/Tests/Tests-Prefix.pch")
    sources_folder: str = Field(default="Pod", description="Generic sources folder renamed to the project name")
    templates_dir: str = Field(default="templates")
    test_examples_dir: str = Field(default="setup/test_examples")
    example_dir: str = Field(default="Example")
    carthage_link: str = Field(default="_Pods.xcodeproj")
    carthage_target: str = Field(default="Example/Pods/Pods.xcodeproj")
    dev_project: str = Field(
        default="Example/DevelopmentPods/DevelopmentPod.xcodeproj",
        description="Development Xcode project created on every run",
    )
    dev_target: str = Field(default="DevelopmentPod")
    source_extensions: list[str] = Field(
        default=[".swift"],
        description="Suffixes registered as compiled sources of the build target",
    )
    run_git: bool = Field(default=True)
    run_pod_install: bool = Field(default=True)
    command_timeout: int = Field(default=600, ge=1, description="Per-command timeout in seconds")

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    def path(self, relative: str) -> Path:
        """Resolve *relative* against the configured root."""
        return self.root / relative

    @property
    def podfile_path(self) -> Path:
        return self.path(self.podfile)

    @property
    def prefix_header_path(self) -> Path:
        return self.path(self.prefix_header)

    @property
    def templates_path(self) -> Path:
        return self.path(self.templates_dir)

    @property
    def test_examples_path(self) -> Path:
        return self.path(self.test_examples_dir)

    @property
    def example_path(self) -> Path:
        return self.path(self.example_dir)

    @property
    def dev_project_path(self) -> Path:
        return self.path(self.dev_project)

    def workspace_path(self, project_name: str) -> Path:
        """Example workspace written by ``pod install`` for *project_name*."""
        return self.example_path / f"{project_name}.xcworkspace"

    @classmethod
    def from_env(cls, **overrides: Any) -> "ScaffoldConfig":
        """Build a ``ScaffoldConfig`` from environment variables.

        Recognised variables (all optional):
            PODFORGE_ROOT, PODFORGE_SKIP_GIT, PODFORGE_SKIP_INSTALL,
            PODFORGE_TIMEOUT.

        Keyword *overrides* win over the environment.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("PODFORGE_ROOT"):
            kwargs["root"] = Path(os.environ["PODFORGE_ROOT"])
        if _env_flag("PODFORGE_SKIP_GIT"):
            kwargs["run_git"] = False
        if _env_flag("PODFORGE_SKIP_INSTALL"):
            kwargs["run_pod_install"] = False
        if os.environ.get("PODFORGE_TIMEOUT"):
            kwargs["command_timeout"] = int(os.environ["PODFORGE_TIMEOUT"])
        kwargs.update(overrides)
        return cls(**kwargs)
