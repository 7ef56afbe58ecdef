"""podforge template configurator.

Turns a freshly cloned library template into a named project:

1. ASK        -- platform, language and variant questions.
2. VARIANT    -- register pods/prefix lines, inject the test example,
                 activate the variant's template folder.
3. SUBSTITUTE -- replace ``${TOKEN}`` placeholders across the template files.
4. FINALIZE   -- clean scaffold files, rename templates, inject pods and
                 prefix lines, rename the sources folder, synchronise the
                 development project, reinitialise git, run ``pod install``,
                 register the development project in the example workspace
                 and commit.

The run is forward-only: a fatal error aborts it without rolling back the
steps that already completed.  Failures of git or CocoaPods are reported as
warnings.

Usage::

    python -m podforge MyLibrary
    python -m podforge MyLibrary --root ./MyLibrary --skip-install
"""

from __future__ import annotations

import asyncio
import os
import shutil
import sys
import time
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError
from rich.markup import escape

from .config import ScaffoldConfig
from .errors import (
    DestinationExistsError,
    ExternalProcessError,
    MissingTemplateFileError,
    ScaffoldError,
)
from .manifest.sync import add_folder_to_manifest
from .manifest.workspace import add_group_to_workspace
from .manifest.xcode import XcodeManifest
from .models import ConfigurationRecord, TestStyle, Variant
from .prompting.collector import AnswerCollector
from .prompting.messages import MessageBank
from .scaffolder.identity import Identity, resolve_identity
from .scaffolder.substitution import (
    build_substitution_map,
    find_tokens,
    inject_fragment,
    substitute_files,
)
from .scaffolder.variants import VariantChoices, VariantStrategy, choose_variant
from .utils import (
    CommandRunner,
    console,
    format_duration,
    print_error,
    print_step,
    print_success,
    print_summary_table,
    print_warning,
    run_checked,
    run_command,
)

# Tokens filled by later, narrower passes; not reported as unresolved.
DEFERRED_TOKENS = frozenset({"INCLUDED_PODS", "INCLUDED_PREFIXES"})


class RunReport(BaseModel):
    """Outcome of a configurator run."""
    project_name: str
    variant: Variant | None = None
    test_style: TestStyle | None = None
    view_testing: bool = False
    pods: list[str] = Field(default_factory=list)
    steps_completed: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    manifest_changed: bool = False
    duration: str = ""


class TemplateConfigurator:
    """Drives one configuration run over a template checkout.

    Attributes:
        record: Configuration accumulated from the answers.
        config: Paths and switches for this run.
        report: Mutable run report, returned by :meth:`run`.
    """

    _FINALIZE_STEPS: list[str] = [
        "replace_variables_in_files",
        "clean_template_files",
        "rename_template_files",
        "add_pods_to_podfile",
        "customise_prefix",
        "rename_classes_folder",
        "ensure_carthage_compatibility",
        "create_development_pods_project",
        "reinitialize_git_repo",
        "run_pod_install",
        "register_development_pods",
        "commit_initial_state",
    ]

    def __init__(
        self,
        project_name: str,
        config: ScaffoldConfig | None = None,
        *,
        collector: AnswerCollector | None = None,
        runner: CommandRunner = run_command,
        identity: Identity | None = None,
        messages: MessageBank | None = None,
        now: datetime | None = None,
    ) -> None:
        self.record = ConfigurationRecord(project_name=project_name)
        self.config = config or ScaffoldConfig()
        self.collector = collector or AnswerCollector()
        self.collector.bind(self.record)
        self.runner = runner
        self.identity = identity
        self.messages = messages or MessageBank(console=console)
        self.now = now
        self.strategy: VariantStrategy | None = None
        self.choices: VariantChoices | None = None
        self.substitutions: Mapping[str, str] = {}
        self.report = RunReport(project_name=self.record.project_name)

    @property
    def project_name(self) -> str:
        return self.record.project_name

    @property
    def root(self) -> Path:
        return self.config.root

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def collect_answers(self) -> VariantChoices:
        """Greet the user and ask every question; blocks on the prompt IO.

        Called by :meth:`run` when the answers have not been collected yet.
        """
        self.messages.welcome_message(self.project_name)
        self.strategy = choose_variant(self.collector)
        self.choices = self.strategy.configure(self.collector, self.record)
        return self.choices

    async def run(self) -> RunReport:
        """Materialise the template from the answers and return a report.

        Raises:
            ScaffoldError: On any fatal condition (missing template file,
                unreadable directory, unreachable variant).
        """
        started = time.monotonic()
        choices = self.choices or await asyncio.to_thread(self.collect_answers)
        strategy = self.strategy
        self.report.variant = choices.variant
        self.report.test_style = choices.test_style
        self.report.view_testing = choices.view_testing

        strategy.apply_test_framework(self.config, choices.test_style)
        strategy.activate_templates(self.config)

        self.record.freeze()
        self.report.pods = list(self.record.podfile_entries)
        identity = self.identity or await resolve_identity(self.runner)
        self.substitutions = build_substitution_map(self.record, identity, self.now)

        for step_name in self._FINALIZE_STEPS:
            print_step(step_name.replace("_", " "))
            method = getattr(self, step_name)
            await method()
            self.report.steps_completed.append(step_name)

        self.report.duration = format_duration(time.monotonic() - started)
        self.messages.farewell_message(
            self.project_name,
            choices.variant.value,
            self.report.warnings,
            self.report.duration,
        )
        return self.report

    def _warn(self, message: str) -> None:
        self.report.warnings.append(message)
        print_warning(escape(message))

    async def _external(self, cmd: list[str], cwd: Path | None = None) -> bool:
        """Run a git/pod command; a failure becomes a warning."""
        try:
            await run_checked(
                self.runner, cmd, cwd=cwd or self.root, timeout=self.config.command_timeout
            )
        except ExternalProcessError as exc:
            self._warn(str(exc))
            return False
        return True

    # ------------------------------------------------------------------
    # Substitution
    # ------------------------------------------------------------------

    async def replace_variables_in_files(self) -> None:
        paths = [self.config.path(name) for name in self.config.template_files]
        for path in self.strategy.token_files(self.config):
            if path not in paths:
                paths.append(path)
        written = substitute_files(paths, self.substitutions)
        for path in written:
            leftover = sorted(
                set(find_tokens(path.read_text(encoding="utf-8"))) - DEFERRED_TOKENS
            )
            if leftover:
                self._warn(
                    f"Unresolved tokens in {path.relative_to(self.root)}: {', '.join(leftover)}"
                )

    async def add_pods_to_podfile(self) -> None:
        content = "\n    ".join(f"pod '{pod}'" for pod in self.record.podfile_entries)
        inject_fragment(self.config.podfile_path, "INCLUDED_PODS", content)

    async def customise_prefix(self) -> None:
        prefix_path = self.config.prefix_header_path
        if not prefix_path.exists():
            return
        inject_fragment(prefix_path, "INCLUDED_PREFIXES", "\n  ".join(self.record.prefix_lines))

    # ------------------------------------------------------------------
    # File-system finalisation
    # ------------------------------------------------------------------

    async def clean_template_files(self) -> None:
        """Delete scaffold-only assets and every ``.gitkeep`` placeholder."""
        for keep in list(self.root.rglob(".gitkeep")):
            keep.unlink()
        for asset in self.config.scaffold_assets:
            _remove_path(self.config.path(asset))

    async def rename_template_files(self) -> None:
        for source, destination in self.config.renames.items():
            _move(
                self.config.path(source),
                self.config.path(destination.format(name=self.project_name)),
            )

    async def rename_classes_folder(self) -> None:
        _move(
            self.config.path(self.config.sources_folder),
            self.root / self.project_name,
        )

    async def ensure_carthage_compatibility(self) -> None:
        link = self.config.path(self.config.carthage_link)
        if link.is_symlink() or link.exists():
            return
        try:
            os.symlink(self.config.carthage_target, link)
        except OSError as exc:
            self._warn(f"Could not create {link.name}: {exc.strerror or exc}")

    async def create_development_pods_project(self) -> None:
        """Create a fresh development project and mirror the sources into it."""
        dev_path = self.config.dev_project_path
        console.print(f"  Creating development project [bold]{escape(str(dev_path))}[/bold]")
        XcodeManifest.create(dev_path, self.config.dev_target)
        self.report.manifest_changed = add_folder_to_manifest(
            dev_path,
            (self.root / self.project_name).absolute(),
            source_extensions=self.config.source_extensions,
        )
        if self.report.manifest_changed:
            print_success("  Development project updated.")

    # ------------------------------------------------------------------
    # External processes
    # ------------------------------------------------------------------

    async def reinitialize_git_repo(self) -> None:
        if not self.config.run_git:
            console.print("  [dim]git disabled -- skipping.[/dim]")
            return
        _remove_path(self.root / ".git")
        if await self._external(["git", "init"]):
            await self._external(["git", "add", "-A"])

    async def run_pod_install(self) -> None:
        if not self.config.run_pod_install:
            console.print("  [dim]pod install disabled -- skipping.[/dim]")
            return
        console.print("  Running [magenta]pod install[/magenta] on your new library.")
        await self._external(["pod", "install"], cwd=self.config.example_path)

    async def register_development_pods(self) -> None:
        """Add the development project to ``Example/<name>.xcworkspace``.

        The workspace is written by ``pod install``; without it there is
        nothing to register into.
        """
        workspace = self.config.workspace_path(self.project_name)
        if not workspace.is_dir():
            console.print(f"  [dim]{escape(workspace.name)} not found -- skipping.[/dim]")
            return
        dev_path = self.config.dev_project_path
        if add_group_to_workspace(workspace, dev_path.parent.name, dev_path):
            print_success(escape(f"  Registered {dev_path.name} in {workspace.name}."))

    async def commit_initial_state(self) -> None:
        """Commit after ``pod install``; with install skipped the tree stays staged."""
        if not (self.config.run_git and self.config.run_pod_install):
            return
        await self._external(["git", "add", "-A"])
        await self._external(["git", "commit", "-m", "Initial commit"])


# ---------------------------------------------------------------------------
# File helpers
# ---------------------------------------------------------------------------


def _remove_path(path: Path) -> None:
    """``rm -rf`` for a single path; missing paths are ignored."""
    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.is_dir():
        shutil.rmtree(path)


def _move(source: Path, destination: Path) -> None:
    if not source.exists():
        raise MissingTemplateFileError(source)
    if destination.exists() or destination.is_symlink():
        raise DestinationExistsError(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.move(str(source), str(destination))


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``podforge`` / ``python -m podforge``."""
    import argparse

    parser = argparse.ArgumentParser(
        prog="podforge",
        description="Configure a library template into a named project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  podforge MyLibrary\n"
            "  podforge MyLibrary --root ./MyLibrary --skip-install\n"
        ),
    )
    parser.add_argument(
        "project_name",
        nargs="?",
        default=None,
        help="Library name (asked interactively if omitted)",
    )
    parser.add_argument(
        "--root",
        default=None,
        help="Template checkout to configure (default: $PODFORGE_ROOT or .)",
    )
    parser.add_argument(
        "--skip-install",
        action="store_true",
        help="Do not run 'pod install'",
    )
    parser.add_argument(
        "--skip-git",
        action="store_true",
        help="Do not reinitialise the git repository",
    )

    args = parser.parse_args(argv)

    overrides: dict[str, object] = {}
    if args.root:
        overrides["root"] = Path(args.root)
    if args.skip_install:
        overrides["run_pod_install"] = False
    if args.skip_git:
        overrides["run_git"] = False
    config = ScaffoldConfig.from_env(**overrides)

    if not config.root.is_dir():
        print_error(f"Error: Template root not found: {escape(str(config.root))}")
        sys.exit(1)

    collector = AnswerCollector()
    try:
        project_name = args.project_name or collector.ask("What is your library name")
        configurator = TemplateConfigurator(project_name, config, collector=collector)
        configurator.collect_answers()
        report = asyncio.run(configurator.run())
    except ScaffoldError as exc:
        print_error(f"Error: {escape(str(exc))}")
        sys.exit(1)
    except ValidationError as exc:
        print_error(f"Error: Invalid project name: {escape(str(exc.errors()[0]['msg']))}")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[bold red]Aborted.[/bold red] The template is partially configured.")
        sys.exit(130)

    print_summary_table(
        {
            "Project": report.project_name,
            "Variant": report.variant.value if report.variant else "-",
            "Pods": ", ".join(report.pods) or "-",
            "Warnings": str(len(report.warnings)),
            "Duration": report.duration,
        },
        title="podforge",
    )


if __name__ == "__main__":
    main()
