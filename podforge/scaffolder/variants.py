"""Variant selection: platform/language answers to a generation strategy.

The decision table is closed: ``macOS`` always yields ``MacOSSwift``; ``iOS``
branches on the language into ``IOSSwift`` or ``IOSObjC``.  Each strategy
registers its pods, prefix-header lines and extra tokens on the
``ConfigurationRecord``, injects the chosen test example into its test
template and activates its template folder.
"""

from __future__ import annotations

import shutil
from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import BaseModel

from ..config import ScaffoldConfig
from ..errors import MissingTemplateFileError, UnreachableVariantError
from ..models import ConfigurationRecord, Language, Platform, TestStyle, Variant, YesNo
from ..prompting.collector import AnswerCollector
from .substitution import inject_fragment

PLATFORM_QUESTION = "What platform do you want to use"
LANGUAGE_QUESTION = "What language do you want to use"
TEST_FRAMEWORK_QUESTION = "Which testing frameworks will you use"
VIEW_TESTING_QUESTION = "Would you like to do view based testing"
CLASS_PREFIX_QUESTION = "What is your class prefix"


class VariantChoices(BaseModel):
    """Answers a strategy collected while configuring."""
    variant: Variant
    test_style: TestStyle
    view_testing: bool = False


# ---------------------------------------------------------------------------
# Strategy base
# ---------------------------------------------------------------------------


class VariantStrategy(ABC):
    """A generation strategy for one platform/language combination."""

    variant: Variant
    template_folder: str
    test_extension: str
    test_styles: list[TestStyle]
    offers_view_testing: bool = False
    # Root-relative globs of activated files that also get the main substitution pass.
    token_sources: tuple[str, ...] = ()

    # -- Declarations (pure) -----------------------------------------------

    @abstractmethod
    def packages_for(self, test_style: TestStyle, view_testing: bool) -> list[str]:
        """Pods this variant needs for the given answers."""

    def prefix_lines_for(self, test_style: TestStyle, view_testing: bool) -> list[str]:
        """Prefix-header lines this variant needs for the given answers."""
        return []

    def fragment_name(self, test_style: TestStyle) -> str:
        """Base name of the test example injected for *test_style*."""
        return "xctest" if test_style is TestStyle.NONE else test_style.value

    # -- Interactive configuration ------------------------------------------

    def ask_extra(self, collector: AnswerCollector, record: ConfigurationRecord) -> None:
        """Hook for variant-specific questions."""

    def configure(
        self, collector: AnswerCollector, record: ConfigurationRecord
    ) -> VariantChoices:
        """Ask this variant's questions and register the results on *record*."""
        test_style = collector.ask_choice(
            TEST_FRAMEWORK_QUESTION, TestStyle, self.test_styles
        )
        view_testing = False
        if self.offers_view_testing:
            view_testing = bool(collector.ask_choice(VIEW_TESTING_QUESTION, YesNo))

        for pod in self.packages_for(test_style, view_testing):
            record.add_pod(pod)
        for line in self.prefix_lines_for(test_style, view_testing):
            record.add_prefix_line(line)
        self.ask_extra(collector, record)

        return VariantChoices(
            variant=self.variant, test_style=test_style, view_testing=view_testing
        )

    # -- File-system side effects ---------------------------------------------

    def tests_template_path(self, config: ScaffoldConfig) -> Path:
        return (
            config.templates_path / self.template_folder
            / "Example" / "Tests" / f"Tests.{self.test_extension}"
        )

    def apply_test_framework(self, config: ScaffoldConfig, test_style: TestStyle) -> Path:
        """Inject the test example for *test_style* into the test template.

        Raises:
            MissingTemplateFileError: If the example or the test template is missing.
        """
        fragment_path = (
            config.test_examples_path
            / f"{self.fragment_name(test_style)}.{self.test_extension}"
        )
        if not fragment_path.is_file():
            raise MissingTemplateFileError(fragment_path)
        fragment = fragment_path.read_text(encoding="utf-8")
        return inject_fragment(self.tests_template_path(config), "TEST_EXAMPLE", fragment)

    def token_files(self, config: ScaffoldConfig) -> list[Path]:
        """Activated files matching :attr:`token_sources`, in path order."""
        found: set[Path] = set()
        for pattern in self.token_sources:
            found.update(p for p in config.root.glob(pattern) if p.is_file())
        return sorted(found)

    def activate_templates(self, config: ScaffoldConfig) -> list[Path]:
        """Merge ``templates/<folder>/*`` into the project root.

        Returns:
            Top-level paths created or replaced in the root.
        """
        source = config.templates_path / self.template_folder
        if not source.is_dir():
            raise MissingTemplateFileError(source)
        return [
            _merge_into(entry, config.root / entry.name)
            for entry in sorted(source.iterdir())
        ]


def _merge_into(source: Path, destination: Path) -> Path:
    """Move *source* to *destination*, merging directories that already exist."""
    if source.is_dir() and destination.is_dir():
        for child in sorted(source.iterdir()):
            _merge_into(child, destination / child.name)
        source.rmdir()
        return destination
    if destination.is_dir():
        shutil.rmtree(destination)
    elif destination.exists():
        destination.unlink()
    shutil.move(str(source), str(destination))
    return destination


# ---------------------------------------------------------------------------
# Concrete strategies
# ---------------------------------------------------------------------------


class MacOSSwiftVariant(VariantStrategy):
    variant = Variant.MACOS_SWIFT
    template_folder = "macos-swift"
    test_extension = "swift"
    test_styles = [TestStyle.SWIFTCHECK, TestStyle.NONE]

    def packages_for(self, test_style: TestStyle, view_testing: bool) -> list[str]:
        return ["SwiftCheck"] if test_style is TestStyle.SWIFTCHECK else []


class IOSSwiftVariant(VariantStrategy):
    variant = Variant.IOS_SWIFT
    template_folder = "swift"
    test_extension = "swift"
    test_styles = [TestStyle.QUICK, TestStyle.NONE]
    offers_view_testing = True

    def packages_for(self, test_style: TestStyle, view_testing: bool) -> list[str]:
        pods = ["Quick", "Nimble"] if test_style is TestStyle.QUICK else []
        if view_testing:
            pods.append("SnapshotTesting")
        return pods


class IOSObjCVariant(VariantStrategy):
    variant = Variant.IOS_OBJC
    template_folder = "ios"
    test_extension = "m"
    test_styles = [TestStyle.SPECTA, TestStyle.KIWI, TestStyle.NONE]
    offers_view_testing = True
    token_sources = ("Example/**/*.h", "Example/**/*.m")

    _FRAMEWORK_PODS: dict[TestStyle, list[str]] = {
        TestStyle.SPECTA: ["Specta", "Expecta"],
        TestStyle.KIWI: ["Kiwi"],
        TestStyle.NONE: [],
    }

    def packages_for(self, test_style: TestStyle, view_testing: bool) -> list[str]:
        pods = list(self._FRAMEWORK_PODS[test_style])
        if view_testing:
            pods.append("FBSnapshotTestCase")
            if test_style is TestStyle.SPECTA:
                pods.append("Expecta+Snapshots")
        return pods

    def prefix_lines_for(self, test_style: TestStyle, view_testing: bool) -> list[str]:
        # Pod names map to module names: '+' is not allowed in an @import.
        return [
            f"@import {pod.replace('+', '_')};"
            for pod in self.packages_for(test_style, view_testing)
        ]

    def ask_extra(self, collector: AnswerCollector, record: ConfigurationRecord) -> None:
        prefix = collector.ask(CLASS_PREFIX_QUESTION).upper()
        record.set_token("CLASS_PREFIX", prefix)


VARIANTS: dict[Variant, type[VariantStrategy]] = {
    Variant.MACOS_SWIFT: MacOSSwiftVariant,
    Variant.IOS_SWIFT: IOSSwiftVariant,
    Variant.IOS_OBJC: IOSObjCVariant,
}


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------


def select_variant(
    platform: Platform | str, language: Language | str | None = None
) -> VariantStrategy:
    """Map platform (and, for iOS, language) to a strategy.

    Raises:
        UnreachableVariantError: For any combination outside the table.
    """
    if platform == Platform.MACOS:
        return MacOSSwiftVariant()
    if platform == Platform.IOS:
        if language == Language.SWIFT:
            return IOSSwiftVariant()
        if language == Language.OBJC:
            return IOSObjCVariant()
    raise UnreachableVariantError(platform, language)


def choose_variant(collector: AnswerCollector) -> VariantStrategy:
    """Ask the platform question, then the language question for iOS."""
    platform = collector.ask_choice(PLATFORM_QUESTION, Platform)
    language = None
    if platform is Platform.IOS:
        language = collector.ask_choice(LANGUAGE_QUESTION, Language)
    return select_variant(platform, language)
