"""Tests for variant selection and the three strategies (podforge.scaffolder.variants).

Covers:
- Decision table exhaustiveness and unreachable combinations
- Platform/language question sequencing
- Pod and prefix-line registration per variant
- Test example injection and template activation
"""

from __future__ import annotations

import itertools
from pathlib import Path

import pytest

from podforge.config import ScaffoldConfig
from podforge.errors import MissingTemplateFileError, UnreachableVariantError
from podforge.models import ConfigurationRecord, Language, Platform, TestStyle, Variant
from podforge.prompting.collector import AnswerCollector
from podforge.scaffolder.variants import (
    VARIANTS,
    IOSObjCVariant,
    IOSSwiftVariant,
    MacOSSwiftVariant,
    choose_variant,
    select_variant,
)

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# select_variant / choose_variant
# ---------------------------------------------------------------------------


class TestSelectVariant:
    @pytest.mark.parametrize(
        "platform,language,expected",
        [
            (Platform.MACOS, None, MacOSSwiftVariant),
            (Platform.MACOS, Language.SWIFT, MacOSSwiftVariant),
            (Platform.MACOS, Language.OBJC, MacOSSwiftVariant),
            (Platform.IOS, Language.SWIFT, IOSSwiftVariant),
            (Platform.IOS, Language.OBJC, IOSObjCVariant),
        ],
    )
    def test_decision_table(self, platform, language, expected):
        assert isinstance(select_variant(platform, language), expected)

    def test_every_combination_selects_exactly_one_variant(self):
        selected = set()
        for platform, language in itertools.product(Platform, Language):
            strategy = select_variant(platform, language)
            matches = [v for v, cls in VARIANTS.items() if isinstance(strategy, cls)]
            assert len(matches) == 1
            selected.add(strategy.variant)
        assert selected == set(Variant)

    def test_accepts_normalized_strings(self):
        assert isinstance(select_variant("ios", "objc"), IOSObjCVariant)

    def test_ios_without_language_is_unreachable(self):
        with pytest.raises(UnreachableVariantError):
            select_variant(Platform.IOS, None)

    def test_unknown_platform_is_unreachable(self):
        with pytest.raises(UnreachableVariantError) as excinfo:
            select_variant("android", "kotlin")
        assert excinfo.value.platform == "android"


class TestChooseVariant:
    def test_macos_skips_language_question(self, scripted_io):
        io = scripted_io(["macos"])
        strategy = choose_variant(AnswerCollector(io))
        assert isinstance(strategy, MacOSSwiftVariant)
        assert io.reads == 1
        assert "language" not in io.text

    def test_ios_asks_language(self, scripted_io):
        io = scripted_io(["ios", "objc"])
        assert isinstance(choose_variant(AnswerCollector(io)), IOSObjCVariant)
        assert io.reads == 2

    def test_defaults_select_ios_swift(self, scripted_io):
        assert isinstance(choose_variant(AnswerCollector(scripted_io(["", ""]))), IOSSwiftVariant)


# ---------------------------------------------------------------------------
# Package / prefix registration
# ---------------------------------------------------------------------------


def _configure_with_defaults(strategy, scripted_io) -> ConfigurationRecord:
    record = ConfigurationRecord(project_name="MyLib")
    # Defaults for every enumerated question, plus a class prefix for ObjC.
    io = scripted_io(["", "", "abc"])
    strategy.configure(AnswerCollector(io, record), record)
    return record


class TestPackageRegistration:
    def test_default_packages_non_empty_and_disjoint(self, scripted_io):
        pods = {
            variant: set(_configure_with_defaults(cls(), scripted_io).podfile_entries)
            for variant, cls in VARIANTS.items()
        }
        for variant_pods in pods.values():
            assert variant_pods
        for a, b in itertools.combinations(pods.values(), 2):
            assert a.isdisjoint(b)

    def test_objc_specta_with_snapshots(self):
        assert IOSObjCVariant().packages_for(TestStyle.SPECTA, True) == [
            "Specta", "Expecta", "FBSnapshotTestCase", "Expecta+Snapshots",
        ]

    def test_objc_kiwi_without_snapshots(self):
        assert IOSObjCVariant().packages_for(TestStyle.KIWI, False) == ["Kiwi"]

    def test_objc_prefix_lines_use_module_names(self):
        assert IOSObjCVariant().prefix_lines_for(TestStyle.SPECTA, True) == [
            "@import Specta;",
            "@import Expecta;",
            "@import FBSnapshotTestCase;",
            "@import Expecta_Snapshots;",
        ]

    def test_swift_variants_register_no_prefix_lines(self):
        assert IOSSwiftVariant().prefix_lines_for(TestStyle.QUICK, True) == []
        assert MacOSSwiftVariant().prefix_lines_for(TestStyle.SWIFTCHECK, False) == []

    def test_ios_swift_packages(self):
        strategy = IOSSwiftVariant()
        assert strategy.packages_for(TestStyle.QUICK, False) == ["Quick", "Nimble"]
        assert strategy.packages_for(TestStyle.NONE, True) == ["SnapshotTesting"]

    @pytest.mark.parametrize("cls", list(VARIANTS.values()))
    def test_none_registers_nothing(self, cls):
        assert cls().packages_for(TestStyle.NONE, False) == []

    def test_objc_configure_records_prefix_and_token(self, scripted_io):
        record = ConfigurationRecord(project_name="MyLib")
        io = scripted_io(["kiwi", "no", "", "xyz"])
        choices = IOSObjCVariant().configure(AnswerCollector(io, record), record)
        assert choices.test_style is TestStyle.KIWI
        assert choices.view_testing is False
        assert record.podfile_entries == ["Kiwi"]
        assert record.prefix_lines == ["@import Kiwi;"]
        assert record.extra_tokens == {"CLASS_PREFIX": "XYZ"}

    def test_macos_does_not_offer_view_testing(self, scripted_io):
        record = ConfigurationRecord(project_name="MyLib")
        io = scripted_io(["none"])
        choices = MacOSSwiftVariant().configure(AnswerCollector(io, record), record)
        assert choices.test_style is TestStyle.NONE
        assert io.reads == 1

    def test_test_style_restricted_to_variant(self, scripted_io):
        record = ConfigurationRecord(project_name="MyLib")
        io = scripted_io(["specta", "quick", "no"])
        choices = IOSSwiftVariant().configure(AnswerCollector(io, record), record)
        assert choices.test_style is TestStyle.QUICK
        assert "Possible answers are" in io.text


# ---------------------------------------------------------------------------
# File-system side effects
# ---------------------------------------------------------------------------


class TestApplyTestFramework:
    def test_injects_quick_example(self, scaffold_config: ScaffoldConfig):
        strategy = IOSSwiftVariant()
        path = strategy.apply_test_framework(scaffold_config, TestStyle.QUICK)
        text = path.read_text(encoding="utf-8")
        assert "QuickSpec" in text
        assert "${TEST_EXAMPLE}" not in text

    def test_none_uses_xctest_example(self, scaffold_config: ScaffoldConfig):
        path = IOSObjCVariant().apply_test_framework(scaffold_config, TestStyle.NONE)
        assert path.name == "Tests.m"
        assert "testExample" in path.read_text(encoding="utf-8")

    def test_missing_example_is_fatal(self, scaffold_config: ScaffoldConfig):
        (scaffold_config.test_examples_path / "kiwi.m").unlink()
        with pytest.raises(MissingTemplateFileError) as excinfo:
            IOSObjCVariant().apply_test_framework(scaffold_config, TestStyle.KIWI)
        assert excinfo.value.path.name == "kiwi.m"


class TestActivateTemplates:
    def test_moves_variant_folder_into_root(self, scaffold_config: ScaffoldConfig):
        root: Path = scaffold_config.root
        IOSObjCVariant().activate_templates(scaffold_config)
        assert (root / "Example" / "Podfile").is_file()
        assert (root / "Example" / "Tests" / "Tests-Prefix.pch").is_file()
        assert not (root / "Example" / "Tests" / "Tests.swift").exists()

    def test_merges_into_existing_directories(self, scaffold_config: ScaffoldConfig):
        root: Path = scaffold_config.root
        (root / "Example").mkdir()
        (root / "Example" / "Keep.txt").write_text("keep", encoding="utf-8")
        IOSSwiftVariant().activate_templates(scaffold_config)
        assert (root / "Example" / "Keep.txt").read_text(encoding="utf-8") == "keep"
        assert (root / "Example" / "Tests" / "Tests.swift").is_file()

    def test_missing_folder_is_fatal(self, scaffold_config: ScaffoldConfig):
        import shutil

        shutil.rmtree(scaffold_config.templates_path / "macos-swift")
        with pytest.raises(MissingTemplateFileError):
            MacOSSwiftVariant().activate_templates(scaffold_config)


class TestTokenFiles:
    def test_objc_example_sources(self, scaffold_config: ScaffoldConfig):
        root: Path = scaffold_config.root
        variant = IOSObjCVariant()
        variant.activate_templates(scaffold_config)
        names = [path.relative_to(root).as_posix() for path in variant.token_files(scaffold_config)]
        assert names == [
            "Example/Sources/AppDelegate.h",
            "Example/Sources/AppDelegate.m",
            "Example/Tests/Tests.m",
        ]

    def test_nothing_before_activation(self, scaffold_config: ScaffoldConfig):
        assert IOSObjCVariant().token_files(scaffold_config) == []

    @pytest.mark.parametrize("variant", [IOSSwiftVariant, MacOSSwiftVariant])
    def test_swift_variants_have_none(self, variant, scaffold_config: ScaffoldConfig):
        strategy = variant()
        strategy.activate_templates(scaffold_config)
        assert strategy.token_files(scaffold_config) == []
