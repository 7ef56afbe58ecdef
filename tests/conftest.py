"""Shared pytest fixtures for the podforge test suite.

Provides reusable fixtures for:
- A complete template checkout in a temporary directory
- Scripted prompt IO (answers fed from a list)
- A fake command runner that records git/pod invocations
- A fixed identity and clock for deterministic substitution
"""

from __future__ import annotations

import io
from datetime import datetime
from pathlib import Path

import pytest
from rich.console import Console

from podforge.config import ScaffoldConfig
from podforge.prompting.messages import MessageBank
from podforge.scaffolder.identity import Identity


# ---------------------------------------------------------------------------
# Scripted prompt IO
# ---------------------------------------------------------------------------


class ScriptedIO:
    """``PromptIO`` that answers from a fixed script and records output."""

    def __init__(self, answers: list[str]) -> None:
        self.answers = list(answers)
        self.output: list[str] = []
        self.reads = 0

    def write(self, text: str) -> None:
        self.output.append(text)

    def read_line(self) -> str:
        if not self.answers:
            raise AssertionError("prompted more times than the script allows")
        self.reads += 1
        return self.answers.pop(0)

    @property
    def text(self) -> str:
        return "".join(self.output)


@pytest.fixture
def scripted_io():
    """Factory: ``scripted_io(["ios", "swift"])``."""
    return ScriptedIO


# ---------------------------------------------------------------------------
# Fake command runner
# ---------------------------------------------------------------------------


class FakeRunner:
    """Async stand-in for ``run_command``.

    *responses* maps a command prefix (``"pod install"``) to the
    ``(returncode, stdout, stderr)`` it should produce.
    """

    def __init__(
        self,
        responses: dict[str, tuple[int, str, str]] | None = None,
        default: tuple[int, str, str] = (0, "", ""),
    ) -> None:
        self.responses = responses or {}
        self.default = default
        self.calls: list[tuple[str, Path | None]] = []

    async def __call__(self, cmd, cwd=None, timeout=120, **kwargs):
        key = cmd if isinstance(cmd, str) else " ".join(cmd)
        self.calls.append((key, Path(cwd) if cwd else None))
        for prefix, result in self.responses.items():
            if key.startswith(prefix):
                return result
        return self.default

    @property
    def commands(self) -> list[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def fake_runner():
    """Factory: ``fake_runner({"pod install": (1, "", "boom")})``."""
    return FakeRunner


# ---------------------------------------------------------------------------
# Identity, clock, messages
# ---------------------------------------------------------------------------


@pytest.fixture
def identity() -> Identity:
    return Identity(name="Jane Doe", email="jane@example.com")


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 4, 9, 30)


@pytest.fixture
def quiet_messages() -> MessageBank:
    """MessageBank that renders into a buffer instead of the terminal."""
    return MessageBank(console=Console(file=io.StringIO(), width=100))


# ---------------------------------------------------------------------------
# Template checkout
# ---------------------------------------------------------------------------

PODFILE = (
    "use_frameworks!\n"
    "\n"
    "target '${POD_NAME}_Example' do\n"
    "  pod '${POD_NAME}', :path => '../'\n"
    "\n"
    "  target '${POD_NAME}_Tests' do\n"
    "    inherit! :search_paths\n"
    "\n"
    "    ${INCLUDED_PODS}\n"
    "  end\n"
    "end\n"
)

APP_DELEGATE_H = (
    "@import UIKit;\n"
    "\n"
    "@interface ${CLASS_PREFIX}AppDelegate : UIResponder <UIApplicationDelegate>\n"
    "\n"
    "@property (strong, nonatomic) UIWindow *window;\n"
    "\n"
    "@end\n"
)

APP_DELEGATE_M = (
    "#import \"${CLASS_PREFIX}AppDelegate.h\"\n"
    "\n"
    "@implementation ${CLASS_PREFIX}AppDelegate\n"
    "@end\n"
)

TEST_EXAMPLES: dict[str, str] = {
    "specta.m": "SpecBegin(InitialSpecs)\nit(@\"works\", ^{ expect(1).to.equal(1); });\nSpecEnd\n",
    "kiwi.m": "SPEC_BEGIN(InitialTests)\ndescribe(@\"these\", ^{ });\nSPEC_END\n",
    "xctest.m": "@implementation Tests\n- (void)testExample {}\n@end\n",
    "quick.swift": "class TableOfContentsSpec: QuickSpec {\n}\n",
    "swiftcheck.swift": "class PropertySpec: XCTestCase {\n  func testProperty() { property(\"ok\") <- forAll { (x: Int) in x == x } }\n}\n",
    "xctest.swift": "class Tests: XCTestCase {\n  func testExample() {}\n}\n",
}


def build_template_tree(root: Path) -> Path:
    """Write a complete, minimal library template under *root*."""
    files: dict[str, str] = {
        "POD_LICENSE": "Copyright (c) ${YEAR} ${USER_NAME} <${USER_EMAIL}>\n",
        "POD_README.md": "# ${POD_NAME}\n\nRepository: ${REPO_NAME}\n",
        "NAME.podspec": (
            "Pod::Spec.new do |s|\n"
            "  s.name = '${POD_NAME}'\n"
            "  s.author = { '${USER_NAME}' => '${USER_EMAIL}' }\n"
            "  # generated ${DATE}\n"
            "end\n"
        ),
        ".travis.yml": "xcode_workspace: Example/${POD_NAME}.xcworkspace\n",
        "README.md": "# pod-template\n",
        "LICENSE": "template license\n",
        "CODE_OF_CONDUCT.md": "be nice\n",
        "configure": "#!/usr/bin/env bash\n",
        "_CONFIGURE.rb": "# configure\n",
        "Pod/Classes/ReplaceMe.swift": "// replace me\n",
        "Pod/Classes/.gitkeep": "",
        "Pod/Assets/.gitkeep": "",
        "templates/swift/Example/Podfile": PODFILE,
        "templates/swift/Example/Tests/Tests.swift": "import XCTest\n\n${TEST_EXAMPLE}\n",
        "templates/macos-swift/Example/Podfile": PODFILE,
        "templates/macos-swift/Example/Tests/Tests.swift": "import XCTest\n\n${TEST_EXAMPLE}\n",
        "templates/ios/Example/Podfile": PODFILE,
        "templates/ios/Example/Sources/AppDelegate.h": APP_DELEGATE_H,
        "templates/ios/Example/Sources/AppDelegate.m": APP_DELEGATE_M,
        "templates/ios/Example/Tests/Tests.m": "${TEST_EXAMPLE}\n",
        "templates/ios/Example/Tests/Tests-Prefix.pch": (
            "#ifdef __OBJC__\n  ${INCLUDED_PREFIXES}\n#endif\n"
        ),
    }
    for name, content in TEST_EXAMPLES.items():
        files[f"setup/test_examples/{name}"] = content

    for rel_path, content in files.items():
        path = root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def template_root(tmp_path: Path) -> Path:
    """A freshly 'cloned' template checkout."""
    return build_template_tree(tmp_path / "MyLib")


@pytest.fixture
def scaffold_config(template_root: Path) -> ScaffoldConfig:
    return ScaffoldConfig(root=template_root)
