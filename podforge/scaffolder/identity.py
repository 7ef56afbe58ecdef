"""Committer identity used for the ``USER_NAME`` / ``USER_EMAIL`` tokens.

Resolution never fails: when no identity is configured anywhere, documented
placeholders are substituted so the generated files make the gap obvious.
"""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass

from ..utils import CommandRunner, run_command

PLACEHOLDER_NAME = "<GITHUB_USERNAME>"
PLACEHOLDER_EMAIL = "<GITHUB_EMAIL>"


@dataclass(frozen=True)
class Identity:
    """Name and e-mail written into license, podspec and readme."""

    name: str
    email: str


async def _command_output(runner: CommandRunner, cmd: list[str]) -> str:
    returncode, stdout, _ = await runner(cmd, timeout=10)
    if returncode != 0:
        return ""
    return stdout.strip()


async def github_user_name(runner: CommandRunner = run_command) -> str | None:
    """Return the GitHub account stored in the macOS keychain, if any.

    Values that look like an e-mail address are ignored.
    """
    if shutil.which("security") is None:
        return None
    output = await _command_output(
        runner, ["security", "find-internet-password", "-s", "github.com"]
    )
    for line in output.splitlines():
        line = line.strip()
        if line.startswith('"acct"<blob>='):
            account = line.split("=", 1)[1].strip().strip('"')
            if account and "@" not in account:
                return account
    return None


async def resolve_user_name(runner: CommandRunner = run_command) -> str:
    env_name = os.environ.get("GIT_COMMITTER_NAME", "").strip()
    if env_name:
        return env_name
    keychain = await github_user_name(runner)
    if keychain:
        return keychain
    configured = await _command_output(runner, ["git", "config", "user.name"])
    return configured or PLACEHOLDER_NAME


async def resolve_user_email(runner: CommandRunner = run_command) -> str:
    env_email = os.environ.get("GIT_COMMITTER_EMAIL", "").strip()
    if env_email:
        return env_email
    configured = await _command_output(runner, ["git", "config", "user.email"])
    return configured or PLACEHOLDER_EMAIL


async def resolve_identity(runner: CommandRunner = run_command) -> Identity:
    """Resolve the committer identity from the environment, keychain and git."""
    return Identity(
        name=await resolve_user_name(runner),
        email=await resolve_user_email(runner),
    )
