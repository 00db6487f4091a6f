"""
Git hooks for SwiftLint/SwiftFormat and conventional commit messages.
"""

import os
import re
import stat
from typing import List, Tuple

import structlog

from repokit.core.console import StatusConsole
from repokit.core.errors import PrerequisiteError
from repokit.core.shell import CommandRunner
from repokit.vcs.git import Git

logger = structlog.get_logger(__name__)

CONVENTIONAL_COMMIT = re.compile(
    r"^(feat|fix|docs|style|refactor|perf|test|chore|build|ci)(\(.+\))?: .{1,50}"
)
SKIPPED_PREFIXES = ("Merge branch", "Revert")

COMMIT_TYPES: List[Tuple[str, str]] = [
    ("feat", "A new feature"),
    ("fix", "A bug fix"),
    ("docs", "Documentation only changes"),
    ("style", "Changes that do not affect the meaning of the code"),
    ("refactor", "A code change that neither fixes a bug nor adds a feature"),
    ("perf", "A code change that improves performance"),
    ("test", "Adding missing tests or correcting existing tests"),
    ("chore", "Changes to the build process or auxiliary tools"),
    ("build", "Changes that affect the build system or external dependencies"),
    ("ci", "Changes to our CI configuration files and scripts"),
]

COMMIT_EXAMPLES = [
    "feat: add user authentication",
    "fix: resolve memory leak in image cache",
    "docs: update API documentation",
    "feat(auth): implement OAuth2 login",
]

PRE_COMMIT_HOOK = """#!/bin/bash
# Pre-commit hook for SwiftLint and SwiftFormat (installed by repokit)
set -e

echo "🔍 Running pre-commit checks..."

SWIFT_FILES=$(git diff --cached --name-only --diff-filter=d | grep -E '\\.(swift)$' || true)

if [ -z "$SWIFT_FILES" ]; then
    echo "No Swift files to check."
    exit 0
fi

if command -v swiftformat &> /dev/null; then
    echo "🔧 Running SwiftFormat..."
    swiftformat --config .swiftformat $SWIFT_FILES
    git add $SWIFT_FILES
    echo "✅ SwiftFormat completed"
else
    echo "⚠️  SwiftFormat not found, skipping formatting"
fi

if ! command -v swiftlint &> /dev/null; then
    echo "❌ SwiftLint not found. Please install it first: brew install swiftlint"
    exit 1
fi

echo "🔍 Running SwiftLint..."
if swiftlint lint --config .swiftlint.yml $SWIFT_FILES; then
    echo "✅ SwiftLint checks passed"
else
    echo "❌ SwiftLint found issues. Please fix them before committing."
    exit 1
fi

echo "✅ Pre-commit checks passed!"
"""

PRE_PUSH_HOOK = """#!/bin/bash
# Pre-push hook for a full SwiftLint run (installed by repokit)
set -e

echo "🚀 Running pre-push checks..."

if ! command -v swiftlint &> /dev/null; then
    echo "❌ SwiftLint not found. Please install it first: brew install swiftlint"
    exit 1
fi

if swiftlint lint --config .swiftlint.yml --strict; then
    echo "✅ SwiftLint comprehensive check passed"
else
    echo "❌ SwiftLint found issues. Please fix them before pushing."
    echo "💡 You can run 'swiftlint lint --fix' to auto-fix some issues"
    exit 1
fi

echo "✅ Pre-push checks passed!"
"""

COMMIT_MSG_HOOK = """#!/bin/bash
# Conventional commit message check (installed by repokit)
exec repokit commit-msg "$1"
"""

HOOKS = {
    "pre-commit": PRE_COMMIT_HOOK,
    "pre-push": PRE_PUSH_HOOK,
    "commit-msg": COMMIT_MSG_HOOK,
}


def validate_commit_message(message: str) -> bool:
    """Merge and revert messages always pass; everything else must be conventional."""
    if message.startswith(SKIPPED_PREFIXES):
        return True
    return CONVENTIONAL_COMMIT.match(message) is not None


def commit_format_help() -> List[str]:
    lines = ["Expected format: <type>[optional scope]: <description>", "", "Types:"]
    lines += [f"  {name + ':':<9} {description}" for name, description in COMMIT_TYPES]
    lines += ["", "Examples:"]
    lines += [f"  {example}" for example in COMMIT_EXAMPLES]
    return lines


def _make_executable(path: str) -> None:
    mode = os.stat(path).st_mode
    os.chmod(path, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def write_hook(hooks_dir: str, name: str, content: str) -> str:
    os.makedirs(hooks_dir, exist_ok=True)
    path = os.path.join(hooks_dir, name)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    _make_executable(path)
    logger.debug("Installed git hook", hook=name, path=path)
    return path


class HookInstaller:
    def __init__(self, git: Git, runner: CommandRunner, console: StatusConsole):
        self.git = git
        self.runner = runner
        self.console = console

    def _brew_install(self, tool: str) -> bool:
        if not self.runner.which("brew"):
            return False
        self.runner.run(["brew", "install", tool])
        return True

    def check_requirements(self) -> None:
        """
        Raises:
            PrerequisiteError: Not a git repository, or SwiftLint missing without Homebrew.
        """
        self.console.info("Checking requirements...")
        self.git.ensure_repository()

        if not self.runner.which("swiftlint"):
            self.console.warning("SwiftLint is not installed. Installing via Homebrew...")
            if not self._brew_install("swiftlint"):
                raise PrerequisiteError(
                    "Homebrew not found. Please install SwiftLint manually.",
                    "brew install swiftlint, or download from "
                    "https://github.com/realm/SwiftLint/releases",
                )

        if not self.runner.which("swiftformat"):
            self.console.warning("SwiftFormat is not installed. Installing via Homebrew...")
            if not self._brew_install("swiftformat"):
                self.console.warning(
                    "Homebrew not found. SwiftFormat is optional but recommended."
                )
        self.console.success("Requirements check completed")

    def install(self) -> List[str]:
        self.check_requirements()
        installed = []
        for name, content in HOOKS.items():
            self.console.info(f"Creating {name} hook...")
            installed.append(write_hook(self.git.hooks_dir(), name, content))
            self.console.success(f"{name} hook created")
        return installed
