"""
The `setup-hooks` and `commit-msg` commands.
"""

import argparse
import os

from repokit.core.app import AppContext
from repokit.hooks import HookInstaller, commit_format_help, validate_commit_message


def add_setup_arguments(parser: argparse.ArgumentParser) -> None:
    parser.description = "Install the SwiftLint/SwiftFormat and commit message git hooks."


def add_commit_msg_arguments(parser: argparse.ArgumentParser) -> None:
    parser.description = "Check a commit message file against the conventional format."
    parser.add_argument("message_file", help="Path to the commit message file.")


def setup(app: AppContext, args: argparse.Namespace) -> int:
    console = app.console
    console.header("🔧 Git Hooks Setup")
    installed = HookInstaller(app.git, app.runner, console).install()
    console.line()
    console.success("🎉 Git hooks setup completed!")
    console.info("Installed hooks:")
    console.lines(os.path.basename(path) for path in installed)
    console.line()
    console.info("To bypass the hooks for one commit: git commit --no-verify")
    return 0


def commit_msg(app: AppContext, args: argparse.Namespace) -> int:
    with open(args.message_file, encoding="utf-8") as f:
        message = f.read().strip()
    if validate_commit_message(message):
        return 0
    app.console.error("Invalid commit message format!")
    app.console.lines(commit_format_help(), indent="")
    return 1
