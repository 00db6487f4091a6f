import argparse
import os
import sys

import structlog
from rich.console import Console

from repokit.core.app import initialize_app
from repokit.core.console import StatusConsole
from repokit.core.errors import (
    CommandError,
    PrerequisiteError,
    RepokitError,
    UserCancelled,
)
from repokit.scripts import (
    coverage,
    env_check,
    github_setup,
    greet,
    hooks,
    packages,
    post_release,
    prepare_release,
    run_tests,
    secrets,
    setup_repo,
    template_setup,
    validate_security,
    verify,
)

logger = structlog.get_logger(__name__)

# (name, help, argument builder, entry point)
COMMANDS = [
    (
        "setup",
        "Customize the app template for your project.",
        template_setup.add_arguments,
        template_setup.main,
    ),
    ("verify", "Verify the template's structure.", verify.add_arguments, verify.main),
    (
        "github-setup",
        "Set GitHub Actions secrets and variables from .env.",
        github_setup.add_arguments,
        github_setup.main,
    ),
    (
        "secrets",
        "Manage .env and GitHub repository secrets.",
        secrets.add_arguments,
        secrets.main,
    ),
    (
        "env-check",
        "Check required build variables.",
        env_check.add_arguments,
        env_check.main,
    ),
    (
        "setup-repo",
        "Configure branch protection and repository settings.",
        setup_repo.add_arguments,
        setup_repo.main,
    ),
    (
        "validate-security",
        "Validate the repository security configuration.",
        validate_security.add_arguments,
        validate_security.main,
    ),
    (
        "prepare-release",
        "Prepare a release branch and pull request.",
        prepare_release.add_arguments,
        prepare_release.main,
    ),
    (
        "post-release",
        "Run post-release cleanup and reporting.",
        post_release.add_arguments,
        post_release.main,
    ),
    ("run-tests", "Run the Swift test suites.", run_tests.add_arguments, run_tests.main),
    ("coverage", "Generate code coverage reports.", coverage.add_arguments, coverage.main),
    (
        "validate-packages",
        "Validate the Swift package.",
        packages.add_validate_arguments,
        packages.validate,
    ),
    (
        "update-packages",
        "Update Swift package dependencies.",
        packages.add_update_arguments,
        packages.update,
    ),
    ("setup-hooks", "Install git hooks.", hooks.add_setup_arguments, hooks.setup),
    (
        "commit-msg",
        "Validate a commit message file.",
        hooks.add_commit_msg_arguments,
        hooks.commit_msg,
    ),
    (
        "greet",
        "Show the placeholder library's welcome view.",
        greet.add_arguments,
        greet.main,
    ),
]


class ArgumentParser(argparse.ArgumentParser):
    """Usage errors exit with status 1."""

    def error(self, message: str):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="repokit",
        description="Bootstrap and maintain iOS/macOS app repositories.",
    )
    parser.add_argument(
        "-y", "--yes", action="store_true", help="Answer yes to every confirmation prompt."
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Console log level (default: LOG_LEVEL or INFO).",
    )
    subparsers = parser.add_subparsers(
        dest="command", required=True, help="sub-command help", parser_class=ArgumentParser
    )
    for name, help_text, add_arguments, func in COMMANDS:
        subparser = subparsers.add_parser(name, help=help_text)
        add_arguments(subparser)
        subparser.set_defaults(func=func)
    return parser


def run_cli(argv: list[str]) -> int:
    """
    Parses command-line arguments and executes the corresponding command.
    This function is separate from main() to be easily testable.

    Returns:
        The process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.log_level:
        os.environ["LOG_LEVEL"] = args.log_level

    try:
        app = initialize_app(assume_yes=args.yes)
    except (RuntimeError, ValueError) as e:
        StatusConsole(Console(stderr=True)).error(f"Invalid configuration: {e}")
        return 1
    logger.info(f"Executing command: {args.command}")
    try:
        exit_code = args.func(app, args)
    except UserCancelled as e:
        app.console.warning(str(e))
        return e.exit_code
    except PrerequisiteError as e:
        app.console.error(str(e))
        if e.hint:
            app.console.info(e.hint)
        return e.exit_code
    except CommandError as e:
        logger.error("Command failed", command=args.command, cmd=e.cmd, stderr=e.stderr)
        app.console.error(str(e))
        app.console.lines(e.stderr.strip().splitlines()[-10:])
        return e.exit_code
    except RepokitError as e:
        logger.error("Command failed", command=args.command, error=str(e))
        app.console.error(str(e))
        return e.exit_code
    except KeyboardInterrupt:
        Console(stderr=True).print("\n[yellow]Interrupted[/yellow]")
        return 130
    logger.info(f"Command '{args.command}' finished.", exit_code=exit_code)
    return exit_code


def main():
    """
    Main entry point for the application's command-line interface.
    """
    sys.exit(run_cli(sys.argv[1:]))


if __name__ == "__main__":
    main()
