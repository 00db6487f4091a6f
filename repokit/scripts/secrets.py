"""
Local `.env` management and bulk upload to GitHub secrets.

Exactly one action flag is accepted per invocation.
"""

import argparse
import os
import stat

import structlog

from repokit.core.app import AppContext
from repokit.core.errors import EnvValidationError, UserCancelled
from repokit.envfile import create_from_template, read_env_file, validate_required

logger = structlog.get_logger(__name__)

VALIDATOR_SCRIPT = """#!/bin/bash
# Environment validation script (generated by repokit)
# Checks the required iOS/macOS build variables from .env and the environment.
exec repokit env-check "$@"
"""


def add_arguments(parser: argparse.ArgumentParser) -> None:
    parser.description = "Manage the local .env file and GitHub repository secrets."
    actions = parser.add_mutually_exclusive_group()
    actions.add_argument(
        "--setup-env", action="store_true", help="Create .env from .env.template."
    )
    actions.add_argument(
        "--validate", action="store_true", help="Validate the required .env values."
    )
    actions.add_argument(
        "--upload-secrets",
        action="store_true",
        help="Upload .env values as GitHub repository secrets.",
    )
    actions.add_argument(
        "--list-secrets", action="store_true", help="List the repository's secrets."
    )
    actions.add_argument(
        "--create-validator",
        action="store_true",
        help="Write scripts/validate-environment.sh for CI use.",
    )
    actions.add_argument(
        "--all", action="store_true", help="Create .env and print the next steps."
    )


def check_prerequisites(app: AppContext) -> None:
    app.gh.ensure_ready()
    if not app.runner.which("bundle"):
        app.console.warning("Bundler is not installed. Fastlane requires it: gem install bundler")
    app.console.success("Prerequisites check passed")


def setup_env(app: AppContext) -> bool:
    """Create .env from the template; an existing file is only replaced on confirmation."""
    paths = app.settings.paths
    console = app.console
    console.status("Setting up environment file...")
    overwrite = False
    if os.path.exists(paths.env_file):
        console.warning(".env already exists")
        if not console.confirm("Do you want to overwrite it?", default=False):
            console.info("Keeping existing .env file")
            return False
        overwrite = True
    create_from_template(paths.env_template, paths.env_file, overwrite=overwrite)
    console.success("Created .env from .env.template")
    console.warning("Please edit .env with your actual values")
    return True


def validate_env(app: AppContext) -> None:
    """
    Raises:
        EnvValidationError: Required values are missing or still placeholders.
    """
    console = app.console
    console.status("Validating environment file...")
    result = validate_required(read_env_file(app.settings.paths.env_file))
    if result.missing:
        console.error("Missing required variables:")
        console.lines(result.missing, indent="  - ")
    if result.placeholders:
        console.warning("Variables with placeholder values:")
        console.lines(result.placeholders, indent="  - ")
    if not result.ok:
        raise EnvValidationError(result.missing, result.placeholders)
    console.success("Environment file validation passed")


def upload_secrets(app: AppContext) -> None:
    validate_env(app)
    app.git.ensure_repository()
    console = app.console
    full_name = app.gh.repo_name_with_owner()
    console.status("Uploading secrets to GitHub repository...")
    console.info(f"Repository: {full_name}")
    if not console.confirm("Upload secrets to this repository?", default=False):
        raise UserCancelled("Secret upload cancelled", exit_code=0)
    app.runner.run(["gh", "secret", "set", "-f", app.settings.paths.env_file])
    console.success("Secrets uploaded successfully")
    list_secrets(app)


def list_secrets(app: AppContext) -> None:
    app.console.status("Current GitHub repository secrets:")
    app.console.lines(app.gh.secret_list())


def create_validator(app: AppContext) -> str:
    path = app.settings.paths.validation_script
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(VALIDATOR_SCRIPT)
    os.chmod(path, os.stat(path).st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    app.console.success(f"Created validation script: {os.path.relpath(path, app.root)}")
    logger.info("Validation script written", path=path)
    return path


def main(app: AppContext, args: argparse.Namespace) -> int:
    console = app.console
    console.header("🔐 iOS/macOS Secrets Management")
    check_prerequisites(app)

    if args.setup_env:
        setup_env(app)
    elif args.validate:
        validate_env(app)
    elif args.upload_secrets:
        upload_secrets(app)
    elif args.list_secrets:
        list_secrets(app)
    elif args.create_validator:
        create_validator(app)
    elif args.all:
        setup_env(app)
        console.line()
        console.info("Please edit .env with your actual values, then run:")
        console.info("repokit secrets --validate && repokit secrets --upload-secrets")
    else:
        console.info("No option specified. Use --help for usage information.")
        console.info("Quick start: repokit secrets --all")
    return 0
