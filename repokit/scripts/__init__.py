"""
This package contains the command implementations.

Each module exposes an argument builder and a `main(app, args)` entry point
so the commands can be registered on the unified CLI.
"""

from . import (
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

__all__ = [
    "coverage",
    "env_check",
    "github_setup",
    "greet",
    "hooks",
    "packages",
    "post_release",
    "prepare_release",
    "run_tests",
    "secrets",
    "setup_repo",
    "template_setup",
    "validate_security",
    "verify",
]
