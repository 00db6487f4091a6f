"""
Uploads `.env` values to GitHub Actions as secrets and variables.
"""

import argparse

import structlog

from repokit.core.app import AppContext
from repokit.envfile import read_env_file
from repokit.secrets import (
    SECRET_KEYS,
    VARIABLE_KEYS,
    apply_secrets,
    apply_variables,
    match_repository,
    plan_upload,
)
from repokit.template import require_env_file

logger = structlog.get_logger(__name__)

PRIVATE_KEY_INSTRUCTIONS = [
    "APP_STORE_CONNECT_PRIVATE_KEY:",
    "  Description: Your App Store Connect API private key (.p8 file content)",
    "  How to get: Download from App Store Connect → Users and Access → Keys",
    "  Command: cat your-key.p8 | gh secret set APP_STORE_CONNECT_PRIVATE_KEY --app actions",
]


def add_arguments(parser: argparse.ArgumentParser) -> None:
    parser.description = "Set GitHub Actions secrets and variables from .env."


def main(app: AppContext, args: argparse.Namespace) -> int:
    console = app.console
    console.header("🔐 GitHub Secrets & Variables Setup")

    require_env_file(app)
    app.gh.ensure_ready()
    values = read_env_file(app.settings.paths.env_file)
    plan = plan_upload(values)

    console.status("🔑 Setting up GitHub Secrets...")
    secrets = apply_secrets(app.gh, plan.secrets)
    for name in secrets.uploaded:
        console.success(f"Set secret: {name}")
    for name in secrets.failed:
        console.error(f"Failed to set secret: {name}")
    for name in SECRET_KEYS:
        if name in plan.skipped:
            console.warning(f"Skipped {name} (not set or placeholder value)")

    console.status("⚙️ Setting up GitHub Variables...")
    variables = apply_variables(app.gh, plan.variables)
    for name in variables.uploaded:
        console.success(f"Set variable: {name} = {plan.variables[name]}")
    for name in variables.failed:
        console.error(f"Failed to set variable: {name}")
    for name in VARIABLE_KEYS:
        if name in plan.skipped:
            console.warning(f"Skipped {name} (not customized from template)")

    console.line()
    console.info("📝 Manual setup required for:")
    console.lines(PRIVATE_KEY_INSTRUCTIONS)

    match_repo = match_repository(values.get("MATCH_GIT_URL", ""))
    if match_repo:
        console.line()
        console.info("🔐 Fastlane Match repository:")
        console.line(f"  Make sure the private repository exists: {match_repo}")
        console.line(f"  Create it with: gh repo create {match_repo} --private")

    console.line()
    console.info("🔍 Verify your configuration:")
    console.lines(["gh secret list --app actions", "gh variable list"])

    console.line()
    console.success("🎉 GitHub setup complete!")
    console.info("Next steps:")
    console.lines(
        [
            "1. Add the APP_STORE_CONNECT_PRIVATE_KEY secret manually (see above)",
            "2. Initialize Fastlane Match: bundle exec fastlane match init",
            "3. Push a commit to trigger the CI workflow",
        ],
        indent="",
    )
    logger.info(
        "GitHub secrets and variables applied",
        secrets=len(secrets.uploaded),
        variables=len(variables.uploaded),
        failed=len(secrets.failed) + len(variables.failed),
        skipped=len(plan.skipped),
    )
    return 0
