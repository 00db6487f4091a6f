import argparse
import os

from repokit.core.app import AppContext
from repokit.envfile import REQUIRED_KEYS, merged_with_environment, read_env_file


def add_arguments(parser: argparse.ArgumentParser) -> None:
    parser.description = (
        "Check the required build variables in .env and the process environment."
    )


def main(app: AppContext, args: argparse.Namespace) -> int:
    """Presence check only; a value counts as set when it is non-empty."""
    console = app.console
    env_file = app.settings.paths.env_file
    values = {}
    if os.path.isfile(env_file):
        values = read_env_file(env_file)
        console.success(".env file loaded")
    else:
        console.warning(".env file not found, checking system environment variables")

    merged = merged_with_environment(values, os.environ)
    missing = []
    for key in REQUIRED_KEYS:
        if merged.get(key):
            console.success(f"Set: {key}")
        else:
            missing.append(key)
            console.error(f"Missing: {key}")

    console.line()
    console.line("📊 Validation Summary:")
    console.line(f"  ✅ Variables set: {len(REQUIRED_KEYS) - len(missing)}")
    console.line(f"  ❌ Variables missing: {len(missing)}")
    console.line()
    if missing:
        console.error(
            "Missing required environment variables. Please configure them in your .env file."
        )
        return 1
    console.success("🎉 All required environment variables are set!")
    return 0
