import argparse

from repokit.core.app import AppContext
from repokit.template import verify_template


def add_arguments(parser: argparse.ArgumentParser) -> None:
    parser.description = "Check that the template's required files and configs are in place."


def main(app: AppContext, args: argparse.Namespace) -> int:
    result = verify_template(app)
    return 0 if result.ok else 1
