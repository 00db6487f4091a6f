import argparse

from repokit.core.app import AppContext
from repokit.template import setup_template


def add_arguments(parser: argparse.ArgumentParser) -> None:
    parser.description = "Customize the app template for your project (renames MyApp)."


def main(app: AppContext, args: argparse.Namespace) -> int:
    """Renames the template project after confirmation."""
    setup_template(app)
    return 0
