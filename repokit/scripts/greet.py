import argparse

from repokit.core.app import AppContext
from repokit.library import TemplateProject, TemplateProjectConfiguration, WelcomeView


def add_arguments(parser: argparse.ArgumentParser) -> None:
    parser.description = "Show the placeholder library's welcome view."
    parser.add_argument(
        "--debug", action="store_true", help="Configure the library in debug mode first."
    )


def main(app: AppContext, args: argparse.Namespace) -> int:
    TemplateProject.configure(TemplateProjectConfiguration(is_debug_mode=args.debug))
    app.console.console.print(WelcomeView(TemplateProject.shared))
    return 0
