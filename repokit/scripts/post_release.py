import argparse

from repokit.core.app import AppContext
from repokit.release.post import PostReleaseTasks


def add_arguments(parser: argparse.ArgumentParser) -> None:
    parser.description = (
        "Clean up after a tagged release: merge back to develop, report and notify."
    )


def main(app: AppContext, args: argparse.Namespace) -> int:
    tasks = PostReleaseTasks(app)
    result = tasks.run()
    tasks.print_summary(result)
    return 0
