import argparse

from repokit.core.app import AppContext
from repokit.release import BumpType
from repokit.release.prepare import ReleasePreparer


def _bump_type(value: str) -> BumpType:
    try:
        return BumpType.parse(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def add_arguments(parser: argparse.ArgumentParser) -> None:
    parser.description = "Bump the version, cut a release branch and open a pull request."
    parser.add_argument(
        "bump",
        nargs="?",
        type=_bump_type,
        default=BumpType.PATCH,
        help="Version component to increment: patch (default), minor or major.",
    )


def main(app: AppContext, args: argparse.Namespace) -> int:
    preparer = ReleasePreparer(app, args.bump)
    plan = preparer.run()
    preparer.print_next_steps(plan)
    return 0
