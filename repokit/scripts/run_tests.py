import argparse

from repokit.core.app import AppContext
from repokit.testing.runner import SuiteOptions, SwiftTestRunner


def add_arguments(parser: argparse.ArgumentParser) -> None:
    parser.description = "Run the Swift package's test suites and summarize the results."
    only = parser.add_mutually_exclusive_group()
    only.add_argument("--unit-only", action="store_true", help="Run only unit tests.")
    only.add_argument("--ui-only", action="store_true", help="Run only UI tests.")
    only.add_argument(
        "--performance-only", action="store_true", help="Run only performance tests."
    )
    parser.add_argument(
        "--no-coverage", action="store_true", help="Disable code coverage collection."
    )
    parser.add_argument(
        "--sequential", action="store_true", help="Run tests sequentially instead of in parallel."
    )


def main(app: AppContext, args: argparse.Namespace) -> int:
    options = SuiteOptions.from_flags(
        unit_only=args.unit_only,
        ui_only=args.ui_only,
        performance_only=args.performance_only,
        no_coverage=args.no_coverage,
        sequential=args.sequential,
    )
    runner = SwiftTestRunner(app, options)
    summary = runner.run()
    runner.print_summary(summary)
    return summary.exit_code
