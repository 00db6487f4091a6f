import argparse

from repokit.core.app import AppContext
from repokit.testing.coverage import CoverageOptions, CoverageReporter


def add_arguments(parser: argparse.ArgumentParser) -> None:
    parser.description = "Run the tests with coverage and write coverage reports."
    parser.add_argument(
        "--threshold",
        type=float,
        default=None,
        help="Minimum coverage percentage (default: COVERAGE_THRESHOLD or 80).",
    )
    parser.add_argument(
        "--output-dir", default=None, help="Directory for the reports (default: coverage-output)."
    )
    formats = parser.add_mutually_exclusive_group()
    formats.add_argument("--json-only", action="store_true", help="Only generate the JSON report.")
    formats.add_argument("--html-only", action="store_true", help="Only generate the HTML report.")
    parser.add_argument(
        "--show-uncovered", action="store_true", help="List the files with the lowest coverage."
    )


def main(app: AppContext, args: argparse.Namespace) -> int:
    threshold = args.threshold
    if threshold is None:
        threshold = app.settings.coverage.threshold
    options = CoverageOptions(
        threshold=threshold,
        output_dir=args.output_dir,
        json=not args.html_only,
        html=not args.json_only,
        show_uncovered=args.show_uncovered,
    )
    reporter = CoverageReporter(app, options)
    report = reporter.run()
    reporter.print_summary(report)
    return report.exit_code
