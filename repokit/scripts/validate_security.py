"""
Runs the repository security checklist and writes a markdown report.
"""

import argparse
import os

from repokit.core.app import AppContext
from repokit.github.repository import resolve_origin
from repokit.security import CheckOutcome, SecurityValidator, write_report
from repokit.security.validator import CheckResult


def add_arguments(parser: argparse.ArgumentParser) -> None:
    parser.description = "Validate the repository's security configuration on GitHub."


def main(app: AppContext, args: argparse.Namespace) -> int:
    console = app.console
    console.header("🔒 Repository Security Validation")
    app.gh.ensure_ready()
    owner, repo = resolve_origin(app.git, app.gh)
    console.info(f"Validating security configuration for: {owner}/{repo}")

    current = {"category": None}

    def print_result(result: CheckResult) -> None:
        if result.check.category != current["category"]:
            current["category"] = result.check.category
            console.section(result.check.category)
        if result.outcome is CheckOutcome.PASSED:
            console.success(result.check.description)
        elif result.outcome is CheckOutcome.WARNING:
            console.warning(result.check.description)
        else:
            console.error(result.check.description)

    validator = SecurityValidator(app.gh, app.git, app.runner, app.root, owner, repo)
    run = validator.run(on_result=print_result)
    tally = run.tally

    console.status("Generating security report...")
    report = write_report(app.root, run.full_name, tally)
    console.success(f"Security report generated: {os.path.basename(report)}")

    console.section("Validation Summary")
    console.table(
        "📊 Security Validation Results",
        ["Result", "Count"],
        [
            ("✅ Passed", tally.passed),
            ("❌ Failed", tally.failed),
            ("⚠️ Warnings", tally.warnings),
            ("📈 Security Score", f"{tally.score}%"),
        ],
    )
    console.line(f"  📄 Report: {os.path.basename(report)}")
    if tally.total:
        if tally.score >= 75:
            console.success(f"{tally.label} security configuration")
        elif tally.score >= 60:
            console.warning(f"{tally.label} security configuration - improvements recommended")
        else:
            console.error("Security configuration needs significant improvement")

    console.line()
    console.info("Next Steps:")
    steps = []
    if tally.failed:
        steps.append("🚨 Address failed security checks immediately")
    if tally.warnings:
        steps.append("🔍 Review warning items and implement improvements")
    steps += [
        "📅 Schedule regular security validation (monthly)",
        "📚 Review security documentation and best practices",
        "👥 Share security report with team",
    ]
    console.lines([f"{i}. {step}" for i, step in enumerate(steps, 1)], indent="")

    console.line()
    if tally.exit_code:
        console.error("❗ Security validation found issues that need attention")
        console.line("Please address the failed checks before proceeding.")
    else:
        console.success("🎉 Security validation completed successfully!")
        console.line("Repository meets basic security requirements.")
    return tally.exit_code
