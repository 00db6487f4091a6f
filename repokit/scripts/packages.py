"""
The `validate-packages` and `update-packages` commands.
"""

import argparse

from repokit.core.app import AppContext
from repokit.packages import PackageReport, SwiftPackage


def add_validate_arguments(parser: argparse.ArgumentParser) -> None:
    parser.description = "Validate Package.swift, resolution, builds and tests."


def add_update_arguments(parser: argparse.ArgumentParser) -> None:
    parser.description = "Update Swift package dependencies and re-validate the build."


def _print_warnings(app: AppContext, report: PackageReport) -> None:
    if report.warnings:
        app.console.warning(f"{len(report.warnings)} warning(s):")
        app.console.lines(report.warnings, indent="  • ")


def validate(app: AppContext, args: argparse.Namespace) -> int:
    report = SwiftPackage(app).validate()
    app.console.section("Validation Summary")
    app.console.line(f"  Swift version: {report.swift_version or 'unknown'}")
    app.console.line(f"  Release build time: {report.build_seconds}s")
    _print_warnings(app, report)
    app.console.success("🎉 Package validation completed successfully!")
    return 0


def update(app: AppContext, args: argparse.Namespace) -> int:
    changes, report = SwiftPackage(app).update()
    app.console.section("Update Summary")
    app.console.line(f"  Updated: {len(changes.updated)}")
    app.console.line(f"  Added: {len(changes.added)}")
    app.console.line(f"  Removed: {len(changes.removed)}")
    _print_warnings(app, report)
    app.console.success("🎉 Dependency update completed successfully!")
    return 0
