"""
Swift Package Manager validation and dependency updates.
"""

import json
import os
import re
import shutil
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import structlog

from repokit.core.app import AppContext
from repokit.core.error_handler import best_effort
from repokit.core.errors import CommandError, PrerequisiteError

logger = structlog.get_logger(__name__)

SLOW_BUILD_SECONDS = 60
MIXED_CASE_NAME = re.compile(r"[A-Z].*[a-z]")
LOOSE_CONSTRAINT = re.compile(r"\.upToNextMajor|branch:")


def read_pins(data: Dict[str, Any]) -> Dict[str, str]:
    """Map pin identity to its version (or revision) in a Package.resolved document."""
    pins = {}
    for pin in data.get("pins", []):
        name = pin.get("identity", pin.get("package", "unknown"))
        state = pin.get("state", {})
        pins[name] = state.get("version", state.get("revision", "unknown"))
    return pins


def load_pins(path: str) -> Dict[str, str]:
    try:
        with open(path, encoding="utf-8") as f:
            return read_pins(json.load(f))
    except (OSError, json.JSONDecodeError) as e:
        logger.debug("Could not read Package.resolved", path=path, error=str(e))
        return {}


@dataclass
class DependencyChanges:
    updated: List[Tuple[str, str, str]] = field(default_factory=list)
    added: List[Tuple[str, str]] = field(default_factory=list)
    removed: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not (self.updated or self.added or self.removed)


def diff_resolved(before: Dict[str, str], after: Dict[str, str]) -> DependencyChanges:
    changes = DependencyChanges()
    for name, version in after.items():
        if name not in before:
            changes.added.append((name, version))
        elif before[name] != version:
            changes.updated.append((name, before[name], version))
    for name, version in before.items():
        if name not in after:
            changes.removed.append((name, version))
    changes.updated.sort()
    changes.added.sort()
    changes.removed.sort()
    return changes


@dataclass
class PackageReport:
    swift_version: str = ""
    has_tests: bool = False
    tests_passed: Optional[bool] = None
    build_seconds: int = 0
    warnings: List[str] = field(default_factory=list)


class SwiftPackage:
    """
    Operations on the Swift package at the repository root.

    Args:
        app: The application context.
    """

    def __init__(self, app: AppContext):
        self.app = app
        self.console = app.console
        self.runner = app.runner
        self.manifest = os.path.join(app.root, "Package.swift")
        self.resolved = os.path.join(app.root, "Package.resolved")
        self.backup = self.resolved + ".backup"

    def _swift(self, *args: str, check: bool = True):
        return self.runner.run(["swift", *args], check=check)

    def _warn(self, report: PackageReport, message: str) -> None:
        report.warnings.append(message)
        self.console.warning(message)

    def require_manifest(self) -> None:
        if not os.path.isfile(self.manifest):
            raise PrerequisiteError(
                "Package.swift not found in current directory",
                "Run this command from the root of a Swift package.",
            )

    def dump_package(self) -> Dict[str, Any]:
        return json.loads(self._swift("package", "dump-package").stdout)

    def has_test_target(self, manifest: Dict[str, Any]) -> bool:
        return any(target.get("type") == "test" for target in manifest.get("targets", []))

    def show_dependencies(self, label: str) -> None:
        self.console.status(label)
        ok, result = best_effort(self._swift, "package", "show-dependencies")
        if ok:
            self.console.lines(result.stdout.splitlines(), indent="")
        else:
            self.console.warning("Could not display dependency tree")

    def _audit_gems(self) -> None:
        has_gemfile = os.path.isfile(os.path.join(self.app.root, "Gemfile"))
        if not (self.runner.which("bundle-audit") and has_gemfile):
            self.console.info("Bundle audit not available or no Gemfile found")
            return
        self.runner.run(["bundle", "audit", "--update", "--quiet"], check=False)
        if self.runner.succeeds(["bundle", "audit"]):
            self.console.success("Ruby dependency security check completed")
        else:
            self.console.warning("Security vulnerabilities detected in Ruby dependencies")

    def _timed_release_build(self) -> int:
        self.console.status("Checking build performance...")
        started = time.monotonic()
        self._swift("build", "--configuration", "release", check=False)
        seconds = int(time.monotonic() - started)
        self.console.success(f"Release build completed in {seconds} seconds")
        return seconds

    def validate(self) -> PackageReport:
        """
        Full validation pass; hard failures raise, soft findings become warnings.

        Raises:
            PrerequisiteError: No Package.swift.
            CommandError: Syntax check, resolution, a build or the tests failed.
        """
        self.require_manifest()
        self.console.success("Package.swift found")
        report = PackageReport()

        self.console.status("Validating Package.swift syntax...")
        try:
            manifest = self.dump_package()
        except CommandError as e:
            self.console.error("Package.swift syntax validation failed")
            self.console.lines(e.stderr.splitlines())
            raise
        self.console.success("Package.swift syntax is valid")

        self.console.status("Checking Swift version compatibility...")
        report.swift_version = (self._swift("--version").stdout.splitlines() or [""])[0]
        self.console.success(f"Using Swift version: {report.swift_version}")

        self.console.status("Resolving package dependencies...")
        self._swift("package", "resolve")
        self.console.success("Dependencies resolved successfully")
        self.show_dependencies("Package dependency tree:")

        self.console.status("Checking for known vulnerabilities...")
        self._audit_gems()

        self.console.status("Building package in debug mode...")
        self._swift("build")
        self.console.success("Debug build successful")
        self.console.status("Building package in release mode...")
        self._swift("build", "--configuration", "release")
        self.console.success("Release build successful")

        report.has_tests = self.has_test_target(manifest)
        if report.has_tests:
            self.console.status("Running package tests...")
            self._swift("test")
            report.tests_passed = True
            self.console.success("All tests passed")
        else:
            self._warn(report, "No test targets found")

        self.console.status("Checking for common package issues...")
        names = [target.get("name", "") for target in manifest.get("targets", [])]
        if any(MIXED_CASE_NAME.search(name) for name in names):
            self._warn(report, "Mixed case target names detected - consider using lowercase")
        with open(self.manifest, encoding="utf-8") as f:
            if LOOSE_CONSTRAINT.search(f.read()):
                self._warn(report, "Consider using more specific version constraints for production")

        report.build_seconds = self._timed_release_build()
        if report.build_seconds > SLOW_BUILD_SECONDS:
            self._warn(report, "Build time is over 1 minute - consider optimizing dependencies")

        self.console.status("Checking license compatibility...")
        licenses = ("LICENSE", "LICENSE.md", "LICENSE.txt")
        if any(os.path.isfile(os.path.join(self.app.root, n)) for n in licenses):
            self.console.success("License file found")
        else:
            self._warn(report, "No license file found - consider adding one")

        self.console.status("Checking documentation...")
        if os.path.isfile(os.path.join(self.app.root, "README.md")):
            self.console.success("README.md found")
        else:
            self._warn(report, "README.md not found - consider adding documentation")
        if os.path.isdir(os.path.join(self.app.root, ".swiftpm")):
            self.console.success("Xcode project configuration found")
        else:
            self._warn(report, "No Xcode project configuration - run 'xed .' to generate")

        logger.info(
            "Package validated",
            warnings=len(report.warnings),
            build_seconds=report.build_seconds,
        )
        return report

    def print_changes(self, before: Dict[str, str], after: Dict[str, str]) -> DependencyChanges:
        changes = diff_resolved(before, after)
        self.console.line("=== DEPENDENCY CHANGES ===")
        if not before and not after:
            self.console.line("No dependency information available")
        elif not before:
            self.console.line("First time dependency resolution:")
            self.console.lines(f"+ {name}: {version}" for name, version in sorted(after.items()))
        elif changes.empty:
            self.console.line("No dependency changes detected")
        else:
            if changes.updated:
                self.console.line("Updated packages:")
                self.console.lines(f"↑ {n}: {old} → {new}" for n, old, new in changes.updated)
            if changes.added:
                self.console.line("Added packages:")
                self.console.lines(f"+ {n}: {v}" for n, v in changes.added)
            if changes.removed:
                self.console.line("Removed packages:")
                self.console.lines(f"- {n}: {v}" for n, v in changes.removed)
        return changes

    def _restore_backup(self) -> bool:
        if not os.path.isfile(self.backup):
            return False
        shutil.move(self.backup, self.resolved)
        self.console.success("Package.resolved restored")
        return True

    def update(self) -> Tuple[DependencyChanges, PackageReport]:
        """
        Update every dependency and re-validate.

        Raises:
            PrerequisiteError: No Package.swift.
            CommandError: The update or the build failed.
        """
        self.require_manifest()
        self.console.status("Starting Swift Package Manager dependency update...")
        report = PackageReport()

        if os.path.isfile(self.resolved):
            self.console.status("Backing up Package.resolved...")
            shutil.copyfile(self.resolved, self.backup)
            self.console.success("Backup created: Package.resolved.backup")
        else:
            self.console.warning("No Package.resolved found - this will be a fresh resolution")
        before = load_pins(self.resolved) if os.path.isfile(self.resolved) else {}

        self.show_dependencies("Current dependency tree:")

        self.console.status("Updating all dependencies...")
        try:
            self._swift("package", "update")
        except CommandError:
            self.console.error("Dependency update failed")
            self.console.status("Restoring Package.resolved from backup...")
            self._restore_backup()
            raise
        self.console.success("Dependencies updated successfully")
        self.show_dependencies("Updated dependency tree:")

        self.console.status("Analyzing dependency changes...")
        changes = self.print_changes(before, load_pins(self.resolved))

        self.console.status("Validating updated dependencies...")
        manifest = self.dump_package()
        self.console.success("Package.swift syntax is still valid")

        self.console.status("Building with updated dependencies...")
        try:
            self._swift("build")
        except CommandError:
            self.console.error("Build failed with updated dependencies")
            if os.path.isfile(self.backup) and self.console.confirm(
                "Restore previous Package.resolved?", default=False
            ):
                self._restore_backup()
                self.console.info("You may need to resolve conflicts manually")
            raise
        self.console.success("Build successful with updated dependencies")

        report.has_tests = self.has_test_target(manifest)
        if report.has_tests:
            self.console.status("Running tests with updated dependencies...")
            report.tests_passed = self.runner.succeeds(["swift", "test"])
            if report.tests_passed:
                self.console.success("All tests pass with updated dependencies")
            else:
                self._warn(report, "Some tests failed with updated dependencies")
                self.console.info("Review test failures and update test code if needed")
        else:
            self._warn(report, "No test targets found - consider adding tests")

        self.console.status("Checking updated dependencies for security issues...")
        self._audit_gems()

        report.build_seconds = self._timed_release_build()
        if report.build_seconds > SLOW_BUILD_SECONDS:
            self._warn(report, "Build time increased - consider reviewing new dependencies")

        if os.path.isfile(self.backup):
            self.console.info("Keeping Package.resolved.backup for safety")
            self.console.info("Remove it manually after confirming everything works correctly")
        logger.info(
            "Dependencies updated",
            updated=len(changes.updated),
            added=len(changes.added),
            removed=len(changes.removed),
        )
        return changes, report

