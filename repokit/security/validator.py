"""
The repository security checklist.

Every check is an independent predicate over the current state of the GitHub
repository (read through `gh api`) or the working tree. Running the catalog
twice against an unchanged repository yields the same tally.
"""

import glob
import os
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Tuple

import structlog

from repokit.core.shell import CommandRunner
from repokit.github.client import GitHubCLI
from repokit.security.checks import CheckOutcome, SecurityCheck, ValidationTally
from repokit.vcs.git import Git

logger = structlog.get_logger(__name__)

SECRET_LOG_PATTERN = r"password\|secret\|key\|token"
MAX_COLLABORATORS = 10


def _dig(data: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


@dataclass
class CheckResult:
    check: SecurityCheck
    outcome: CheckOutcome


@dataclass
class ValidationRun:
    full_name: str
    tally: ValidationTally = field(default_factory=ValidationTally)
    results: List[CheckResult] = field(default_factory=list)

    def by_category(self) -> List[Tuple[str, List[CheckResult]]]:
        grouped: List[Tuple[str, List[CheckResult]]] = []
        for result in self.results:
            if not grouped or grouped[-1][0] != result.check.category:
                grouped.append((result.check.category, []))
            grouped[-1][1].append(result)
        return grouped


class SecurityValidator:
    """
    Builds and evaluates the checklist for `owner/repo`.

    Args:
        gh: GitHub CLI wrapper.
        git: Git wrapper for the local clone.
        runner: Command runner for package tooling.
        root: The local repository root; file checks resolve against it.
        owner: Repository owner.
        repo: Repository name.
    """

    def __init__(
        self,
        gh: GitHubCLI,
        git: Git,
        runner: CommandRunner,
        root: str,
        owner: str,
        repo: str,
    ):
        self.gh = gh
        self.git = git
        self.runner = runner
        self.root = root
        self.owner = owner
        self.repo = repo

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    def _endpoint(self, suffix: str = "") -> str:
        return f"repos/{self.full_name}{suffix}"

    def _repo_field(self, *keys: str) -> Any:
        return _dig(self.gh.api_json(self._endpoint()), *keys)

    def _main_protection(self, *keys: str) -> Any:
        return _dig(self.gh.api_json(self._endpoint("/branches/main/protection")), *keys)

    def _exists(self, *relative: str) -> bool:
        return any(os.path.isfile(os.path.join(self.root, path)) for path in relative)

    def _has_workflows(self) -> bool:
        return bool(glob.glob(os.path.join(self.root, ".github", "workflows", "*.yml")))

    def _develop_protected_if_present(self) -> bool:
        if self.gh.api_json(self._endpoint("/branches/develop")) is None:
            return True
        return self.gh.api_ok(self._endpoint("/branches/develop/protection"))

    def _maintainers_team(self) -> bool:
        return self.gh.api_ok(self._endpoint("/teams/maintainers-team")) or self.gh.api_ok(
            self._endpoint("/teams/maintainers")
        )

    def _few_collaborators(self) -> bool:
        collaborators = self.gh.api_json(self._endpoint("/collaborators"))
        return isinstance(collaborators, list) and len(collaborators) < MAX_COLLABORATORS

    def _no_secret_commits(self) -> bool:
        return not self.git.log_grep(SECRET_LOG_PATTERN, limit=5)

    def build_catalog(self) -> List[SecurityCheck]:
        """The ordered checklist; package checks depend on which files exist."""

        def check(
            category: str,
            description: str,
            predicate: Callable[[], bool],
            warning: bool = False,
        ):
            return SecurityCheck(category, description, predicate, is_warning=warning)

        def endpoint_ok(path: str) -> Callable[[], bool]:
            return lambda: self.gh.api_ok(self._endpoint(path))

        def repo_flag(name: str, expected: bool = True) -> Callable[[], bool]:
            return lambda: self._repo_field(name) is expected

        def main_rule(section: str, key: str, expected: bool = True) -> Callable[[], bool]:
            return lambda: self._main_protection(section, key) is expected

        def exists(*paths: str) -> Callable[[], bool]:
            return lambda: self._exists(*paths)

        def required_reviews() -> bool:
            count = self._main_protection(
                "required_pull_request_reviews", "required_approving_review_count"
            )
            return (count or 0) >= 1

        access = "Repository Access"
        branches = "Branch Protection"
        features = "Security Features"
        settings = "Repository Settings"
        files = "Required Files"
        workflows = "CI/CD and Workflows"
        teams = "Teams and Permissions"
        advanced = "Advanced Security"
        packages = "Package Security"

        catalog = [
            check(
                access,
                "Repository is accessible",
                lambda: self.gh.can_view_repo(self.full_name),
            ),
            check(
                access,
                "User has admin access",
                lambda: self._repo_field("permissions", "admin") is True,
                True,
            ),
            check(
                branches,
                "Main branch protection enabled",
                endpoint_ok("/branches/main/protection"),
            ),
            check(branches, "Main branch requires PR reviews", required_reviews),
            check(
                branches,
                "Main branch requires status checks",
                main_rule("required_status_checks", "strict"),
            ),
            check(
                branches,
                "Main branch dismisses stale reviews",
                main_rule("required_pull_request_reviews", "dismiss_stale_reviews"),
            ),
            check(
                branches,
                "Develop branch protection (if exists)",
                self._develop_protected_if_present,
                True,
            ),
            check(
                features,
                "Vulnerability alerts enabled",
                endpoint_ok("/vulnerability-alerts"),
            ),
            check(
                features,
                "Automated security fixes enabled (Dependabot)",
                endpoint_ok("/automated-security-fixes"),
            ),
            check(
                features,
                "Secret scanning enabled",
                endpoint_ok("/secret-scanning/alerts"),
                True,
            ),
            check(
                features,
                "Code scanning enabled",
                endpoint_ok("/code-scanning/alerts"),
                True,
            ),
            check(features, "Dependency graph enabled", repo_flag("has_dependency_graph")),
            check(
                settings,
                "Repository is private (or appropriately public)",
                repo_flag("private"),
                True,
            ),
            check(settings, "Issues are enabled", repo_flag("has_issues")),
            check(
                settings,
                "Merge commits disabled (squash only)",
                repo_flag("allow_merge_commit", False),
            ),
            check(
                settings,
                "Auto-delete head branches enabled",
                repo_flag("delete_branch_on_merge"),
            ),
            check(
                settings,
                "Force pushes disabled",
                main_rule("allow_force_pushes", "enabled", False),
            ),
            check(files, "SECURITY.md exists", exists("SECURITY.md")),
            check(
                files,
                "LICENSE file exists",
                exists("LICENSE", "LICENSE.txt", "LICENSE.md"),
            ),
            check(files, "CODEOWNERS file exists", exists(".github/CODEOWNERS")),
            check(files, "README.md exists", exists("README.md")),
            check(
                files,
                "Dependabot configuration exists",
                exists(".github/dependabot.yml"),
                True,
            ),
            check(workflows, "GitHub Actions workflows exist", self._has_workflows),
            check(
                workflows,
                "CI workflow exists",
                exists(".github/workflows/ci.yml", ".github/workflows/test.yml"),
            ),
            check(
                workflows,
                "Security workflow exists",
                exists(".github/workflows/security.yml"),
                True,
            ),
            check(
                workflows,
                "Release workflow exists",
                exists(".github/workflows/release.yml"),
                True,
            ),
            check(teams, "Maintainers team has access", self._maintainers_team, True),
            check(teams, "Outside collaborators limited", self._few_collaborators, True),
            check(advanced, "No secrets in repository", self._no_secret_commits, True),
            check(
                advanced,
                "Signed commits enabled",
                main_rule("required_signatures", "enabled"),
                True,
            ),
            check(
                advanced,
                "Conversation resolution required",
                main_rule("required_conversation_resolution", "enabled"),
                True,
            ),
        ]

        if self._exists("Package.swift"):
            catalog.append(
                check(
                    packages,
                    "Swift Package.swift exists and valid",
                    lambda: self.runner.succeeds(["swift", "package", "dump-package"]),
                )
            )
        if self._exists("Gemfile"):
            catalog.append(
                check(packages, "Ruby Gemfile.lock exists", exists("Gemfile.lock"))
            )
            if self.runner.which("bundle"):
                catalog.append(
                    check(
                        packages,
                        "No Ruby vulnerability warnings",
                        lambda: self.runner.succeeds(["bundle", "audit", "--quiet"]),
                        True,
                    )
                )
        if self._exists("fastlane/Fastfile"):
            catalog.append(
                check(
                    packages,
                    "Fastlane configuration exists",
                    exists("fastlane/Fastfile"),
                )
            )
        return catalog

    def run(self, on_result: Optional[Callable[[CheckResult], None]] = None) -> ValidationRun:
        """Evaluate every check with a fresh tally."""
        run = ValidationRun(full_name=self.full_name)
        for check in self.build_catalog():
            outcome = check.evaluate()
            run.tally.record(outcome)
            result = CheckResult(check, outcome)
            run.results.append(result)
            if on_result:
                on_result(result)
        logger.info(
            "Security validation finished",
            repository=self.full_name,
            passed=run.tally.passed,
            failed=run.tally.failed,
            warnings=run.tally.warnings,
        )
        return run
