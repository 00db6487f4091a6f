"""
Applying branch protection, CODEOWNERS and repository settings to a GitHub
repository.
"""

import json
import os
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

import structlog

from repokit.core.console import StatusConsole
from repokit.core.errors import CommandError, PrerequisiteError
from repokit.github.client import GitHubCLI, parse_remote_url
from repokit.github.protection import (
    RELEASE_BRANCH_PATTERN,
    develop_branch_protection,
    main_branch_protection,
    render_codeowners,
    repository_merge_settings,
)
from repokit.vcs.git import Git

logger = structlog.get_logger(__name__)

CODEOWNERS_PREVIEW_LINES = 10


def resolve_origin(git: Git, gh: GitHubCLI) -> Tuple[str, str]:
    """
    Owner and name of the GitHub repository behind `origin`.

    Raises:
        PrerequisiteError: No GitHub remote, or `gh` cannot see the repository.
    """
    url = git.remote_url()
    if not url:
        raise PrerequisiteError(
            "No GitHub remote found. Make sure this is a GitHub repository."
        )
    owner, repo = parse_remote_url(url)
    if not gh.can_view_repo(f"{owner}/{repo}"):
        raise PrerequisiteError(
            f"Cannot access repository {owner}/{repo}. Check your permissions."
        )
    return owner, repo


@dataclass
class RepositorySetupOptions:
    main_protection: bool = True
    develop_protection: bool = True
    release_protection: bool = True
    codeowners: bool = True
    repo_settings: bool = True
    dry_run: bool = False

    @classmethod
    def from_flags(
        cls,
        main_only: bool = False,
        no_codeowners: bool = False,
        no_repo_settings: bool = False,
        dry_run: bool = False,
    ) -> "RepositorySetupOptions":
        return cls(
            develop_protection=not main_only,
            release_protection=not main_only,
            codeowners=not no_codeowners,
            repo_settings=not no_repo_settings,
            dry_run=dry_run,
        )


@dataclass
class RepositorySetupResult:
    applied: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


class RepositorySetup:
    """
    Configures `owner/repo` according to the options.

    In dry-run mode every action is announced and recorded as skipped; no
    API call that changes state is made.
    """

    def __init__(
        self,
        gh: GitHubCLI,
        console: StatusConsole,
        owner: str,
        repo: str,
        codeowners_path: str,
        options: Optional[RepositorySetupOptions] = None,
    ):
        self.gh = gh
        self.console = console
        self.owner = owner
        self.repo = repo
        self.codeowners_path = codeowners_path
        self.options = options or RepositorySetupOptions()
        self.result = RepositorySetupResult()

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    def _endpoint(self, suffix: str = "") -> str:
        return f"repos/{self.full_name}{suffix}"

    def _execute(self, description: str, preview: str, action: Callable[[], Any]) -> bool:
        self.console.status(description)
        if self.options.dry_run:
            self.console.info(f"Would execute: {preview}")
            self.result.skipped.append(description)
            return True
        try:
            action()
        except CommandError as e:
            logger.warning("Repository action failed", action=description, stderr=e.stderr.strip())
            self.console.error(f"{description} failed")
            self.result.failed.append(description)
            return False
        self.console.success(f"{description} completed")
        self.result.applied.append(description)
        return True

    def _put_protection(self, branch: str, payload: Dict[str, Any]) -> bool:
        path = self._endpoint(f"/branches/{branch}/protection")
        return self._execute(
            f"Setting {branch} branch protection rules",
            f"gh api {path} --method PUT --input - <<< '{json.dumps(payload)}'",
            lambda: self.gh.api(path, method="PUT", payload=payload),
        )

    def print_configuration(self) -> None:
        self.console.info("Configuration:")
        self.console.flag("Main branch protection", self.options.main_protection)
        self.console.flag("Develop branch protection", self.options.develop_protection)
        self.console.flag("Release branch protection", self.options.release_protection)
        self.console.flag("Create CODEOWNERS", self.options.codeowners)
        self.console.flag("Repository settings", self.options.repo_settings)
        self.console.flag("Dry run", self.options.dry_run)

    def check_branches(self) -> None:
        self.console.status("Checking branch availability...")
        main_exists = self.gh.api_ok(self._endpoint("/branches/main"))
        develop_exists = self.gh.api_ok(self._endpoint("/branches/develop"))
        self.console.info("Branch status:")
        self.console.line(f"  main: {'✅' if main_exists else '❌'}")
        self.console.line(f"  develop: {'✅' if develop_exists else '❌'}")

        if not main_exists:
            self.console.warning("Main branch not found - skipping main branch protection")
            self.options.main_protection = False

        if not develop_exists and self.options.develop_protection:
            if self.console.confirm(
                "Develop branch not found - do you want to create it?", default=False
            ):
                self._execute(
                    "Creating develop branch",
                    f"gh api {self._endpoint('/git/refs')} --method POST "
                    "--field ref=refs/heads/develop --field sha=<main sha>",
                    self.create_develop_branch,
                )
            else:
                self.console.info("Skipping develop branch protection")
                self.options.develop_protection = False

    def create_develop_branch(self) -> None:
        sha = self.gh.api(self._endpoint("/git/refs/heads/main"), jq=".object.sha")
        self.gh.api(
            self._endpoint("/git/refs"),
            method="POST",
            fields={"ref": "refs/heads/develop", "sha": sha},
        )

    def configure_main(self) -> None:
        self.console.section("Configuring Main Branch Protection")
        self._put_protection("main", main_branch_protection())

    def configure_develop(self) -> None:
        self.console.section("Configuring Develop Branch Protection")
        self._put_protection("develop", develop_branch_protection())

    def describe_release(self) -> None:
        self.console.section("Configuring Release Branch Protection")
        self.console.info(
            f"Release branch pattern protection ({RELEASE_BRANCH_PATTERN}) must be configured manually:"
        )
        self.console.info("1. Go to Settings → Branches in GitHub")
        self.console.info(f"2. Add rule with pattern '{RELEASE_BRANCH_PATTERN}'")
        self.console.info("3. Use similar settings to main branch")
        self.result.skipped.append("Release branch protection")

    def write_codeowners(self) -> None:
        self.console.section("Creating CODEOWNERS File")
        content = render_codeowners()
        if self.options.dry_run:
            self.console.info("Would create .github/CODEOWNERS file")
            self.console.info("Content preview:")
            self.console.lines(content.splitlines()[:CODEOWNERS_PREVIEW_LINES])
            self.console.line("  ...")
            self.result.skipped.append("Create CODEOWNERS")
            return
        os.makedirs(os.path.dirname(self.codeowners_path), exist_ok=True)
        with open(self.codeowners_path, "w", encoding="utf-8") as f:
            f.write(content)
        self.console.success("Created .github/CODEOWNERS file")
        self.result.applied.append("Create CODEOWNERS")

    def configure_settings(self) -> None:
        self.console.section("Configuring Repository Settings")
        settings = repository_merge_settings()
        path = self._endpoint()
        self._execute(
            "Updating repository merge settings",
            f"gh api {path} --method PATCH --input - <<< '{json.dumps(settings)}'",
            lambda: self.gh.api(path, method="PATCH", payload=settings),
        )
        self.console.status("Enabling security features...")
        for description, suffix in (
            ("Enabling vulnerability alerts", "/vulnerability-alerts"),
            ("Enabling automated security fixes", "/automated-security-fixes"),
        ):
            endpoint = self._endpoint(suffix)
            self._execute(
                description,
                f"gh api {endpoint} --method PUT",
                lambda endpoint=endpoint: self.gh.api(endpoint, method="PUT"),
            )
        self.console.info("Additional security features (may require GitHub Advanced Security):")
        self.console.info("- Secret scanning: Enable in Settings → Security & analysis")
        self.console.info("- Code scanning: Enable in Settings → Security & analysis")
        self.console.info("- Dependency review: Enable in Settings → Security & analysis")

    def run(self) -> RepositorySetupResult:
        self.check_branches()
        if self.options.main_protection:
            self.configure_main()
        if self.options.develop_protection:
            self.configure_develop()
        if self.options.release_protection:
            self.describe_release()
        if self.options.codeowners:
            self.write_codeowners()
        if self.options.repo_settings:
            self.configure_settings()
        logger.info(
            "Repository setup finished",
            repository=self.full_name,
            applied=len(self.result.applied),
            failed=len(self.result.failed),
            dry_run=self.options.dry_run,
        )
        return self.result

    def print_summary(self) -> None:
        self.console.section("Setup Complete")
        self.console.line("📊 Configuration Summary:")
        self.console.line(f"  Repository: {self.full_name}")
        self.console.flag("Main branch protection", self.options.main_protection)
        self.console.flag("Develop branch protection", self.options.develop_protection)
        self.console.flag("CODEOWNERS file", self.options.codeowners)
        self.console.flag("Repository settings", self.options.repo_settings)
        if self.result.failed:
            self.console.warning(f"{len(self.result.failed)} action(s) failed:")
            self.console.lines(self.result.failed, indent="  • ")
        self.console.line()
        self.console.info("Next Steps:")
        self.console.lines(
            [
                "1. Review branch protection rules in GitHub Settings → Branches",
                "2. Verify team permissions and access levels",
                "3. Update .github/CODEOWNERS with your actual team names",
                "4. Configure required status checks to match your CI workflows",
                "5. Test the protection rules with a test PR",
            ],
            indent="",
        )
        self.console.line()
        self.console.warning("Important Notes:")
        self.console.lines(
            [
                "• Some features require GitHub Advanced Security license",
                "• Teams referenced in CODEOWNERS must exist in your organization",
                "• Status checks must match the names used in your GitHub Actions workflows",
            ],
            indent="",
        )
