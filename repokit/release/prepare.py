"""
Release preparation: bump the version, cut a release branch, commit and open
a pull request.
"""

import os
from dataclasses import dataclass
from typing import Optional

import structlog

from repokit.core.app import AppContext
from repokit.core.error_handler import best_effort
from repokit.core.errors import PrerequisiteError, UserCancelled
from repokit.github.client import parse_remote_url
from repokit.release.changelog import update_changelog
from repokit.release.notes import pr_body, release_notes
from repokit.release.semver import BumpType, Version
from repokit.release.version_files import update_version_files

logger = structlog.get_logger(__name__)

CANCELLED = "Release preparation cancelled"


@dataclass
class ReleasePlan:
    current: Version
    new: Version
    bump: BumpType
    branch: str
    notes_path: Optional[str] = None
    pr_created: bool = False


class ReleasePreparer:
    """
    Walks through the release preparation steps for one bump.

    Args:
        app: The application context.
        bump: Which version component to increment.
    """

    def __init__(self, app: AppContext, bump: BumpType = BumpType.PATCH):
        self.app = app
        self.console = app.console
        self.git = app.git
        self.release = app.settings.release
        self.bump = BumpType(bump)

    def current_version(self) -> Version:
        tag = self.git.latest_tag()
        if not tag:
            return Version()
        try:
            return Version.parse(tag, prefix=self.release.tag_prefix)
        except ValueError:
            logger.warning("Latest tag is not a version, starting from 0.0.0", tag=tag)
            return Version()

    def _check_worktree(self) -> None:
        changes = self.git.status_porcelain()
        if not changes:
            return
        self.console.warning("You have uncommitted changes. Please commit or stash them first.")
        self.console.lines(changes)
        if not self.console.confirm("Continue anyway?", default=False):
            raise UserCancelled(CANCELLED, exit_code=1)

    def _check_branch(self) -> str:
        branch = self.git.current_branch()
        allowed = (self.release.main_branch, self.release.develop_branch)
        if branch not in allowed:
            self.console.warning(
                f"You're not on {allowed[0]} or {allowed[1]} branch (currently on: {branch})"
            )
            if not self.console.confirm("Continue anyway?", default=False):
                raise UserCancelled(CANCELLED, exit_code=1)
        return branch

    def _switch_to_release_branch(self, branch: str) -> None:
        self.console.status(f"Creating release branch: {branch}")
        if self.git.branch_exists(branch):
            self.console.warning(f"Release branch {branch} already exists")
            if not self.console.confirm("Check out existing branch?", default=True):
                raise UserCancelled(CANCELLED, exit_code=1)
            self.git.checkout(branch)
        else:
            self.git.checkout_new(branch)
            self.console.success(f"Created and checked out release branch: {branch}")

    def _update_files(self, version: str) -> None:
        self.console.status("Updating version in project files...")
        for path in update_version_files(self.app.root, version):
            self.console.status(f"Updated version in {os.path.relpath(path, self.app.root)}")

        self.console.status("Updating CHANGELOG.md...")
        created = update_changelog(os.path.join(self.app.root, "CHANGELOG.md"), version)
        if created:
            self.console.status("Created CHANGELOG.md")
        self.console.success("CHANGELOG.md updated")

    def _run_tests(self) -> None:
        self.console.status("Running tests to validate the release...")
        runner = self.app.runner
        if os.path.isfile(os.path.join(self.app.root, "Package.swift")):
            self.console.status("Running Swift package tests...")
            if runner.succeeds(["swift", "test"]):
                self.console.success("Swift package tests passed")
            else:
                self.console.error("Swift package tests failed")
                if not self.console.confirm("Continue anyway?", default=False):
                    raise UserCancelled(CANCELLED, exit_code=1)

        fastfile = os.path.join(self.app.root, "fastlane", "Fastfile")
        if os.path.isfile(fastfile) and runner.which("bundle"):
            self.console.status("Running Fastlane tests...")
            ok, _ = best_effort(runner.run, ["bundle", "exec", "fastlane", "test"])
            if ok:
                self.console.success("Fastlane tests completed")
            else:
                self.console.warning(
                    "Fastlane tests had issues (this might be expected if no Xcode project exists)"
                )

    def _commit_and_push(self, version: str, branch: str) -> None:
        self.console.status("Committing version changes...")
        self.git.add_all()
        self.git.commit(
            f"Prepare release {version}\n\n"
            f"- Bump version to {version}\n"
            "- Update CHANGELOG.md\n"
            "- Update project files with new version"
        )
        self.console.success("Version changes committed")

        self.console.status("Pushing release branch to origin...")
        self.git.push_upstream(branch)
        self.console.success("Release branch pushed to origin")

    def _open_pull_request(self, plan: ReleasePlan) -> bool:
        gh = self.app.gh
        main = self.release.main_branch
        if not gh.is_installed():
            self.console.warning("GitHub CLI not available - please create pull request manually")
            self.console.status(f"Create PR from {plan.branch} to {main} branch")
            return False

        self.console.status("Creating GitHub pull request...")
        body = pr_body(str(plan.new), str(plan.current), plan.bump.value, self.release.tag_prefix)
        if gh.pr_create(f"Release {plan.new}", body, base=main, head=plan.branch):
            self.console.success("GitHub pull request created")
            return True

        self.console.warning("Could not create GitHub pull request automatically")
        try:
            owner, repo = parse_remote_url(self.git.remote_url())
        except PrerequisiteError:
            return False
        self.console.status(
            "You can create it manually at: "
            f"https://github.com/{owner}/{repo}/compare/{main}...{plan.branch}"
        )
        return False

    def _write_notes(self, plan: ReleasePlan) -> str:
        self.console.status("Generating release notes...")
        path = os.path.join(self.app.root, f"release-notes-{plan.new}.md")
        with open(path, "w", encoding="utf-8") as f:
            f.write(release_notes(str(plan.new), str(plan.current), self.release.tag_prefix))
        self.console.success(f"Release notes generated: {os.path.basename(path)}")
        return path

    def run(self) -> ReleasePlan:
        """
        Run every step in order.

        Raises:
            PrerequisiteError: Not inside a git repository.
            UserCancelled: A confirmation was declined.
        """
        self.git.ensure_repository()
        self.console.status(
            f"Starting release preparation with {self.bump.value} version bump..."
        )
        self._check_worktree()
        branch = self._check_branch()

        self.console.status("Pulling latest changes from origin...")
        self.git.pull(branch)

        current = self.current_version()
        new = current.bump(self.bump)
        self.console.status(f"Current version: {current}")
        self.console.status(f"New version will be: {new}")

        self.console.line()
        self.console.line("=== RELEASE SUMMARY ===")
        self.console.line(f"Version bump: {self.bump.value}")
        self.console.line(f"Current version: {current}")
        self.console.line(f"New version: {new}")
        self.console.line(f"Current branch: {branch}")
        self.console.line("========================")
        if not self.console.confirm("Proceed with release preparation?", default=True):
            raise UserCancelled(CANCELLED, exit_code=0)

        plan = ReleasePlan(current=current, new=new, bump=self.bump, branch=f"release/{new}")
        self._switch_to_release_branch(plan.branch)
        self._update_files(str(new))
        self._run_tests()
        self._commit_and_push(str(new), plan.branch)
        plan.pr_created = self._open_pull_request(plan)
        plan.notes_path = self._write_notes(plan)
        logger.info("Release prepared", version=str(new), branch=plan.branch)
        return plan

    def print_next_steps(self, plan: ReleasePlan) -> None:
        tag = plan.new.tag(self.release.tag_prefix)
        main = self.release.main_branch
        self.console.line()
        self.console.success("🎉 Release preparation completed successfully!")
        self.console.line()
        self.console.line("=== NEXT STEPS ===")
        self.console.lines(
            [
                "1. Edit and complete the CHANGELOG.md entry",
                f"2. Update release notes in: {os.path.basename(plan.notes_path or '')}",
                "3. Test the release branch thoroughly",
                "4. Review and merge the pull request",
                "5. Create and push the release tag:",
                f"   git checkout {main}",
                f"   git pull origin {main}",
                f"   git tag -a {tag} -m 'Release {plan.new}'",
                f"   git push origin {tag}",
            ],
            indent="",
        )
        self.console.line()
        self.console.line("=== AUTOMATED DEPLOYMENT ===")
        self.console.line("After pushing the tag, GitHub Actions will automatically:")
        self.console.lines(
            [
                "- Build and test the release",
                "- Deploy to TestFlight",
                "- Create GitHub release with notes",
                "- Send team notifications",
            ],
            indent="",
        )
