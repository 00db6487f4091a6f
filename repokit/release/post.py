"""
Post-release housekeeping: branch cleanup, develop sync, report, archive and
notifications.
"""

import os
import shutil
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import structlog

from repokit.core.app import AppContext
from repokit.core.error_handler import best_effort
from repokit.core.errors import PrerequisiteError
from repokit.github.client import parse_remote_url
from repokit.release.notes import ReleaseReportData, release_report
from repokit.release.notify import send_email, send_slack

logger = structlog.get_logger(__name__)

SECONDS_PER_DAY = 86400
SWIFT_EXCLUDED_DIRS = {"build", ".build", ".git"}


@dataclass
class ReleaseMetrics:
    days_since_previous: Optional[int] = None
    commits_in_release: Optional[int] = None
    contributors: int = 0


@dataclass
class PostReleaseResult:
    version: str
    tag: str
    report_path: str
    archived: List[str] = field(default_factory=list)
    develop_merged: Optional[bool] = None
    metrics: ReleaseMetrics = field(default_factory=ReleaseMetrics)


def count_swift_sources(root: str) -> Tuple[int, int]:
    """(files, lines) over `*.swift` files outside build directories."""
    files = 0
    lines = 0
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [d for d in dirnames if d not in SWIFT_EXCLUDED_DIRS]
        for name in filenames:
            if not name.endswith(".swift"):
                continue
            files += 1
            with open(os.path.join(dirpath, name), encoding="utf-8", errors="replace") as f:
                lines += sum(1 for _ in f)
    return files, lines


class PostReleaseTasks:
    def __init__(self, app: AppContext):
        self.app = app
        self.console = app.console
        self.git = app.git
        self.gh = app.gh
        self.release = app.settings.release

    def _version_of(self, tag: str) -> str:
        prefix = self.release.tag_prefix
        return tag[len(prefix):] if prefix and tag.startswith(prefix) else tag

    def _ensure_main(self) -> None:
        main = self.release.main_branch
        if self.git.current_branch() != main:
            self.console.status(f"Switching to {main} branch...")
            self.git.checkout(main)
            self.git.pull(main)
            self.console.success(f"Switched to {main} branch")

    def _cleanup_release_branch(self, version: str) -> None:
        branch = f"release/{version}"
        if not self.git.branch_exists(branch):
            self.console.info(
                f"Release branch {branch} not found (may have been cleaned up already)"
            )
            return
        self.console.status(f"Cleaning up release branch: {branch}")
        self.git.delete_branch(branch)
        self.git.delete_remote_branch(branch)
        self.console.success(f"Release branch {branch} cleaned up")

    def _sync_develop(self, version: str) -> Optional[bool]:
        develop = self.release.develop_branch
        main = self.release.main_branch
        if not self.git.branch_exists(develop):
            self.console.info(f"Develop branch not found - skipping {develop} branch update")
            return None

        self.console.status(f"Updating {develop} branch with {main} branch changes...")
        self.git.checkout(develop)
        self.git.pull(develop)
        merged = self.git.merge_no_ff(
            main, f"Merge {main} into {develop} after release {version}"
        )
        if merged:
            self.console.success(f"Merged {main} into {develop}")
            self.git.push(develop)
            self.console.success(f"Pushed updated {develop} branch")
        else:
            self.console.warning(f"Merge conflicts detected when merging {main} into {develop}")
            self.console.info("Please resolve conflicts manually and run:")
            self.console.info("  git add .")
            self.console.info(
                f"  git commit -m 'Resolve merge conflicts after release {version}'"
            )
            self.console.info(f"  git push origin {develop}")
        self.git.checkout(main)
        return merged

    def _workflow_conclusion(self, workflow: str) -> str:
        if not self.gh.is_installed():
            return "Unknown"
        run = self.gh.latest_run(workflow)
        return (run or {}).get("conclusion") or "Unknown"

    def collect_report_data(self, version: str, tag: str) -> ReleaseReportData:
        previous = self.git.previous_tag(tag)
        base = previous or "HEAD~10"
        swift_files, swift_lines = count_swift_sources(self.app.root)
        return ReleaseReportData(
            version=version,
            tag=tag,
            previous_tag=previous,
            release_commit=self.git.rev_parse(tag),
            total_commits=self.git.rev_list_count(tag),
            contributors=self.git.contributor_count(tag),
            commits=self.git.log_oneline(f"{base}...{tag}"),
            files_changed=self.git.diff_names(f"{base}...{tag}"),
            build_status=self._workflow_conclusion("release.yml"),
            test_status=self._workflow_conclusion("ci.yml"),
            swift_lines=swift_lines,
            swift_files=swift_files,
        )

    def _check_deployment(self, tag: str) -> None:
        self.console.status("Checking release deployment status...")
        if not self.gh.is_installed():
            self.console.warning("GitHub CLI not available - cannot check release status")
            return

        url = self.gh.release_url(tag)
        if url:
            self.console.success(f"GitHub release {tag} is published")
            self.console.info(f"Release URL: {url}")
        else:
            self.console.warning(f"GitHub release {tag} not found - may still be processing")

        self.console.status("Checking GitHub Actions status...")
        run = self.gh.latest_run("release.yml") or {}
        status = run.get("status") or "unknown"
        if status == "completed":
            conclusion = run.get("conclusion")
            if conclusion == "success":
                self.console.success("Release workflow completed successfully")
            else:
                self.console.warning(f"Release workflow completed with status: {conclusion}")
        elif status == "in_progress":
            self.console.info("Release workflow is still running...")
            self.console.info("Monitor progress: gh run list --workflow=release.yml")
        else:
            self.console.warning(f"Release workflow status: {status}")

    def _archive(self, version: str, report_path: str) -> List[str]:
        self.console.status("Archiving release documentation...")
        releases_dir = self.app.settings.paths.releases_dir
        os.makedirs(releases_dir, exist_ok=True)
        archived = []
        notes = os.path.join(self.app.root, f"release-notes-{version}.md")
        if os.path.isfile(notes):
            archived.append(shutil.move(notes, os.path.join(releases_dir, os.path.basename(notes))))
            self.console.success("Archived release notes to releases/")
        archived.append(
            shutil.move(report_path, os.path.join(releases_dir, os.path.basename(report_path)))
        )
        self.console.success("Archived release report to releases/")
        return archived

    def _update_version_tracker(self, version: str) -> None:
        tracker = os.path.join(self.app.root, ".version")
        if not os.path.isfile(tracker):
            return
        with open(tracker, "w", encoding="utf-8") as f:
            f.write(f"{version}\n")
        self.git.add(".version")
        self.git.commit(f"Update version tracker to {version}")
        self.git.push(self.release.main_branch)
        self.console.success("Updated version tracker")

    def _notify(self, version: str, tag: str) -> None:
        self.console.status("Sending post-release notifications...")
        notifications = self.app.settings.notifications

        if notifications.slack_webhook_url:
            self.console.status("Sending Slack notification...")
            ok, _ = best_effort(send_slack, notifications.slack_webhook_url, version, tag)
            if ok:
                self.console.success("Slack notification sent")
            else:
                self.console.warning("Failed to send Slack notification")
        else:
            self.console.info("SLACK_WEBHOOK_URL not configured - skipping Slack notification")

        if notifications.release_email_list and self.app.runner.which("mail"):
            self.console.status("Sending email notification...")
            ok, _ = best_effort(
                send_email, self.app.runner, notifications.release_email_list, version, tag
            )
            if ok:
                self.console.success("Email notification sent")
            else:
                self.console.warning("Failed to send email notification")
        else:
            self.console.info("Email notifications not configured - skipping")

    def collect_metrics(self, tag: str, previous: Optional[str]) -> ReleaseMetrics:
        metrics = ReleaseMetrics(contributors=self.git.contributor_count(tag))
        if previous:
            delta = self.git.commit_timestamp(tag) - self.git.commit_timestamp(previous)
            metrics.days_since_previous = delta // SECONDS_PER_DAY
            metrics.commits_in_release = self.git.rev_list_count(f"{previous}..{tag}")
        return metrics

    def run(self) -> PostReleaseResult:
        """
        Raises:
            PrerequisiteError: Not a git repository, or no release tag exists.
        """
        self.git.ensure_repository()
        self.console.status("Starting post-release tasks...")

        tag = self.git.latest_tag()
        if not tag:
            raise PrerequisiteError("No release tag found. Did the release process complete?")
        version = self._version_of(tag)
        self.console.status(f"Processing post-release tasks for version {version} (tag: {tag})")
        if not self.git.ref_exists(tag):
            raise PrerequisiteError(
                f"Release tag {tag} not found. Release may not have completed successfully."
            )
        self.console.success(f"Release tag {tag} found")

        self._ensure_main()
        self._cleanup_release_branch(version)
        develop_merged = self._sync_develop(version)

        self.console.status("Generating release report...")
        data = self.collect_report_data(version, tag)
        report_path = os.path.join(self.app.root, f"release-report-{version}.md")
        with open(report_path, "w", encoding="utf-8") as f:
            f.write(release_report(data))
        self.console.success(f"Release report generated: {os.path.basename(report_path)}")

        self._check_deployment(tag)
        archived = self._archive(version, report_path)
        self._update_version_tracker(version)
        self._notify(version, tag)

        self.console.status("Collecting release metrics...")
        metrics = self.collect_metrics(tag, data.previous_tag)
        if metrics.days_since_previous is not None:
            self.console.info(f"Days since last release: {metrics.days_since_previous}")
        if metrics.commits_in_release is not None:
            self.console.info(f"Commits in this release: {metrics.commits_in_release}")
        self.console.info(f"Total contributors: {metrics.contributors}")

        logger.info("Post-release tasks finished", version=version, tag=tag)
        return PostReleaseResult(
            version=version,
            tag=tag,
            report_path=archived[-1],
            archived=archived,
            develop_merged=develop_merged,
            metrics=metrics,
        )

    def print_summary(self, result: PostReleaseResult) -> None:
        self.console.line()
        self.console.success("🎉 Post-release processing completed successfully!")
        self.console.line()
        self.console.line("=== POST-RELEASE SUMMARY ===")
        self.console.lines(
            [
                f"✅ Release version: {result.version}",
                f"✅ Release tag: {result.tag}",
                "✅ Release branch cleaned up",
                "✅ Develop branch updated",
                "✅ Documentation archived",
                "✅ Notifications sent",
            ],
            indent="",
        )
        self.console.line()
        self.console.line("=== MONITORING RESOURCES ===")
        try:
            owner, repo = parse_remote_url(self.git.remote_url())
            self.console.line(
                f"• GitHub Release: https://github.com/{owner}/{repo}/releases/tag/{result.tag}"
            )
        except PrerequisiteError:
            logger.debug("No GitHub remote for release link")
        self.console.lines(
            [
                "• App Store Connect: https://appstoreconnect.apple.com",
                "• TestFlight: https://appstoreconnect.apple.com/apps",
            ],
            indent="",
        )
        self.console.line()
        self.console.line("=== ARCHIVED DOCUMENTATION ===")
        for path in result.archived:
            self.console.line(f"• {os.path.relpath(path, self.app.root)}")

