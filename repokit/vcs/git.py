"""
Git operations used by the setup, release and hook commands.
"""

import os
from typing import List, Optional

import structlog

from repokit.core.errors import CommandError, PrerequisiteError
from repokit.core.shell import CommandRunner

logger = structlog.get_logger(__name__)


class Git:
    """
    Runs git in a single repository.

    Args:
        runner: The command runner used for every git invocation.
        root: The repository root.
    """

    def __init__(self, runner: CommandRunner, root: str):
        self.runner = runner
        self.root = root

    def _git(self, *args: str, check: bool = True) -> str:
        return self.runner.output(["git", *args], check=check, cwd=self.root)

    def is_repository(self) -> bool:
        return self.runner.succeeds(["git", "rev-parse", "--git-dir"], cwd=self.root)

    def ensure_repository(self) -> None:
        if not self.is_repository():
            raise PrerequisiteError(
                "Not in a git repository.",
                "Run this command from your repository root.",
            )

    def hooks_dir(self) -> str:
        return os.path.join(self.root, ".git", "hooks")

    def status_porcelain(self) -> List[str]:
        return [line for line in self._git("status", "--porcelain").splitlines() if line]

    def current_branch(self) -> str:
        return self._git("rev-parse", "--abbrev-ref", "HEAD")

    def latest_tag(self, ref: Optional[str] = None) -> Optional[str]:
        args = ["describe", "--tags", "--abbrev=0"]
        if ref:
            args.append(ref)
        tag = self._git(*args, check=False)
        return tag or None

    def previous_tag(self, tag: str) -> Optional[str]:
        """The most recent tag reachable from the parent of `tag`."""
        return self.latest_tag(f"{tag}^")

    def branch_exists(self, branch: str) -> bool:
        return self.runner.succeeds(
            ["git", "rev-parse", "--verify", branch], cwd=self.root
        )

    def checkout(self, branch: str) -> None:
        self._git("checkout", branch)

    def checkout_new(self, branch: str) -> None:
        self._git("checkout", "-b", branch)

    def pull(self, branch: str, remote: str = "origin") -> None:
        self._git("pull", remote, branch)

    def push(self, *refs: str, remote: str = "origin") -> None:
        self._git("push", remote, *refs)

    def push_upstream(self, branch: str, remote: str = "origin") -> None:
        self._git("push", "-u", remote, branch)

    def add_all(self) -> None:
        self._git("add", "-A")

    def add(self, *paths: str) -> None:
        self._git("add", *paths)

    def commit(self, message: str) -> None:
        self._git("commit", "-m", message)

    def merge_no_ff(self, branch: str, message: str) -> bool:
        """Merge `branch` into the current branch; False on conflicts."""
        try:
            self._git("merge", branch, "--no-ff", "-m", message)
            return True
        except CommandError as e:
            logger.warning("Merge failed", branch=branch, stderr=e.stderr.strip())
            return False

    def delete_branch(self, branch: str) -> bool:
        return self.runner.succeeds(["git", "branch", "-D", branch], cwd=self.root)

    def delete_remote_branch(self, branch: str, remote: str = "origin") -> bool:
        return self.runner.succeeds(
            ["git", "push", remote, "--delete", branch], cwd=self.root
        )

    def rev_parse(self, ref: str) -> str:
        return self._git("rev-parse", ref)

    def ref_exists(self, ref: str) -> bool:
        return self.runner.succeeds(["git", "rev-parse", ref], cwd=self.root)

    def rev_list_count(self, rev_range: str) -> int:
        return int(self._git("rev-list", "--count", rev_range) or 0)

    def contributor_count(self, ref: str) -> int:
        output = self._git("shortlog", "-sn", ref, check=False)
        return len([line for line in output.splitlines() if line.strip()])

    def log_oneline(self, rev_range: str) -> List[str]:
        return self._git("log", "--oneline", rev_range, check=False).splitlines()

    def diff_names(self, rev_range: str) -> List[str]:
        return self._git("diff", "--name-only", rev_range, check=False).splitlines()

    def commit_timestamp(self, ref: str) -> int:
        return int(self._git("log", "-1", "--format=%ct", ref))

    def remote_url(self, remote: str = "origin") -> str:
        return self._git("config", "--get", f"remote.{remote}.url", check=False)

    def staged_files(self, suffix: str = "") -> List[str]:
        output = self._git("diff", "--cached", "--name-only", "--diff-filter=d")
        return [f for f in output.splitlines() if f and f.endswith(suffix)]

    def log_grep(self, pattern: str, limit: int = 5) -> List[str]:
        output = self._git(
            "log", "--all", f"--grep={pattern}", "--oneline", "-n", str(limit),
            check=False,
        )
        return [line for line in output.splitlines() if line]
