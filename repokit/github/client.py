"""
Wrapper around the GitHub CLI (`gh`).

Every GitHub interaction goes through `gh` so the user's existing
authentication is reused; no tokens are handled here.
"""

import json
import re
from typing import Any, Dict, List, Optional, Tuple

import structlog

from repokit.core.errors import CommandError, PrerequisiteError
from repokit.core.shell import CommandRunner

logger = structlog.get_logger(__name__)

GITHUB_REMOTE_PATTERN = re.compile(r"github\.com[:/]([^/]+)/([^/]+?)(?:\.git)?/?$")

GH_INSTALL_HINT = "Install it with: brew install gh (or visit https://cli.github.com/)"
GH_AUTH_HINT = "Run: gh auth login"


def parse_remote_url(url: str) -> Tuple[str, str]:
    """
    Extract (owner, repo) from a GitHub remote URL.

    Both SSH (`git@github.com:owner/repo.git`) and HTTPS forms are accepted.
    """
    match = GITHUB_REMOTE_PATTERN.search(url.strip()) if url else None
    if not match:
        raise PrerequisiteError(
            f"Could not parse GitHub repository from remote URL: {url or '<none>'}",
            "Make sure 'origin' points at a GitHub repository.",
        )
    return match.group(1), match.group(2)


class GitHubCLI:
    """
    Typed helpers over `gh` subcommands.

    Args:
        runner: The command runner used to invoke `gh`.
    """

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def is_installed(self) -> bool:
        return self.runner.which("gh")

    def is_authenticated(self) -> bool:
        return self.runner.succeeds(["gh", "auth", "status"])

    def ensure_ready(self) -> None:
        """Raise PrerequisiteError unless gh is installed and logged in."""
        if not self.is_installed():
            raise PrerequisiteError("GitHub CLI (gh) is not installed.", GH_INSTALL_HINT)
        if not self.is_authenticated():
            raise PrerequisiteError("Not authenticated with GitHub CLI.", GH_AUTH_HINT)

    def repo_name_with_owner(self) -> str:
        return self.runner.output(
            ["gh", "repo", "view", "--json", "nameWithOwner", "-q", ".nameWithOwner"]
        )

    def can_view_repo(self, full_name: str) -> bool:
        return self.runner.succeeds(["gh", "repo", "view", full_name])

    def api(
        self,
        path: str,
        method: str = "GET",
        payload: Optional[Dict[str, Any]] = None,
        jq: Optional[str] = None,
        fields: Optional[Dict[str, str]] = None,
        check: bool = True,
    ) -> str:
        """
        Call `gh api`. A payload is sent as JSON on stdin.

        Returns:
            The raw stdout of the call.
        """
        cmd = ["gh", "api", path, "--method", method]
        if jq:
            cmd += ["--jq", jq]
        for key, value in (fields or {}).items():
            cmd += ["--field", f"{key}={value}"]
        stdin = None
        if payload is not None:
            cmd += ["--input", "-"]
            stdin = json.dumps(payload)
        result = self.runner.run(cmd, check=check, input=stdin)
        return result.stdout.strip()

    def api_json(self, path: str) -> Optional[Any]:
        """GET an endpoint and parse the JSON body; None when the call fails."""
        try:
            body = self.api(path)
        except CommandError:
            return None
        if not body:
            return {}
        try:
            return json.loads(body)
        except json.JSONDecodeError:
            logger.debug("Non-JSON response", path=path)
            return None

    def api_ok(self, path: str) -> bool:
        return self.runner.succeeds(["gh", "api", path, "--silent"])

    def secret_set(self, name: str, value: str) -> bool:
        return self.runner.succeeds(
            ["gh", "secret", "set", name, "--app", "actions"], input=value
        )

    def secret_set_from_file(self, env_file: str) -> bool:
        return self.runner.succeeds(["gh", "secret", "set", "-f", env_file])

    def secret_list(self) -> List[str]:
        output = self.runner.output(["gh", "secret", "list"])
        return [line for line in output.splitlines() if line.strip()]

    def variable_set(self, name: str, value: str) -> bool:
        return self.runner.succeeds(["gh", "variable", "set", name, "--body", value])

    def pr_create(self, title: str, body: str, base: str, head: str) -> bool:
        return self.runner.succeeds(
            [
                "gh", "pr", "create",
                "--title", title,
                "--body", body,
                "--base", base,
                "--head", head,
                "--reviewer", "@me",
            ]
        )

    def release_url(self, tag: str) -> Optional[str]:
        result = self.runner.run(
            ["gh", "release", "view", tag, "--json", "url", "--jq", ".url"], check=False
        )
        return result.stdout.strip() if result.ok else None

    def latest_run(self, workflow: str) -> Optional[Dict[str, Any]]:
        """Status and conclusion of the most recent run of a workflow file."""
        result = self.runner.run(
            [
                "gh", "run", "list",
                f"--workflow={workflow}",
                "--limit=1",
                "--json", "status,conclusion",
            ],
            check=False,
        )
        if not result.ok:
            return None
        try:
            runs = json.loads(result.stdout or "[]")
        except json.JSONDecodeError:
            return None
        return runs[0] if runs else None

    def open_repo_in_browser(self, full_name: str, branch: str) -> None:
        self.runner.run(["gh", "repo", "view", "--web", full_name, "--branch", branch])
