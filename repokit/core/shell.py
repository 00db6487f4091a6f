"""
Running external command-line tools.

All subprocess calls in the project go through `CommandRunner`, which keeps
them capturable in tests and turns failures into typed exceptions.
"""

import os
import shutil
import subprocess
from dataclasses import dataclass
from typing import Mapping, Sequence

import structlog

from repokit.core.errors import CommandError, PrerequisiteError

logger = structlog.get_logger(__name__)


@dataclass
class CommandResult:
    """Outcome of one external command."""

    args: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner:
    """
    Executes external commands relative to a working directory.

    Args:
        cwd: Directory commands run in. Defaults to the process cwd.
    """

    def __init__(self, cwd: str | None = None):
        self.cwd = cwd

    def run(
        self,
        cmd: Sequence[str],
        *,
        check: bool = True,
        input: str | None = None,
        cwd: str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        """
        Run a command and capture its output.

        Raises:
            PrerequisiteError: The executable does not exist.
            CommandError: `check` is set and the command exited non-zero.
        """
        args = [str(part) for part in cmd]
        logger.debug("Running command", cmd=args)
        run_env = None
        if env is not None:
            run_env = {**os.environ, **env}
        try:
            completed = subprocess.run(
                args,
                capture_output=True,
                text=True,
                input=input,
                cwd=cwd or self.cwd,
                env=run_env,
            )
        except FileNotFoundError:
            raise PrerequisiteError(f"'{args[0]}' is not installed.")

        result = CommandResult(
            args=args,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
        if check and not result.ok:
            logger.debug(
                "Command failed",
                cmd=args,
                returncode=result.returncode,
                stderr=result.stderr.strip(),
            )
            raise CommandError(args, result.returncode, result.stdout, result.stderr)
        return result

    def output(self, cmd: Sequence[str], **kwargs) -> str:
        """Run a command and return its stripped stdout."""
        return self.run(cmd, **kwargs).stdout.strip()

    def succeeds(self, cmd: Sequence[str], **kwargs) -> bool:
        """Return whether a command exits with status 0."""
        try:
            return self.run(cmd, check=False, **kwargs).ok
        except PrerequisiteError:
            return False

    def stream(self, cmd: Sequence[str], log_file: str) -> int:
        """Run a command with stdout and stderr written to `log_file`."""
        args = [str(part) for part in cmd]
        logger.debug("Running command", cmd=args, log_file=log_file)
        os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
        with open(log_file, "w", encoding="utf-8") as fh:
            try:
                completed = subprocess.run(
                    args, stdout=fh, stderr=subprocess.STDOUT, cwd=self.cwd
                )
            except FileNotFoundError:
                raise PrerequisiteError(f"'{args[0]}' is not installed.")
        return completed.returncode

    def which(self, tool: str) -> bool:
        return shutil.which(tool) is not None

    def require(self, tool: str, hint: str | None = None) -> None:
        if not self.which(tool):
            raise PrerequisiteError(f"{tool} is not installed.", hint)
