"""
Exception types shared by all commands.

The CLI turns these into exit codes and colored messages; nothing below the
CLI layer calls sys.exit().
"""

from typing import Sequence


class RepokitError(Exception):
    """Base class for expected, user-facing failures."""

    exit_code = 1


class PrerequisiteError(RepokitError):
    """A required tool, login, file or repository state is missing."""

    def __init__(self, message: str, hint: str | None = None):
        super().__init__(message)
        self.hint = hint


class CommandError(RepokitError):
    """An external command exited with a non-zero status."""

    def __init__(
        self,
        cmd: Sequence[str],
        returncode: int,
        stdout: str = "",
        stderr: str = "",
    ):
        self.cmd = list(cmd)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(
            f"Command failed with exit code {returncode}: {' '.join(self.cmd)}"
        )


class UserCancelled(RepokitError):
    """The user declined a confirmation prompt."""

    def __init__(self, message: str = "Operation cancelled", exit_code: int = 1):
        super().__init__(message)
        self.exit_code = exit_code


class EnvValidationError(RepokitError):
    """Required .env keys are missing or still hold template placeholders."""

    def __init__(self, missing: Sequence[str], placeholders: Sequence[str]):
        self.missing = list(missing)
        self.placeholders = list(placeholders)
        parts = []
        if self.missing:
            parts.append(f"missing: {', '.join(self.missing)}")
        if self.placeholders:
            parts.append(f"placeholder values: {', '.join(self.placeholders)}")
        super().__init__("Environment validation failed (" + "; ".join(parts) + ")")
