"""
Centralized application initialization.

This module provides a single point of entry for initializing the
application's core services, such as configuration, logging and the
command runner. CLI commands receive a fully configured `AppContext`.
"""

import structlog

from repokit.core.config import AppSettings, get_settings
from repokit.core.console import StatusConsole
from repokit.core.logger import setup_logging
from repokit.core.shell import CommandRunner
from repokit.github.client import GitHubCLI
from repokit.vcs.git import Git

_logger = structlog.get_logger(__name__)


class AppContext:
    """
    Centralized application context.
    """

    def __init__(
        self,
        settings: AppSettings,
        console: StatusConsole | None = None,
        runner: CommandRunner | None = None,
        configure_logging: bool = True,
    ):
        self.settings = settings
        if configure_logging:
            setup_logging(self.settings)
        self.console = console or StatusConsole()
        self.runner = runner or CommandRunner(cwd=self.settings.paths.root_dir)
        self.git = Git(self.runner, self.settings.paths.root_dir)
        self.gh = GitHubCLI(self.runner)
        _logger.debug(
            "Application context initialized.", root=self.settings.paths.root_dir
        )

    @property
    def root(self) -> str:
        return self.settings.paths.root_dir

    @classmethod
    def create(cls, assume_yes: bool = False) -> "AppContext":
        """
        Creates a new instance of the application context.
        """
        settings = get_settings()
        return cls(settings, console=StatusConsole(assume_yes=assume_yes))


def initialize_app(assume_yes: bool = False) -> AppContext:
    """
    Initializes the application by creating the application context.
    """
    return AppContext.create(assume_yes=assume_yes)
