import io
from unittest.mock import MagicMock

import pytest
from rich.console import Console

from repokit.core.app import AppContext
from repokit.core.config import AppSettings, PathSettings, get_settings
from repokit.core.console import StatusConsole
from repokit.core.shell import CommandResult, CommandRunner


@pytest.fixture(scope="function", autouse=True)
def set_test_environment(monkeypatch, tmp_path):
    """
    Keeps every test away from the developer's real repository and logs.
    """
    monkeypatch.setenv("REPOKIT_LOG_DIR", str(tmp_path / "logs"))
    for key in (
        "PROJECT_NAME",
        "COVERAGE_THRESHOLD",
        "RELEASE_MAIN_BRANCH",
        "RELEASE_DEVELOP_BRANCH",
        "RELEASE_TAG_PREFIX",
        "SLACK_WEBHOOK_URL",
        "RELEASE_EMAIL_LIST",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(scope="function")
def repo_root(tmp_path):
    """An empty directory standing in for the managed repository."""
    root = tmp_path / "repo"
    root.mkdir()
    return root


@pytest.fixture(scope="function")
def make_settings(repo_root):
    """Factory for settings rooted at the temporary repository."""

    def _make(**overrides) -> AppSettings:
        settings = AppSettings(paths=PathSettings(root_dir=str(repo_root)))
        for name, value in overrides.items():
            setattr(settings, name, value)
        return settings

    return _make


@pytest.fixture(scope="function")
def settings(make_settings):
    return make_settings()


@pytest.fixture(scope="function")
def runner():
    """A CommandRunner whose commands all succeed with empty output."""
    mock_runner = MagicMock(spec=CommandRunner)
    mock_runner.run.side_effect = lambda cmd, **kwargs: CommandResult(list(cmd), 0)
    mock_runner.output.return_value = ""
    mock_runner.succeeds.return_value = True
    mock_runner.which.return_value = True
    mock_runner.stream.return_value = 0
    return mock_runner


@pytest.fixture(scope="function")
def console():
    """A console that answers yes and records its output."""
    return StatusConsole(Console(file=io.StringIO(), width=200), assume_yes=True)


@pytest.fixture(scope="function")
def output(console):
    """Returns everything printed to the test console so far."""

    def _output() -> str:
        return console.console.file.getvalue()

    return _output


@pytest.fixture(scope="function")
def app(settings, console, runner):
    """An application context wired to the mock runner and quiet console."""
    return AppContext(settings, console=console, runner=runner, configure_logging=False)
