import os
from unittest.mock import MagicMock, patch

import pytest

from repokit.cli import COMMANDS, build_parser, run_cli
from repokit.core.errors import (
    CommandError,
    EnvValidationError,
    PrerequisiteError,
    UserCancelled,
)


@pytest.fixture
def cli_app(app):
    with patch("repokit.cli.initialize_app", return_value=app) as mock_initialize:
        app.initialize = mock_initialize
        yield app


def test_every_command_is_registered():
    parser = build_parser()
    for name, _, _, func in COMMANDS:
        args = parser.parse_args([name] if name != "commit-msg" else [name, "MSG"])
        assert args.func is func


def test_unknown_flag_exits_with_one():
    with pytest.raises(SystemExit) as exc_info:
        run_cli(["run-tests", "--no-such-flag"])
    assert exc_info.value.code == 1


def test_missing_command_exits_with_one():
    with pytest.raises(SystemExit) as exc_info:
        run_cli([])
    assert exc_info.value.code == 1


def test_invalid_bump_type_exits_with_one():
    with pytest.raises(SystemExit) as exc_info:
        run_cli(["prepare-release", "huge"])
    assert exc_info.value.code == 1


def test_global_flags(cli_app, monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    assert run_cli(["-y", "--log-level", "debug", "greet"]) == 0
    cli_app.initialize.assert_called_once_with(assume_yes=True)
    assert os.environ["LOG_LEVEL"] == "DEBUG"


def fail_with(exc):
    return MagicMock(side_effect=exc)


@pytest.mark.parametrize(
    "exc, code, message",
    [
        (UserCancelled("Setup cancelled", exit_code=0), 0, "Setup cancelled"),
        (UserCancelled("Release cancelled"), 1, "Release cancelled"),
        (PrerequisiteError(".env file not found!", "Run: repokit setup"), 1, "Run: repokit setup"),
        (EnvValidationError(["APPLE_ID"], []), 1, "missing: APPLE_ID"),
        (KeyboardInterrupt(), 130, None),
    ],
)
def test_exception_exit_codes(cli_app, output, exc, code, message):
    with patch("repokit.cli.build_parser") as mock_build_parser:
        args = build_parser().parse_args(["verify"])
        args.func = fail_with(exc)
        mock_build_parser.return_value.parse_args.return_value = args

        assert run_cli(["verify"]) == code

    if message:
        assert message in output()


def test_command_error_shows_stderr_tail(cli_app, output):
    stderr = "\n".join(f"error line {i}" for i in range(15))
    with patch("repokit.cli.build_parser") as mock_build_parser:
        args = build_parser().parse_args(["validate-packages"])
        args.func = fail_with(CommandError(["swift", "build"], 1, stderr=stderr))
        mock_build_parser.return_value.parse_args.return_value = args

        assert run_cli(["validate-packages"]) == 1

    text = output()
    assert "Command failed with exit code 1: swift build" in text
    assert "error line 14" in text
    assert "error line 4\n" not in text


def test_returns_command_exit_code(cli_app, repo_root):
    (repo_root / "COMMIT_EDITMSG").write_text("wip\n")
    assert run_cli(["commit-msg", str(repo_root / "COMMIT_EDITMSG")]) == 1


@pytest.mark.parametrize(
    "env, message",
    [
        ({"COVERAGE_THRESHOLD": "high"}, "COVERAGE_THRESHOLD"),
        ({"RELEASE_DEVELOP_BRANCH": "main"}, "must differ"),
    ],
)
@patch("repokit.core.config.loader.load_dotenv")
def test_invalid_configuration_exits_with_one(
    mock_load_dotenv, monkeypatch, capsys, repo_root, env, message
):
    monkeypatch.setenv("REPOKIT_ROOT", str(repo_root))
    for key, value in env.items():
        monkeypatch.setenv(key, value)

    assert run_cli(["greet"]) == 1

    err = " ".join(capsys.readouterr().err.split())
    assert "Invalid configuration" in err
    assert message in err
