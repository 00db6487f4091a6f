from unittest.mock import MagicMock

import pytest

from repokit.core.errors import CommandError, PrerequisiteError
from repokit.github.client import GitHubCLI
from repokit.github.repository import (
    RepositorySetup,
    RepositorySetupOptions,
    resolve_origin,
)
from repokit.vcs.git import Git


@pytest.fixture
def gh():
    mock_gh = MagicMock(spec=GitHubCLI)
    mock_gh.api_ok.return_value = True
    mock_gh.api.return_value = ""
    return mock_gh


@pytest.fixture
def codeowners(repo_root):
    return repo_root / ".github" / "CODEOWNERS"


def make_setup(gh, console, codeowners, **flags):
    options = RepositorySetupOptions.from_flags(**flags)
    return RepositorySetup(gh, console, "acme", "weather", str(codeowners), options)


def test_from_flags():
    options = RepositorySetupOptions.from_flags(main_only=True, no_codeowners=True)
    assert options.main_protection is True
    assert options.develop_protection is False
    assert options.release_protection is False
    assert options.codeowners is False
    assert options.repo_settings is True


def test_dry_run_changes_nothing(gh, console, codeowners, output):
    setup = make_setup(gh, console, codeowners, dry_run=True)

    result = setup.run()

    gh.api.assert_not_called()
    assert not codeowners.exists()
    assert result.applied == []
    assert result.failed == []
    assert "Setting main branch protection rules" in result.skipped
    assert "Create CODEOWNERS" in result.skipped
    assert "Would execute: gh api repos/acme/weather/branches/main/protection" in output()


def test_full_run(gh, console, codeowners):
    setup = make_setup(gh, console, codeowners)

    result = setup.run()

    assert result.ok
    assert codeowners.read_text().startswith("# Code Owners Configuration")
    paths = [c.args[0] for c in gh.api.call_args_list]
    assert "repos/acme/weather/branches/main/protection" in paths
    assert "repos/acme/weather/branches/develop/protection" in paths
    assert "repos/acme/weather" in paths
    assert "repos/acme/weather/vulnerability-alerts" in paths
    assert "repos/acme/weather/automated-security-fixes" in paths
    main_call = gh.api.call_args_list[paths.index("repos/acme/weather/branches/main/protection")]
    assert main_call.kwargs["method"] == "PUT"
    assert main_call.kwargs["payload"]["enforce_admins"] is True


def test_failures_are_counted(gh, console, codeowners):
    def api(path, **kwargs):
        if path.endswith("/vulnerability-alerts"):
            raise CommandError(["gh", "api", path], 1, stderr="Forbidden")
        return ""

    gh.api.side_effect = api
    setup = make_setup(gh, console, codeowners, no_codeowners=True)

    result = setup.run()

    assert not result.ok
    assert result.failed == ["Enabling vulnerability alerts"]
    assert "Enabling automated security fixes" in result.applied


def test_missing_main_skips_protection(gh, console, codeowners):
    gh.api_ok.side_effect = lambda path: not path.endswith("/branches/main")
    setup = make_setup(gh, console, codeowners, main_only=True, no_repo_settings=True)

    setup.run()

    assert setup.options.main_protection is False
    gh.api.assert_not_called()


def test_missing_develop_is_created(gh, console, codeowners):
    gh.api_ok.side_effect = lambda path: not path.endswith("/branches/develop")
    gh.api.side_effect = lambda path, **kwargs: "abc123" if path.endswith("heads/main") else ""
    setup = make_setup(gh, console, codeowners, no_codeowners=True, no_repo_settings=True)

    setup.run()

    gh.api.assert_any_call(
        "repos/acme/weather/git/refs",
        method="POST",
        fields={"ref": "refs/heads/develop", "sha": "abc123"},
    )
    assert "Creating develop branch" in setup.result.applied


def test_declined_develop_creation(gh, console, codeowners):
    console.assume_yes = False
    console.confirm = MagicMock(return_value=False)
    gh.api_ok.side_effect = lambda path: not path.endswith("/branches/develop")
    setup = make_setup(gh, console, codeowners, no_codeowners=True, no_repo_settings=True)

    setup.run()

    assert setup.options.develop_protection is False
    paths = [c.args[0] for c in gh.api.call_args_list]
    assert paths == ["repos/acme/weather/branches/main/protection"]


def test_resolve_origin():
    git = MagicMock(spec=Git)
    git.remote_url.return_value = "git@github.com:acme/weather.git"
    gh = MagicMock(spec=GitHubCLI)
    gh.can_view_repo.return_value = True

    assert resolve_origin(git, gh) == ("acme", "weather")
    gh.can_view_repo.assert_called_once_with("acme/weather")


def test_resolve_origin_without_remote():
    git = MagicMock(spec=Git)
    git.remote_url.return_value = ""
    with pytest.raises(PrerequisiteError, match="No GitHub remote"):
        resolve_origin(git, MagicMock(spec=GitHubCLI))


def test_resolve_origin_without_access():
    git = MagicMock(spec=Git)
    git.remote_url.return_value = "https://github.com/acme/weather.git"
    gh = MagicMock(spec=GitHubCLI)
    gh.can_view_repo.return_value = False
    with pytest.raises(PrerequisiteError, match="Cannot access"):
        resolve_origin(git, gh)
