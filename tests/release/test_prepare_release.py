from unittest.mock import MagicMock

import pytest

from repokit.core.errors import PrerequisiteError, UserCancelled
from repokit.github.client import GitHubCLI
from repokit.release import BumpType, Version
from repokit.release.prepare import ReleasePreparer
from repokit.vcs.git import Git


@pytest.fixture
def release_app(app):
    git = MagicMock(spec=Git)
    git.status_porcelain.return_value = []
    git.current_branch.return_value = "develop"
    git.latest_tag.return_value = "v1.2.3"
    git.branch_exists.return_value = False
    git.remote_url.return_value = "git@github.com:acme/weather.git"
    gh = MagicMock(spec=GitHubCLI)
    gh.is_installed.return_value = True
    gh.pr_create.return_value = True
    app.git = git
    app.gh = gh
    return app


def test_current_version(release_app):
    assert ReleasePreparer(release_app).current_version() == Version(1, 2, 3)
    release_app.git.latest_tag.return_value = None
    assert ReleasePreparer(release_app).current_version() == Version(0, 0, 0)
    release_app.git.latest_tag.return_value = "nightly"
    assert ReleasePreparer(release_app).current_version() == Version(0, 0, 0)


def test_run_minor_release(release_app, repo_root):
    (repo_root / "Package.swift").write_text('let version = "1.2.3"\n')
    git = release_app.git

    plan = ReleasePreparer(release_app, BumpType.MINOR).run()

    assert str(plan.current) == "1.2.3"
    assert str(plan.new) == "1.3.0"
    assert plan.branch == "release/1.3.0"
    assert plan.pr_created is True
    git.pull.assert_called_once_with("develop")
    git.checkout_new.assert_called_once_with("release/1.3.0")
    git.add_all.assert_called_once()
    assert git.commit.call_args.args[0].startswith("Prepare release 1.3.0\n\n- Bump version to 1.3.0")
    git.push_upstream.assert_called_once_with("release/1.3.0")
    assert 'version = "1.3.0"' in (repo_root / "Package.swift").read_text()
    assert "## [1.3.0]" in (repo_root / "CHANGELOG.md").read_text()
    assert (repo_root / "release-notes-1.3.0.md").exists()
    release_app.runner.succeeds.assert_any_call(["swift", "test"])
    title, body = release_app.gh.pr_create.call_args.args
    assert title == "Release 1.3.0"
    assert "minor (1.2.3 → 1.3.0)" in body
    assert release_app.gh.pr_create.call_args.kwargs == {"base": "main", "head": "release/1.3.0"}


def test_not_a_repository(release_app):
    release_app.git.ensure_repository.side_effect = PrerequisiteError("Not in a git repository.")
    with pytest.raises(PrerequisiteError):
        ReleasePreparer(release_app).run()


def test_dirty_worktree_declined(release_app, console):
    release_app.git.status_porcelain.return_value = [" M Sources/App.swift"]
    console.confirm = MagicMock(return_value=False)

    with pytest.raises(UserCancelled) as exc_info:
        ReleasePreparer(release_app).run()

    assert exc_info.value.exit_code == 1
    release_app.git.pull.assert_not_called()


def test_unexpected_branch_declined(release_app, console):
    release_app.git.current_branch.return_value = "feature/login"
    console.confirm = MagicMock(return_value=False)

    with pytest.raises(UserCancelled) as exc_info:
        ReleasePreparer(release_app).run()
    assert exc_info.value.exit_code == 1


def test_summary_declined_exits_cleanly(release_app, console):
    console.confirm = MagicMock(return_value=False)

    with pytest.raises(UserCancelled) as exc_info:
        ReleasePreparer(release_app).run()

    assert exc_info.value.exit_code == 0
    release_app.git.checkout_new.assert_not_called()


def test_existing_release_branch_checked_out(release_app):
    release_app.git.branch_exists.return_value = True
    ReleasePreparer(release_app).run()
    release_app.git.checkout.assert_called_once_with("release/1.2.4")
    release_app.git.checkout_new.assert_not_called()


def test_failed_tests_declined(release_app, repo_root, console):
    (repo_root / "Package.swift").write_text("// package\n")
    release_app.runner.succeeds.return_value = False
    console.confirm = MagicMock(side_effect=[True, False])

    with pytest.raises(UserCancelled):
        ReleasePreparer(release_app).run()
    release_app.git.commit.assert_not_called()


def test_pull_request_fallback(release_app, output):
    release_app.gh.pr_create.return_value = False

    plan = ReleasePreparer(release_app).run()

    assert plan.pr_created is False
    assert "https://github.com/acme/weather/compare/main...release/1.2.4" in output()


def test_without_gh(release_app):
    release_app.gh.is_installed.return_value = False
    plan = ReleasePreparer(release_app).run()
    assert plan.pr_created is False
    release_app.gh.pr_create.assert_not_called()
