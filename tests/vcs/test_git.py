from unittest.mock import MagicMock

import pytest

from repokit.core.errors import CommandError, PrerequisiteError
from repokit.core.shell import CommandRunner
from repokit.vcs.git import Git


@pytest.fixture
def git_runner():
    return MagicMock(spec=CommandRunner)


@pytest.fixture
def git(git_runner, repo_root):
    return Git(git_runner, str(repo_root))


def test_ensure_repository(git, git_runner):
    git_runner.succeeds.return_value = False
    with pytest.raises(PrerequisiteError) as exc_info:
        git.ensure_repository()
    assert exc_info.value.hint == "Run this command from your repository root."


def test_latest_tag(git, git_runner, repo_root):
    git_runner.output.return_value = "v1.2.3"
    assert git.latest_tag() == "v1.2.3"
    git_runner.output.assert_called_with(
        ["git", "describe", "--tags", "--abbrev=0"], check=False, cwd=str(repo_root)
    )

    git_runner.output.return_value = ""
    assert git.latest_tag() is None


def test_previous_tag(git, git_runner, repo_root):
    git_runner.output.return_value = "v1.2.2"
    assert git.previous_tag("v1.2.3") == "v1.2.2"
    git_runner.output.assert_called_with(
        ["git", "describe", "--tags", "--abbrev=0", "v1.2.3^"], check=False, cwd=str(repo_root)
    )


def test_status_porcelain(git, git_runner):
    git_runner.output.return_value = " M README.md\n?? notes.txt"
    assert git.status_porcelain() == [" M README.md", "?? notes.txt"]


def test_merge_conflict_returns_false(git, git_runner):
    git_runner.output.side_effect = CommandError(
        ["git", "merge"], 1, stderr="CONFLICT (content): Merge conflict in README.md\n"
    )
    assert git.merge_no_ff("main", "Merge main into develop") is False


def test_merge_success(git, git_runner, repo_root):
    assert git.merge_no_ff("main", "Merge main into develop") is True
    git_runner.output.assert_called_once_with(
        ["git", "merge", "main", "--no-ff", "-m", "Merge main into develop"],
        check=True,
        cwd=str(repo_root),
    )


def test_contributor_count(git, git_runner):
    git_runner.output.return_value = "    12\tAda Lovelace\n     3\tGrace Hopper\n"
    assert git.contributor_count("v1.0.0") == 2


def test_rev_list_count(git, git_runner):
    git_runner.output.return_value = "17"
    assert git.rev_list_count("v1.0.0..v1.1.0") == 17


def test_staged_files(git, git_runner):
    git_runner.output.return_value = "Sources/App.swift\nREADME.md\nTests/AppTests.swift"
    assert git.staged_files(".swift") == ["Sources/App.swift", "Tests/AppTests.swift"]


def test_delete_remote_branch(git, git_runner, repo_root):
    git_runner.succeeds.return_value = True
    assert git.delete_remote_branch("release/1.0.0") is True
    git_runner.succeeds.assert_called_once_with(
        ["git", "push", "origin", "--delete", "release/1.0.0"], cwd=str(repo_root)
    )


def test_hooks_dir(git, repo_root):
    assert git.hooks_dir() == str(repo_root / ".git" / "hooks")
