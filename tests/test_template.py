import os
from unittest.mock import MagicMock

import pytest

from repokit.core.errors import CommandError, PrerequisiteError, UserCancelled
from repokit.template import (
    check_yaml,
    rename_template,
    replace_in_file,
    require_env_file,
    required_files,
    setup_template,
    verify_template,
)

ENV_TEMPLATE = "PROJECT_NAME=Weather\nPRODUCT_BUNDLE_IDENTIFIER=io.acme.weather\nDEVELOPMENT_TEAM=\n"


def make_template(root):
    (root / "MyApp.xcodeproj").mkdir()
    (root / "MyApp.xcodeproj" / "project.pbxproj").write_text("// project")
    (root / "MyApp").mkdir()
    (root / ".swiftlint.yml").write_text("included:\n  - MyApp\n  - MyAppTests\n")
    (root / ".env.template").write_text(ENV_TEMPLATE)


def populate(root, project="MyApp"):
    for relative in required_files(project):
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("name: ci\n" if relative.endswith(".yml") else "content\n")


def test_rename_template(repo_root):
    make_template(repo_root)

    renamed = rename_template(str(repo_root), "Weather")

    assert renamed == [str(repo_root / "Weather.xcodeproj"), str(repo_root / "Weather")]
    assert (repo_root / "Weather.xcodeproj" / "project.pbxproj").exists()
    assert not (repo_root / "MyApp").exists()
    assert rename_template(str(repo_root), "MyApp") == []


def test_replace_in_file(tmp_path):
    path = tmp_path / ".swiftlint.yml"
    path.write_text("included:\n  - MyApp\n  - MyAppTests\n")
    assert replace_in_file(str(path), "MyApp", "Weather") is True
    assert path.read_text() == "included:\n  - Weather\n  - WeatherTests\n"
    assert replace_in_file(str(tmp_path / "missing.yml"), "MyApp", "Weather") is False


def test_setup_template(app, repo_root):
    make_template(repo_root)

    result = setup_template(app)

    assert result.project_name == "Weather"
    assert result.env_created is True
    assert result.swiftlint_updated is True
    assert (repo_root / ".env").read_text() == ENV_TEMPLATE
    assert (repo_root / "Weather.xcodeproj").is_dir()
    assert "Weather" in (repo_root / ".swiftlint.yml").read_text()


def test_setup_template_declined(app, repo_root, console):
    make_template(repo_root)
    console.confirm = MagicMock(return_value=False)

    with pytest.raises(UserCancelled) as exc_info:
        setup_template(app)

    assert exc_info.value.exit_code == 0
    assert (repo_root / "MyApp.xcodeproj").is_dir()


def test_setup_template_without_env_template(app):
    with pytest.raises(PrerequisiteError, match="not found"):
        setup_template(app)


def test_verify_missing_files(app, repo_root, output):
    populate(repo_root)
    os.remove(repo_root / "fastlane" / "Matchfile")

    result = verify_template(app)

    assert result.ok is False
    assert result.missing == ["fastlane/Matchfile"]
    assert "Missing files: fastlane/Matchfile" in output()
    app.runner.run.assert_not_called()


def test_verify(app, repo_root):
    populate(repo_root)
    (repo_root / ".github" / "dependabot.yml").write_text("updates: [unclosed\n")

    result = verify_template(app)

    assert result.ok is True
    assert result.xcode_checked is True
    assert result.yaml_issues == [".github/dependabot.yml"]
    assert result.fixed_permissions is True
    assert os.access(repo_root / "setup.sh", os.X_OK)
    app.runner.run.assert_called_once_with(["xcodebuild", "-list", "-project", "MyApp.xcodeproj"])


def test_verify_invalid_xcode_project(app, repo_root):
    populate(repo_root)
    app.runner.run.side_effect = CommandError(["xcodebuild", "-list"], 74)
    with pytest.raises(CommandError):
        verify_template(app)


def test_verify_without_xcodebuild(app, repo_root):
    populate(repo_root)
    app.runner.which.return_value = False
    assert verify_template(app).xcode_checked is False


def test_check_yaml(tmp_path):
    good = tmp_path / "ci.yml"
    good.write_text("on: [push]\njobs: {}\n")
    bad = tmp_path / "bad.yml"
    bad.write_text("jobs: [\n")
    assert check_yaml(str(good)) is None
    assert check_yaml(str(bad))


def test_require_env_file(app, repo_root):
    with pytest.raises(PrerequisiteError) as exc_info:
        require_env_file(app)
    assert exc_info.value.hint == "Run: repokit setup"
    (repo_root / ".env").write_text("APPLE_ID=dev@acme.io\n")
    require_env_file(app)
