"""
First-run customization of the app template and a structural self-check.
"""

import os
import re
import stat
from dataclasses import dataclass, field
from typing import List, Optional

import structlog
import yaml

from repokit.core.app import AppContext
from repokit.core.errors import CommandError, PrerequisiteError, UserCancelled
from repokit.envfile import create_from_template, read_env_file

logger = structlog.get_logger(__name__)

TEMPLATE_NAME = "MyApp"

YAML_FILES = (
    ".github/workflows/ci.yml",
    ".github/workflows/release.yml",
    ".github/dependabot.yml",
)


def required_files(project: str) -> List[str]:
    return [
        ".env.template",
        ".gitignore",
        "setup.sh",
        "README.md",
        "LICENSE",
        "Gemfile",
        f"{project}.xcodeproj/project.pbxproj",
        "fastlane/Fastfile",
        "fastlane/Appfile",
        "fastlane/Matchfile",
        *YAML_FILES,
        ".swiftlint.yml",
    ]


@dataclass
class SetupResult:
    project_name: str
    renamed: List[str] = field(default_factory=list)
    env_created: bool = False
    swiftlint_updated: bool = False


@dataclass
class VerifyResult:
    missing: List[str] = field(default_factory=list)
    yaml_issues: List[str] = field(default_factory=list)
    xcode_checked: bool = False
    fixed_permissions: bool = False

    @property
    def ok(self) -> bool:
        return not self.missing


def rename_template(root: str, project_name: str) -> List[str]:
    """Rename `MyApp.xcodeproj` and `MyApp/` to the project name; returns the new paths."""
    renamed = []
    if project_name == TEMPLATE_NAME:
        return renamed
    for old, new in (
        (f"{TEMPLATE_NAME}.xcodeproj", f"{project_name}.xcodeproj"),
        (TEMPLATE_NAME, project_name),
    ):
        source = os.path.join(root, old)
        target = os.path.join(root, new)
        if os.path.isdir(source):
            os.rename(source, target)
            renamed.append(target)
    return renamed


def replace_in_file(path: str, old: str, new: str) -> bool:
    if not os.path.isfile(path):
        return False
    with open(path, encoding="utf-8") as f:
        content = f.read()
    with open(path, "w", encoding="utf-8") as f:
        f.write(re.sub(re.escape(old), new, content))
    return True


def setup_template(app: AppContext) -> SetupResult:
    """
    Raises:
        PrerequisiteError: Neither .env nor .env.template exists.
        UserCancelled: The user declined (exit code 0).
    """
    console = app.console
    paths = app.settings.paths
    console.header("🚀 iOS/macOS Template Setup")

    env_created = False
    if not os.path.exists(paths.env_file):
        console.warning(".env file not found. Copying from .env.template")
        env_created = create_from_template(paths.env_template, paths.env_file)
        console.success("Created .env file from template")

    values = read_env_file(paths.env_file)
    project_name = values.get("PROJECT_NAME") or app.settings.project.name
    console.info("📋 Current Configuration:")
    console.line(f"Project Name: {project_name}")
    console.line(f"Bundle ID: {values.get('PRODUCT_BUNDLE_IDENTIFIER', '')}")
    console.line(f"Development Team: {values.get('DEVELOPMENT_TEAM') or 'Not set'}")
    console.line()

    console.warning("This will rename files and update references to use your project name.")
    if not console.confirm("Do you want to proceed?", default=False):
        raise UserCancelled(
            "Setup cancelled. You can run this command again when ready.", exit_code=0
        )

    result = SetupResult(project_name=project_name, env_created=env_created)
    console.status("🔄 Renaming project files...")
    result.renamed = rename_template(app.root, project_name)
    for path in result.renamed:
        console.success(f"Renamed to {os.path.relpath(path, app.root)}")

    swiftlint = os.path.join(app.root, ".swiftlint.yml")
    if project_name != TEMPLATE_NAME and replace_in_file(swiftlint, TEMPLATE_NAME, project_name):
        result.swiftlint_updated = True
        console.success("Updated SwiftLint configuration")

    logger.info("Template customized", project=project_name, renamed=result.renamed)
    console.status("Next steps:")
    console.lines(
        [
            f"1. Open {project_name}.xcodeproj in Xcode",
            "2. Update the project name in Xcode (select project → rename)",
            "3. Review and update your .env file with correct values",
            "4. Set up your GitHub secrets: repokit github-setup",
            "5. Initialize Fastlane Match: fastlane match init",
        ],
        indent="",
    )
    console.success("Template setup complete!")
    return result


def check_yaml(path: str) -> Optional[str]:
    """Parse a YAML file; returns the error text or None."""
    try:
        with open(path, encoding="utf-8") as f:
            yaml.safe_load(f)
    except yaml.YAMLError as e:
        return str(e)
    return None


def verify_template(app: AppContext) -> VerifyResult:
    """
    Raises:
        CommandError: `xcodebuild -list` rejected the Xcode project.
    """
    console = app.console
    project = app.settings.project.name
    result = VerifyResult()
    console.header("🔍 iOS/macOS Template Verification")

    console.status("📁 Checking required files...")
    for relative in required_files(project):
        if os.path.isfile(os.path.join(app.root, relative)):
            console.success(relative)
        else:
            console.error(relative)
            result.missing.append(relative)
    if result.missing:
        console.error(f"Missing files: {' '.join(result.missing)}")
        return result
    console.success("All required files present")

    console.status("🛠️ Checking Xcode project...")
    if app.runner.which("xcodebuild"):
        try:
            app.runner.run(["xcodebuild", "-list", "-project", f"{project}.xcodeproj"])
        except CommandError:
            console.error("Xcode project is invalid")
            raise
        result.xcode_checked = True
        console.success("Xcode project is valid")
    else:
        console.warning("xcodebuild not found, skipping Xcode project check")

    console.status("⚙️ Checking GitHub Actions workflows...")
    for relative in YAML_FILES:
        error = check_yaml(os.path.join(app.root, relative))
        if error:
            result.yaml_issues.append(relative)
            logger.warning("YAML parse error", file=relative, error=error)
    if result.yaml_issues:
        console.warning(f"YAML has issues (non-critical): {', '.join(result.yaml_issues)}")
    else:
        console.success("YAML syntax is valid")

    console.status("🚀 Checking setup script...")
    setup_script = os.path.join(app.root, "setup.sh")
    if os.access(setup_script, os.X_OK):
        console.success("setup.sh is executable")
    else:
        console.warning("setup.sh is not executable, fixing...")
        mode = os.stat(setup_script).st_mode
        os.chmod(setup_script, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        result.fixed_permissions = True
        console.success("Fixed setup.sh permissions")

    console.success("🎉 Template verification complete!")
    return result


def require_env_file(app: AppContext) -> None:
    if not os.path.isfile(app.settings.paths.env_file):
        raise PrerequisiteError(".env file not found!", "Run: repokit setup")
