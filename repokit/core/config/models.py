"""
Configuration models for the application.
"""

import os
from dataclasses import dataclass, field


@dataclass
class PathSettings:
    """
    Path and filename settings.
    All paths are absolute and constructed from the repository root.
    """

    root_dir: str = ""

    # Computed Paths
    env_file: str = field(init=False)
    env_template: str = field(init=False)
    log_dir: str = field(init=False)
    releases_dir: str = field(init=False)
    test_output_dir: str = field(init=False)
    coverage_dir: str = field(init=False)
    codeowners_file: str = field(init=False)
    validation_script: str = field(init=False)

    def __post_init__(self):
        from .utils import get_project_root

        if not self.root_dir:
            self.root_dir = get_project_root()
        self.root_dir = os.path.abspath(self.root_dir)
        self.env_file = os.path.join(self.root_dir, ".env")
        self.env_template = os.path.join(self.root_dir, ".env.template")
        # Logs stay outside the managed work tree so they never show up in git status
        self.log_dir = os.getenv(
            "REPOKIT_LOG_DIR", os.path.join(os.path.expanduser("~"), ".repokit", "logs")
        )
        self.releases_dir = os.path.join(self.root_dir, "releases")
        self.test_output_dir = os.path.join(self.root_dir, "test-output")
        self.coverage_dir = os.path.join(self.root_dir, "coverage-output")
        self.codeowners_file = os.path.join(self.root_dir, ".github", "CODEOWNERS")
        self.validation_script = os.path.join(
            self.root_dir, "scripts", "validate-environment.sh"
        )


@dataclass
class ProjectSettings:
    """Identity of the app project the template is being customized for."""

    name: str = "MyApp"
    display_name: str = ""
    bundle_identifier: str = ""
    development_team: str = ""
    scheme: str = "TemplateProject"


@dataclass
class ReleaseSettings:
    """Branch and tag conventions used by the release flow."""

    main_branch: str = "main"
    develop_branch: str = "develop"
    tag_prefix: str = "v"


@dataclass
class NotificationSettings:
    """Optional post-release notification targets."""

    slack_webhook_url: str | None = None
    release_email_list: str | None = None


@dataclass
class CoverageSettings:
    """Settings for the coverage report."""

    threshold: float = 80.0  # percent


@dataclass
class AppSettings:
    """Root application settings."""

    paths: PathSettings
    project: ProjectSettings = field(default_factory=ProjectSettings)
    release: ReleaseSettings = field(default_factory=ReleaseSettings)
    notifications: NotificationSettings = field(default_factory=NotificationSettings)
    coverage: CoverageSettings = field(default_factory=CoverageSettings)
    console_log_level: str = "INFO"
