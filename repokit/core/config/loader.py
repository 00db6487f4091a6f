"""
Configuration loader that loads settings from environment variables.
"""

import os
from functools import lru_cache

from dotenv import load_dotenv

from .models import (
    AppSettings,
    CoverageSettings,
    NotificationSettings,
    PathSettings,
    ProjectSettings,
    ReleaseSettings,
)


@lru_cache(maxsize=None)
def get_settings() -> AppSettings:
    """
    Loads the application settings from the repository's .env file and the
    process environment.
    Uses a cache to ensure settings are loaded only once.
    """
    # --- Path Settings ---
    path_settings = PathSettings()

    # The .env file is optional here; commands that need it check for it.
    load_dotenv(path_settings.env_file)

    # --- Project Settings ---
    project_settings = ProjectSettings(
        name=os.getenv("PROJECT_NAME", "MyApp"),
        display_name=os.getenv("DISPLAY_NAME", ""),
        bundle_identifier=os.getenv("PRODUCT_BUNDLE_IDENTIFIER", ""),
        development_team=os.getenv("DEVELOPMENT_TEAM", ""),
        scheme=os.getenv("FASTLANE_SCHEME", "TemplateProject"),
    )

    # --- Release Settings ---
    release_settings = ReleaseSettings(
        main_branch=os.getenv("RELEASE_MAIN_BRANCH", "main"),
        develop_branch=os.getenv("RELEASE_DEVELOP_BRANCH", "develop"),
        tag_prefix=os.getenv("RELEASE_TAG_PREFIX", "v"),
    )

    # --- Notification Settings ---
    notification_settings = NotificationSettings(
        slack_webhook_url=os.getenv("SLACK_WEBHOOK_URL") or None,
        release_email_list=os.getenv("RELEASE_EMAIL_LIST") or None,
    )

    # --- Coverage Settings ---
    threshold = os.getenv("COVERAGE_THRESHOLD", "80.0")
    try:
        coverage_settings = CoverageSettings(threshold=float(threshold))
    except ValueError:
        raise RuntimeError(
            f"Environment variable 'COVERAGE_THRESHOLD' must be a number, got {threshold!r}."
        )

    # --- Validate Configuration ---
    from .validator import validate_configuration

    validate_configuration(release_settings, coverage_settings)

    # --- App Settings ---
    return AppSettings(
        paths=path_settings,
        project=project_settings,
        release=release_settings,
        notifications=notification_settings,
        coverage=coverage_settings,
        console_log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
