"""
Configuration validator that validates settings values.
"""

import structlog

from .models import CoverageSettings, ReleaseSettings

logger = structlog.get_logger(__name__)


def validate_configuration(
    release: ReleaseSettings,
    coverage: CoverageSettings,
) -> None:
    """Validate configuration values and provide helpful warnings."""

    # Validate coverage threshold
    if coverage.threshold < 0 or coverage.threshold > 100:
        raise ValueError(
            f"COVERAGE_THRESHOLD must be between 0 and 100, got {coverage.threshold}"
        )

    # Validate branch names
    if not release.main_branch or not release.develop_branch:
        raise ValueError("Release branch names must not be empty")
    if release.main_branch == release.develop_branch:
        raise ValueError(
            f"RELEASE_MAIN_BRANCH and RELEASE_DEVELOP_BRANCH must differ, both are '{release.main_branch}'"
        )

    if not release.tag_prefix:
        logger.warning(
            "RELEASE_TAG_PREFIX is empty. Tags will be plain version numbers like '1.2.3'."
        )
