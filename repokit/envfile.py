"""
Reading and validating the project's `.env` file.

The file is a flat mapping of KEY=value pairs. The only rule enforced is that
required keys are present, non-empty and no longer hold template placeholder
text.
"""

import os
import shutil
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Sequence

import structlog
from dotenv import dotenv_values

from repokit.core.errors import PrerequisiteError

logger = structlog.get_logger(__name__)

REQUIRED_KEYS = (
    "APPLE_ID",
    "DEVELOPMENT_TEAM",
    "APPSTORE_TEAM_ID",
    "APP_STORE_CONNECT_API_KEY_KEY_ID",
    "APP_STORE_CONNECT_API_KEY_ISSUER_ID",
    "APP_STORE_CONNECT_API_KEY_CONTENT",
    "MATCH_PASSWORD",
    "MATCH_GIT_URL",
    "MATCH_GIT_BASIC_AUTHORIZATION",
    "KEYCHAIN_PASSWORD",
)

# Case-sensitive substrings left behind by .env.template
PLACEHOLDER_MARKERS = ("your", "YOUR", "example.com")


@dataclass
class EnvValidationResult:
    """Classification of each required key into exactly one bucket."""

    missing: List[str] = field(default_factory=list)
    placeholders: List[str] = field(default_factory=list)
    present: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.missing and not self.placeholders


def read_env_file(path: str) -> Dict[str, str]:
    """Parse a .env file; keys without a value map to an empty string."""
    if not os.path.isfile(path):
        raise PrerequisiteError(
            f"Environment file ({os.path.basename(path)}) not found!",
            "Run: repokit secrets --setup-env",
        )
    return {key: value or "" for key, value in dotenv_values(path).items()}


def is_placeholder(value: str) -> bool:
    return any(marker in value for marker in PLACEHOLDER_MARKERS)


def validate_required(
    values: Mapping[str, str], required: Sequence[str] = REQUIRED_KEYS
) -> EnvValidationResult:
    """Check each required key for presence and placeholder text."""
    result = EnvValidationResult()
    for key in required:
        value = values.get(key) or ""
        if not value.strip():
            result.missing.append(key)
        elif is_placeholder(value):
            result.placeholders.append(key)
        else:
            result.present.append(key)
    logger.debug(
        "Validated environment",
        missing=len(result.missing),
        placeholders=len(result.placeholders),
        present=len(result.present),
    )
    return result


def merged_with_environment(
    values: Mapping[str, str],
    environ: Mapping[str, str],
    keys: Sequence[str] = REQUIRED_KEYS,
) -> Dict[str, str]:
    """Fill keys that are empty in the file from the process environment."""
    merged = dict(values)
    for key in keys:
        if not merged.get(key) and environ.get(key):
            merged[key] = environ[key]
    return merged


def create_from_template(template: str, target: str, overwrite: bool = False) -> bool:
    """
    Copy the template to the target path.

    Returns:
        True if the file was written, False if an existing target was kept.
    """
    if not os.path.isfile(template):
        raise PrerequisiteError(
            f"Environment template file ({os.path.basename(template)}) not found!"
        )
    if os.path.exists(target) and not overwrite:
        return False
    shutil.copyfile(template, target)
    logger.info("Created environment file", target=target, template=template)
    return True
