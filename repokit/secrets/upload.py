"""
Deciding which `.env` values become GitHub Actions secrets or variables.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

import structlog

from repokit.github.client import GitHubCLI

logger = structlog.get_logger(__name__)

# Sensitive values, stored encrypted
SECRET_KEYS = (
    "DEVELOPMENT_TEAM",
    "APP_STORE_CONNECT_KEY_ID",
    "APP_STORE_CONNECT_ISSUER_ID",
    "APPLE_ID",
    "MATCH_PASSWORD",
    "MATCH_GIT_URL",
)

# Non-sensitive configuration
VARIABLE_KEYS = (
    "PROJECT_NAME",
    "DISPLAY_NAME",
    "PRODUCT_BUNDLE_IDENTIFIER",
    "ORGANIZATION_NAME",
    "ORGANIZATION_IDENTIFIER",
    "COPYRIGHT",
    "IOS_DEPLOYMENT_TARGET",
    "MACOS_DEPLOYMENT_TARGET",
    "SWIFT_VERSION",
    "GITHUB_REPOSITORY_OWNER",
    "GITHUB_REPOSITORY_NAME",
    "FASTLANE_APP_IDENTIFIER",
    "FASTLANE_SCHEME",
)

SECRET_PLACEHOLDERS = {"YOUR_TEAM_ID", "YOUR_KEY_ID", "YOUR_ISSUER_ID"}
VARIABLE_PLACEHOLDER_VALUES = {"MyApp"}
VARIABLE_PLACEHOLDER_MARKERS = ("yourcompany", "yourusername")

MATCH_URL_PATTERN = re.compile(r"github\.com[:/](.+?)(?:\.git)?$")


@dataclass
class UploadPlan:
    """Values to push, keyed by name, plus the names that were skipped."""

    secrets: Dict[str, str] = field(default_factory=dict)
    variables: Dict[str, str] = field(default_factory=dict)
    skipped: List[str] = field(default_factory=list)


@dataclass
class UploadResult:
    uploaded: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


def is_customized_secret(value: str) -> bool:
    return bool(value) and value not in SECRET_PLACEHOLDERS


def is_customized_variable(value: str) -> bool:
    if not value or value in VARIABLE_PLACEHOLDER_VALUES:
        return False
    return not any(marker in value for marker in VARIABLE_PLACEHOLDER_MARKERS)


def plan_upload(values: Mapping[str, str]) -> UploadPlan:
    """Split .env values into secrets and variables, skipping template values."""
    plan = UploadPlan()
    for key in SECRET_KEYS:
        value = values.get(key) or ""
        if is_customized_secret(value):
            plan.secrets[key] = value
        else:
            plan.skipped.append(key)
    for key in VARIABLE_KEYS:
        value = values.get(key) or ""
        if is_customized_variable(value):
            plan.variables[key] = value
        else:
            plan.skipped.append(key)
    return plan


def match_repository(match_git_url: str) -> Optional[str]:
    """`owner/repo` of the fastlane match repository, if the URL is on GitHub."""
    if not match_git_url or "yourusername" in match_git_url:
        return None
    match = MATCH_URL_PATTERN.search(match_git_url.strip())
    return match.group(1) if match else None


def apply_secrets(gh: GitHubCLI, secrets: Mapping[str, str]) -> UploadResult:
    result = UploadResult()
    for name, value in secrets.items():
        if gh.secret_set(name, value):
            result.uploaded.append(name)
        else:
            logger.warning("Failed to set secret", name=name)
            result.failed.append(name)
    return result


def apply_variables(gh: GitHubCLI, variables: Mapping[str, str]) -> UploadResult:
    result = UploadResult()
    for name, value in variables.items():
        if gh.variable_set(name, value):
            result.uploaded.append(name)
        else:
            logger.warning("Failed to set variable", name=name)
            result.failed.append(name)
    return result
