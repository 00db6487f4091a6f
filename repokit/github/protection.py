"""
Branch protection rules, repository settings and CODEOWNERS content applied
by `repokit setup-repo`.
"""

from typing import Any, Dict, List

MAIN_STATUS_CHECKS = ["CI Tests", "Security Scans", "SwiftLint", "Package Validation"]
DEVELOP_STATUS_CHECKS = ["Build and Test", "SwiftLint", "Package Validation"]
RELEASE_STATUS_CHECKS = MAIN_STATUS_CHECKS + ["Release Validation"]

RELEASE_BRANCH_PATTERN = "release/*"


def main_branch_protection() -> Dict[str, Any]:
    return {
        "required_status_checks": {
            "strict": True,
            "contexts": list(MAIN_STATUS_CHECKS),
        },
        "enforce_admins": True,
        "required_pull_request_reviews": {
            "dismiss_stale_reviews": True,
            "require_code_owner_reviews": True,
            "required_approving_review_count": 2,
            "require_last_push_approval": True,
        },
        "restrictions": None,
        "required_conversation_resolution": True,
        "allow_force_pushes": False,
        "allow_deletions": False,
        "block_creations": False,
        "required_linear_history": False,
    }


def develop_branch_protection() -> Dict[str, Any]:
    return {
        "required_status_checks": {
            "strict": True,
            "contexts": list(DEVELOP_STATUS_CHECKS),
        },
        "enforce_admins": False,
        "required_pull_request_reviews": {
            "dismiss_stale_reviews": False,
            "require_code_owner_reviews": False,
            "required_approving_review_count": 1,
        },
        "restrictions": None,
        "required_conversation_resolution": False,
        "allow_force_pushes": False,
        "allow_deletions": False,
    }


def release_branch_protection() -> Dict[str, Any]:
    """Rules for `release/*`; only shown to the user since the REST API takes no patterns."""
    return {
        "required_status_checks": {
            "strict": True,
            "contexts": list(RELEASE_STATUS_CHECKS),
        },
        "enforce_admins": True,
        "required_pull_request_reviews": {
            "dismiss_stale_reviews": True,
            "require_code_owner_reviews": True,
            "required_approving_review_count": 2,
        },
        "restrictions": {"users": [], "teams": ["maintainers"]},
        "required_conversation_resolution": True,
        "allow_force_pushes": False,
        "allow_deletions": False,
    }


def repository_merge_settings() -> Dict[str, Any]:
    """Squash-only merges with auto-delete of merged branches."""
    return {
        "allow_squash_merge": True,
        "allow_merge_commit": False,
        "allow_rebase_merge": False,
        "allow_auto_merge": True,
        "delete_branch_on_merge": True,
        "allow_update_branch": True,
        "squash_merge_commit_title": "PR_TITLE",
        "squash_merge_commit_message": "PR_BODY",
    }


# (pattern, owners) in file order; the last matching pattern wins on GitHub
CODEOWNERS_SECTIONS: List[tuple] = [
    (
        "Global owners - these users/teams are requested as reviewers for all changes",
        [("*", "@maintainers-team")],
    ),
    (
        "iOS/Swift specific files",
        [
            ("*.swift", "@ios-team @swift-experts"),
            ("*.xcodeproj", "@ios-team"),
            ("*.xcworkspace", "@ios-team"),
            ("*.plist", "@ios-team"),
            ("*.storyboard", "@ios-team @ui-team"),
            ("*.xib", "@ios-team @ui-team"),
        ],
    ),
    (
        "Package Manager files",
        [
            ("Package.swift", "@swift-experts @maintainers-team"),
            ("*.podspec", "@ios-team"),
            ("Cartfile*", "@ios-team"),
            ("*.xcconfig", "@ios-team"),
        ],
    ),
    (
        "Fastlane configuration",
        [
            ("fastlane/", "@release-team @maintainers-team"),
            ("Fastfile", "@release-team @maintainers-team"),
            ("Appfile", "@release-team @maintainers-team"),
            ("Matchfile", "@release-team"),
        ],
    ),
    (
        "CI/CD and automation",
        [
            (".github/", "@devops-team @maintainers-team"),
            ("*.yml", "@devops-team"),
            ("*.yaml", "@devops-team"),
            ("Dockerfile*", "@devops-team"),
            ("scripts/", "@devops-team @maintainers-team"),
        ],
    ),
    (
        "Documentation",
        [
            ("*.md", "@documentation-team"),
            ("docs/", "@documentation-team"),
            ("README*", "@documentation-team @maintainers-team"),
        ],
    ),
    (
        "Configuration and environment",
        [
            (".env*", "@devops-team @maintainers-team"),
            ("*.json", "@maintainers-team"),
        ],
    ),
    (
        "Testing",
        [
            ("*Test*", "@ios-team @qa-team"),
            ("*Tests/", "@ios-team @qa-team"),
            ("UITests/", "@ios-team @qa-team @ui-team"),
        ],
    ),
    (
        "Security sensitive files",
        [
            ("SECURITY.md", "@security-team @maintainers-team"),
            ("*.p12", "@security-team @release-team"),
            ("*.mobileprovision", "@security-team @release-team"),
        ],
    ),
    (
        "Legal and licensing",
        [
            ("LICENSE*", "@legal-team @maintainers-team"),
            ("NOTICE*", "@legal-team"),
            ("COPYRIGHT*", "@legal-team"),
        ],
    ),
]


def render_codeowners() -> str:
    lines = [
        "# Code Owners Configuration",
        "# This file defines individuals or teams responsible for code in this repository.",
        "# Order is important; the last matching pattern takes precedence.",
    ]
    for title, entries in CODEOWNERS_SECTIONS:
        lines.append("")
        lines.append(f"# {title}")
        lines.extend(f"{pattern} {owners}" for pattern, owners in entries)
    return "\n".join(lines) + "\n"
