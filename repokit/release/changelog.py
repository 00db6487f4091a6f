"""
CHANGELOG.md maintenance in the Keep a Changelog format.
"""

import os
from datetime import date
from typing import Optional

import structlog

logger = structlog.get_logger(__name__)

CHANGELOG_HEADER = """# Changelog

All notable changes to this project will be documented in this file.

The format is based on [Keep a Changelog](https://keepachangelog.com/en/1.0.0/),
and this project adheres to [Semantic Versioning](https://semver.org/spec/v2.0.0.html).
"""

# Header occupies the first 7 lines of an existing changelog
HEADER_LINES = 7

SECTION_HEADINGS = ("Added", "Changed", "Deprecated", "Removed", "Fixed", "Security")


def release_section(version: str, release_date: Optional[date] = None) -> str:
    """An empty section for `version` with one `-` bullet per heading."""
    release_date = release_date or date.today()
    lines = [f"## [{version}] - {release_date.isoformat()}", ""]
    for heading in SECTION_HEADINGS:
        lines += [f"### {heading}", "-", ""]
    return "\n".join(lines)


def initial_changelog(version: str, release_date: Optional[date] = None) -> str:
    section = release_section(version, release_date).replace(
        "### Added\n-\n", "### Added\n- Initial release\n", 1
    )
    return f"{CHANGELOG_HEADER}\n## [Unreleased]\n\n{section}"


def insert_release(existing: str, version: str, release_date: Optional[date] = None) -> str:
    """Insert the new section after the header block of an existing changelog."""
    lines = existing.splitlines(keepends=True)
    head = "".join(lines[:HEADER_LINES])
    tail = "".join(lines[HEADER_LINES:])
    if head and not head.endswith("\n"):
        head += "\n"
    return f"{head}\n{release_section(version, release_date)}\n{tail}"


def update_changelog(path: str, version: str, release_date: Optional[date] = None) -> bool:
    """
    Add a release section to the changelog at `path`.

    Returns:
        True if the file was created, False if an existing file was updated.
    """
    if not os.path.exists(path):
        with open(path, "w", encoding="utf-8") as f:
            f.write(initial_changelog(version, release_date))
        logger.info("Created changelog", path=path, version=version)
        return True

    with open(path, encoding="utf-8") as f:
        existing = f.read()
    with open(path, "w", encoding="utf-8") as f:
        f.write(insert_release(existing, version, release_date))
    logger.info("Updated changelog", path=path, version=version)
    return False
