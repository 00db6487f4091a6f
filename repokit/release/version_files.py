"""
Rewriting the version number in project files.
"""

import os
import plistlib
import re
from typing import List

import structlog

logger = structlog.get_logger(__name__)

PACKAGE_VERSION_PATTERN = re.compile(r'version = "[^"]*"')
README_VERSION_PATTERN = re.compile(r"Version \d+\.\d+\.\d+")

EXCLUDED_DIRS = {"build", "DerivedData", ".build", ".git"}


def update_package_swift(path: str, version: str) -> bool:
    if not os.path.isfile(path):
        return False
    with open(path, encoding="utf-8") as f:
        content = f.read()
    updated = PACKAGE_VERSION_PATTERN.sub(f'version = "{version}"', content)
    if updated == content:
        return False
    with open(path, "w", encoding="utf-8") as f:
        f.write(updated)
    return True


def find_info_plists(root: str) -> List[str]:
    found = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in EXCLUDED_DIRS)
        if "Info.plist" in filenames:
            found.append(os.path.join(dirpath, "Info.plist"))
    return found


def update_info_plist(path: str, version: str) -> bool:
    """Set CFBundleShortVersionString; unreadable plists are skipped."""
    try:
        with open(path, "rb") as f:
            data = plistlib.load(f)
    except (plistlib.InvalidFileException, ValueError) as e:
        logger.warning("Skipping unreadable plist", path=path, error=str(e))
        return False
    if not isinstance(data, dict):
        return False
    data["CFBundleShortVersionString"] = version
    with open(path, "wb") as f:
        plistlib.dump(data, f)
    return True


def update_readme(path: str, version: str) -> bool:
    if not os.path.isfile(path):
        return False
    with open(path, encoding="utf-8") as f:
        content = f.read()
    updated = README_VERSION_PATTERN.sub(f"Version {version}", content)
    if updated == content:
        return False
    with open(path, "w", encoding="utf-8") as f:
        f.write(updated)
    return True


def update_version_files(root: str, version: str) -> List[str]:
    """Apply every rewrite under `root`; returns the files that changed."""
    changed = []
    package_swift = os.path.join(root, "Package.swift")
    if update_package_swift(package_swift, version):
        changed.append(package_swift)
    for plist in find_info_plists(root):
        if update_info_plist(plist, version):
            changed.append(plist)
    readme = os.path.join(root, "README.md")
    if update_readme(readme, version):
        changed.append(readme)
    logger.debug("Version files updated", version=version, files=changed)
    return changed
