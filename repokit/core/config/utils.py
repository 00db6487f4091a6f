"""
Utility functions for configuration management.
"""

import os


def get_project_root() -> str:
    """Returns the root of the repository being managed."""
    return os.path.abspath(os.getenv("REPOKIT_ROOT", os.getcwd()))
