"""
Centralized configuration management.

This module provides a clean interface to the configuration system.
"""

from .loader import get_settings as get_settings
from .models import (
    AppSettings as AppSettings,
)
from .models import (
    CoverageSettings as CoverageSettings,
)
from .models import (
    NotificationSettings as NotificationSettings,
)
from .models import (
    PathSettings as PathSettings,
)
from .models import (
    ProjectSettings as ProjectSettings,
)
from .models import (
    ReleaseSettings as ReleaseSettings,
)

__all__ = [
    "AppSettings",
    "CoverageSettings",
    "NotificationSettings",
    "PathSettings",
    "ProjectSettings",
    "ReleaseSettings",
    "get_settings",
]
