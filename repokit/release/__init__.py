from .semver import BumpType, Version

__all__ = ["BumpType", "Version"]
