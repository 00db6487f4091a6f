"""
Semantic version arithmetic for release tags.
"""

from dataclasses import dataclass
from enum import Enum


class BumpType(str, Enum):
    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"

    @classmethod
    def parse(cls, value: str) -> "BumpType":
        try:
            return cls(value.lower())
        except ValueError:
            raise ValueError(
                f"Invalid version type: {value}. Use: patch, minor, or major"
            )


@dataclass(frozen=True, order=True)
class Version:
    major: int = 0
    minor: int = 0
    patch: int = 0

    @classmethod
    def parse(cls, text: str, prefix: str = "v") -> "Version":
        """
        Parse `X.Y.Z`, optionally prefixed (e.g. `v1.2.3`).

        Missing components default to 0, so `1.2` is `1.2.0`.
        """
        raw = (text or "").strip()
        if prefix and raw.startswith(prefix):
            raw = raw[len(prefix):]
        parts = raw.split(".") if raw else []
        if len(parts) > 3 or any(not part.isdigit() for part in parts):
            raise ValueError(f"Invalid version: {text!r}")
        numbers = [int(part) for part in parts] + [0] * (3 - len(parts))
        return cls(*numbers)

    def bump(self, kind: BumpType) -> "Version":
        kind = BumpType(kind)
        if kind is BumpType.MAJOR:
            return Version(self.major + 1, 0, 0)
        if kind is BumpType.MINOR:
            return Version(self.major, self.minor + 1, 0)
        return Version(self.major, self.minor, self.patch + 1)

    def tag(self, prefix: str = "v") -> str:
        return f"{prefix}{self}"

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"
