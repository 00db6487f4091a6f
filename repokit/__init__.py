"""repokit: bootstrap and maintain iOS/macOS app repositories."""

__version__ = "1.0.0"
