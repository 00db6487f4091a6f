from .client import GitHubCLI, parse_remote_url

__all__ = ["GitHubCLI", "parse_remote_url"]
