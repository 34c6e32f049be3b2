"""Services for Codex PR Action."""

from .codex import CodexRunner
from .git import GitService, GitError
from .github_client import GitHubClient, GitHubAPIError, parse_repository
from .providers import build_subprocess_env, map_provider_environment

__all__ = [
    "CodexRunner",
    "GitService",
    "GitError",
    "GitHubClient",
    "GitHubAPIError",
    "parse_repository",
    "build_subprocess_env",
    "map_provider_environment",
]
