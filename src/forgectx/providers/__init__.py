from __future__ import annotations

from .base import FetchParams, ForgeProvider, parse_repository
from .factory import create_provider, create_provider_from_env, is_forgejo_provider, is_github_provider
from .forgejo import ForgejoProvider
from .github import GitHubProvider

__all__ = [
    "FetchParams",
    "ForgeProvider",
    "ForgejoProvider",
    "GitHubProvider",
    "create_provider",
    "create_provider_from_env",
    "is_forgejo_provider",
    "is_github_provider",
    "parse_repository",
]
