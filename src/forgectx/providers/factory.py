from __future__ import annotations

from collections.abc import Mapping

from ..client import GitHubClient
from ..config import ForgeConfig, load_config
from ..errors import MissingClientError, UnknownProviderError
from ..images import ImageHandler
from .base import ForgeProvider
from .forgejo import ForgejoProvider
from .github import GitHubProvider


def create_provider(
    provider_type: str,
    config: ForgeConfig,
    github_client: GitHubClient | None = None,
    *,
    image_handler: ImageHandler | None = None,
) -> ForgeProvider:
    """Instantiate the adapter for ``provider_type``.

    The GitHub adapter talks through an injected :class:`GitHubClient`; the
    Forgejo adapter builds its own transport from ``config``.
    """
    if provider_type == "github":
        if github_client is None:
            raise MissingClientError("A GitHubClient instance is required for the GitHub provider.")
        return GitHubProvider(github_client, config, image_handler=image_handler)
    if provider_type == "forgejo":
        return ForgejoProvider(config, image_handler=image_handler)
    raise UnknownProviderError(f"Unknown Git forge provider type: {provider_type}")


def create_provider_from_env(
    environ: Mapping[str, str],
    github_client: GitHubClient | None = None,
    **overrides: str | None,
) -> ForgeProvider:
    config = load_config(environ, **overrides)
    return create_provider(config.type, config, github_client)


def is_github_provider(provider: ForgeProvider) -> bool:
    return provider.get_provider_type() == "github"


def is_forgejo_provider(provider: ForgeProvider) -> bool:
    return provider.get_provider_type() == "forgejo"
