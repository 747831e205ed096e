"""Connection settings for the supported forges.

The configuration is resolved once, when the process starts, and passed by
value into the provider factory. Only :func:`load_config` looks at the
environment, and it receives the mapping explicitly so callers (and tests)
decide where the values come from.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal

from .errors import MissingTokenError, UnknownProviderError

logger = logging.getLogger(__name__)

ProviderType = Literal["github", "forgejo"]
PROVIDER_TYPES: tuple[str, ...] = ("github", "forgejo")

GITHUB_API_URL = "https://api.github.com"
GITHUB_SERVER_URL = "https://github.com"
FORGEJO_PLACEHOLDER_API_URL = "https://forgejo.example.com/api/v1"
FORGEJO_PLACEHOLDER_SERVER_URL = "https://forgejo.example.com"

TOKEN_ENV_VARS: tuple[str, ...] = ("FORGE_TOKEN", "GITHUB_TOKEN")


@dataclass(frozen=True)
class ForgeConfig:
    type: ProviderType
    api_url: str
    server_url: str
    token: str


def _first(*candidates: str | None) -> str | None:
    for value in candidates:
        if value:
            return value
    return None


def load_config(
    environ: Mapping[str, str],
    *,
    provider_type: str | None = None,
    api_url: str | None = None,
    server_url: str | None = None,
    token: str | None = None,
) -> ForgeConfig:
    """Resolve a :class:`ForgeConfig`.

    Every field is taken from the explicit argument when given, otherwise from
    the environment, otherwise from the built-in default for the selected
    forge. Raises :class:`MissingTokenError` when no token is found anywhere.
    """
    resolved_type = _first(provider_type, environ.get("FORGE_TYPE")) or "github"
    resolved_type = resolved_type.lower()
    if resolved_type not in PROVIDER_TYPES:
        raise UnknownProviderError(f"Unknown Git forge provider type: {resolved_type}")

    if resolved_type == "github":
        default_api_url = environ.get("GITHUB_API_URL") or GITHUB_API_URL
        default_server_url = environ.get("GITHUB_SERVER_URL") or GITHUB_SERVER_URL
    else:
        default_api_url = FORGEJO_PLACEHOLDER_API_URL
        default_server_url = FORGEJO_PLACEHOLDER_SERVER_URL

    resolved_api_url = _first(api_url, environ.get("FORGE_API_URL")) or default_api_url
    resolved_server_url = _first(server_url, environ.get("FORGE_SERVER_URL")) or default_server_url
    resolved_token = _first(token, *(environ.get(name) for name in TOKEN_ENV_VARS))

    if not resolved_token:
        raise MissingTokenError(
            "Authentication token is required (set FORGE_TOKEN or GITHUB_TOKEN)."
        )

    if resolved_api_url == FORGEJO_PLACEHOLDER_API_URL:
        logger.warning(
            "FORGE_API_URL is not set; using placeholder %s. Point it at your Forgejo instance.",
            FORGEJO_PLACEHOLDER_API_URL,
        )

    return ForgeConfig(
        type=resolved_type,  # type: ignore[arg-type]
        api_url=resolved_api_url.rstrip("/"),
        server_url=resolved_server_url.rstrip("/"),
        token=resolved_token,
    )
