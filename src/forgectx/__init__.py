"""Unified pull request / issue context for GitHub and Forgejo."""
from __future__ import annotations

from .config import ForgeConfig, load_config
from .errors import ForgeError
from .models import FetchResult
from .providers import FetchParams, ForgeProvider, create_provider, create_provider_from_env

__version__ = "0.1.0"

__all__ = [
    "FetchParams",
    "FetchResult",
    "ForgeConfig",
    "ForgeError",
    "ForgeProvider",
    "create_provider",
    "create_provider_from_env",
    "load_config",
]
