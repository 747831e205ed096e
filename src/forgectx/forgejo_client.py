from __future__ import annotations

import logging
from typing import Any

import httpx

from .client import error_detail, parse_json
from .errors import AuthError, ConfigurationError, NetworkError, NotFoundError, UpstreamError

logger = logging.getLogger(__name__)


class ForgejoClient:
    """REST transport for Forgejo (and API-compatible Gitea) instances.

    ``api_url`` is the full API root, e.g. ``https://codeberg.org/api/v1``.
    The underlying :class:`httpx.Client` is safe to share between threads.
    """

    def __init__(self, api_url: str, token: str, timeout: float = 30.0) -> None:
        self._api_url = api_url.rstrip("/")
        self._client = httpx.Client(
            headers={
                "Authorization": f"token {token}",
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
            timeout=httpx.Timeout(timeout),
        )

    def __enter__(self) -> ForgejoClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def url(self, path: str) -> str:
        if not self._api_url:
            raise ConfigurationError("apiUrl is required for the Forgejo provider.")
        return f"{self._api_url}{path}"

    def request(self, method: str, path: str, payload: dict[str, Any] | None = None) -> Any:
        url = self.url(path)
        logger.debug("Forgejo %s %s", method, url)
        try:
            response = self._client.request(method, url, json=payload)
        except httpx.RequestError as exc:
            raise NetworkError(f"Forgejo API {method} {path} failed: {exc}") from exc

        if not response.is_success:
            detail = error_detail(response)
            if response.status_code == 401:
                raise AuthError("Forgejo token is invalid or lacks the required scopes.", detail=detail)
            if response.status_code == 404:
                raise NotFoundError(f"Forgejo API returned HTTP 404 for {path}: {detail}", detail=detail)
            raise UpstreamError(
                f"Forgejo API returned HTTP {response.status_code} for {path}: {detail}",
                response.status_code,
                detail=detail,
            )

        return parse_json(response, "Forgejo")

    def get(self, path: str) -> Any:
        return self.request("GET", path)

    def post(self, path: str, payload: dict[str, Any]) -> Any:
        return self.request("POST", path, payload)

    def patch(self, path: str, payload: dict[str, Any]) -> Any:
        return self.request("PATCH", path, payload)
