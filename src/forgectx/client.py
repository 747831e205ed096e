from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from .config import GITHUB_API_URL
from .errors import AuthError, NetworkError, NotFoundError, RateLimitError, UpstreamError

_RETRY_DELAYS = (1, 5, 15)

logger = logging.getLogger(__name__)


def error_detail(response: httpx.Response) -> str:
    """Best message a backend gave us for a failed response."""
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return response.text or response.reason_phrase


def parse_json(response: httpx.Response, backend: str) -> Any:
    """Decode a successful response body, or raise :class:`UpstreamError`."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError as exc:
        raise UpstreamError(
            f"{backend} API returned HTTP {response.status_code} with a body that is not JSON",
            response.status_code,
            detail=response.text[:200],
        ) from exc


class GitHubClient:
    """GraphQL and REST transport for the GitHub API.

    Reads (GraphQL queries and REST GETs) are retried on server errors and
    timeouts with a fixed backoff. Writes are sent once. Every failure is
    raised as a :class:`ForgeError` subclass.
    """

    def __init__(self, token: str, api_url: str = GITHUB_API_URL) -> None:
        self._api_url = api_url.rstrip("/")
        self._client = httpx.Client(
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "Content-Type": "application/json",
            },
            timeout=httpx.Timeout(30.0),
        )

    @property
    def graphql_url(self) -> str:
        return f"{self._api_url}/graphql"

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _send(
        self, method: str, url: str, payload: dict[str, Any] | None = None, *, retry: bool = True
    ) -> httpx.Response:
        """Send a request, retrying timeouts and 5xx responses when ``retry`` is set.

        The last attempt's response is returned as-is, so a persistent 5xx
        reaches :meth:`_raise_for_status` with its status and body.
        """
        for delay in _RETRY_DELAYS if retry else ():
            try:
                response = self._client.request(method, url, json=payload)
            except httpx.TimeoutException:
                logger.debug("GitHub API timed out, retrying in %ss", delay)
                time.sleep(delay)
                continue
            except httpx.RequestError as exc:
                raise NetworkError(str(exc)) from exc
            if response.status_code < 500:
                return response
            logger.debug("GitHub API returned %s, retrying in %ss", response.status_code, delay)
            time.sleep(delay)

        try:
            return self._client.request(method, url, json=payload)
        except httpx.RequestError as exc:
            raise NetworkError(f"GitHub API {method} {url} failed: {exc}") from exc

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.is_success:
            return
        detail = error_detail(response)
        if response.status_code == 401:
            raise AuthError("GitHub token is invalid or missing required scopes.", detail=detail)
        if response.status_code == 404:
            raise NotFoundError(f"GitHub API returned HTTP 404: {detail}", detail=detail)
        raise UpstreamError(
            f"GitHub API returned HTTP {response.status_code}: {detail}",
            response.status_code,
            detail=detail,
        )

    def execute(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        payload: dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables

        response = self._send("POST", self.graphql_url, payload)
        self._raise_for_status(response)
        data = parse_json(response, "GitHub")
        if not isinstance(data, dict):
            raise UpstreamError("GitHub GraphQL API returned an unexpected payload", response.status_code)

        if errors := data.get("errors"):
            msg = errors[0].get("message", "Unknown GraphQL error")
            if "Could not resolve to" in msg or "NOT_FOUND" in str(errors[0].get("type", "")):
                raise NotFoundError(msg)
            raise UpstreamError(msg)

        if rate_limit := (data.get("data") or {}).get("rateLimit"):
            remaining = rate_limit.get("remaining", 9999)
            if remaining == 0:
                reset_at = rate_limit.get("resetAt", "unknown")
                raise RateLimitError(f"GitHub rate limit exhausted. Resets at {reset_at}.")
            if remaining < 100:
                logger.warning(
                    "GitHub rate limit low: %s requests remaining (resets at %s)",
                    remaining,
                    rate_limit.get("resetAt", "unknown"),
                )

        return data

    def rest(self, method: str, path: str, payload: dict[str, Any] | None = None) -> Any:
        response = self._send(
            method, f"{self._api_url}{path}", payload, retry=method.upper() == "GET"
        )
        self._raise_for_status(response)
        return parse_json(response, "GitHub")
