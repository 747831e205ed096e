"""Image references in comment bodies.

Both adapters flatten every body they fetched into a list of
:class:`CommentBody` and hand it to the same stage; what happens to the
images (nothing, or a download) is decided by the injected handler.
"""
from __future__ import annotations

import logging
import mimetypes
import re
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Literal
from urllib.parse import urlparse

import httpx

from .models import Comment, Connection, ContextData, Review

logger = logging.getLogger(__name__)

CommentKind = Literal["pr_body", "issue_body", "issue_comment", "review_body", "review_comment"]

_MARKDOWN_IMAGE = re.compile(r"!\[[^\]]*\]\((https?://[^)\s]+)")
_HTML_IMAGE = re.compile(r"<img\b[^>]*\bsrc=[\"'](https?://[^\"']+)[\"']", re.IGNORECASE)


@dataclass(frozen=True)
class CommentBody:
    kind: CommentKind
    id: str
    body: str


ImageHandler = Callable[[str, str, list[CommentBody]], dict[str, str]]


def collect_comment_bodies(
    context: ContextData,
    comments: list[Comment],
    review_data: Connection[Review] | None,
    identifier: str,
    is_pull_request: bool,
) -> list[CommentBody]:
    bodies: list[CommentBody] = []
    if context.body:
        kind: CommentKind = "pr_body" if is_pull_request else "issue_body"
        bodies.append(CommentBody(kind, identifier, context.body))
    bodies.extend(CommentBody("issue_comment", c.database_id, c.body) for c in comments if c.body)
    reviews = review_data.nodes if review_data else []
    bodies.extend(CommentBody("review_body", r.database_id, r.body) for r in reviews if r.body)
    bodies.extend(
        CommentBody("review_comment", rc.database_id, rc.body)
        for r in reviews
        for rc in r.comments.nodes
        if rc.body
    )
    return bodies


def extract_image_urls(body: str) -> list[str]:
    found = [m.group(1) for m in _MARKDOWN_IMAGE.finditer(body)]
    found.extend(m.group(1) for m in _HTML_IMAGE.finditer(body))
    return list(dict.fromkeys(found))


def build_image_url_map(
    handler: ImageHandler | None,
    owner: str,
    repo: str,
    bodies: list[CommentBody],
) -> dict[str, str]:
    if handler is None or not bodies:
        return {}
    return handler(owner, repo, bodies)


GITHUB_IMAGE_HOSTS: tuple[str, ...] = ("github.com", "githubusercontent.com")


def host_matches(host: str, trusted_hosts: tuple[str, ...]) -> bool:
    """True when ``host`` is one of ``trusted_hosts`` or a subdomain of one."""
    host = host.lower().rstrip(".")
    return any(host == trusted or host.endswith(f".{trusted}") for trusted in trusted_hosts)


class ImageDownloader:
    """Download every image referenced in the bodies into ``dest_dir``.

    Returns a map from the original URL to the local file path. An image that
    cannot be downloaded is logged and left out of the map. ``token`` is only
    sent to hosts in ``trusted_hosts``; every other host is fetched
    anonymously.
    """

    def __init__(
        self,
        http_client: httpx.Client,
        dest_dir: Path,
        *,
        token: str | None = None,
        trusted_hosts: tuple[str, ...] = GITHUB_IMAGE_HOSTS,
    ) -> None:
        self._http_client = http_client
        self._dest_dir = dest_dir
        self._token = token
        self._trusted_hosts = tuple(h.lower() for h in trusted_hosts if h)

    def _headers_for(self, url: str) -> dict[str, str]:
        host = urlparse(url).hostname or ""
        if self._token and host_matches(host, self._trusted_hosts):
            return {"Authorization": f"token {self._token}"}
        return {}

    def __call__(self, owner: str, repo: str, bodies: list[CommentBody]) -> dict[str, str]:
        urls = list(dict.fromkeys(url for b in bodies for url in extract_image_urls(b.body)))
        if not urls:
            return {}

        self._dest_dir.mkdir(parents=True, exist_ok=True)
        downloaded: dict[str, str] = {}
        for index, url in enumerate(urls, start=1):
            try:
                response = self._http_client.get(
                    url, headers=self._headers_for(url), follow_redirects=True
                )
                response.raise_for_status()
            except httpx.HTTPError as exc:
                logger.warning("Failed to download image %s for %s/%s: %s", url, owner, repo, exc)
                continue
            target = self._dest_dir / f"image-{index}{self._suffix(url, response)}"
            target.write_bytes(response.content)
            downloaded[url] = str(target)

        logger.info("Downloaded %d of %d images for %s/%s", len(downloaded), len(urls), owner, repo)
        return downloaded

    @staticmethod
    def _suffix(url: str, response: httpx.Response) -> str:
        suffix = Path(urlparse(url).path).suffix
        if suffix:
            return suffix
        content_type = response.headers.get("content-type", "").split(";")[0].strip()
        return mimetypes.guess_extension(content_type) or ".png"
