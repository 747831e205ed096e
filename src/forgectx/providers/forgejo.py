from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict
from typing import Any
from urllib.parse import quote

from ..config import ForgeConfig, ProviderType
from ..errors import ForgeError, NotFoundError, UpstreamError
from ..forgejo_client import ForgejoClient
from ..images import ImageHandler, build_image_url_map, collect_comment_bodies
from ..mappers.forgejo import map_issue, map_pull_request
from ..models import Connection, FetchResult, File, FileWithSHA, Review
from .base import FetchParams, ForgeProvider, parse_number, parse_repository

logger = logging.getLogger(__name__)


class ForgejoProvider(ForgeProvider):
    """Forgejo adapter built on the flat REST API.

    Pull request metadata, commits, files and comments are requested in
    parallel and joined before mapping. Reviews are optional on some
    deployments, so they are requested afterwards and any failure there only
    costs the review data.
    """

    def __init__(
        self,
        config: ForgeConfig,
        *,
        client: ForgejoClient | None = None,
        image_handler: ImageHandler | None = None,
    ) -> None:
        self._config = config
        self._owns_client = client is None
        self._client = client or ForgejoClient(config.api_url, config.token)
        self._image_handler = image_handler

    def get_provider_type(self) -> ProviderType:
        return "forgejo"

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _get_all(self, *paths: str) -> list[Any]:
        with ThreadPoolExecutor(max_workers=len(paths)) as executor:
            futures = [executor.submit(self._client.get, path) for path in paths]
            return [future.result() for future in futures]

    def _fetch_reviews(self, base: str, number: int) -> tuple[list[Any] | None, list[Any]]:
        try:
            reviews = self._client.get(f"{base}/pulls/{number}/reviews") or []
            review_comments = self._client.get(f"{base}/pulls/{number}/comments") or []
        except ForgeError as exc:
            logger.warning("Reviews unavailable for %s pull request #%s, continuing without them: %s", base, number, exc)
            return None, []
        return reviews, review_comments

    def fetch_data(self, params: FetchParams) -> FetchResult:
        owner, repo = parse_repository(params.repository)
        number = parse_number(params.identifier)
        base = f"/repos/{owner}/{repo}"

        review_data: Connection[Review] | None = None
        changed_files: list[File] = []
        changed_files_with_sha: list[FileWithSHA] = []

        if params.is_pull_request:
            try:
                pr, commits, files, comments = self._get_all(
                    f"{base}/pulls/{number}",
                    f"{base}/pulls/{number}/commits",
                    f"{base}/pulls/{number}/files",
                    f"{base}/issues/{number}/comments",
                )
            except NotFoundError as exc:
                raise NotFoundError(
                    f"Pull request #{number} not found in {owner}/{repo}.", detail=exc.detail
                ) from exc

            reviews, review_comments = self._fetch_reviews(base, number)
            context = map_pull_request(
                pr, commits or [], files or [], comments or [], reviews or [], review_comments
            )
            if reviews is not None:
                review_data = context.reviews
            changed_files = list(context.files.nodes)
            changed_files_with_sha = [
                FileWithSHA(**asdict(f), sha=context.head_ref_oid) for f in changed_files
            ]
            logger.info("Fetched pull request #%s from %s/%s", number, owner, repo)
        else:
            try:
                issue, comments = self._get_all(
                    f"{base}/issues/{number}",
                    f"{base}/issues/{number}/comments",
                )
            except NotFoundError as exc:
                raise NotFoundError(
                    f"Issue #{number} not found in {owner}/{repo}.", detail=exc.detail
                ) from exc
            context = map_issue(issue, comments or [])
            logger.info("Fetched issue #%s from %s/%s", number, owner, repo)

        comment_list = list(context.comments.nodes)
        bodies = collect_comment_bodies(
            context, comment_list, review_data, str(number), params.is_pull_request
        )
        image_url_map = build_image_url_map(self._image_handler, owner, repo, bodies)

        trigger_display_name = None
        if params.trigger_username:
            trigger_display_name = self.fetch_user_display_name(params.trigger_username)

        return FetchResult(
            context_data=context,
            comments=comment_list,
            changed_files=changed_files,
            changed_files_with_sha=changed_files_with_sha,
            review_data=review_data,
            image_url_map=image_url_map,
            trigger_display_name=trigger_display_name,
        )

    def fetch_user_display_name(self, login: str) -> str | None:
        try:
            user = self._client.get(f"/users/{quote(login, safe='')}")
        except ForgeError as exc:
            logger.warning("Failed to fetch user display name for %s: %s", login, exc)
            return None
        full_name = user.get("full_name") if isinstance(user, dict) else None
        return full_name if isinstance(full_name, str) and full_name else None

    def create_comment(self, repository: str, item_number: str, body: str) -> None:
        owner, repo = parse_repository(repository)
        number = parse_number(item_number)
        try:
            self._client.post(f"/repos/{owner}/{repo}/issues/{number}/comments", {"body": body})
        except UpstreamError as exc:
            raise UpstreamError(
                f"Failed to create comment on {owner}/{repo}#{number}: {exc.status_code} {exc.detail}",
                exc.status_code,
                detail=exc.detail,
            ) from exc
        logger.info("Created comment on %s/%s#%s", owner, repo, number)

    def update_comment(self, repository: str, comment_id: str, body: str) -> None:
        owner, repo = parse_repository(repository)
        cid = parse_number(comment_id, "comment id")
        try:
            self._client.patch(f"/repos/{owner}/{repo}/issues/comments/{cid}", {"body": body})
        except UpstreamError as exc:
            raise UpstreamError(
                f"Failed to update comment {cid} on {owner}/{repo}: {exc.status_code} {exc.detail}",
                exc.status_code,
                detail=exc.detail,
            ) from exc
        logger.info("Updated comment %s on %s/%s", cid, owner, repo)
