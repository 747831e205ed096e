from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any

from ..client import GitHubClient
from ..config import ForgeConfig, ProviderType
from ..errors import ForgeError, NotFoundError, UpstreamError
from ..hashing import HASH_ERRORS, FileHasher, git_hash_object
from ..images import ImageHandler, build_image_url_map, collect_comment_bodies
from ..mappers.github import map_issue, map_pull_request
from ..models import Connection, FetchResult, File, FileWithSHA, Review
from ..queries import ISSUE_QUERY, PR_QUERY, USER_QUERY
from .base import FetchParams, ForgeProvider, parse_number, parse_repository

logger = logging.getLogger(__name__)


class GitHubProvider(ForgeProvider):
    """GitHub adapter: one GraphQL query returns the whole tree."""

    def __init__(
        self,
        client: GitHubClient,
        config: ForgeConfig | None = None,
        *,
        hasher: FileHasher = git_hash_object,
        image_handler: ImageHandler | None = None,
    ) -> None:
        self._client = client
        self._config = config
        self._hasher = hasher
        self._image_handler = image_handler

    def get_provider_type(self) -> ProviderType:
        return "github"

    def fetch_data(self, params: FetchParams) -> FetchResult:
        owner, repo = parse_repository(params.repository)
        number = parse_number(params.identifier)
        variables = {"owner": owner, "repo": repo, "number": number}

        review_data: Connection[Review] | None = None
        changed_files: list[File] = []
        changed_files_with_sha: list[FileWithSHA] = []

        if params.is_pull_request:
            data = self._client.execute(PR_QUERY, variables)
            node = self._item(data, "pullRequest", f"Pull request #{number}", owner, repo)
            context = map_pull_request(node)
            changed_files = list(context.files.nodes)
            changed_files_with_sha = self._hash_files(changed_files)
            review_data = context.reviews
            logger.info("Fetched pull request #%s from %s/%s", number, owner, repo)
        else:
            data = self._client.execute(ISSUE_QUERY, variables)
            node = self._item(data, "issue", f"Issue #{number}", owner, repo)
            context = map_issue(node)
            logger.info("Fetched issue #%s from %s/%s", number, owner, repo)

        comments = list(context.comments.nodes)
        bodies = collect_comment_bodies(
            context, comments, review_data, str(number), params.is_pull_request
        )
        image_url_map = build_image_url_map(self._image_handler, owner, repo, bodies)

        trigger_display_name = None
        if params.trigger_username:
            trigger_display_name = self.fetch_user_display_name(params.trigger_username)

        return FetchResult(
            context_data=context,
            comments=comments,
            changed_files=changed_files,
            changed_files_with_sha=changed_files_with_sha,
            review_data=review_data,
            image_url_map=image_url_map,
            trigger_display_name=trigger_display_name,
        )

    @staticmethod
    def _item(data: dict[str, Any], key: str, label: str, owner: str, repo: str) -> dict[str, Any]:
        repo_data = (data.get("data") or {}).get("repository")
        if repo_data is None:
            raise NotFoundError(f"Repository {owner}/{repo} not found.")
        node = repo_data.get(key)
        if node is None:
            raise NotFoundError(f"{label} not found in {owner}/{repo}.")
        return node

    def _hash_files(self, files: list[File]) -> list[FileWithSHA]:
        hashed: list[FileWithSHA] = []
        for file in files:
            if file.change_type.upper() == "DELETED":
                sha = "deleted"
            else:
                try:
                    sha = self._hasher(file.path)
                except HASH_ERRORS as exc:
                    logger.warning("Failed to compute SHA for %s: %s", file.path, exc)
                    sha = "unknown"
            hashed.append(FileWithSHA(**asdict(file), sha=sha))
        return hashed

    def fetch_user_display_name(self, login: str) -> str | None:
        try:
            data = self._client.execute(USER_QUERY, {"login": login})
        except ForgeError as exc:
            logger.warning("Failed to fetch user display name for %s: %s", login, exc)
            return None
        user = data.get("data")
        user = user.get("user") if isinstance(user, dict) else None
        name = user.get("name") if isinstance(user, dict) else None
        return name if isinstance(name, str) and name else None

    def create_comment(self, repository: str, item_number: str, body: str) -> None:
        owner, repo = parse_repository(repository)
        number = parse_number(item_number)
        try:
            self._client.rest("POST", f"/repos/{owner}/{repo}/issues/{number}/comments", {"body": body})
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
            self._client.rest("PATCH", f"/repos/{owner}/{repo}/issues/comments/{cid}", {"body": body})
        except UpstreamError as exc:
            raise UpstreamError(
                f"Failed to update comment {cid} on {owner}/{repo}: {exc.status_code} {exc.detail}",
                exc.status_code,
                detail=exc.detail,
            ) from exc
        logger.info("Updated comment %s on %s/%s", cid, owner, repo)
