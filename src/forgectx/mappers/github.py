from __future__ import annotations

from typing import Any

from ..models import (
    Author,
    Comment,
    Commit,
    CommitAuthor,
    CommitConnection,
    CommitNode,
    Connection,
    File,
    Issue,
    PullRequest,
    Review,
    ReviewComment,
)
from . import as_id, author_from, resolve_line


def map_author(node: dict[str, Any] | None) -> Author:
    if not node:
        return author_from(None)
    return author_from(node.get("login"), node.get("name"))


def map_comment(node: dict[str, Any]) -> Comment:
    return Comment(
        id=as_id(node.get("id")),
        database_id=as_id(node.get("databaseId")),
        body=node.get("body") or "",
        author=map_author(node.get("author")),
        created_at=node.get("createdAt") or "",
    )


def map_review_comment(node: dict[str, Any]) -> ReviewComment:
    return ReviewComment(
        id=as_id(node.get("id")),
        database_id=as_id(node.get("databaseId")),
        body=node.get("body") or "",
        author=map_author(node.get("author")),
        created_at=node.get("createdAt") or "",
        path=node.get("path") or "",
        line=resolve_line(node.get("line"), node.get("originalLine")),
    )


def map_commit(node: dict[str, Any]) -> Commit:
    author = node.get("author") or {}
    return Commit(
        oid=node["oid"],
        message=node.get("message") or "",
        author=CommitAuthor(name=author.get("name") or "", email=author.get("email") or ""),
    )


def map_file(node: dict[str, Any]) -> File:
    return File(
        path=node["path"],
        additions=node.get("additions") or 0,
        deletions=node.get("deletions") or 0,
        change_type=node.get("changeType") or "",
    )


def map_review(node: dict[str, Any]) -> Review:
    comment_nodes = (node.get("comments") or {}).get("nodes") or []
    return Review(
        id=as_id(node.get("id")),
        database_id=as_id(node.get("databaseId")),
        author=map_author(node.get("author")),
        body=node.get("body") or "",
        state=(node.get("state") or "").lower(),
        submitted_at=node.get("submittedAt") or "",
        comments=Connection([map_review_comment(c) for c in comment_nodes]),
    )


def _nodes(node: dict[str, Any], key: str) -> list[dict[str, Any]]:
    return (node.get(key) or {}).get("nodes") or []


def map_pull_request(node: dict[str, Any]) -> PullRequest:
    commits = node.get("commits") or {}
    commit_nodes = [CommitNode(commit=map_commit(c["commit"])) for c in commits.get("nodes") or []]
    return PullRequest(
        title=node["title"],
        body=node.get("body") or "",
        author=map_author(node.get("author")),
        base_ref_name=node.get("baseRefName") or "",
        head_ref_name=node.get("headRefName") or "",
        head_ref_oid=node.get("headRefOid") or "",
        created_at=node.get("createdAt") or "",
        state=(node.get("state") or "").lower(),
        additions=node.get("additions") or 0,
        deletions=node.get("deletions") or 0,
        commits=CommitConnection(
            total_count=commits.get("totalCount") or len(commit_nodes),
            nodes=commit_nodes,
        ),
        files=Connection([map_file(f) for f in _nodes(node, "files")]),
        comments=Connection([map_comment(c) for c in _nodes(node, "comments")]),
        reviews=Connection([map_review(r) for r in _nodes(node, "reviews")]),
    )


def map_issue(node: dict[str, Any]) -> Issue:
    return Issue(
        title=node["title"],
        body=node.get("body") or "",
        author=map_author(node.get("author")),
        created_at=node.get("createdAt") or "",
        state=(node.get("state") or "").lower(),
        comments=Connection([map_comment(c) for c in _nodes(node, "comments")]),
    )
