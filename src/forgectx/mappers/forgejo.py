"""Reassemble Forgejo's flat REST collections into the unified tree.

Forgejo has no endpoint returning a pull request with everything attached,
so the adapter fetches each collection separately and the functions here
join them back together. The join is explicit: loose records are grouped by
their owning key first (:func:`group_review_comments_by_review`) and only
then mapped.
"""
from __future__ import annotations

from collections.abc import Sequence
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

Payload = dict[str, Any]


def map_user(user: Payload | None) -> Author:
    if not user:
        return author_from(None)
    return author_from(user.get("login"), user.get("full_name"))


def map_comment(comment: Payload) -> Comment:
    return Comment(
        id=as_id(comment["id"]),
        database_id=as_id(comment["id"]),
        body=comment.get("body") or "",
        author=map_user(comment.get("user")),
        created_at=comment.get("created_at") or "",
    )


def map_review_comment(comment: Payload) -> ReviewComment:
    return ReviewComment(
        id=as_id(comment["id"]),
        database_id=as_id(comment["id"]),
        body=comment.get("body") or "",
        author=map_user(comment.get("user")),
        created_at=comment.get("created_at") or "",
        path=comment.get("path") or "",
        line=resolve_line(comment.get("line"), comment.get("original_line")),
    )


def map_commit(commit: Payload) -> Commit:
    details = commit.get("commit") or {}
    author = details.get("author") or {}
    return Commit(
        oid=commit["sha"],
        message=details.get("message") or "",
        author=CommitAuthor(name=author.get("name") or "", email=author.get("email") or ""),
    )


def map_file(file: Payload) -> File:
    return File(
        path=file["filename"],
        additions=file.get("additions") or 0,
        deletions=file.get("deletions") or 0,
        change_type=file.get("status") or "",
    )


def map_review(review: Payload, review_comments: Sequence[Payload] = ()) -> Review:
    return Review(
        id=as_id(review["id"]),
        database_id=as_id(review["id"]),
        author=map_user(review.get("user")),
        body=review.get("body") or "",
        state=(review.get("state") or "").lower(),
        submitted_at=review.get("submitted_at") or "",
        comments=Connection([map_review_comment(c) for c in review_comments]),
    )


def group_review_comments_by_review(
    reviews: Sequence[Payload],
    review_comments: Sequence[Payload],
) -> dict[Any, list[Payload]]:
    """Attach review comments to the review that owns them.

    The pull request comments endpoint does not say which review a comment
    belongs to, so every comment is pooled under the first review. Comments
    are dropped when the pull request has no reviews.
    """
    if not reviews:
        return {}
    first_review_id = reviews[0]["id"]
    return {first_review_id: list(review_comments)} if review_comments else {}


def pull_request_state(pr: Payload) -> str:
    if pr.get("merged"):
        return "merged"
    return (pr.get("state") or "").lower()


def map_pull_request(
    pr: Payload,
    commits: Sequence[Payload] = (),
    files: Sequence[Payload] = (),
    comments: Sequence[Payload] = (),
    reviews: Sequence[Payload] = (),
    review_comments: Sequence[Payload] = (),
) -> PullRequest:
    comments_by_review = group_review_comments_by_review(reviews, review_comments)
    base = pr.get("base") or {}
    head = pr.get("head") or {}
    return PullRequest(
        title=pr["title"],
        body=pr.get("body") or "",
        author=map_user(pr.get("user")),
        base_ref_name=base.get("ref") or "",
        head_ref_name=head.get("ref") or "",
        head_ref_oid=head.get("sha") or "",
        created_at=pr.get("created_at") or "",
        state=pull_request_state(pr),
        additions=pr.get("additions") or 0,
        deletions=pr.get("deletions") or 0,
        commits=CommitConnection(
            total_count=len(commits),
            nodes=[CommitNode(commit=map_commit(c)) for c in commits],
        ),
        files=Connection([map_file(f) for f in files]),
        comments=Connection([map_comment(c) for c in comments]),
        reviews=Connection(
            [map_review(r, comments_by_review.get(r["id"], [])) for r in reviews]
        ),
    )


def map_issue(issue: Payload, comments: Sequence[Payload] = ()) -> Issue:
    return Issue(
        title=issue["title"],
        body=issue.get("body") or "",
        author=map_user(issue.get("user")),
        created_at=issue.get("created_at") or "",
        state=(issue.get("state") or "").lower(),
        comments=Connection([map_comment(c) for c in comments]),
    )
