"""Shared factories and fixtures for the test suite."""
from __future__ import annotations

import pytest

from forgectx.config import ForgeConfig
from forgectx.models import (
    Author,
    Comment,
    Commit,
    CommitAuthor,
    CommitConnection,
    CommitNode,
    Connection,
    FetchResult,
    File,
    FileWithSHA,
    Issue,
    PullRequest,
    Review,
    ReviewComment,
)

GQL_URL = "https://api.github.com/graphql"
GH_API = "https://api.github.com"
FORGEJO_API = "https://forgejo.example.com/api/v1"

# ---------------------------------------------------------------------------
# GitHub GraphQL node factories: raw dicts mirroring API responses
# ---------------------------------------------------------------------------


def rate_limit_data(remaining: int = 4999) -> dict:
    return {"cost": 1, "remaining": remaining, "resetAt": "2024-12-31T23:59:59Z"}


def gh_author(login: str | None = "test-user", name: str | None = None) -> dict | None:
    if login is None:
        return None
    node = {"login": login}
    if name is not None:
        node["name"] = name
    return node


def gh_comment_node(
    id: str = "IC_1",
    database_id: int = 101,
    body: str = "Looks good",
    author: str | None = "reviewer",
    created_at: str = "2024-01-01T10:00:00Z",
) -> dict:
    return {
        "id": id,
        "databaseId": database_id,
        "body": body,
        "author": gh_author(author),
        "createdAt": created_at,
    }


def gh_review_comment_node(
    id: str = "RC_1",
    database_id: int = 201,
    body: str = "Fix this",
    path: str = "src/foo.py",
    line: int | None = 42,
    original_line: int | None = None,
    author: str | None = "reviewer",
) -> dict:
    return {
        "id": id,
        "databaseId": database_id,
        "body": body,
        "path": path,
        "line": line,
        "originalLine": original_line,
        "author": gh_author(author),
        "createdAt": "2024-01-01T11:00:00Z",
    }


def gh_review_node(
    id: str = "R_1",
    database_id: int = 301,
    body: str = "Some notes",
    state: str = "CHANGES_REQUESTED",
    author: str | None = "reviewer",
    comment_nodes: list[dict] | None = None,
) -> dict:
    return {
        "id": id,
        "databaseId": database_id,
        "author": gh_author(author),
        "body": body,
        "state": state,
        "submittedAt": "2024-01-01T12:00:00Z",
        "comments": {"nodes": comment_nodes or []},
    }


def gh_file_node(
    path: str = "test.js",
    additions: int = 10,
    deletions: int = 5,
    change_type: str = "MODIFIED",
) -> dict:
    return {"path": path, "additions": additions, "deletions": deletions, "changeType": change_type}


def gh_commit_node(oid: str = "abc123", message: str = "Initial commit") -> dict:
    return {
        "commit": {
            "oid": oid,
            "message": message,
            "author": {"name": "Test Author", "email": "author@example.com"},
        }
    }


def gh_pr_node(
    title: str = "Test PR",
    body: str = "Test body",
    author: str | None = "test-user",
    author_name: str | None = "Test User",
    state: str = "OPEN",
    commit_nodes: list[dict] | None = None,
    file_nodes: list[dict] | None = None,
    comment_nodes: list[dict] | None = None,
    review_nodes: list[dict] | None = None,
) -> dict:
    commit_nodes = commit_nodes or []
    return {
        "title": title,
        "body": body,
        "author": gh_author(author, author_name),
        "baseRefName": "main",
        "headRefName": "feature/test",
        "headRefOid": "abc123",
        "createdAt": "2023-01-01T00:00:00Z",
        "additions": 50,
        "deletions": 30,
        "state": state,
        "commits": {"totalCount": len(commit_nodes), "nodes": commit_nodes},
        "files": {"nodes": file_nodes or []},
        "comments": {"nodes": comment_nodes or []},
        "reviews": {"nodes": review_nodes or []},
    }


def gh_issue_node(
    title: str = "Test Issue",
    body: str = "Issue body",
    author: str | None = "test-user",
    state: str = "OPEN",
    comment_nodes: list[dict] | None = None,
) -> dict:
    return {
        "title": title,
        "body": body,
        "author": gh_author(author),
        "createdAt": "2023-01-01T00:00:00Z",
        "state": state,
        "comments": {"nodes": comment_nodes or []},
    }


def pr_response(node: dict | None, remaining: int = 4999) -> dict:
    return {"data": {"rateLimit": rate_limit_data(remaining), "repository": {"pullRequest": node}}}


def issue_response(node: dict | None) -> dict:
    return {"data": {"rateLimit": rate_limit_data(), "repository": {"issue": node}}}


def user_response(name: str | None) -> dict:
    return {"data": {"user": {"name": name}}}


# ---------------------------------------------------------------------------
# Forgejo REST payload factories
# ---------------------------------------------------------------------------


def fj_user(login: str = "testuser", full_name: str | None = "Test User", id: int = 456) -> dict:
    user = {"id": id, "login": login}
    if full_name is not None:
        user["full_name"] = full_name
    return user


def fj_pull_request(
    number: int = 123,
    title: str = "Test PR",
    body: str = "Test PR body",
    user: dict | None = None,
    state: str = "open",
    merged: bool = False,
    head_sha: str = "head456",
    additions: int | None = 20,
    deletions: int | None = 10,
) -> dict:
    pr = {
        "id": 1,
        "number": number,
        "title": title,
        "body": body,
        "user": user or fj_user(),
        "state": state,
        "merged": merged,
        "created_at": "2023-01-01T00:00:00Z",
        "updated_at": "2023-01-01T01:00:00Z",
        "base": {"ref": "main", "sha": "base123", "repo": {"name": "test-repo", "owner": fj_user("testorg", None, 789)}},
        "head": {"ref": "feature", "sha": head_sha, "repo": {"name": "test-repo", "owner": fj_user()}},
    }
    if additions is not None:
        pr["additions"] = additions
    if deletions is not None:
        pr["deletions"] = deletions
    return pr


def fj_issue(number: int = 7, title: str = "Test Issue", state: str = "open") -> dict:
    return {
        "id": 2,
        "number": number,
        "title": title,
        "body": "Test issue body",
        "user": fj_user(),
        "state": state,
        "created_at": "2023-01-01T00:00:00Z",
        "updated_at": "2023-01-01T01:00:00Z",
    }


def fj_comment(id: int = 1, body: str = "Test comment", user: dict | None = None) -> dict:
    return {
        "id": id,
        "user": user or fj_user(),
        "body": body,
        "created_at": "2023-01-01T02:00:00Z",
        "updated_at": "2023-01-01T02:00:00Z",
    }


def fj_commit(sha: str = "commit1", message: str = "Test commit") -> dict:
    return {
        "sha": sha,
        "commit": {"message": message, "author": {"name": "Test Author", "email": "author@example.com"}},
    }


def fj_file(filename: str = "test.js", status: str = "modified") -> dict:
    return {"filename": filename, "additions": 10, "deletions": 5, "changes": 15, "status": status}


def fj_review(id: int = 1, state: str = "APPROVED", body: str = "Looks good overall", user: dict | None = None) -> dict:
    return {
        "id": id,
        "user": user or fj_user("reviewer", "Reviewer User", 2),
        "body": body,
        "state": state,
        "submitted_at": "2023-01-01T02:00:00Z",
    }


def fj_review_comment(
    id: int = 1,
    body: str = "This could be improved",
    path: str = "src/main.js",
    line: int | None = 10,
    original_line: int | None = None,
) -> dict:
    comment = {
        "id": id,
        "user": fj_user("reviewer", "Reviewer User", 2),
        "body": body,
        "path": path,
        "created_at": "2023-01-01T02:30:00Z",
    }
    if line is not None:
        comment["line"] = line
    if original_line is not None:
        comment["original_line"] = original_line
    return comment


# ---------------------------------------------------------------------------
# Model object factories
# ---------------------------------------------------------------------------


def make_author(login: str = "alice", name: str | None = None) -> Author:
    return Author(login=login, name=name or login)


def make_comment(id: str = "1", body: str = "Looks good", author: str = "reviewer") -> Comment:
    return Comment(
        id=id,
        database_id=id,
        body=body,
        author=make_author(author),
        created_at="2024-01-01T10:00:00Z",
    )


def make_review(
    state: str = "approved",
    body: str = "Ship it",
    comments: list[ReviewComment] | None = None,
) -> Review:
    return Review(
        id="R1",
        database_id="301",
        author=make_author("reviewer"),
        body=body,
        state=state,
        submitted_at="2024-01-01T12:00:00Z",
        comments=Connection(comments or []),
    )


def make_review_comment(path: str = "src/foo.py", line: int | None = 42, body: str = "Fix this") -> ReviewComment:
    return ReviewComment(
        id="RC1",
        database_id="201",
        body=body,
        author=make_author("reviewer"),
        created_at="2024-01-01T11:00:00Z",
        path=path,
        line=line,
    )


def make_pull_request(
    title: str = "Fix bug",
    body: str = "PR body",
    files: list[File] | None = None,
    comments: list[Comment] | None = None,
    reviews: list[Review] | None = None,
) -> PullRequest:
    commit = Commit(oid="abcdef123", message="Fix bug\n\nDetails", author=CommitAuthor("Alice", "a@example.com"))
    return PullRequest(
        title=title,
        body=body,
        author=make_author("alice", "Alice Liddell"),
        base_ref_name="main",
        head_ref_name="fix/bug",
        head_ref_oid="abcdef123",
        created_at="2024-01-01T00:00:00Z",
        state="open",
        additions=10,
        deletions=5,
        commits=CommitConnection(total_count=1, nodes=[CommitNode(commit)]),
        files=Connection(files or []),
        comments=Connection(comments or []),
        reviews=Connection(reviews or []),
    )


def make_fetch_result(
    context: PullRequest | Issue | None = None,
    trigger_display_name: str | None = None,
) -> FetchResult:
    if context is None:
        context = make_pull_request(
            files=[File("src/app.py", 3, 1, "MODIFIED")],
            comments=[make_comment()],
            reviews=[make_review(comments=[make_review_comment()])],
        )
    if isinstance(context, PullRequest):
        files = list(context.files.nodes)
        return FetchResult(
            context_data=context,
            comments=list(context.comments.nodes),
            changed_files=files,
            changed_files_with_sha=[
                FileWithSHA(f.path, f.additions, f.deletions, f.change_type, sha="f00ba4") for f in files
            ],
            review_data=context.reviews,
            trigger_display_name=trigger_display_name,
        )
    return FetchResult(
        context_data=context,
        comments=list(context.comments.nodes),
        changed_files=[],
        changed_files_with_sha=[],
        review_data=None,
        trigger_display_name=trigger_display_name,
    )


def make_issue(title: str = "Crash on start") -> Issue:
    return Issue(
        title=title,
        body="It crashes",
        author=make_author("bob"),
        created_at="2024-02-01T00:00:00Z",
        state="open",
        comments=Connection([make_comment(body="Same here")]),
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def github_config() -> ForgeConfig:
    return ForgeConfig(type="github", api_url=GH_API, server_url="https://github.com", token="test-token")


@pytest.fixture
def forgejo_config() -> ForgeConfig:
    return ForgeConfig(
        type="forgejo",
        api_url=FORGEJO_API,
        server_url="https://forgejo.example.com",
        token="test-token",
    )


@pytest.fixture(autouse=True)
def no_dotenv(mocker):
    """Prevent tests from loading a real .env file."""
    mocker.patch("forgectx.cli.load_dotenv")
