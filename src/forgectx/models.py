from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Connection(Generic[T]):
    nodes: list[T] = field(default_factory=list)


@dataclass(frozen=True)
class Author:
    login: str
    name: str | None = None


@dataclass(frozen=True)
class Comment:
    id: str
    database_id: str
    body: str
    author: Author
    created_at: str


@dataclass(frozen=True)
class ReviewComment(Comment):
    path: str = ""
    line: int | None = None


@dataclass(frozen=True)
class CommitAuthor:
    name: str
    email: str


@dataclass(frozen=True)
class Commit:
    oid: str
    message: str
    author: CommitAuthor


@dataclass(frozen=True)
class CommitNode:
    commit: Commit


@dataclass(frozen=True)
class CommitConnection:
    total_count: int = 0
    nodes: list[CommitNode] = field(default_factory=list)


@dataclass(frozen=True)
class File:
    path: str
    additions: int
    deletions: int
    change_type: str


@dataclass(frozen=True)
class FileWithSHA(File):
    sha: str = "unknown"


@dataclass(frozen=True)
class Review:
    id: str
    database_id: str
    author: Author
    body: str
    state: str
    submitted_at: str
    comments: Connection[ReviewComment] = field(default_factory=Connection)


@dataclass(frozen=True)
class PullRequest:
    title: str
    body: str
    author: Author
    base_ref_name: str
    head_ref_name: str
    head_ref_oid: str
    created_at: str
    state: str
    additions: int = 0
    deletions: int = 0
    commits: CommitConnection = field(default_factory=CommitConnection)
    files: Connection[File] = field(default_factory=Connection)
    comments: Connection[Comment] = field(default_factory=Connection)
    reviews: Connection[Review] = field(default_factory=Connection)


@dataclass(frozen=True)
class Issue:
    title: str
    body: str
    author: Author
    created_at: str
    state: str
    comments: Connection[Comment] = field(default_factory=Connection)


ContextData = Union[PullRequest, Issue]


@dataclass(frozen=True)
class FetchResult:
    context_data: ContextData
    comments: list[Comment]
    changed_files: list[File]
    changed_files_with_sha: list[FileWithSHA]
    review_data: Connection[Review] | None
    image_url_map: dict[str, str] = field(default_factory=dict)
    trigger_display_name: str | None = None
