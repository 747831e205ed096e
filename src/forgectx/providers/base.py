from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from ..config import ProviderType
from ..errors import InvalidNumberError, InvalidRepositoryFormatError
from ..models import FetchResult


@dataclass(frozen=True)
class FetchParams:
    repository: str
    identifier: str
    is_pull_request: bool
    trigger_username: str | None = None


def parse_repository(repository: str) -> tuple[str, str]:
    """Split ``owner/repo``; anything else is rejected before any I/O."""
    parts = repository.split("/")
    if len(parts) != 2 or not all(parts):
        raise InvalidRepositoryFormatError(repository)
    owner, repo = parts
    return owner, repo


def parse_number(value: str | int, what: str = "number") -> int:
    text = str(value).strip().lstrip("#")
    if not text.isdigit() or int(text) == 0:
        raise InvalidNumberError(f"Invalid {what}: {value!r}. Expected a positive integer.")
    return int(text)


class ForgeProvider(ABC):
    """Operations every forge adapter offers.

    Consumers only ever hold a ``ForgeProvider``; which concrete adapter sits
    behind it is decided once by :func:`forgectx.providers.create_provider`.
    """

    @abstractmethod
    def fetch_data(self, params: FetchParams) -> FetchResult:
        """Fetch a pull request or issue with its commits, files, comments and reviews."""

    @abstractmethod
    def fetch_user_display_name(self, login: str) -> str | None:
        """Display name for ``login``, or ``None``. Never raises."""

    @abstractmethod
    def create_comment(self, repository: str, item_number: str, body: str) -> None:
        """Post a new comment on a pull request or issue."""

    @abstractmethod
    def update_comment(self, repository: str, comment_id: str, body: str) -> None:
        """Replace the body of an existing comment."""

    @abstractmethod
    def get_provider_type(self) -> ProviderType:
        ...

    def close(self) -> None:
        """Release transport resources owned by the provider."""

    def __enter__(self) -> ForgeProvider:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
