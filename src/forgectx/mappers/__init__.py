"""Pure translations from each forge's JSON into :mod:`forgectx.models`."""
from __future__ import annotations

from typing import Any

from ..models import Author

GHOST_LOGIN = "ghost"


def author_from(login: str | None, name: str | None = None) -> Author:
    """Build an :class:`Author`, falling back to the login for the display name.

    Deleted accounts come back without a user; they are reported as ``ghost``.
    """
    login = login or GHOST_LOGIN
    return Author(login=login, name=name or login)


def resolve_line(line: int | None, original_line: int | None) -> int | None:
    if line is not None:
        return line
    if original_line is not None:
        return original_line
    return None


def as_id(value: Any) -> str:
    return "" if value is None else str(value)
