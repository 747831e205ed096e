from __future__ import annotations

import subprocess
from collections.abc import Callable

FileHasher = Callable[[str], str]

HASH_ERRORS = (subprocess.SubprocessError, OSError, ValueError)


def git_hash_object(path: str) -> str:
    """Blob SHA of the file as it is on disk right now."""
    result = subprocess.run(
        ["git", "hash-object", "--", path],
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()
