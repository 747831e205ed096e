from __future__ import annotations

import dataclasses
import json

from ..models import FetchResult, PullRequest


def format_json(result: FetchResult) -> str:
    payload = dataclasses.asdict(result)
    payload["kind"] = "pull_request" if isinstance(result.context_data, PullRequest) else "issue"
    return json.dumps(payload, indent=2)
