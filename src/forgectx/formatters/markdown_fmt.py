from __future__ import annotations

from ..models import Author, FetchResult, PullRequest


def _who(author: Author) -> str:
    if author.name and author.name != author.login:
        return f"{author.name} (@{author.login})"
    return f"@{author.login}"


def format_markdown(result: FetchResult, owner_repo: str = "") -> str:
    ctx = result.context_data
    is_pr = isinstance(ctx, PullRequest)
    lines: list[str] = []

    heading = "Pull Request" if is_pr else "Issue"
    where = f" in {owner_repo}" if owner_repo else ""
    lines.append(f"# {heading}{where}: {ctx.title}")
    lines.append("")
    lines.append("| Field | Value |")
    lines.append("| --- | --- |")
    lines.append(f"| Author | {_who(ctx.author)} |")
    lines.append(f"| State | {ctx.state} |")
    lines.append(f"| Created | {ctx.created_at} |")
    if isinstance(ctx, PullRequest):
        lines.append(f"| Branch | {ctx.head_ref_name} → {ctx.base_ref_name} |")
        lines.append(f"| Head | {ctx.head_ref_oid} |")
        lines.append(f"| Additions | {ctx.additions} |")
        lines.append(f"| Deletions | {ctx.deletions} |")
        lines.append(f"| Commits | {ctx.commits.total_count} |")
    if result.trigger_display_name:
        lines.append(f"| Triggered by | {result.trigger_display_name} |")
    lines.append("")

    if ctx.body:
        lines.append(ctx.body)
        lines.append("")

    if isinstance(ctx, PullRequest) and ctx.commits.nodes:
        lines.append(f"## Commits ({ctx.commits.total_count})")
        lines.append("")
        for node in ctx.commits.nodes:
            summary = node.commit.message.splitlines()[0] if node.commit.message else ""
            lines.append(f"- `{node.commit.oid[:7]}` {summary} ({node.commit.author.name})")
        lines.append("")

    if result.changed_files_with_sha or result.changed_files:
        files = result.changed_files_with_sha or result.changed_files
        lines.append(f"## Changed Files ({len(files)})")
        lines.append("")
        for f in files:
            sha = getattr(f, "sha", None)
            suffix = f" `{sha}`" if sha else ""
            lines.append(f"- `{f.path}` ({f.change_type}) +{f.additions}/-{f.deletions}{suffix}")
        lines.append("")

    if result.comments:
        lines.append(f"## Comments ({len(result.comments)})")
        lines.append("")
        for c in result.comments:
            lines.append(f"### Comment by {_who(c.author)} — {c.created_at}")
            lines.append("")
            lines.append(c.body)
            lines.append("")

    if result.review_data and result.review_data.nodes:
        lines.append(f"## Reviews ({len(result.review_data.nodes)})")
        lines.append("")
        for r in result.review_data.nodes:
            lines.append(f"### {r.state or 'review'} by {_who(r.author)} — {r.submitted_at}")
            lines.append("")
            if r.body:
                lines.append(r.body)
                lines.append("")
            for rc in r.comments.nodes:
                line_info = f":{rc.line}" if rc.line is not None else ""
                lines.append(f"#### `{rc.path}{line_info}` — {_who(rc.author)}")
                lines.append("")
                lines.append(rc.body)
                lines.append("")

    return "\n".join(lines)
