from __future__ import annotations

import logging
import os
import sys
from collections.abc import Callable, Iterator
from contextlib import ExitStack, contextmanager
from pathlib import Path
from typing import Any, NoReturn
from urllib.parse import urlparse

import click
import httpx
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn

from .client import GitHubClient
from .config import PROVIDER_TYPES, ForgeConfig, load_config
from .errors import ForgeError
from .formatters import get_formatter
from .images import GITHUB_IMAGE_HOSTS, ImageDownloader
from .providers import FetchParams, ForgeProvider, create_provider, parse_repository

_stderr = Console(stderr=True)


load_dotenv()


def _fail(exc: Exception) -> NoReturn:
    _stderr.print(f"[red]Error:[/red] {escape(str(exc))}")
    sys.exit(1)


def _validate_repo(ctx: click.Context, param: click.Parameter, value: str) -> str:
    try:
        parse_repository(value)
    except ForgeError:
        raise click.BadParameter(f"{value!r} is not a valid OWNER/REPO format.", param_hint="REPO") from None
    return value


def _read_body(body: str) -> str:
    if body == "-":
        return click.get_text_stream("stdin").read()
    return body


def forge_options(f: Callable[..., Any]) -> Callable[..., Any]:
    f = click.option(
        "--server-url", default=None, help="Forge web URL (FORGE_SERVER_URL)."
    )(f)
    f = click.option(
        "--api-url", default=None, help="Forge API base URL (FORGE_API_URL)."
    )(f)
    f = click.option(
        "--forge-type",
        type=click.Choice(PROVIDER_TYPES),
        default=None,
        help="Forge backend (FORGE_TYPE, default github).",
    )(f)
    return f


def _load(forge_type: str | None, api_url: str | None, server_url: str | None) -> ForgeConfig:
    try:
        return load_config(
            os.environ, provider_type=forge_type, api_url=api_url, server_url=server_url
        )
    except ForgeError as exc:
        _fail(exc)


@contextmanager
def open_provider(config: ForgeConfig, image_dir: Path | None = None) -> Iterator[ForgeProvider]:
    """Build the configured provider together with the transports it needs."""
    with ExitStack() as stack:
        image_handler = None
        if image_dir is not None and config.type == "github":
            http = stack.enter_context(httpx.Client(timeout=30.0))
            forge_hosts = tuple(urlparse(u).hostname or "" for u in (config.server_url, config.api_url))
            image_handler = ImageDownloader(
                http, image_dir, token=config.token, trusted_hosts=(*GITHUB_IMAGE_HOSTS, *forge_hosts)
            )

        github_client = None
        if config.type == "github":
            github_client = stack.enter_context(GitHubClient(config.token, config.api_url))

        provider = stack.enter_context(
            create_provider(config.type, config, github_client, image_handler=image_handler)
        )
        yield provider


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """Fetch pull request and issue context from GitHub or Forgejo."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=_stderr, show_path=False)],
    )


@cli.command()
@click.argument("repo", metavar="OWNER/REPO", callback=_validate_repo)
@click.argument("number", type=click.IntRange(min=1))
@click.option("--issue", "is_issue", is_flag=True, help="Fetch an issue instead of a pull request.")
@click.option("--trigger-user", default=None, help="Login whose display name should be resolved.")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "markdown"]),
    default="json",
    show_default=True,
    help="Output format.",
)
@click.option(
    "--output",
    "output_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Write output to a file instead of stdout.",
)
@click.option(
    "--download-images",
    "image_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Download images referenced in comments into this directory (GitHub only).",
)
@forge_options
def fetch(
    repo: str,
    number: int,
    is_issue: bool,
    trigger_user: str | None,
    output_format: str,
    output_path: Path | None,
    image_dir: Path | None,
    forge_type: str | None,
    api_url: str | None,
    server_url: str | None,
) -> None:
    """Fetch pull request or issue NUMBER from OWNER/REPO."""
    config = _load(forge_type, api_url, server_url)
    kind = "issue" if is_issue else "pull request"
    params = FetchParams(
        repository=repo,
        identifier=str(number),
        is_pull_request=not is_issue,
        trigger_username=trigger_user,
    )

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=_stderr,
            transient=True,
        ) as progress:
            progress.add_task(f"Fetching {kind} #{number} from {repo}…", total=None)
            with open_provider(config, image_dir) as provider:
                result = provider.fetch_data(params)
    except ForgeError as exc:
        _fail(exc)

    formatter = get_formatter(output_format, owner_repo=repo)
    output = formatter(result)

    if output_path is not None:
        output_path.write_text(output, encoding="utf-8")
        _stderr.print(f"[green]Wrote {kind} #{number} to {output_path}[/green]")
    else:
        click.echo(output)


@cli.command()
@click.argument("repo", metavar="OWNER/REPO", callback=_validate_repo)
@click.argument("number", type=click.IntRange(min=1))
@click.argument("body")
@forge_options
def comment(
    repo: str,
    number: int,
    body: str,
    forge_type: str | None,
    api_url: str | None,
    server_url: str | None,
) -> None:
    """Post BODY as a new comment on NUMBER in OWNER/REPO ("-" reads stdin)."""
    config = _load(forge_type, api_url, server_url)
    try:
        with open_provider(config) as provider:
            provider.create_comment(repo, str(number), _read_body(body))
    except ForgeError as exc:
        _fail(exc)
    _stderr.print(f"[green]Commented on {repo}#{number}[/green]")


@cli.command("update-comment")
@click.argument("repo", metavar="OWNER/REPO", callback=_validate_repo)
@click.argument("comment_id", type=click.IntRange(min=1))
@click.argument("body")
@forge_options
def update_comment(
    repo: str,
    comment_id: int,
    body: str,
    forge_type: str | None,
    api_url: str | None,
    server_url: str | None,
) -> None:
    """Replace the body of comment COMMENT_ID in OWNER/REPO ("-" reads stdin)."""
    config = _load(forge_type, api_url, server_url)
    try:
        with open_provider(config) as provider:
            provider.update_comment(repo, str(comment_id), _read_body(body))
    except ForgeError as exc:
        _fail(exc)
    _stderr.print(f"[green]Updated comment {comment_id} in {repo}[/green]")
