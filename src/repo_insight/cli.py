"""Command-line entry point."""

from __future__ import annotations

import asyncio
import logging

import click
import httpx
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .config import load_config
from .errors import InsightError

console = Console(stderr=True)

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=verbose, show_path=verbose)],
        force=True,
    )
    # httpx logs each request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _parse_target(target: str) -> tuple[str, str | None]:
    """Split "owner" or "owner/repo"."""
    owner, _, repo = target.strip("/").partition("/")
    if not owner or "/" in repo:
        raise click.BadParameter("expected USER or OWNER/REPO", param_hint="TARGET")
    return owner, repo or None


@click.command(context_settings=CONTEXT_SETTINGS)
@click.argument("target")
@click.option("--token", envvar="GITHUB_TOKEN", required=True,
              help="GitHub token (defaults to $GITHUB_TOKEN).")
@click.option("--user", "username", default=None,
              help="Login credited with commits. Defaults to the token's owner.")
@click.option("--repo", "repos", multiple=True,
              help="Repository to analyze; repeatable. Defaults to the top repositories.")
@click.option("--top", type=click.IntRange(min=1), default=None,
              help="How many of the most-starred repositories to analyze.  [default: 5]")
@click.option("--window-months", type=click.IntRange(min=1), default=None,
              help="Months in the commit histogram.  [default: 12]")
@click.option("--retries", type=click.IntRange(min=0), default=None,
              help="Retries for transient GitHub failures.  [default: 0]")
@click.option("--concurrency", type=click.IntRange(min=1), default=None,
              help="Repositories analyzed at once.  [default: 5]")
@click.option("--public/--private", "is_public", default=True, show_default=True,
              help="Generate a share token for the report.")
@click.option("--name", "report_name", default=None, help="Report name.")
@click.option("--format", "output_format", type=click.Choice(["table", "json", "csv"]),
              default="table", show_default=True, help="Output format.")
@click.option("--output", "output_file", type=click.Path(dir_okay=False), default=None,
              help="Write the output to a file.")
@click.option("--verbose", "-v", is_flag=True, help="Verbose logging.")
@click.version_option(__version__, prog_name="repo-insight")
def main(target, token, username, repos, top, window_months, retries, concurrency,
         is_public, report_name, output_format, output_file, verbose):
    """Score GitHub repositories and build a shareable developer report.

    \b
    TARGET is either a user (analyze their top repositories) or OWNER/REPO.
    """
    _setup_logging(verbose)
    owner, single_repo = _parse_target(target)
    selected = list(repos)
    if single_repo:
        selected.append(single_repo)

    try:
        config = load_config(
            window_months=window_months,
            max_retries=retries,
            concurrency=concurrency,
            top_repositories=top,
        )
    except ValueError as e:
        raise click.UsageError(str(e)) from e

    from .orchestrator import run

    try:
        asyncio.run(run(
            owner=owner,
            token=token,
            repos=selected,
            username=username,
            config=config,
            report_name=report_name,
            is_public=is_public,
            output_format=output_format,
            output_file=output_file,
        ))
    except (InsightError, httpx.HTTPError) as e:
        console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e
