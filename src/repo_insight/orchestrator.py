"""Glue between the CLI and the analysis engine."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .analyzer import AnalysisBatch
from .config import InsightConfig
from .errors import EmptyInputError
from .github.client import GitHubClient
from .models import Report, RepositoryAnalysis
from .renderer import render_csv, render_json, render_report
from .report import build_report, summarize
from .store import AnalysisStore

logger = logging.getLogger(__name__)


def top_repositories(repos: Sequence[dict], limit: int) -> list[str]:
    """Names of the `limit` most-starred repositories."""
    ranked = sorted(repos, key=lambda r: r.get("stargazers_count") or 0, reverse=True)
    return [r["name"] for r in ranked[:limit]]


async def select_repositories(
    client: GitHubClient, owner: str, viewer: str | None, limit: int
) -> list[str]:
    if viewer is not None and owner.lower() == viewer.lower():
        repos = await client.list_user_repos()
    else:
        repos = await client.list_owner_repos(owner)
    return top_repositories(repos, limit)


async def collect(
    client: GitHubClient,
    owner: str,
    repos: Sequence[str] | None = None,
    username: str | None = None,
    store: AnalysisStore | None = None,
) -> tuple[list[RepositoryAnalysis], dict[str, BaseException]]:
    """Analyze the selected repositories of `owner` (or its top ones).

    Stored analyses belong to the token's account, not to `username`.
    """
    config = client.config
    viewer = (await client.get_authenticated_user()).get("login")
    username = username or viewer

    selected = list(repos or [])
    if not selected:
        selected = await select_repositories(client, owner, viewer, config.top_repositories)
        logger.debug("Selected repositories for %s: %s", owner, ", ".join(selected))

    batch = AnalysisBatch(client, owner, selected, username)
    analyses, failures = await batch.results()

    if store is not None:
        for analysis in analyses:
            store.upsert(viewer or owner, analysis)
    return analyses, failures


async def run(
    owner: str,
    token: str,
    repos: Sequence[str] | None = None,
    username: str | None = None,
    config: InsightConfig | None = None,
    report_name: str | None = None,
    is_public: bool = True,
    output_format: str = "table",
    output_file: str | None = None,
    store: AnalysisStore | None = None,
) -> Report:
    """Analyze, aggregate and render one report.

    Raises:
        EmptyInputError: If no repository could be analyzed.
    """
    async with GitHubClient(token, config=config) as client:
        analyses, failures = await collect(client, owner, repos, username, store)

    if not analyses:
        failed = ", ".join(failures) or "none selected"
        raise EmptyInputError(f"No repository of {owner} could be analyzed ({failed})")

    report = build_report(
        analyses, report_name=report_name or f"Report for {owner}", is_public=is_public
    )
    if store is not None:
        store.save_report(report)
    summary = summarize(analyses)
    failed_repos = sorted(failures)

    if output_format == "json":
        render_json(report, summary, analyses, failed_repos, output_file=output_file)
    elif output_format == "csv":
        render_csv(analyses, output_file=output_file)
    else:
        render_report(report, summary, analyses, failed_repos, output_file=output_file)
    return report

