"""Per-repository analysis and the multi-repository fan-out."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from datetime import datetime

import httpx

from .commits import analyze_commits
from .config import InsightConfig
from .errors import InsightError
from .github.client import GitHubClient
from .heuristics import detect_license, detect_readme, detect_tests
from .languages import language_breakdown
from .models import (
    CodeQualitySummary,
    CollaborationSummary,
    RepositoryAnalysis,
)
from .scoring import (
    code_quality_score,
    collaboration_score,
    consistency_score,
    documentation_score,
)

logger = logging.getLogger(__name__)


async def fetch_tree_paths(client: GitHubClient, owner: str, repo: str) -> list[str] | None:
    """Recursive tree listing, or None when it cannot be retrieved.

    A missing tree only costs the repository its file-based quality bonuses,
    so failures are logged instead of raised.
    """
    try:
        return await client.list_tree_paths(owner, repo)
    except (InsightError, httpx.HTTPError) as e:
        logger.warning("Could not list files of %s/%s: %s", owner, repo, e)
        return None


def split_issues(items: Iterable[dict]) -> tuple[int, int]:
    """Count (plain issues, pull requests) from the issues endpoint."""
    issues = pull_requests = 0
    for item in items:
        if item.get("pull_request"):
            pull_requests += 1
        else:
            issues += 1
    return issues, pull_requests


async def analyze_repository(
    client: GitHubClient,
    owner: str,
    repo: str,
    username: str | None,
    *,
    window_months: int | None = None,
    now: datetime | None = None,
) -> RepositoryAnalysis:
    """Fetch everything one repository needs and score it.

    The collections are fetched concurrently; any failure other than the
    file tree cancels the remaining fetches and fails the whole analysis
    with the first error.
    """
    window = window_months or client.config.window_months
    try:
        async with asyncio.TaskGroup() as tg:
            metadata_task = tg.create_task(client.get_repo(owner, repo))
            languages_task = tg.create_task(client.get_languages(owner, repo))
            commits_task = tg.create_task(client.list_commits(owner, repo))
            contributors_task = tg.create_task(client.list_contributors(owner, repo))
            issues_task = tg.create_task(client.list_issues(owner, repo))
            tree_task = tg.create_task(fetch_tree_paths(client, owner, repo))
    except ExceptionGroup as group:
        raise group.exceptions[0] from None

    metadata = metadata_task.result()
    languages = languages_task.result()
    commits = commits_task.result()
    contributors = contributors_task.result()
    issues = issues_task.result()
    tree = tree_task.result()

    breakdown = language_breakdown(languages)
    paths = tree or []
    issue_count, pr_count = split_issues(issues)

    commit_summary = analyze_commits(commits, username, window_months=window, now=now)
    collaboration = CollaborationSummary(
        contributors=len(contributors), issues=issue_count, pull_requests=pr_count
    )
    quality = CodeQualitySummary(
        has_readme=detect_readme(paths),
        has_license=detect_license(paths, metadata),
        has_tests=detect_tests(paths),
        documentation_score=documentation_score(breakdown),
    )

    analysis = RepositoryAnalysis(
        owner=owner,
        name=metadata.get("name") or repo,
        url=metadata.get("html_url") or f"https://github.com/{owner}/{repo}",
        description=metadata.get("description"),
        primary_language=metadata.get("language"),
        stars=metadata.get("stargazers_count") or 0,
        forks=metadata.get("forks_count") or 0,
        languages=breakdown,
        commits=commit_summary,
        collaboration=collaboration,
        code_quality=quality,
        code_quality_score=code_quality_score(quality),
        collaboration_score=collaboration_score(collaboration),
        consistency_score=consistency_score(commit_summary.by_month),
    )
    logger.debug(
        "Scored %s: quality=%d collaboration=%d consistency=%d",
        analysis.id, analysis.code_quality_score,
        analysis.collaboration_score, analysis.consistency_score,
    )
    return analysis


class AnalysisBatch:
    """One task per repository, individually cancellable.

    Must be created inside a running event loop. Cancelled repositories are
    left out of results() entirely.
    """

    def __init__(
        self,
        client: GitHubClient,
        owner: str,
        repos: Iterable[str],
        username: str | None,
        *,
        window_months: int | None = None,
        concurrency: int | None = None,
        now: datetime | None = None,
    ) -> None:
        self._semaphore = asyncio.Semaphore(concurrency or client.config.concurrency)
        self._tasks: dict[str, asyncio.Task[RepositoryAnalysis]] = {}
        for repo in dict.fromkeys(repos):
            self._tasks[repo] = asyncio.create_task(
                self._run(client, owner, repo, username, window_months, now),
                name=f"analyze:{owner}/{repo}",
            )

    async def _run(self, client, owner, repo, username, window_months, now) -> RepositoryAnalysis:
        async with self._semaphore:
            return await analyze_repository(
                client, owner, repo, username, window_months=window_months, now=now
            )

    @property
    def repositories(self) -> list[str]:
        return list(self._tasks)

    def cancel(self, repo: str) -> bool:
        task = self._tasks.get(repo)
        if task is None or task.done():
            return False
        return task.cancel()

    async def results(self) -> tuple[list[RepositoryAnalysis], dict[str, BaseException]]:
        """Wait for every task; returns (analyses, failures by repository).

        Analyses keep the order repositories were given in.
        """
        await asyncio.gather(*self._tasks.values(), return_exceptions=True)
        analyses: list[RepositoryAnalysis] = []
        failures: dict[str, BaseException] = {}
        for repo, task in self._tasks.items():
            if task.cancelled():
                logger.debug("Analysis of %s was cancelled", repo)
                continue
            error = task.exception()
            if error is not None:
                logger.warning("Analysis of %s failed: %s", repo, error)
                failures[repo] = error
            else:
                analyses.append(task.result())
        return analyses, failures


async def analyze(
    owner_login: str,
    repo_name: str,
    auth_token: str,
    *,
    username: str | None = None,
    window_months: int | None = None,
    config: InsightConfig | None = None,
) -> RepositoryAnalysis:
    """Analyze one repository with a fresh client.

    Commits are attributed to `username`, or to the token's own login when
    it is not given.
    """
    async with GitHubClient(auth_token, config=config) as client:
        if username is None:
            username = (await client.get_authenticated_user()).get("login")
        return await analyze_repository(
            client, owner_login, repo_name, username, window_months=window_months
        )
