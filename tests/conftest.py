"""Shared fixtures: analysis factories and a fake GitHub API."""

from __future__ import annotations

from typing import Any

import httpx
import pytest

from repo_insight.config import InsightConfig
from repo_insight.github.client import GitHubClient
from repo_insight.models import (
    CodeQualitySummary,
    CollaborationSummary,
    CommitSummary,
    LanguageBreakdown,
    RepositoryAnalysis,
)

API = "https://api.github.test"


def make_analysis(**kwargs) -> RepositoryAnalysis:
    defaults = dict(
        owner="alice",
        name="repo1",
        url="https://github.com/alice/repo1",
        stars=3,
        commits=CommitSummary(total=10, user_commits=8),
        collaboration=CollaborationSummary(contributors=2, issues=1, pull_requests=2),
        code_quality=CodeQualitySummary(
            has_readme=True, has_license=True, has_tests=False, documentation_score=70
        ),
        languages=[LanguageBreakdown(name="Python", bytes=1000, percentage=100)],
        code_quality_score=60,
        collaboration_score=90,
        consistency_score=30,
    )
    defaults.update(kwargs)
    return RepositoryAnalysis(**defaults)


class FakeGitHub:
    """Routes requests by path to canned responses and records them."""

    def __init__(self) -> None:
        self.routes: dict[str, list[dict[str, Any]]] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        path: str,
        json: Any = None,
        status: int = 200,
        headers: dict[str, str] | None = None,
        text: str | None = None,
    ) -> None:
        """Queue a response for path; the last one queued is repeated."""
        response: dict[str, Any] = {"status_code": status, "headers": headers}
        if text is not None:
            response["text"] = text
        elif status != 204:
            response["json"] = json
        self.routes.setdefault(path, []).append(response)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get(request.url.path)
        if not queue:
            return httpx.Response(404, json={"message": "Not Found"})
        spec = queue.pop(0) if len(queue) > 1 else queue[0]
        return httpx.Response(**spec)

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]

    def add_repository(
        self,
        owner: str,
        repo: str,
        *,
        stars: int = 0,
        languages: dict[str, int] | None = None,
        commits: list[dict] | None = None,
        contributors: list[dict] | None = None,
        issues: list[dict] | None = None,
        tree: list[str] | None = None,
        license: dict | None = None,
    ) -> None:
        base = f"/repos/{owner}/{repo}"
        self.add(base, {
            "name": repo,
            "html_url": f"https://github.com/{owner}/{repo}",
            "description": f"{repo} description",
            "language": "Python",
            "stargazers_count": stars,
            "forks_count": 1,
            "license": license,
        })
        self.add(f"{base}/languages", languages if languages is not None else {"Python": 1000})
        self.add(f"{base}/commits", commits or [])
        self.add(f"{base}/contributors", contributors or [])
        self.add(f"{base}/issues", issues or [])
        if tree is not None:
            self.add(f"{base}/git/trees/HEAD", {
                "sha": "abc",
                "tree": [{"path": p, "type": "blob"} for p in tree],
                "truncated": False,
            })


def commit(login: str | None, date: str) -> dict:
    return {
        "sha": f"{login}-{date}",
        "author": {"login": login} if login else None,
        "commit": {"author": {"name": login or "ghost", "date": date}},
    }


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def make_client(fake_github):
    def _make(**config) -> GitHubClient:
        return GitHubClient(
            "test-token",
            config=InsightConfig(api_url=API, **config),
            transport=httpx.MockTransport(fake_github.handler),
        )
    return _make
