"""Async GitHub REST client."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from .. import __version__
from ..config import InsightConfig
from ..errors import UnexpectedResponseShapeError
from .pagination import PaginatedFetcher, decode_json
from .rate_limit import RateLimitMonitor

logger = logging.getLogger(__name__)

API_VERSION = "2022-11-28"

_RETRYABLE_STATUS = {429, 500, 502, 503, 504}


class GitHubClient:
    """Thin wrapper over httpx.AsyncClient for the endpoints the analyzer needs.

    Use as an async context manager:

        async with GitHubClient(token) as client:
            repos = await client.list_user_repos()
    """

    def __init__(
        self,
        token: str,
        config: InsightConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or InsightConfig()
        self.rate_limit = RateLimitMonitor(threshold=self.config.rate_limit_threshold)
        self._http = httpx.AsyncClient(
            base_url=self.config.api_url,
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {token}",
                "User-Agent": f"repo-insight/{__version__}",
                "X-GitHub-Api-Version": API_VERSION,
            },
            timeout=self.config.timeout,
            transport=transport,
        )
        self._fetcher = PaginatedFetcher(self._request, max_pages=self.config.max_pages)

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def _is_retryable(self, response: httpx.Response) -> bool:
        if response.status_code in _RETRYABLE_STATUS:
            return True
        # secondary rate limits come back as 403
        return response.status_code == 403 and "rate limit" in response.text.lower()

    async def _request(self, url: str, params: dict[str, Any] | None = None) -> httpx.Response:
        """GET with rate limit pacing and the configured retry budget.

        Non-success responses are returned as-is once retries are spent;
        callers decide how to surface them.
        """
        attempt = 0
        while True:
            await self.rate_limit.wait_if_needed()
            try:
                response = await self._http.get(url, params=params)
            except httpx.TransportError as e:
                if attempt >= self.config.max_retries:
                    raise
                logger.warning("Request to %s failed (%s), retrying", url, e)
            else:
                self.rate_limit.update(response)
                logger.debug("GET %s -> %d", response.url, response.status_code)
                if not self._is_retryable(response) or attempt >= self.config.max_retries:
                    return response
                logger.warning(
                    "GitHub answered %d for %s, retrying", response.status_code, url
                )
            attempt += 1
            await asyncio.sleep(self.config.retry_backoff * 2 ** (attempt - 1))

    async def _get_object(self, url: str, params: dict[str, Any] | None = None) -> dict:
        return decode_json(await self._request(url, params), dict)

    async def _get_collection(self, url: str, **params: Any) -> list[dict]:
        params.setdefault("per_page", self.config.per_page)
        return await self._fetcher.fetch_all(url, params)

    async def get_authenticated_user(self) -> dict:
        return await self._get_object("/user")

    async def list_user_repos(self, include_forks: bool = False) -> list[dict]:
        """Repositories of the authenticated user, most recently updated first."""
        repos = await self._get_collection("/user/repos", sort="updated")
        if include_forks:
            return repos
        return [r for r in repos if not r.get("fork")]

    async def list_owner_repos(self, owner: str, include_forks: bool = False) -> list[dict]:
        """Public repositories owned by another account."""
        repos = await self._get_collection(f"/users/{owner}/repos", type="owner", sort="updated")
        if include_forks:
            return repos
        return [r for r in repos if not r.get("fork")]

    async def get_repo(self, owner: str, repo: str) -> dict:
        return await self._get_object(f"/repos/{owner}/{repo}")

    async def get_languages(self, owner: str, repo: str) -> dict[str, int]:
        return await self._get_object(f"/repos/{owner}/{repo}/languages")

    async def list_commits(self, owner: str, repo: str) -> list[dict]:
        return await self._get_collection(f"/repos/{owner}/{repo}/commits")

    async def list_contributors(self, owner: str, repo: str) -> list[dict]:
        return await self._get_collection(f"/repos/{owner}/{repo}/contributors")

    async def list_issues(self, owner: str, repo: str) -> list[dict]:
        """Issues and pull requests alike; PRs carry a "pull_request" key."""
        return await self._get_collection(f"/repos/{owner}/{repo}/issues", state="all")

    async def list_tree_paths(self, owner: str, repo: str, ref: str = "HEAD") -> list[str]:
        """Every path of the recursive git tree at ref."""
        data = await self._get_object(
            f"/repos/{owner}/{repo}/git/trees/{ref}", {"recursive": "1"}
        )
        tree = data.get("tree")
        if not isinstance(tree, list):
            raise UnexpectedResponseShapeError("array", type(tree).__name__, f"{repo} tree")
        if data.get("truncated"):
            logger.debug("Tree listing for %s/%s was truncated", owner, repo)
        return [entry["path"] for entry in tree if isinstance(entry, dict) and "path" in entry]
