"""Tests for the GitHub client."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from repo_insight.errors import UnexpectedResponseShapeError, UpstreamRequestError


@pytest.mark.asyncio
async def test_default_headers(fake_github, make_client):
    fake_github.add("/user", {"login": "alice"})
    async with make_client() as client:
        user = await client.get_authenticated_user()

    assert user["login"] == "alice"
    request = fake_github.requests[0]
    assert request.headers["Authorization"] == "Bearer test-token"
    assert request.headers["Accept"] == "application/vnd.github+json"
    assert request.headers["X-GitHub-Api-Version"] == "2022-11-28"
    assert request.headers["User-Agent"].startswith("repo-insight/")


@pytest.mark.asyncio
async def test_list_user_repos_excludes_forks(fake_github, make_client):
    fake_github.add("/user/repos", [
        {"name": "own", "fork": False},
        {"name": "forked", "fork": True},
    ])
    async with make_client() as client:
        repos = await client.list_user_repos()
        with_forks = await client.list_user_repos(include_forks=True)

    assert [r["name"] for r in repos] == ["own"]
    assert len(with_forks) == 2
    params = fake_github.requests[0].url.params
    assert params["sort"] == "updated"
    assert params["per_page"] == "100"


@pytest.mark.asyncio
async def test_list_issues_requests_all_states(fake_github, make_client):
    fake_github.add("/repos/alice/repo1/issues", [{"number": 1}])
    async with make_client(per_page=50) as client:
        issues = await client.list_issues("alice", "repo1")

    assert issues == [{"number": 1}]
    params = fake_github.requests[0].url.params
    assert params["state"] == "all"
    assert params["per_page"] == "50"


@pytest.mark.asyncio
async def test_get_languages_requires_object(fake_github, make_client):
    fake_github.add("/repos/alice/repo1/languages", ["Python"])
    async with make_client() as client:
        with pytest.raises(UnexpectedResponseShapeError):
            await client.get_languages("alice", "repo1")


@pytest.mark.asyncio
async def test_list_tree_paths(fake_github, make_client):
    fake_github.add_repository("alice", "repo1", tree=["README.md", "src/app.py", "tests/test_app.py"])
    async with make_client() as client:
        paths = await client.list_tree_paths("alice", "repo1")

    assert paths == ["README.md", "src/app.py", "tests/test_app.py"]
    assert fake_github.requests[0].url.params["recursive"] == "1"


@pytest.mark.asyncio
async def test_list_tree_paths_without_tree_array(fake_github, make_client):
    fake_github.add("/repos/alice/repo1/git/trees/HEAD", {"sha": "abc", "tree": None})
    async with make_client() as client:
        with pytest.raises(UnexpectedResponseShapeError):
            await client.list_tree_paths("alice", "repo1")


@pytest.mark.asyncio
async def test_no_retry_by_default(fake_github, make_client):
    fake_github.add("/repos/alice/repo1", status=503, text="unavailable")
    fake_github.add("/repos/alice/repo1", {"name": "repo1"})
    async with make_client() as client:
        with pytest.raises(UpstreamRequestError) as exc_info:
            await client.get_repo("alice", "repo1")

    assert exc_info.value.status_code == 503
    assert len(fake_github.requests) == 1


@pytest.mark.asyncio
@patch("repo_insight.github.client.asyncio.sleep", new_callable=AsyncMock)
async def test_retries_transient_status(mock_sleep, fake_github, make_client):
    fake_github.add("/repos/alice/repo1", status=502, text="bad gateway")
    fake_github.add("/repos/alice/repo1", status=503, text="unavailable")
    fake_github.add("/repos/alice/repo1", {"name": "repo1"})
    async with make_client(max_retries=2, retry_backoff=0.5) as client:
        repo = await client.get_repo("alice", "repo1")

    assert repo == {"name": "repo1"}
    assert len(fake_github.requests) == 3
    assert [c.args[0] for c in mock_sleep.call_args_list] == [0.5, 1.0]


@pytest.mark.asyncio
@patch("repo_insight.github.client.asyncio.sleep", new_callable=AsyncMock)
async def test_does_not_retry_client_errors(mock_sleep, fake_github, make_client):
    fake_github.add("/repos/alice/missing", status=404, json={"message": "Not Found"})
    async with make_client(max_retries=3) as client:
        with pytest.raises(UpstreamRequestError) as exc_info:
            await client.get_repo("alice", "missing")

    assert exc_info.value.status_code == 404
    assert len(fake_github.requests) == 1
    mock_sleep.assert_not_called()


@pytest.mark.asyncio
@patch("repo_insight.github.client.asyncio.sleep", new_callable=AsyncMock)
async def test_transport_error_raised_after_retries(mock_sleep, make_client, fake_github):
    def broken(request):
        fake_github.requests.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    fake_github.handler = broken
    async with make_client(max_retries=1) as client:
        with pytest.raises(httpx.ConnectError):
            await client.get_repo("alice", "repo1")

    assert len(fake_github.requests) == 2


@pytest.mark.asyncio
async def test_rate_limit_headers_are_tracked(fake_github, make_client):
    fake_github.add("/user", {"login": "alice"}, headers={
        "X-RateLimit-Remaining": "4999",
        "X-RateLimit-Reset": "1700000000",
    })
    async with make_client() as client:
        await client.get_authenticated_user()
        assert client.rate_limit.remaining == 4999
