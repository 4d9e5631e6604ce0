"""Link-header pagination over GitHub REST collections."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

import httpx

from ..errors import UnexpectedResponseShapeError, UpstreamRequestError

logger = logging.getLogger(__name__)

RequestFn = Callable[[str, dict[str, Any] | None], Awaitable[httpx.Response]]


def check_response(response: httpx.Response) -> None:
    """Raise UpstreamRequestError for any non-2xx response."""
    if not response.is_success:
        raise UpstreamRequestError(response.status_code, response.text, str(response.url))


def _shape(value: Any) -> str:
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def decode_json(response: httpx.Response, expected: type[list] | type[dict]) -> Any:
    """Decode a successful response, insisting on an array or object body."""
    check_response(response)
    if response.status_code == 204 or not response.content:
        # contributors answers 204 for empty repositories
        return expected()
    try:
        data = response.json()
    except ValueError as e:
        raise UnexpectedResponseShapeError(
            _shape(expected()), "invalid JSON", str(response.url)
        ) from e
    if not isinstance(data, expected):
        raise UnexpectedResponseShapeError(_shape(expected()), _shape(data), str(response.url))
    return data


def next_link(response: httpx.Response) -> str | None:
    """URL of the rel="next" entry of the Link header, if any."""
    return response.links.get("next", {}).get("url")


class PaginatedFetcher:
    """Follows rel="next" links across the pages of one collection.

    Pages are requested one at a time; each continuation URL is only known
    once the previous response has arrived.
    """

    def __init__(self, request: RequestFn, max_pages: int | None = None) -> None:
        self._request = request
        self.max_pages = max_pages

    async def pages(
        self, url: str, params: dict[str, Any] | None = None
    ) -> AsyncIterator[list[Any]]:
        cursor: str | None = url
        page_count = 0
        while cursor is not None:
            if self.max_pages is not None and page_count >= self.max_pages:
                logger.debug("Stopping at %d pages for %s", page_count, url)
                return
            response = await self._request(cursor, params)
            page = decode_json(response, list)
            page_count += 1
            logger.debug("Fetched page %d (%d items) from %s", page_count, len(page), cursor)
            yield page
            cursor = next_link(response)
            # the next link already carries the query string
            params = None

    async def fetch_all(self, url: str, params: dict[str, Any] | None = None) -> list[Any]:
        items: list[Any] = []
        async for page in self.pages(url, params):
            items.extend(page)
        return items
