"""Error types raised by the insight engine."""

from __future__ import annotations


class InsightError(Exception):
    pass


class UpstreamRequestError(InsightError):
    """The GitHub API answered with a non-success status."""

    def __init__(self, status_code: int, body: str, url: str | None = None):
        self.status_code = status_code
        self.body = body
        self.url = url
        where = f" for {url}" if url else ""
        super().__init__(f"GitHub API error {status_code}{where}: {body[:300]}")


class UnexpectedResponseShapeError(InsightError):
    """A response decoded to JSON of the wrong shape."""

    def __init__(self, expected: str, actual: str, url: str | None = None):
        self.expected = expected
        self.actual = actual
        self.url = url
        where = f" from {url}" if url else ""
        super().__init__(f"Expected JSON {expected}{where}, got {actual}")


class EmptyInputError(InsightError):
    pass
