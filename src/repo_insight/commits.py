"""Monthly commit histogram and user attribution."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone

from .models import CommitSummary, MonthlyCommitBucket
from .scoring import round_half_up


def parse_datetime(s: str | None) -> datetime | None:
    if not s:
        return None
    # GitHub ISO format: 2024-01-15T10:30:00Z
    try:
        parsed = datetime.fromisoformat(s.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def month_window(now: datetime, months: int = 12) -> list[MonthlyCommitBucket]:
    """Zeroed buckets for the `months` calendar months ending with now's month."""
    buckets = []
    for offset in range(months - 1, -1, -1):
        index = now.year * 12 + (now.month - 1) - offset
        year, month = divmod(index, 12)
        buckets.append(MonthlyCommitBucket(month=f"{month + 1:02d}", year=f"{year:04d}"))
    return buckets


def commit_author_login(commit: dict) -> str | None:
    # "author" is the linked GitHub account and is null for unknown emails
    return (commit.get("author") or {}).get("login")


def commit_date(commit: dict) -> datetime | None:
    author = (commit.get("commit") or {}).get("author") or {}
    return parse_datetime(author.get("date"))


def analyze_commits(
    commits: Iterable[dict],
    username: str | None,
    *,
    window_months: int = 12,
    now: datetime | None = None,
) -> CommitSummary:
    """Bucket commits into a trailing monthly window and count the user's own.

    Commits older than the window, or without a readable date, still count
    toward the total.
    """
    now = now or datetime.now(timezone.utc)
    by_month = month_window(now, window_months)
    index = {bucket.key: bucket for bucket in by_month}

    total = 0
    user_commits = 0
    for commit in commits:
        total += 1
        login = commit_author_login(commit)
        if username and login == username:
            user_commits += 1
        date = commit_date(commit)
        if date is None:
            continue
        bucket = index.get(f"{date.year:04d}-{date.month:02d}")
        if bucket is not None:
            bucket.commits += 1

    return CommitSummary(
        total=total,
        user_commits=user_commits,
        by_month=by_month,
        average_per_month=round_half_up(user_commits / window_months),
    )
