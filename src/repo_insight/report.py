"""Combine per-repository analyses into a report."""

from __future__ import annotations

import secrets
import string
from collections.abc import Sequence

from .errors import EmptyInputError
from .languages import merge_languages
from .models import Report, ReportSummary, RepositoryAnalysis
from .scoring import clamp, round_half_up

SHARE_TOKEN_ALPHABET = string.ascii_letters + string.digits + "_-"
SHARE_TOKEN_LENGTH = 10
TOP_LANGUAGES = 5


def generate_share_token(length: int = SHARE_TOKEN_LENGTH) -> str:
    return "".join(secrets.choice(SHARE_TOKEN_ALPHABET) for _ in range(length))


def overall_score(analyses: Sequence[RepositoryAnalysis]) -> int:
    """Mean of each analysis' mean score; every repository weighs the same."""
    if not analyses:
        raise EmptyInputError("Cannot score a report without analyses")
    return clamp(round_half_up(sum(a.mean_score for a in analyses) / len(analyses)))


def build_report(
    analyses: Sequence[RepositoryAnalysis],
    *,
    report_name: str | None = None,
    is_public: bool = False,
) -> Report:
    """Aggregate analyses of one account into a Report.

    Raises:
        EmptyInputError: If no analyses are given.
    """
    if not analyses:
        raise EmptyInputError("Cannot build a report from zero analyses")

    return Report(
        repository_ids=frozenset(a.id for a in analyses),
        total_repositories=len(analyses),
        total_commits=sum(a.commits.user_commits for a in analyses),
        total_stars=sum(a.stars for a in analyses),
        overall_score=overall_score(analyses),
        report_name=report_name,
        is_public=is_public,
        share_token=generate_share_token() if is_public else None,
    )


def summarize(analyses: Sequence[RepositoryAnalysis], top: int = TOP_LANGUAGES) -> ReportSummary:
    """Dashboard totals shown next to a report. Empty input gives an empty summary."""
    if not analyses:
        return ReportSummary(total_commits=0, total_contributors=0, average_documentation_score=0)
    return ReportSummary(
        total_commits=sum(a.commits.user_commits for a in analyses),
        total_contributors=sum(a.collaboration.contributors for a in analyses),
        average_documentation_score=round_half_up(
            sum(a.code_quality.documentation_score for a in analyses) / len(analyses)
        ),
        top_languages=merge_languages((a.languages for a in analyses), top=top),
    )
