"""Score formulas. Every score is an integer in [0, 100].

The weights are fixed constants; changing any of them changes every
previously published score.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

from .models import (
    CodeQualitySummary,
    CollaborationSummary,
    LanguageBreakdown,
    MonthlyCommitBucket,
)

COMMENTED_LANGUAGES = frozenset({"JavaScript", "TypeScript", "Python", "Java", "C++"})

VOLUME_TARGET = 50


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (built-in round() is banker's)."""
    return math.floor(value + 0.5)


def clamp(value: float, low: int = 0, high: int = 100) -> int:
    return int(max(low, min(high, value)))


def documentation_score(languages: Iterable[LanguageBreakdown]) -> int:
    names = {lang.name for lang in languages}
    score = 50
    if "Markdown" in names:
        score += 30
    if names & COMMENTED_LANGUAGES:
        score += 20
    return clamp(score)


def code_quality_score(quality: CodeQualitySummary) -> int:
    score = 0
    if quality.has_readme:
        score += 25
    if quality.has_license:
        score += 20
    if quality.has_tests:
        score += 30
    score += round_half_up(quality.documentation_score * 0.25)
    return clamp(score)


def collaboration_score(collaboration: CollaborationSummary) -> int:
    score = 30
    if collaboration.contributors > 1:
        score += 20
    if collaboration.contributors > 5:
        score += 10
    if collaboration.pull_requests > 0:
        score += 20
    if collaboration.issues > 0:
        score += 10
    if collaboration.pull_requests > collaboration.issues:
        score += 10
    return clamp(score)


def consistency_score(by_month: Sequence[MonthlyCommitBucket]) -> int:
    """Reward regular monthly activity (70%) and overall volume (30%)."""
    if not by_month:
        return 0
    counts = [bucket.commits for bucket in by_month]
    total = sum(counts)
    average = total / len(counts)
    variance = sum((c - average) ** 2 for c in counts) / len(counts)

    if average == 0:
        consistency_factor = 0.0
    else:
        consistency_factor = max(0.0, 100 - (variance / average) * 20)
    volume_factor = min(total / VOLUME_TARGET, 1) * 100

    return clamp(round_half_up(consistency_factor * 0.7 + volume_factor * 0.3))
