"""Language byte histograms."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping

from .models import LanguageBreakdown
from .scoring import round_half_up


def _percentage(part: int, total: int) -> int:
    if total <= 0:
        return 0
    return round_half_up(part / total * 100)


def language_breakdown(languages: Mapping[str, int]) -> list[LanguageBreakdown]:
    """Turn GitHub's {language: bytes} map into breakdown entries, in API order."""
    total = sum(languages.values())
    return [
        LanguageBreakdown(name=name, bytes=count, percentage=_percentage(count, total))
        for name, count in languages.items()
    ]


def merge_languages(
    breakdowns: Iterable[Iterable[LanguageBreakdown]], top: int | None = 5
) -> list[LanguageBreakdown]:
    """Sum bytes per language across repositories and rank by bytes.

    Percentages are recomputed against the merged total.
    """
    merged: dict[str, int] = defaultdict(int)
    for breakdown in breakdowns:
        for lang in breakdown:
            merged[lang.name] += lang.bytes

    total = sum(merged.values())
    result = [
        LanguageBreakdown(name=name, bytes=count, percentage=_percentage(count, total))
        for name, count in merged.items()
    ]
    result.sort(key=lambda lang: lang.bytes, reverse=True)
    return result[:top] if top is not None else result
