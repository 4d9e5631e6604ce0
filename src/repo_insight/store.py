"""In-memory registry of analyses and shared reports."""

from __future__ import annotations

from collections.abc import Iterable

from .models import Report, RepositoryAnalysis


class AnalysisStore:
    """Keeps one analysis per (account, repository name).

    Saving a re-analysis of the same repository replaces the earlier record.
    Public reports are kept by share token.
    """

    def __init__(self) -> None:
        self._records: dict[tuple[str, str], RepositoryAnalysis] = {}
        self._reports: dict[str, Report] = {}

    def upsert(self, account: str, analysis: RepositoryAnalysis) -> RepositoryAnalysis:
        self._records[(account, analysis.name)] = analysis
        return analysis

    def get(self, account: str, repository_name: str) -> RepositoryAnalysis | None:
        return self._records.get((account, repository_name))

    def for_account(self, account: str) -> list[RepositoryAnalysis]:
        return [a for (owner, _), a in self._records.items() if owner == account]

    def resolve(self, account: str, ids: Iterable[str]) -> list[RepositoryAnalysis]:
        """Analyses of `account` whose id is in `ids`; unknown ids are skipped."""
        wanted = set(ids)
        return [a for a in self.for_account(account) if a.id in wanted]

    def save_report(self, report: Report) -> bool:
        """Keep a public report for lookup by token; private ones are not kept."""
        if not report.is_public or not report.share_token:
            return False
        self._reports[report.share_token] = report
        return True

    def open_shared_report(self, share_token: str) -> Report | None:
        """Public report for `share_token`, counting the visit."""
        report = self._reports.get(share_token)
        if report is None or not report.is_public:
            return None
        report.record_view()
        return report

    def __len__(self) -> int:
        return len(self._records)
