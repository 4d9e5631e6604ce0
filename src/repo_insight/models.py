"""Data models for repo-insight."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class LanguageBreakdown:
    name: str
    bytes: int
    percentage: int


@dataclass
class MonthlyCommitBucket:
    month: str  # "MM"
    year: str  # "YYYY"
    commits: int = 0

    @property
    def key(self) -> str:
        return f"{self.year}-{self.month}"


@dataclass
class CommitSummary:
    total: int
    user_commits: int
    by_month: list[MonthlyCommitBucket] = field(default_factory=list)
    average_per_month: int = 0


@dataclass
class CollaborationSummary:
    contributors: int = 0
    issues: int = 0
    pull_requests: int = 0
    is_collaborative: bool = field(init=False)

    def __post_init__(self) -> None:
        self.is_collaborative = self.contributors > 1


@dataclass
class CodeQualitySummary:
    has_readme: bool = False
    has_license: bool = False
    has_tests: bool = False
    documentation_score: int = 0


@dataclass
class RepositoryAnalysis:
    owner: str
    name: str
    url: str
    commits: CommitSummary
    collaboration: CollaborationSummary
    code_quality: CodeQualitySummary
    description: str | None = None
    primary_language: str | None = None
    stars: int = 0
    forks: int = 0
    languages: list[LanguageBreakdown] = field(default_factory=list)
    code_quality_score: int = 0
    collaboration_score: int = 0
    consistency_score: int = 0

    @property
    def id(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def mean_score(self) -> float:
        return (self.code_quality_score + self.collaboration_score + self.consistency_score) / 3


@dataclass
class ReportSummary:
    total_commits: int
    total_contributors: int
    average_documentation_score: int
    top_languages: list[LanguageBreakdown] = field(default_factory=list)


@dataclass
class Report:
    repository_ids: frozenset[str]
    total_repositories: int
    total_commits: int
    total_stars: int
    overall_score: int
    report_name: str | None = None
    is_public: bool = False
    share_token: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    view_count: int = 0

    def record_view(self) -> int:
        self.view_count += 1
        return self.view_count
