"""Rich-based terminal report renderer with JSON/CSV support."""

from __future__ import annotations

import csv
import io
import json
from collections.abc import Sequence
from dataclasses import asdict
from datetime import datetime
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import Report, ReportSummary, RepositoryAnalysis

CSV_HEADER = [
    "repository",
    "stars",
    "user_commits",
    "code_quality",
    "collaboration",
    "consistency",
]


def _format_number(n: int) -> str:
    return f"{n:,}"


def _make_bar(percentage: float, width: int = 20) -> str:
    filled = round(percentage / 100 * width)
    return "█" * filled + "░" * (width - filled)


def _score_style(score: int) -> str:
    if score >= 75:
        return "green"
    if score >= 50:
        return "yellow"
    return "red"


def _write_to_file(content: str, output_file: str) -> None:
    """Write content to a file and print confirmation."""
    with open(output_file, "w", encoding="utf-8") as f:
        f.write(content)
    Console().print(f"Saved to {output_file}")


def render_report(
    report: Report,
    summary: ReportSummary,
    analyses: Sequence[RepositoryAnalysis],
    failed_repos: Sequence[str] = (),
    output_file: str | None = None,
) -> None:
    """Render a Report to the terminal using rich."""
    if output_file:
        string_io = io.StringIO()
        console = Console(file=string_io, force_terminal=False, width=120)
    else:
        console = Console()

    title = report.report_name or "repo-insight report"
    console.print(Panel(
        Text(f"{title}\nOverall score: {report.overall_score}/100", justify="center"),
        style="bold cyan",
    ))
    console.print()

    if failed_repos:
        console.print(
            f"[bold yellow]Warning:[/bold yellow] Failed to analyze "
            f"{len(failed_repos)} repo(s): {', '.join(failed_repos)}"
        )
        console.print()

    console.print("[bold]Summary[/bold]")
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("label", style="dim")
    table.add_column("value", style="bold")
    table.add_row("Repositories", _format_number(report.total_repositories))
    table.add_row("Your Commits", _format_number(report.total_commits))
    table.add_row("Stars", _format_number(report.total_stars))
    table.add_row("Contributors", _format_number(summary.total_contributors))
    table.add_row("Avg Documentation", f"{summary.average_documentation_score}/100")
    console.print(table)
    console.print()

    if analyses:
        console.print("[bold]Repository Scores[/bold]")
        repo_table = Table(show_header=True, header_style="bold")
        repo_table.add_column("Repo")
        repo_table.add_column("Stars", justify="right")
        repo_table.add_column("Commits", justify="right")
        repo_table.add_column("Quality", justify="right")
        repo_table.add_column("Collaboration", justify="right")
        repo_table.add_column("Consistency", justify="right")
        repo_table.add_column("Top Language")

        for a in sorted(analyses, key=lambda a: a.mean_score, reverse=True):
            top_lang = a.primary_language or (a.languages[0].name if a.languages else "-")
            repo_table.add_row(
                a.name,
                _format_number(a.stars),
                _format_number(a.commits.user_commits),
                *(
                    f"[{_score_style(s)}]{s}[/]"
                    for s in (a.code_quality_score, a.collaboration_score, a.consistency_score)
                ),
                top_lang,
            )
        console.print(repo_table)
        console.print()

    if summary.top_languages:
        console.print("[bold]Top Languages[/bold]")
        lang_table = Table(show_header=True, header_style="bold")
        lang_table.add_column("Language")
        lang_table.add_column("Bar")
        lang_table.add_column("Percentage", justify="right")
        lang_table.add_column("Bytes", justify="right")
        for lang in summary.top_languages:
            lang_table.add_row(
                lang.name,
                _make_bar(lang.percentage),
                f"{lang.percentage}%",
                _format_number(lang.bytes),
            )
        console.print(lang_table)
        console.print()

    if report.share_token:
        console.print(f"Share token: [bold]{report.share_token}[/bold]")

    if output_file:
        _write_to_file(string_io.getvalue(), output_file)


def _json_default(obj: Any) -> Any:
    if isinstance(obj, (set, frozenset)):
        return sorted(obj)
    if isinstance(obj, datetime):
        return obj.isoformat()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def render_json(
    report: Report,
    summary: ReportSummary,
    analyses: Sequence[RepositoryAnalysis],
    failed_repos: Sequence[str] = (),
    output_file: str | None = None,
) -> None:
    """Render a Report, its summary and the analyses as JSON."""
    payload = {
        "report": asdict(report),
        "summary": asdict(summary),
        "analyses": [{"id": a.id, **asdict(a)} for a in analyses],
        "failed_repos": list(failed_repos),
    }
    content = json.dumps(payload, indent=2, ensure_ascii=False, default=_json_default)
    if output_file:
        _write_to_file(content, output_file)
    else:
        print(content)


def render_csv(analyses: Sequence[RepositoryAnalysis], output_file: str | None = None) -> None:
    """Render per-repository scores as CSV."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(CSV_HEADER)
    for a in analyses:
        writer.writerow([
            a.id,
            a.stars,
            a.commits.user_commits,
            a.code_quality_score,
            a.collaboration_score,
            a.consistency_score,
        ])
    content = output.getvalue()
    if output_file:
        _write_to_file(content, output_file)
    else:
        print(content, end="")
