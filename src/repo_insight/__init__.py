"""repo-insight: developer health scores for GitHub repositories."""

__version__ = "0.1.0"

from .analyzer import analyze
from .report import build_report

__all__ = ["__version__", "analyze", "build_report"]
