"""
Configuration management for repo-insight.

Settings are resolved with this priority:
1. Explicit overrides (CLI options)
2. REPO_INSIGHT_* environment variables
3. [tool.repo-insight] in .repo-insight.toml
4. [tool.repo-insight] in pyproject.toml
5. Defaults
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

ENV_PREFIX = "REPO_INSIGHT_"
LOCAL_CONFIG_NAME = ".repo-insight.toml"
TOOL_KEY = "repo-insight"

DEFAULT_API_URL = "https://api.github.com"


@dataclass(frozen=True)
class InsightConfig:
    api_url: str = DEFAULT_API_URL
    window_months: int = 12
    per_page: int = 100
    max_pages: int | None = None
    max_retries: int = 0
    retry_backoff: float = 1.0
    timeout: float = 30.0
    rate_limit_threshold: int = 10
    concurrency: int = 5
    top_repositories: int = 5

    def __post_init__(self) -> None:
        if self.window_months < 1:
            raise ValueError(f"window_months must be at least 1, got {self.window_months}")
        if not 1 <= self.per_page <= 100:
            raise ValueError(f"per_page must be between 1 and 100, got {self.per_page}")
        if self.max_pages is not None and self.max_pages < 1:
            raise ValueError(f"max_pages must be at least 1, got {self.max_pages}")
        if self.max_retries < 0:
            raise ValueError(f"max_retries must not be negative, got {self.max_retries}")
        if self.concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {self.concurrency}")
        if self.top_repositories < 1:
            raise ValueError(
                f"top_repositories must be at least 1, got {self.top_repositories}"
            )


def load_config_file(config_path: Path) -> dict:
    """Load a TOML configuration file."""
    if not config_path.exists():
        return {}
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ValueError(f"Failed to load config from {config_path}: {e}") from e


def _file_settings(root: Path) -> dict[str, Any]:
    for name in (LOCAL_CONFIG_NAME, "pyproject.toml"):
        section = load_config_file(root / name).get("tool", {}).get(TOOL_KEY)
        if section:
            return {key.replace("-", "_"): value for key, value in section.items()}
    return {}


def _coerce(name: str, raw: str) -> Any:
    field_type = {f.name: f.type for f in fields(InsightConfig)}[name]
    if raw.lower() in ("", "none") and "None" in str(field_type):
        return None
    try:
        if "int" in str(field_type):
            return int(raw)
        if "float" in str(field_type):
            return float(raw)
    except ValueError as e:
        raise ValueError(f"Invalid value for {ENV_PREFIX}{name.upper()}: {raw!r}") from e
    return raw


def _env_settings() -> dict[str, Any]:
    settings = {}
    for f in fields(InsightConfig):
        raw = os.getenv(ENV_PREFIX + f.name.upper())
        if raw is not None:
            settings[f.name] = _coerce(f.name, raw)
    return settings


def load_config(root: Path | str | None = None, **overrides: Any) -> InsightConfig:
    """
    Build an InsightConfig from config files, environment and overrides.

    Args:
        root: Directory holding .repo-insight.toml / pyproject.toml.
              Defaults to the current working directory.
        **overrides: Explicit values; None values are ignored.

    Returns:
        Validated configuration.

    Raises:
        ValueError: If a setting is unknown or invalid.
    """
    known = {f.name for f in fields(InsightConfig)}
    settings = _file_settings(Path(root) if root is not None else Path.cwd())
    settings.update(_env_settings())
    settings.update({k: v for k, v in overrides.items() if v is not None})

    unknown = set(settings) - known
    if unknown:
        raise ValueError(f"Unknown repo-insight settings: {', '.join(sorted(unknown))}")
    return replace(InsightConfig(), **settings)
