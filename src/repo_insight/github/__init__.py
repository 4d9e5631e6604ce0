from .client import GitHubClient
from .pagination import PaginatedFetcher, next_link
from .rate_limit import RateLimitMonitor

__all__ = ["GitHubClient", "PaginatedFetcher", "RateLimitMonitor", "next_link"]
