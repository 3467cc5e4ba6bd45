"""Remote source: GitHub REST client over a retrying httpx transport."""

from hubox.remote.github import GitHubClient
from hubox.remote.http_client import HTTPClient, HTTPClientError, RateLimitError, RetryConfig

__all__ = [
    "GitHubClient",
    "HTTPClient",
    "HTTPClientError",
    "RateLimitError",
    "RetryConfig",
]
