"""
GitHub REST client for the notification inbox.

Wraps the fixed set of endpoints the inbox consumes. Every request carries
the bearer token, the GitHub JSON media type and a client-identifying
User-Agent; any non-2xx response surfaces as ``HTTPClientError``.

Detail lookups (issue, pull request, comments) can be served from a
``ResponseCache``: a fresh cached body skips the network round-trip and a
successful response is stored under its full request URL.
"""

import json
import logging
from typing import Any

from hubox.config.settings import Settings, get_settings
from hubox.inbox.schemas import Comment, Notification
from hubox.remote.http_client import HTTPClient, HTTPClientError, RetryConfig
from hubox.storage.cache import ResponseCache

logger = logging.getLogger(__name__)


class GitHubClient:
    """
    Async client for the GitHub notifications and issues APIs.

    Example:
        client = GitHubClient(token)
        await client.validate_token()
        notifications = await client.list_notifications(per_page=100)
    """

    def __init__(
        self,
        token: str,
        settings: Settings | None = None,
        retry_config: RetryConfig | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._token = token
        self._base_url = settings.github_api_url.rstrip("/")
        self._user_agent = settings.github_user_agent
        self._timeout = settings.request_timeout_seconds
        self._retry_config = retry_config or RetryConfig(
            max_retries=settings.max_http_retries,
            max_backoff_seconds=settings.max_backoff_seconds,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/vnd.github+json",
            "User-Agent": self._user_agent,
        }

    def _http(self) -> HTTPClient:
        return HTTPClient(retry_config=self._retry_config, timeout=self._timeout)

    async def validate_token(self) -> None:
        """Probe the notifications endpoint; raises HTTPClientError if rejected."""
        async with self._http() as http:
            await http.get(
                f"{self._base_url}/notifications",
                params={"all": "true", "per_page": 1},
                headers=self._headers(),
            )

    async def list_notifications(self, page: int = 1, per_page: int = 100) -> list[Notification]:
        """Fetch one page of notification threads, including read ones."""
        async with self._http() as http:
            response = await http.get(
                f"{self._base_url}/notifications",
                params={"all": "true", "page": page, "per_page": per_page},
                headers=self._headers(),
            )
        try:
            return [Notification.from_dict(item) for item in response.json()]
        except (ValueError, KeyError, TypeError) as e:
            raise HTTPClientError(
                f"Malformed notifications payload: {e}",
                status_code=response.status_code,
                response_body=response.text,
            ) from e

    async def mark_thread_done(self, thread_id: str) -> None:
        """Mark a thread as done on GitHub; any 2xx (204, 205) counts as success."""
        async with self._http() as http:
            await http.delete(
                f"{self._base_url}/notifications/threads/{thread_id}",
                headers=self._headers(),
            )

    async def get_issue(
        self,
        owner: str,
        repo: str,
        number: int,
        cache: ResponseCache | None = None,
        now_ms: int | None = None,
    ) -> dict[str, Any]:
        url = f"{self._base_url}/repos/{owner}/{repo}/issues/{number}"
        return await self._get_json(url, cache, now_ms)

    async def get_pull_request(
        self,
        owner: str,
        repo: str,
        number: int,
        cache: ResponseCache | None = None,
        now_ms: int | None = None,
    ) -> dict[str, Any]:
        url = f"{self._base_url}/repos/{owner}/{repo}/pulls/{number}"
        return await self._get_json(url, cache, now_ms)

    async def get_comments(
        self,
        owner: str,
        repo: str,
        number: int,
        cache: ResponseCache | None = None,
        now_ms: int | None = None,
    ) -> list[Comment]:
        """Issue comments; pull request conversation comments live at the same endpoint."""
        url = f"{self._base_url}/repos/{owner}/{repo}/issues/{number}/comments"
        payload = await self._get_json(url, cache, now_ms)
        try:
            return [Comment.from_dict(item) for item in payload]
        except (KeyError, TypeError, ValueError) as e:
            raise HTTPClientError(f"Malformed comments payload: {e}") from e

    async def _get_json(
        self,
        url: str,
        cache: ResponseCache | None,
        now_ms: int | None,
    ) -> Any:
        use_cache = cache is not None and now_ms is not None
        if use_cache:
            cached = cache.lookup(url, now_ms)
            if cached is not None:
                try:
                    payload = json.loads(cached)
                except ValueError:
                    logger.warning("Ignoring unparseable cached body for %s", url)
                else:
                    logger.debug("Cache hit for %s", url)
                    return payload

        async with self._http() as http:
            response = await http.get(url, headers=self._headers())

        try:
            payload = response.json()
        except ValueError as e:
            raise HTTPClientError(
                f"Invalid JSON from {url}",
                status_code=response.status_code,
                response_body=response.text,
            ) from e

        if use_cache:
            cache.store(url, response.text, now_ms)
        return payload
