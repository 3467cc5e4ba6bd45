"""
Notification manager - the orchestrating service for one authenticated session.

Owns the in-memory Snapshot and ResponseCache, sequences remote calls with
reconciliation, curation and stats, and mirrors state to disk after every
mutation that must survive a restart.

Control flow for a sync:
    list_notifications -> merge_notifications -> prune_custom_states
    -> curate -> persist

A failed fetch flips the session to offline and leaves the snapshot
untouched.
"""

import asyncio
import time
from collections.abc import Callable
from typing import Any

import structlog

from hubox.config.settings import Settings, get_settings
from hubox.inbox.config import InboxConfig
from hubox.inbox.curator import active_notifications, curate, done_notifications, sort_by_updated
from hubox.inbox.errors import CredentialError, InvalidSubjectError, NotFoundError
from hubox.inbox.reconcile import merge_notifications, prune_custom_states
from hubox.inbox.schemas import (
    MarkDoneResult,
    Notification,
    NotificationDetails,
    NotificationStats,
    SessionState,
    Snapshot,
)
from hubox.inbox.stats import compute_stats
from hubox.remote.github import GitHubClient
from hubox.remote.http_client import HTTPClientError
from hubox.storage.cache import ResponseCache
from hubox.storage.file_store import FileStore

logger = structlog.get_logger(__name__)

DETAIL_SUBJECT_TYPES = frozenset({"Issue", "PullRequest"})
AUTH_FAILURE_STATUSES = frozenset({401, 403})


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def parse_subject_url(url: str | None) -> tuple[str, str, int]:
    """Split a subject API URL into (owner, repo, number).

    Expects ``https://api.github.com/repos/{owner}/{repo}/{kind}/{number}``.

    Raises:
        InvalidSubjectError: If the URL is missing or does not match.
    """
    if not url:
        raise InvalidSubjectError("No subject URL")

    parts = url.rstrip("/").split("/")
    if len(parts) < 8:
        raise InvalidSubjectError(f"Invalid subject URL format: {url}")

    owner, repo, number = parts[-4], parts[-3], parts[-1]
    if not owner or not repo or not number.isdigit():
        raise InvalidSubjectError(f"Invalid subject URL format: {url}")
    return owner, repo, int(number)


class NotificationManager:
    """
    Session-scoped service over the notification inbox.

    Not safe for concurrent use on its own; ``CommandSurface`` serializes
    access with a lock.

    Usage:
        manager = await NotificationManager.create(token)
        await manager.sync()
        inbox = manager.get_in_progress()
    """

    def __init__(
        self,
        client: GitHubClient,
        file_store: FileStore,
        config: InboxConfig | None = None,
        snapshot: Snapshot | None = None,
        cache: ResponseCache | None = None,
        clock: Callable[[], int] = now_ms,
        is_online: bool = True,
    ) -> None:
        self._client = client
        self._store = file_store
        self._config = config or InboxConfig()
        self._snapshot = snapshot or Snapshot(max_active=self._config.default_max_active)
        self._cache = cache if cache is not None else ResponseCache()
        self._clock = clock
        self._is_online = is_online

    @classmethod
    async def create(
        cls,
        token: str,
        settings: Settings | None = None,
        file_store: FileStore | None = None,
        config: InboxConfig | None = None,
        client_factory: Callable[..., GitHubClient] = GitHubClient,
        clock: Callable[[], int] = now_ms,
        validate: bool = True,
        allow_offline: bool = True,
    ) -> "NotificationManager":
        """Validate the token and load persisted state.

        Args:
            validate: Probe the remote with the token before starting. When
                False no request is made and the session starts online.
            allow_offline: If the probe fails for a reason other than the
                token (network down, 5xx), start an offline session over the
                persisted snapshot instead of raising.

        Raises:
            CredentialError: If the token is empty or rejected by the remote.
            HTTPClientError: If the remote is unreachable and
                ``allow_offline`` is False.
        """
        if not token or not token.strip():
            raise CredentialError("Token must not be empty")

        settings = settings or get_settings()
        config = config or InboxConfig()
        client = client_factory(token.strip(), settings=settings)

        is_online = True
        if validate:
            try:
                await client.validate_token()
            except HTTPClientError as e:
                if e.status_code in AUTH_FAILURE_STATUSES:
                    logger.warning("Token rejected", status_code=e.status_code)
                    raise CredentialError(f"Invalid token: {e}") from e
                if not allow_offline:
                    raise
                logger.warning("Token validation unreachable, starting offline", error=str(e))
                is_online = False

        store = file_store or FileStore(settings=settings)
        snapshot = store.load_snapshot(default_max_active=config.default_max_active)
        cache = store.load_cache()
        logger.info(
            "Session initialized",
            notifications=len(snapshot.notifications),
            active=len(snapshot.active_batch_ids),
            cached_responses=len(cache),
            online=is_online,
        )
        return cls(
            client,
            store,
            config=config,
            snapshot=snapshot,
            cache=cache,
            clock=clock,
            is_online=is_online,
        )

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    @property
    def is_online(self) -> bool:
        return self._is_online

    @property
    def state(self) -> SessionState:
        return SessionState.ONLINE if self._is_online else SessionState.OFFLINE

    # ── Sync ────────────────────────────────────────────────────

    async def sync(self) -> int:
        """Fetch, reconcile, curate and persist.

        Returns:
            Number of notifications reported by the remote.

        Raises:
            HTTPClientError: If any page fails; the snapshot is unchanged.
        """
        try:
            remote = await self._fetch_all()
        except HTTPClientError as e:
            self._is_online = False
            logger.warning("Sync failed, going offline", error=str(e), status_code=e.status_code)
            raise

        self._is_online = True
        snapshot = self._snapshot
        snapshot.notifications = merge_notifications(
            snapshot.notifications, remote, snapshot.custom_states
        )
        prune_custom_states(
            snapshot.custom_states,
            {n.id for n in snapshot.notifications},
            self._config.custom_state_retention_syncs,
        )
        curate(snapshot)
        snapshot.last_sync = self._clock()
        self._store.save_snapshot(snapshot)

        logger.info(
            "Sync complete",
            fetched=len(remote),
            active=len(snapshot.active_batch_ids),
            max_active=snapshot.max_active,
        )
        return len(remote)

    async def _fetch_all(self) -> list[Notification]:
        per_page = self._config.sync_per_page
        notifications: list[Notification] = []
        for page in range(1, self._config.sync_max_pages + 1):
            batch = await self._client.list_notifications(page=page, per_page=per_page)
            notifications.extend(batch)
            if len(batch) < per_page:
                break
        return notifications

    # ── Views ───────────────────────────────────────────────────

    def get_in_progress(self) -> list[Notification]:
        """The active working set, newest first."""
        return active_notifications(self._snapshot)

    def get_all(self) -> list[Notification]:
        return sort_by_updated(self._snapshot.notifications)

    def get_done(self) -> list[Notification]:
        return done_notifications(self._snapshot)

    def get_stats(self) -> NotificationStats:
        return compute_stats(self._snapshot, self._is_online)

    # ── Local mutations ─────────────────────────────────────────

    def mark_read(self, notification_id: str) -> bool:
        """Mark a notification read locally; unknown ids are a no-op.

        Returns:
            True if the notification existed.
        """
        notification = self._snapshot.get(notification_id)
        if notification is None:
            logger.debug("mark_read for unknown notification", notification_id=notification_id)
            return False

        notification.is_read = True
        notification.last_viewed_at = self._clock()
        self._snapshot.custom_states[notification_id] = notification.overlay()
        self._store.save_snapshot(self._snapshot)
        return True

    async def mark_done(self, notification_id: str) -> MarkDoneResult:
        """Mark done locally, backfill the inbox, then echo to GitHub best-effort.

        A remote failure never rolls back the local change; it is reported
        in the result instead.
        """
        notification = self._snapshot.get(notification_id)
        if notification is None:
            logger.debug("mark_done for unknown notification", notification_id=notification_id)
            return MarkDoneResult(notification_id=notification_id, found=False)

        notification.is_done = True
        notification.is_read = True
        self._snapshot.custom_states[notification_id] = notification.overlay()
        curate(self._snapshot)
        self._store.save_snapshot(self._snapshot)

        try:
            await self._client.mark_thread_done(notification_id)
        except HTTPClientError as e:
            logger.warning(
                "Remote mark-done failed, keeping local state",
                notification_id=notification_id,
                error=str(e),
            )
            return MarkDoneResult(
                notification_id=notification_id,
                found=True,
                remote_confirmed=False,
                remote_error=str(e),
            )

        return MarkDoneResult(notification_id=notification_id, found=True, remote_confirmed=True)

    def expand_inbox(self) -> int:
        """Grow capacity by one step and backfill.

        Returns:
            The new ``max_active``.
        """
        self._snapshot.max_active += self._config.expand_step
        curate(self._snapshot)
        self._store.save_snapshot(self._snapshot)
        logger.info("Inbox expanded", max_active=self._snapshot.max_active)
        return self._snapshot.max_active

    # ── Details ─────────────────────────────────────────────────

    async def get_details(self, notification_id: str) -> NotificationDetails:
        """Resolve a notification's subject and fetch its issue/PR and comments.

        The two lookups fail independently: a failed one leaves its field
        as None instead of failing the call.

        Raises:
            NotFoundError: If the id is not in the snapshot.
            InvalidSubjectError: If an Issue/PullRequest subject has no usable URL.
        """
        notification = self._snapshot.get(notification_id)
        if notification is None:
            raise NotFoundError(f"Notification not found: {notification_id}")

        details = NotificationDetails(notification=notification)
        subject_type = notification.subject.subject_type
        if subject_type not in DETAIL_SUBJECT_TYPES:
            return details

        owner, repo, number = parse_subject_url(notification.subject.url)
        cache_kwargs: dict[str, Any] = {}
        if self._config.cache_detail_requests:
            cache_kwargs = {"cache": self._cache, "now_ms": self._clock()}

        if subject_type == "Issue":
            primary = self._client.get_issue(owner, repo, number, **cache_kwargs)
        else:
            primary = self._client.get_pull_request(owner, repo, number, **cache_kwargs)
        comments = self._client.get_comments(owner, repo, number, **cache_kwargs)

        primary_result, comments_result = await asyncio.gather(
            primary, comments, return_exceptions=True
        )

        body = self._settle(primary_result, notification_id, subject_type)
        if subject_type == "Issue":
            details.issue = body
        else:
            details.pull_request = body
        details.comments = self._settle(comments_result, notification_id, "comments")

        if cache_kwargs and (body is not None or details.comments is not None):
            self._store.save_cache(self._cache)
        return details

    @staticmethod
    def _settle(result: Any, notification_id: str, part: str) -> Any:
        if isinstance(result, HTTPClientError):
            logger.warning(
                "Detail fetch failed",
                notification_id=notification_id,
                part=part,
                error=str(result),
            )
            return None
        if isinstance(result, BaseException):
            raise result
        return result
