"""
Command surface exposed to the calling shell.

Holds the optional session (a ``NotificationManager``) behind a single
``asyncio.Lock``: every command, queries included, runs with the lock held,
so mutations apply strictly in invocation order. The session is replaced
as a whole on credential change and dropped on credential deletion.

Every command returns a ``CommandResult``: a typed value on success or an
error string. Without a session, queries return empty results and
mutations return ``"Manager not initialized"``.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from keyring.errors import KeyringError

from hubox.config.settings import Settings, get_settings
from hubox.inbox.config import InboxConfig
from hubox.inbox.errors import InboxError
from hubox.inbox.schemas import (
    MarkDoneResult,
    Notification,
    NotificationDetails,
    NotificationStats,
    SessionState,
)
from hubox.remote.http_client import HTTPClientError
from hubox.services.notification_manager import NotificationManager
from hubox.storage.credentials import CredentialStore
from hubox.storage.file_store import FileStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

NOT_INITIALIZED = "Manager not initialized"

_COMMAND_ERRORS = (InboxError, HTTPClientError, KeyringError, OSError)

ManagerFactory = Callable[..., Awaitable[NotificationManager]]


class SessionNotInitializedError(InboxError):
    """A mutation was requested before a session exists."""


@dataclass
class CommandResult(Generic[T]):
    """Typed value on success, error string on failure."""

    ok: bool
    value: T | None = None
    error: str | None = None

    @classmethod
    def success(cls, value: T | None = None) -> "CommandResult[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: str) -> "CommandResult[T]":
        return cls(ok=False, error=error)

    def to_dict(self) -> dict[str, Any]:
        value = self.value
        if isinstance(value, list):
            value = [v.to_dict() if hasattr(v, "to_dict") else v for v in value]
        elif hasattr(value, "to_dict"):
            value = value.to_dict()
        return {"ok": self.ok, "value": value, "error": self.error}


class CommandSurface:
    """
    Session holder and command dispatcher.

    Usage:
        commands = CommandSurface()
        await commands.initialize(token)
        await commands.sync()
        result = await commands.get_in_progress()
    """

    def __init__(
        self,
        settings: Settings | None = None,
        credential_store: CredentialStore | None = None,
        file_store: FileStore | None = None,
        inbox_config: InboxConfig | None = None,
        manager_factory: ManagerFactory | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._credentials = credential_store or CredentialStore(self._settings)
        self._file_store = file_store or FileStore(settings=self._settings)
        self._inbox_config = inbox_config or InboxConfig()
        self._manager_factory = manager_factory or NotificationManager.create
        self._lock = asyncio.Lock()
        self._manager: NotificationManager | None = None

    @property
    def state(self) -> SessionState:
        if self._manager is None:
            return SessionState.UNINITIALIZED
        return self._manager.state

    @property
    def manager(self) -> NotificationManager | None:
        return self._manager

    # ── Credentials / session lifecycle ─────────────────────────

    async def save_token(self, token: str) -> CommandResult[None]:
        """Validate the token, store it in the keychain, and replace the session."""
        async with self._lock:
            try:
                manager = await self._create_manager(token, allow_offline=False)
                self._credentials.save_token(token.strip())
            except _COMMAND_ERRORS as e:
                return CommandResult.failure(str(e))
            self._manager = manager
        return CommandResult.success()

    async def get_token(self) -> CommandResult[str]:
        try:
            return CommandResult.success(self._credentials.get_token())
        except KeyringError as e:
            return CommandResult.failure(str(e))

    async def delete_token(self) -> CommandResult[None]:
        """Delete the stored token and discard the session."""
        async with self._lock:
            try:
                self._credentials.delete_token()
            except KeyringError as e:
                return CommandResult.failure(str(e))
            self._manager = None
        logger.info("Session discarded")
        return CommandResult.success()

    async def initialize(self, token: str, validate: bool = True) -> CommandResult[None]:
        """Start (or replace) the session with ``token`` without storing it.

        An unreachable remote yields an offline session over the persisted
        snapshot; ``validate=False`` skips the remote probe entirely.
        """
        async with self._lock:
            try:
                self._manager = await self._create_manager(token, validate=validate)
            except _COMMAND_ERRORS as e:
                return CommandResult.failure(str(e))
        return CommandResult.success()

    async def _create_manager(self, token: str, **options: Any) -> NotificationManager:
        return await self._manager_factory(
            token,
            settings=self._settings,
            file_store=self._file_store,
            config=self._inbox_config,
            **options,
        )

    # ── Mutations ───────────────────────────────────────────────

    async def sync(self) -> CommandResult[int]:
        return await self._run(lambda m: m.sync())

    async def mark_read(self, notification_id: str) -> CommandResult[bool]:
        return await self._run(lambda m: _completed(m.mark_read(notification_id)))

    async def mark_done(self, notification_id: str) -> CommandResult[MarkDoneResult]:
        return await self._run(lambda m: m.mark_done(notification_id))

    async def expand_inbox(self) -> CommandResult[int]:
        return await self._run(lambda m: _completed(m.expand_inbox()))

    async def get_details(self, notification_id: str) -> CommandResult[NotificationDetails]:
        return await self._run(lambda m: m.get_details(notification_id))

    # ── Queries ─────────────────────────────────────────────────

    async def get_in_progress(self) -> CommandResult[list[Notification]]:
        async with self._lock:
            if self._manager is None:
                return CommandResult.success([])
            return CommandResult.success(self._manager.get_in_progress())

    async def get_all(self) -> CommandResult[list[Notification]]:
        async with self._lock:
            if self._manager is None:
                return CommandResult.success([])
            return CommandResult.success(self._manager.get_all())

    async def get_done(self) -> CommandResult[list[Notification]]:
        async with self._lock:
            if self._manager is None:
                return CommandResult.success([])
            return CommandResult.success(self._manager.get_done())

    async def get_stats(self) -> CommandResult[NotificationStats]:
        async with self._lock:
            if self._manager is None:
                return CommandResult.success(NotificationStats())
            return CommandResult.success(self._manager.get_stats())

    async def _run(
        self, operation: Callable[[NotificationManager], Awaitable[T]]
    ) -> CommandResult[T]:
        async with self._lock:
            try:
                if self._manager is None:
                    raise SessionNotInitializedError(NOT_INITIALIZED)
                return CommandResult.success(await operation(self._manager))
            except _COMMAND_ERRORS as e:
                return CommandResult.failure(str(e))


async def _completed(value: T) -> T:
    return value
