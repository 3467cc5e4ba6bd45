"""Shared fixtures for notification manager tests."""

from unittest.mock import MagicMock

import pytest

from hubox.inbox.config import InboxConfig
from hubox.inbox.schemas import Snapshot
from hubox.services.notification_manager import NotificationManager
from hubox.storage.file_store import FileStore


class FakeClock:
    """Deterministic epoch-millis clock."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_manager(mock_client: MagicMock, file_store: FileStore, clock: FakeClock):
    """Factory building a NotificationManager over a mock client and temp files."""

    def _make(snapshot: Snapshot | None = None, config: InboxConfig | None = None) -> NotificationManager:
        return NotificationManager(
            mock_client,
            file_store,
            config=config or InboxConfig(),
            snapshot=snapshot,
            clock=clock,
        )

    return _make
