"""Pytest fixtures for hubox tests."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from hubox.config.settings import Settings
from hubox.inbox.config import InboxConfig
from hubox.inbox.schemas import Notification, Repository, Subject
from hubox.storage.file_store import FileStore

API = "https://api.github.com"


def make_notification(
    notification_id: str = "1",
    updated_at: str = "2024-01-01T00:00:00Z",
    unread: bool = True,
    is_read: bool | None = None,
    is_done: bool | None = None,
    subject_type: str = "Issue",
    subject_url: str | None = None,
    priority: int | None = None,
    last_viewed_at: int | None = None,
) -> Notification:
    """Build a Notification in the shape the GitHub API reports."""
    return Notification(
        id=notification_id,
        reason="assign",
        repository=Repository(owner_login="octo", name="hub"),
        subject=Subject(title=f"Thread {notification_id}", subject_type=subject_type, url=subject_url),
        updated_at=updated_at,
        unread=unread,
        url=f"{API}/notifications/threads/{notification_id}",
        is_read=is_read,
        is_done=is_done,
        priority=priority,
        last_viewed_at=last_viewed_at,
    )


def make_api_thread(
    notification_id: str,
    updated_at: str = "2024-01-01T00:00:00Z",
    subject_type: str = "Issue",
    number: int = 1,
) -> dict:
    """A raw notification thread as returned by GET /notifications."""
    kind = "issues" if subject_type == "Issue" else "pulls"
    return {
        "id": notification_id,
        "unread": True,
        "reason": "mention",
        "updated_at": updated_at,
        "last_read_at": None,
        "subject": {
            "title": f"Thread {notification_id}",
            "url": f"{API}/repos/acme/hub/{kind}/{number}",
            "latest_comment_url": None,
            "type": subject_type,
        },
        "repository": {
            "id": 1296269,
            "name": "hub",
            "full_name": "acme/hub",
            "owner": {"login": "acme", "id": 1},
            "private": False,
        },
        "url": f"{API}/notifications/threads/{notification_id}",
        "subscription_url": f"{API}/notifications/threads/{notification_id}/subscription",
    }


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings pointing persistence at a temporary directory."""
    return Settings(
        environment="development",
        log_level="DEBUG",
        data_dir=tmp_path / "hubox",
        github_api_url=API,
        max_http_retries=0,
    )


@pytest.fixture
def file_store(test_settings: Settings) -> FileStore:
    return FileStore(settings=test_settings)


@pytest.fixture
def inbox_config() -> InboxConfig:
    return InboxConfig()


@pytest.fixture
def mock_client() -> MagicMock:
    """Mock GitHubClient matching the GitHubClient API."""
    client = MagicMock()
    client.validate_token = AsyncMock(return_value=None)
    client.list_notifications = AsyncMock(return_value=[])
    client.mark_thread_done = AsyncMock(return_value=None)
    client.get_issue = AsyncMock(return_value={"number": 1, "state": "open"})
    client.get_pull_request = AsyncMock(return_value={"number": 1, "state": "open"})
    client.get_comments = AsyncMock(return_value=[])
    return client
