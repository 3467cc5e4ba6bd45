"""Schema definitions for the notification inbox.

Maps 1:1 to the persisted snapshot file and to the subset of the GitHub
notifications payload the inbox cares about. Server-origin fields come from
the remote; the overlay fields (``is_read``, ``is_done``, ``priority``,
``last_viewed_at``) are owned by this application and are never sent by
the remote.
"""

import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

DEFAULT_MAX_ACTIVE = 10


class SessionState(str, enum.Enum):
    """Lifecycle of one authenticated session."""

    UNINITIALIZED = "uninitialized"
    ONLINE = "online"
    OFFLINE = "offline"


def parse_timestamp(value: str | datetime) -> datetime:
    """Parse an ISO-8601 timestamp into an aware datetime (naive means UTC)."""
    if isinstance(value, datetime):
        parsed = value
    else:
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: datetime) -> str:
    """Serialize an aware datetime as ISO-8601 UTC with a ``Z`` suffix."""
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass
class Repository:
    """Repository a notification thread belongs to."""

    owner_login: str
    name: str
    full_name: str = ""

    def __post_init__(self) -> None:
        if not self.full_name:
            self.full_name = f"{self.owner_login}/{self.name}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "full_name": self.full_name,
            "owner": {"login": self.owner_login},
            "name": self.name,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Repository":
        owner = data.get("owner") or {}
        return cls(
            owner_login=owner.get("login", ""),
            name=data.get("name", ""),
            full_name=data.get("full_name", ""),
        )


@dataclass
class Subject:
    """The issue, pull request, or other object a thread is about.

    Attributes:
        title: Human-readable title.
        subject_type: Type tag such as ``Issue`` or ``PullRequest``.
        url: Canonical API URL, used to derive owner/repo/number.
        latest_comment_url: API URL of the most recent comment, if any.
    """

    title: str
    subject_type: str
    url: str | None = None
    latest_comment_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "type": self.subject_type,
            "url": self.url,
            "latest_comment_url": self.latest_comment_url,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Subject":
        return cls(
            title=data.get("title", ""),
            subject_type=data.get("type", ""),
            url=data.get("url"),
            latest_comment_url=data.get("latest_comment_url"),
        )


@dataclass
class Notification:
    """A notification thread plus the app-owned overlay fields.

    Attributes:
        id: Thread id, unique within a snapshot.
        reason: Why the user was notified (``assign``, ``mention``, ...).
        repository: Owning repository.
        subject: What the thread is about.
        updated_at: Last remote update, always timezone-aware.
        unread: Server-side unread flag.
        url: API URL of the thread itself.
        is_read: App-local read marker.
        is_done: App-local done marker.
        priority: App-local priority.
        last_viewed_at: Epoch millis of the last local view.
    """

    id: str
    reason: str
    repository: Repository
    subject: Subject
    updated_at: datetime
    unread: bool = False
    url: str = ""
    is_read: bool | None = None
    is_done: bool | None = None
    priority: int | None = None
    last_viewed_at: int | None = None

    def __post_init__(self) -> None:
        self.updated_at = parse_timestamp(self.updated_at)

    @property
    def done(self) -> bool:
        return bool(self.is_done)

    @property
    def read(self) -> bool:
        return bool(self.is_read)

    def overlay(self) -> "CustomState":
        """Snapshot of the overlay fields as a CustomState."""
        return CustomState(
            is_read=self.read,
            is_done=self.done,
            priority=self.priority or 0,
            last_viewed_at=self.last_viewed_at or 0,
        )

    def copy_overlay_from(self, other: "Notification") -> None:
        self.is_read = other.is_read
        self.is_done = other.is_done
        self.priority = other.priority
        self.last_viewed_at = other.last_viewed_at

    def apply_custom_state(self, state: "CustomState") -> None:
        self.is_read = state.is_read
        self.is_done = state.is_done
        self.priority = state.priority
        self.last_viewed_at = state.last_viewed_at

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary (unset overlay fields omitted)."""
        data: dict[str, Any] = {
            "id": self.id,
            "reason": self.reason,
            "repository": self.repository.to_dict(),
            "subject": self.subject.to_dict(),
            "updated_at": format_timestamp(self.updated_at),
            "unread": self.unread,
            "url": self.url,
        }
        for name in ("is_read", "is_done", "priority", "last_viewed_at"):
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Notification":
        """Create a Notification from a persisted record or a GitHub API payload.

        Unknown keys are ignored, so raw API thread objects parse directly.
        """
        return cls(
            id=str(data["id"]),
            reason=data.get("reason", ""),
            repository=Repository.from_dict(data.get("repository") or {}),
            subject=Subject.from_dict(data.get("subject") or {}),
            updated_at=parse_timestamp(data["updated_at"]),
            unread=bool(data.get("unread", False)),
            url=data.get("url", ""),
            is_read=data.get("is_read"),
            is_done=data.get("is_done"),
            priority=data.get("priority"),
            last_viewed_at=data.get("last_viewed_at"),
        )


@dataclass
class CustomState:
    """Overlay fields recorded per id, independent of a full notification.

    ``absent_syncs`` counts consecutive successful syncs in which the id was
    missing from the remote list; it only drives optional pruning.
    """

    is_read: bool = False
    is_done: bool = False
    priority: int = 0
    last_viewed_at: int = 0
    absent_syncs: int = 0

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "is_read": self.is_read,
            "is_done": self.is_done,
            "priority": self.priority,
            "last_viewed_at": self.last_viewed_at,
        }
        if self.absent_syncs:
            data["absent_syncs"] = self.absent_syncs
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CustomState":
        return cls(
            is_read=bool(data.get("is_read", False)),
            is_done=bool(data.get("is_done", False)),
            priority=int(data.get("priority", 0)),
            last_viewed_at=int(data.get("last_viewed_at", 0)),
            absent_syncs=int(data.get("absent_syncs", 0)),
        )


@dataclass
class Snapshot:
    """Durable aggregate of all known notifications plus curated state.

    Invariants maintained by the curator: every id in ``active_batch_ids``
    exists in ``notifications`` and is not done, there are no duplicates,
    and ``len(active_batch_ids) <= max_active``.
    """

    notifications: list[Notification] = field(default_factory=list)
    active_batch_ids: list[str] = field(default_factory=list)
    custom_states: dict[str, CustomState] = field(default_factory=dict)
    last_sync: int = 0
    max_active: int = DEFAULT_MAX_ACTIVE

    def get(self, notification_id: str) -> Notification | None:
        for notification in self.notifications:
            if notification.id == notification_id:
                return notification
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "notifications": [n.to_dict() for n in self.notifications],
            "active_batch_ids": list(self.active_batch_ids),
            "custom_states": {k: v.to_dict() for k, v in self.custom_states.items()},
            "last_sync": self.last_sync,
            "max_active": self.max_active,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Snapshot":
        return cls(
            notifications=[Notification.from_dict(n) for n in data.get("notifications", [])],
            active_batch_ids=[str(i) for i in data.get("active_batch_ids", [])],
            custom_states={
                str(k): CustomState.from_dict(v)
                for k, v in (data.get("custom_states") or {}).items()
            },
            last_sync=int(data.get("last_sync", 0)),
            max_active=int(data.get("max_active", DEFAULT_MAX_ACTIVE)),
        )


@dataclass
class NotificationStats:
    """Aggregate counters for display."""

    total: int = 0
    unread: int = 0
    app_unread: int = 0
    done: int = 0
    in_progress: int = 0
    last_sync: int = 0
    is_online: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "unread": self.unread,
            "app_unread": self.app_unread,
            "done": self.done,
            "in_progress": self.in_progress,
            "last_sync": self.last_sync,
            "is_online": self.is_online,
        }


@dataclass
class Comment:
    """An issue or pull request comment."""

    id: int
    user_login: str
    body: str
    created_at: str
    updated_at: str
    user_avatar_url: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user": {"login": self.user_login, "avatar_url": self.user_avatar_url},
            "body": self.body,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Comment":
        user = data.get("user") or {}
        return cls(
            id=int(data["id"]),
            user_login=user.get("login", ""),
            user_avatar_url=user.get("avatar_url", ""),
            body=data.get("body") or "",
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
        )


@dataclass
class NotificationDetails:
    """Detail view of a notification; each remote part may be absent."""

    notification: Notification
    comments: list[Comment] | None = None
    issue: dict[str, Any] | None = None
    pull_request: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"notification": self.notification.to_dict()}
        if self.comments is not None:
            data["comments"] = [c.to_dict() for c in self.comments]
        if self.issue is not None:
            data["issue"] = self.issue
        if self.pull_request is not None:
            data["pull_request"] = self.pull_request
        return data


@dataclass
class MarkDoneResult:
    """Outcome of a mark-done: the local commit and the remote echo, separately.

    Attributes:
        notification_id: Target id.
        found: Whether the id existed locally (False means nothing changed).
        remote_confirmed: Whether the remote accepted the mark-done.
        remote_error: Error text when the remote echo failed.
    """

    notification_id: str
    found: bool
    remote_confirmed: bool = False
    remote_error: str | None = None

    @property
    def local_committed(self) -> bool:
        return self.found

    def to_dict(self) -> dict[str, Any]:
        return {
            "notification_id": self.notification_id,
            "found": self.found,
            "remote_confirmed": self.remote_confirmed,
            "remote_error": self.remote_error,
        }
