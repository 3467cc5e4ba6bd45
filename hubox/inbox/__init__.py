"""Inbox reconciliation and curation.

Components:
- Notification / CustomState / Snapshot: Persisted data model
- InboxConfig: Pydantic settings for capacity, pagination and retention
- merge_notifications / prune_custom_states: Reconciliation with remote state
- recalculate_active_batch / curate: Bounded working-set curation
- compute_stats: Display counters
"""

from hubox.inbox.config import InboxConfig
from hubox.inbox.curator import (
    active_notifications,
    curate,
    done_notifications,
    recalculate_active_batch,
    sort_by_updated,
)
from hubox.inbox.errors import CredentialError, InboxError, InvalidSubjectError, NotFoundError
from hubox.inbox.reconcile import merge_notifications, prune_custom_states
from hubox.inbox.schemas import (
    Comment,
    CustomState,
    MarkDoneResult,
    Notification,
    NotificationDetails,
    NotificationStats,
    Repository,
    SessionState,
    Snapshot,
    Subject,
)
from hubox.inbox.stats import compute_stats

__all__ = [
    "Comment",
    "CredentialError",
    "CustomState",
    "InboxConfig",
    "InboxError",
    "InvalidSubjectError",
    "MarkDoneResult",
    "NotFoundError",
    "Notification",
    "NotificationDetails",
    "NotificationStats",
    "Repository",
    "SessionState",
    "Snapshot",
    "Subject",
    "active_notifications",
    "compute_stats",
    "curate",
    "done_notifications",
    "merge_notifications",
    "prune_custom_states",
    "recalculate_active_batch",
    "sort_by_updated",
]
