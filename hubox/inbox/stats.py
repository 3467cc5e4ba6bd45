"""Aggregate counters derived from a snapshot."""

from hubox.inbox.schemas import NotificationStats, Snapshot


def compute_stats(snapshot: Snapshot, is_online: bool) -> NotificationStats:
    """Derive display counters; no side effects.

    ``unread`` is the server flag across all notifications, while
    ``app_unread`` only counts active-batch members not marked read locally.
    """
    active_ids = set(snapshot.active_batch_ids)
    return NotificationStats(
        total=len(snapshot.notifications),
        unread=sum(1 for n in snapshot.notifications if n.unread),
        app_unread=sum(
            1 for n in snapshot.notifications if n.id in active_ids and not n.read
        ),
        done=sum(1 for n in snapshot.notifications if n.done),
        in_progress=len(snapshot.active_batch_ids),
        last_sync=snapshot.last_sync,
        is_online=is_online,
    )
