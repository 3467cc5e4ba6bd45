"""Curation of the bounded active working set.

Carry-over-then-fill: ids already in the active batch keep their position
as long as they remain eligible (present and not done), then free slots
are filled with the most recently updated eligible notifications up to
``max_active``.
"""

from collections.abc import Iterable

from hubox.inbox.schemas import Notification, Snapshot


def sort_by_updated(notifications: Iterable[Notification]) -> list[Notification]:
    """Order by ``updated_at`` descending; ties keep their input order."""
    return sorted(notifications, key=lambda n: n.updated_at, reverse=True)


def recalculate_active_batch(
    notifications: list[Notification],
    previous_active: list[str],
    max_active: int,
) -> list[str]:
    """Compute the next active batch.

    Args:
        notifications: Reconciled notification list.
        previous_active: Current active batch, in display order.
        max_active: Capacity; carried-over ids beyond it are truncated.

    Returns:
        New list of active ids.
    """
    eligible = sort_by_updated(n for n in notifications if not n.done)
    eligible_ids = {n.id for n in eligible}

    active: list[str] = []
    chosen: set[str] = set()
    for notification_id in previous_active:
        if len(active) >= max_active:
            break
        if notification_id in eligible_ids and notification_id not in chosen:
            active.append(notification_id)
            chosen.add(notification_id)

    for notification in eligible:
        if len(active) >= max_active:
            break
        if notification.id not in chosen:
            active.append(notification.id)
            chosen.add(notification.id)

    return active


def curate(snapshot: Snapshot) -> None:
    """Recompute ``snapshot.active_batch_ids`` in place."""
    snapshot.active_batch_ids = recalculate_active_batch(
        snapshot.notifications,
        snapshot.active_batch_ids,
        snapshot.max_active,
    )


def active_notifications(snapshot: Snapshot) -> list[Notification]:
    """Members of the active batch, sorted by ``updated_at`` descending."""
    active_ids = set(snapshot.active_batch_ids)
    return sort_by_updated(n for n in snapshot.notifications if n.id in active_ids)


def done_notifications(snapshot: Snapshot) -> list[Notification]:
    """Notifications marked done, sorted by ``updated_at`` descending."""
    return sort_by_updated(n for n in snapshot.notifications if n.done)
