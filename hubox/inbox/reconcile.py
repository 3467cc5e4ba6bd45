"""Reconciliation of freshly fetched remote notifications with local state.

Stateless functions: the remote list is authoritative for membership and
every server-origin field, while the overlay fields are carried forward
from the previous snapshot (or seeded from ``custom_states`` for ids that
have local history but no previous record).
"""

import dataclasses
import logging

from hubox.inbox.schemas import CustomState, Notification

logger = logging.getLogger(__name__)


def merge_notifications(
    previous: list[Notification],
    remote: list[Notification],
    custom_states: dict[str, CustomState],
) -> list[Notification]:
    """Merge a remote notification list into the previously persisted one.

    The result contains exactly the remote ids, in remote order (first
    occurrence wins if the remote repeats an id). Ids only present in
    ``previous`` are dropped. Inputs are not mutated.

    Args:
        previous: Notifications from the persisted snapshot.
        remote: Notifications as just fetched; overlay fields are ignored.
        custom_states: Overlay records keyed by id, used when an id has no
            previous record.

    Returns:
        New list of merged notifications.
    """
    existing = {n.id: n for n in previous}
    merged: list[Notification] = []
    seen: set[str] = set()

    for incoming in remote:
        if incoming.id in seen:
            continue
        seen.add(incoming.id)

        record = dataclasses.replace(incoming)
        prior = existing.get(record.id)
        if prior is not None:
            record.copy_overlay_from(prior)
        elif record.id in custom_states:
            record.apply_custom_state(custom_states[record.id])
        else:
            record.is_read = None
            record.is_done = None
            record.priority = None
            record.last_viewed_at = None
        merged.append(record)

    dropped = len(existing.keys() - seen)
    if dropped:
        logger.debug("Dropped %d notifications no longer reported by remote", dropped)
    return merged


def prune_custom_states(
    custom_states: dict[str, CustomState],
    present_ids: set[str],
    retention_syncs: int,
) -> list[str]:
    """Age out CustomStates whose id keeps missing from the remote list.

    With ``retention_syncs == 0`` retention is unbounded and nothing is
    touched. Otherwise each absent id's ``absent_syncs`` counter is bumped,
    present ids are reset to zero, and entries reaching the threshold are
    removed in place.

    Returns:
        Ids that were pruned.
    """
    if retention_syncs <= 0:
        return []

    pruned: list[str] = []
    for state_id in list(custom_states):
        state = custom_states[state_id]
        if state_id in present_ids:
            state.absent_syncs = 0
            continue
        state.absent_syncs += 1
        if state.absent_syncs >= retention_syncs:
            del custom_states[state_id]
            pruned.append(state_id)

    if pruned:
        logger.info("Pruned %d custom states absent for %d syncs", len(pruned), retention_syncs)
    return pruned
