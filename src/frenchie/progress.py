"""Learner progress persistence and the review actions that change it.

Every mutation takes the caller's current working copy, returns a new
map and saves that new map before returning, so saves always follow the
latest state.
"""
import json
import logging
from datetime import datetime

from frenchie.catalog import get_item
from frenchie.db import LOAD_TIMEOUT_SECONDS, KeyValueStore
from frenchie.migration import migrate_progress
from frenchie.models import ProgressMap, ReviewState, VocabularyItem, utc_now
from frenchie.settings import CURRENT_INDEX_KEY, PROGRESS_KEY, STREAK_KEY, load_value
from frenchie.sm2 import FORGOT, REMEMBERED, VERY_FAMILIAR, apply_review

logger = logging.getLogger(__name__)


def load_progress(
    store: KeyValueStore,
    timeout: float = LOAD_TIMEOUT_SECONDS,
    now: datetime | None = None,
) -> ProgressMap:
    """Load and upgrade stored progress, falling back to an empty map."""
    data = load_value(store, PROGRESS_KEY, timeout)
    if not data:
        return {}
    try:
        raw_map = json.loads(data)
        if not isinstance(raw_map, dict):
            raise ValueError(f"expected an object, got {type(raw_map).__name__}")
        progress, changed = migrate_progress(raw_map, now)
    except (ValueError, TypeError) as e:
        logger.warning("Error loading progress (using empty): %s", e)
        return {}
    if changed:
        save_progress(store, progress)
    return progress


def save_progress(store: KeyValueStore, progress: ProgressMap) -> bool:
    payload = json.dumps({item_id: state.to_dict() for item_id, state in progress.items()})
    saved = store.set(PROGRESS_KEY, payload)
    if not saved:
        logger.warning("Progress not saved; %d entries kept in memory only", len(progress))
    return saved


def load_current_index(store: KeyValueStore, timeout: float = LOAD_TIMEOUT_SECONDS) -> int:
    data = load_value(store, CURRENT_INDEX_KEY, timeout)
    if not data:
        return 0
    try:
        index = int(data)
    except ValueError:
        logger.warning("Error loading current index (using 0): %r", data)
        return 0
    return index if index >= 0 else 0


def save_current_index(store: KeyValueStore, index: int) -> bool:
    return store.set(CURRENT_INDEX_KEY, str(index))


def reset_progress(store: KeyValueStore) -> None:
    """Forget everything the learner has done: progress, position and streak."""
    for key in (PROGRESS_KEY, CURRENT_INDEX_KEY, STREAK_KEY):
        if not store.remove(key):
            logger.error("Error resetting progress: could not remove %s", key)


def _known(item_id: str, catalog: list[VocabularyItem]) -> bool:
    if get_item(catalog, item_id) is not None:
        return True
    logger.debug("Ignoring review of unknown item %s", item_id)
    return False


def _commit(store: KeyValueStore, progress: ProgressMap, item_id: str, state: ReviewState) -> ProgressMap:
    new_progress = {**progress, item_id: state}
    save_progress(store, new_progress)
    return new_progress


def mark_remembered(
    store: KeyValueStore,
    progress: ProgressMap,
    item_id: str,
    catalog: list[VocabularyItem],
    now: datetime | None = None,
) -> ProgressMap:
    if not _known(item_id, catalog):
        return progress
    now = utc_now(now)
    current = progress.get(item_id) or ReviewState.fresh(now)
    state = apply_review(current, REMEMBERED, now)
    state.forgot_count = max(0, current.forgot_count - 1)
    return _commit(store, progress, item_id, state)


def mark_forgot(
    store: KeyValueStore,
    progress: ProgressMap,
    item_id: str,
    catalog: list[VocabularyItem],
    now: datetime | None = None,
) -> ProgressMap:
    if not _known(item_id, catalog):
        return progress
    now = utc_now(now)
    current = progress.get(item_id) or ReviewState.fresh(now)
    state = apply_review(current, FORGOT, now)
    state.forgot_count = current.forgot_count + 1
    state.marked_very_familiar = False
    return _commit(store, progress, item_id, state)


def mark_very_familiar(
    store: KeyValueStore,
    progress: ProgressMap,
    item_id: str,
    catalog: list[VocabularyItem],
    now: datetime | None = None,
) -> ProgressMap:
    """Record a perfect review and retire the item from the learning queue."""
    if not _known(item_id, catalog):
        return progress
    now = utc_now(now)
    current = progress.get(item_id) or ReviewState.fresh(now)
    state = apply_review(current, VERY_FAMILIAR, now)
    state.marked_very_familiar = True
    return _commit(store, progress, item_id, state)


def restore_from_familiar(
    store: KeyValueStore,
    progress: ProgressMap,
    item_id: str,
    catalog: list[VocabularyItem],
    now: datetime | None = None,
) -> ProgressMap:
    """Put a very-familiar item back into rotation, due immediately."""
    if not _known(item_id, catalog) or item_id not in progress:
        return progress
    now = utc_now(now)
    state = progress[item_id].copy(
        marked_very_familiar=False,
        last_reviewed_at=now,
        next_review_due_at=now,
    )
    return _commit(store, progress, item_id, state)
