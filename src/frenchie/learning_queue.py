"""Assembly of the daily learning queue."""
import random
from datetime import datetime, timedelta, timezone

from frenchie.models import ProgressMap, ReviewState, VocabularyItem

RECENT_FORGET_WINDOW = timedelta(hours=24)


def is_due(state: ReviewState | None, now: datetime) -> bool:
    """Items nobody has reviewed are always due."""
    if state is None:
        return True
    return not state.marked_very_familiar and state.next_review_due_at <= now


def is_new(state: ReviewState | None) -> bool:
    return state is None or state.is_new


def is_recently_forgotten(state: ReviewState | None, now: datetime) -> bool:
    return (
        state is not None
        and state.forgot_count > 0
        and now - state.last_reviewed_at < RECENT_FORGET_WINDOW
    )


def get_due_cards(
    progress: ProgressMap,
    catalog: list[VocabularyItem],
    now: datetime | None = None,
) -> list[VocabularyItem]:
    """Catalog items due now, in catalog order."""
    now = now or datetime.now(timezone.utc)
    return [item for item in catalog if is_due(progress.get(item.id), now)]


def build_learning_queue(
    progress: ProgressMap,
    catalog: list[VocabularyItem],
    max_size: int,
    now: datetime | None = None,
    rng: random.Random | None = None,
) -> list[VocabularyItem]:
    """Pick at most ``max_size`` items for the next session and shuffle them.

    Candidates are taken in priority order (forgotten in the last 24h,
    other due reviews, then new items) and only the final selection is
    shuffled, so priority decides what gets in, not the order shown.
    """
    if max_size <= 0:
        return []
    now = now or datetime.now(timezone.utc)
    rng = rng or random.Random()

    recently_forgotten = []
    other_due = []
    due_new = []
    for item in get_due_cards(progress, catalog, now):
        state = progress.get(item.id)
        if is_recently_forgotten(state, now):
            recently_forgotten.append(item)
        elif is_new(state):
            due_new.append(item)
        else:
            other_due.append(item)

    selected = (recently_forgotten + other_due)[:max_size]
    budget = max(0, max_size - len(recently_forgotten) - len(other_due))
    if budget:
        # Parked new items (not yet due) fill whatever the due ones leave.
        picked = {item.id for item in due_new}
        parked_new = [
            item for item in catalog
            if item.id not in picked
            and is_new(progress.get(item.id))
            and not progress[item.id].marked_very_familiar
        ]
        selected += (due_new + parked_new)[:budget]

    rng.shuffle(selected)
    return selected
