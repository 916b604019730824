"""Upgrade stored progress written before scheduling fields existed.

Legacy entries only know ``forgotCount``, ``lastReviewed`` and
``veryFamiliar``. They are given SM-2 fields as follows:

* forgotten at least once: due again one day after the upgrade;
* on the learner's first upgrade, the first ``NEW_ITEM_CAP`` remaining
  entries become new items due now;
* everything else is new but parked a year out, so a returning learner
  is not buried under hundreds of simultaneously due items.

Entries that already carry ``intervalDays`` are decoded untouched, which
makes the whole pass idempotent.
"""
import logging
from datetime import datetime, timedelta

from frenchie.models import DEFAULT_EASE_FACTOR, ProgressMap, ReviewState, from_millis, utc_now

logger = logging.getLogger(__name__)

NEW_ITEM_CAP = 5
FORGOTTEN_DELAY = timedelta(days=1)
PARKED_DELAY = timedelta(days=365)


def needs_upgrade(raw: dict) -> bool:
    return raw.get("intervalDays") is None


def upgrade(raw: dict, now: datetime, due_now: bool = False) -> ReviewState:
    """Turn one legacy entry into a ReviewState."""
    forgot_count = max(0, int(raw.get("forgotCount") or 0))
    last_reviewed = raw.get("lastReviewed")
    state = ReviewState(
        next_review_due_at=now + PARKED_DELAY,
        last_reviewed_at=from_millis(last_reviewed) if last_reviewed else now,
        repetition=0,
        ease_factor=DEFAULT_EASE_FACTOR,
        interval_days=0,
        is_new=True,
        forgot_count=forgot_count,
        marked_very_familiar=bool(raw.get("veryFamiliar", False)),
    )
    if forgot_count > 0:
        return state.copy(next_review_due_at=now + FORGOTTEN_DELAY, is_new=False)
    if due_now:
        return state.copy(next_review_due_at=now)
    return state


def migrate_progress(raw_map: dict, now: datetime | None = None) -> tuple[ProgressMap, bool]:
    """Decode a stored progress object, upgrading legacy entries.

    Entries that cannot be decoded are dropped one by one; the rest of
    the map survives. Returns the progress map and whether anything was
    upgraded or dropped, so the caller knows to write it back.
    """
    now = utc_now(now)
    first_upgrade = not any(
        isinstance(raw, dict) and not needs_upgrade(raw) for raw in raw_map.values()
    )
    progress: ProgressMap = {}
    introduced = 0
    upgraded = 0
    for item_id, raw in raw_map.items():
        if not isinstance(raw, dict):
            logger.warning("Dropping malformed progress entry for %s", item_id)
            continue
        try:
            if not needs_upgrade(raw):
                progress[item_id] = ReviewState.from_dict(raw)
                continue
            forgotten = int(raw.get("forgotCount") or 0) > 0
            due_now = first_upgrade and not forgotten and introduced < NEW_ITEM_CAP
            progress[item_id] = upgrade(raw, now, due_now=due_now)
        except (ValueError, TypeError, OverflowError) as e:
            logger.warning("Dropping unreadable progress entry for %s: %s", item_id, e)
            continue
        if due_now:
            introduced += 1
        upgraded += 1
    if upgraded:
        logger.info("Upgraded %d legacy progress entries (%d introduced now)", upgraded, introduced)
    return progress, upgraded > 0 or len(progress) != len(raw_map)
