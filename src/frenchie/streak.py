"""Daily goal streak tracking.

Dates are ISO calendar dates in UTC, so a learner who travels or lives
through a DST change still gets exactly one calendar day per UTC day.
"""
import json
import logging
from datetime import date, datetime, timedelta, timezone

from frenchie.db import LOAD_TIMEOUT_SECONDS, KeyValueStore
from frenchie.models import StreakState
from frenchie.settings import STREAK_KEY, load_value

logger = logging.getLogger(__name__)


def today_stamp(now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).date().isoformat()


def record_goal_completion(state: StreakState, today: str) -> StreakState:
    """Count ``today`` towards the streak. Calling twice on one day is a no-op."""
    if state.last_completed_date == today:
        return state
    yesterday = (date.fromisoformat(today) - timedelta(days=1)).isoformat()
    if state.last_completed_date == yesterday:
        current = state.current_streak + 1
    else:
        current = 1
    return StreakState(
        current_streak=current,
        longest_streak=max(state.longest_streak, current),
        last_completed_date=today,
    )


def load_streak(store: KeyValueStore, timeout: float = LOAD_TIMEOUT_SECONDS) -> StreakState:
    data = load_value(store, STREAK_KEY, timeout)
    if not data:
        return StreakState()
    try:
        raw = json.loads(data)
        if not isinstance(raw, dict):
            raise ValueError(f"expected an object, got {type(raw).__name__}")
        return StreakState.from_dict(raw)
    except (ValueError, TypeError) as e:
        logger.warning("Error loading streak (using default): %s", e)
        return StreakState()


def save_streak(store: KeyValueStore, state: StreakState) -> bool:
    saved = store.set(STREAK_KEY, json.dumps(state.to_dict()))
    if not saved:
        logger.warning("Streak not saved")
    return saved
