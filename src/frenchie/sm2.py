"""SM-2 spaced repetition algorithm."""
import math
from datetime import datetime, timedelta

from frenchie.models import MIN_EASE_FACTOR, ReviewState, utc_now

FORGOT = 1
REMEMBERED = 4
VERY_FAMILIAR = 5

# Forgotten items come back the same day instead of after the 1-day minimum.
FORGOT_RESURFACE_DELAY = timedelta(hours=4)


def sm2_update(quality: int, repetitions: int, ease_factor: float) -> dict:
    """Calculate next review parameters using SM-2.

    Args:
        quality: Rating 0-5 (0=complete blackout, 5=perfect)
        repetitions: Number of consecutive correct reviews
        ease_factor: Current ease factor (minimum 1.3)

    Returns:
        Dict with updated interval, repetitions, ease_factor.
    """
    if quality < 3:
        # Incorrect, reset
        new_ef = max(MIN_EASE_FACTOR, ease_factor - 0.2)
        return {"interval": 1, "repetitions": 0, "ease_factor": new_ef}

    new_ef = ease_factor + (0.1 - (5 - quality) * (0.08 + (5 - quality) * 0.02))
    new_ef = max(MIN_EASE_FACTOR, new_ef)
    new_repetitions = repetitions + 1
    if new_repetitions == 1:
        new_interval = 1
    elif new_repetitions == 2:
        new_interval = 6
    else:
        new_interval = math.ceil(new_repetitions * new_ef)

    return {
        "interval": new_interval,
        "repetitions": new_repetitions,
        "ease_factor": new_ef,
    }


def apply_review(state: ReviewState, quality: int, now: datetime | None = None) -> ReviewState:
    """Return the state after one review; ``state`` is left untouched.

    Only the SM-2 fields, the due date and ``is_new`` change here.
    ``forgot_count`` and the very-familiar flag belong to the caller.
    """
    now = utc_now(now)
    updated = sm2_update(quality, state.repetition, state.ease_factor)
    if quality == FORGOT:
        next_due = now + FORGOT_RESURFACE_DELAY
    else:
        next_due = now + timedelta(days=updated["interval"])
    return state.copy(
        repetition=updated["repetitions"],
        ease_factor=updated["ease_factor"],
        interval_days=updated["interval"],
        next_review_due_at=next_due,
        last_reviewed_at=now,
        is_new=False,
    )
