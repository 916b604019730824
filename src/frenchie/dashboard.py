"""Learning statistics and mastery labels."""
import math
from datetime import datetime, timezone

from frenchie.learning_queue import get_due_cards, is_new
from frenchie.models import LearningStats, ProgressMap, VocabularyItem


def get_mastery_label(percentage: float) -> str:
    if percentage >= 80:
        return "FLUENT"
    elif percentage >= 50:
        return "CONFIDENT"
    elif percentage >= 20:
        return "PROGRESSING"
    return "GETTING STARTED"


def get_mastery_color(percentage: float) -> str:
    if percentage >= 80:
        return "green"
    elif percentage >= 50:
        return "yellow"
    elif percentage >= 20:
        return "dark_orange"
    return "red"


def get_learning_stats(
    progress: ProgressMap,
    catalog: list[VocabularyItem],
    now: datetime | None = None,
) -> LearningStats:
    now = now or datetime.now(timezone.utc)
    total = len(catalog)
    learned = sum(
        1 for item in catalog
        if item.id in progress and progress[item.id].repetition > 0
    )
    due = len(get_due_cards(progress, catalog, now))
    new = sum(1 for item in catalog if is_new(progress.get(item.id)))
    # Halves round up, so 1 of 8 shows 13%, not 12%
    mastery = math.floor(learned / total * 100 + 0.5) if total else 0
    return LearningStats(total=total, learned=learned, due=due, new=new, mastery_percentage=mastery)
