"""Review lists: words that keep slipping and words set aside as familiar."""
from frenchie.models import ForgotEntry, ProgressMap, VocabularyItem


def list_forgotten(progress: ProgressMap, catalog: list[VocabularyItem]) -> list[ForgotEntry]:
    """Items forgotten at least once, most forgotten first (catalog order on ties)."""
    entries = [
        ForgotEntry(item=item, forgot_count=progress[item.id].forgot_count)
        for item in catalog
        if item.id in progress and progress[item.id].forgot_count > 0
    ]
    return sorted(entries, key=lambda e: e.forgot_count, reverse=True)


def list_familiar(progress: ProgressMap, catalog: list[VocabularyItem]) -> list[VocabularyItem]:
    """Items marked very familiar, most recently marked first."""
    familiar = [
        item for item in catalog
        if item.id in progress and progress[item.id].marked_very_familiar
    ]
    return sorted(
        familiar,
        key=lambda item: progress[item.id].last_reviewed_at,
        reverse=True,
    )
