# tests/test_review.py
from datetime import timedelta

from frenchie.progress import mark_forgot, mark_very_familiar, restore_from_familiar
from frenchie.review import list_familiar, list_forgotten


def test_list_forgotten_empty(catalog):
    assert list_forgotten({}, catalog) == []


def test_list_forgotten_sorted_by_count(store, catalog, now):
    progress = {}
    for item_id, times in (("a2-001", 2), ("a2-002", 5), ("a2-003", 1)):
        for _ in range(times):
            progress = mark_forgot(store, progress, item_id, catalog, now=now)
    entries = list_forgotten(progress, catalog)
    assert [e.forgot_count for e in entries] == [5, 2, 1]
    assert entries[0].item.id == "a2-002"


def test_list_forgotten_ties_keep_catalog_order(store, catalog, now):
    progress = {}
    for item_id in ("b1-004", "a2-009", "b2-001"):
        progress = mark_forgot(store, progress, item_id, catalog, now=now)
    assert [e.item.id for e in list_forgotten(progress, catalog)] == ["a2-009", "b1-004", "b2-001"]


def test_list_familiar_most_recent_first(store, catalog, now):
    progress = mark_very_familiar(store, {}, "a2-001", catalog, now=now)
    progress = mark_very_familiar(store, progress, "b1-001", catalog, now=now + timedelta(hours=1))
    progress = mark_very_familiar(store, progress, "a2-005", catalog, now=now + timedelta(minutes=5))
    assert [i.id for i in list_familiar(progress, catalog)] == ["b1-001", "a2-005", "a2-001"]


def test_list_familiar_after_restore_and_forgot(store, catalog, now):
    progress = mark_very_familiar(store, {}, "a2-001", catalog, now=now)
    progress = mark_very_familiar(store, progress, "a2-002", catalog, now=now)
    progress = restore_from_familiar(store, progress, "a2-001", catalog, now=now)
    progress = mark_forgot(store, progress, "a2-002", catalog, now=now)
    assert list_familiar(progress, catalog) == []
