# tests/test_learning_queue.py
import random
from datetime import timedelta

from frenchie.learning_queue import build_learning_queue, get_due_cards
from frenchie.models import ReviewState


def reviewed(now, due_in=timedelta(days=3), forgot=0, last_ago=timedelta(days=2), familiar=False):
    return ReviewState(
        next_review_due_at=now + due_in,
        last_reviewed_at=now - last_ago,
        repetition=0 if forgot else 2,
        interval_days=6,
        is_new=False,
        forgot_count=forgot,
        marked_very_familiar=familiar,
    )


def ids(items):
    return [item.id for item in items]


def test_get_due_cards_empty_map_returns_whole_catalog(catalog, now):
    assert ids(get_due_cards({}, catalog, now)) == ids(catalog)


def test_get_due_cards_excludes_future_items(catalog, now):
    progress = {"a2-001": reviewed(now), "a2-002": reviewed(now, due_in=-timedelta(minutes=1))}
    due = ids(get_due_cards(progress, catalog, now))
    assert "a2-001" not in due
    assert "a2-002" in due
    assert len(due) == len(catalog) - 1


def test_get_due_cards_boundary_is_inclusive(catalog, now):
    progress = {"a2-001": reviewed(now, due_in=timedelta(0))}
    assert "a2-001" in ids(get_due_cards(progress, catalog, now))


def test_get_due_cards_skips_very_familiar(catalog, now):
    progress = {"a2-001": reviewed(now, due_in=-timedelta(days=1), familiar=True)}
    assert "a2-001" not in ids(get_due_cards(progress, catalog, now))


def test_queue_bound(catalog, now):
    rng = random.Random(7)
    for size in (0, 1, 5, 20, len(catalog), len(catalog) + 10):
        queue = build_learning_queue({}, catalog, size, now=now, rng=rng)
        assert len(queue) == min(size, len(catalog))
        assert len(set(ids(queue))) == len(queue)


def test_queue_negative_size(catalog, now):
    assert build_learning_queue({}, catalog, -3, now=now) == []


def test_queue_empty_catalog(now):
    assert build_learning_queue({}, [], 10, now=now) == []


def test_recently_forgotten_always_included(catalog, now):
    forgotten = catalog[-1].id
    progress = {forgotten: reviewed(now, due_in=-timedelta(hours=1), forgot=1, last_ago=timedelta(hours=5))}
    for seed in range(10):
        queue = build_learning_queue(progress, catalog, 1, now=now, rng=random.Random(seed))
        assert ids(queue) == [forgotten]


def test_recently_forgotten_beats_other_due(catalog, now):
    progress = {item.id: reviewed(now, due_in=-timedelta(days=1)) for item in catalog[:10]}
    progress[catalog[-1].id] = reviewed(now, due_in=-timedelta(hours=1), forgot=2, last_ago=timedelta(hours=3))
    queue = build_learning_queue(progress, catalog, 3, now=now, rng=random.Random(1))
    assert catalog[-1].id in ids(queue)
    assert len(queue) == 3


def test_old_forget_is_ordinary_due(catalog, now):
    old = catalog[-1].id
    progress = {item.id: reviewed(now, due_in=-timedelta(days=1)) for item in catalog[:10]}
    progress[old] = reviewed(now, due_in=-timedelta(hours=1), forgot=1, last_ago=timedelta(hours=30))
    queue = build_learning_queue(progress, catalog, 5, now=now, rng=random.Random(1))
    # Due reviews in catalog order win; the stale forget comes after them.
    assert old not in ids(queue)
    assert set(ids(queue)) == {item.id for item in catalog[:5]}


def test_due_reviews_come_before_new_items(catalog, now):
    progress = {item.id: reviewed(now) for item in catalog}
    progress[catalog[3].id] = reviewed(now, due_in=-timedelta(hours=2))
    del progress[catalog[7].id]
    del progress[catalog[8].id]
    queue = build_learning_queue(progress, catalog, 2, now=now, rng=random.Random(3))
    assert set(ids(queue)) == {catalog[3].id, catalog[7].id}


def test_new_items_fill_remaining_budget_in_catalog_order(catalog, now):
    progress = {catalog[0].id: reviewed(now, due_in=-timedelta(hours=2))}
    queue = build_learning_queue(progress, catalog, 4, now=now, rng=random.Random(0))
    assert set(ids(queue)) == {catalog[0].id, catalog[1].id, catalog[2].id, catalog[3].id}


def test_parked_new_items_fill_after_due_new_items(catalog, now):
    parked = ReviewState(next_review_due_at=now + timedelta(days=365), last_reviewed_at=now)
    progress = {item.id: parked for item in catalog}
    progress[catalog[10].id] = ReviewState.fresh(now)
    queue = build_learning_queue(progress, catalog, 3, now=now, rng=random.Random(0))
    assert set(ids(queue)) == {catalog[10].id, catalog[0].id, catalog[1].id}


def test_nothing_available(catalog, now):
    progress = {item.id: reviewed(now) for item in catalog}
    assert build_learning_queue(progress, catalog, 10, now=now) == []


def test_queue_is_shuffled(catalog, now):
    orders = {
        tuple(ids(build_learning_queue({}, catalog, 10, now=now, rng=random.Random(seed))))
        for seed in range(5)
    }
    assert len(orders) > 1
    assert all(set(order) == {item.id for item in catalog[:10]} for order in orders)


def test_queue_does_not_mutate_progress(catalog, now):
    progress = {catalog[0].id: reviewed(now, due_in=-timedelta(hours=2))}
    snapshot = dict(progress)
    build_learning_queue(progress, catalog, 10, now=now)
    assert progress == snapshot
