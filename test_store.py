import uuid
from concurrent.futures import ThreadPoolExecutor

import pytest

from errors import ReceiptNotFound
from models import Receipt
from scoring import score
from store import ReceiptStore


def test_put_then_get(store, simple_receipt_skeleton):
    points = score(Receipt.from_json(simple_receipt_skeleton))
    receipt_id = store.put(points)
    assert store.get(receipt_id) == points
    assert receipt_id in store
    uuid.UUID(receipt_id)


def test_get_unknown_id(store):
    store.put(10.0)
    with pytest.raises(ReceiptNotFound):
        store.get("unknown-id")
    assert "unknown-id" not in store


def test_put_ids_are_unique(store):
    receipt_ids = [store.put(float(i)) for i in range(10000)]
    assert len(set(receipt_ids)) == len(receipt_ids)
    assert len(store) == 10000


def test_put_regenerates_colliding_ids(store, monkeypatch):
    taken = store.put(1.0)
    fresh = str(uuid.uuid4())
    generated = iter([uuid.UUID(taken), uuid.UUID(fresh)])
    monkeypatch.setattr("store.uuid4", lambda: next(generated))
    assert store.put(2.0) == fresh
    assert store.get(taken) == 1.0
    assert store.get(fresh) == 2.0


def test_stores_are_isolated(store):
    receipt_id = store.put(5.0)
    with pytest.raises(ReceiptNotFound):
        ReceiptStore().get(receipt_id)


def test_put_concurrently(store):
    with ThreadPoolExecutor(max_workers=50) as pool:
        receipt_ids = list(pool.map(store.put, [31.0] * 3000))
    assert len(set(receipt_ids)) == 3000
    assert len(store) == 3000
    assert all(store.get(receipt_id) == 31.0 for receipt_id in receipt_ids)
