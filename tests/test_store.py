import random
import threading

import pytest

from receipt_processor.model.ReceiptModel import Receipt
from receipt_processor.store.memory import InMemoryReceiptStore, ReceiptStore


def make_receipt(retailer="Target"):
    return Receipt(
        retailer=retailer,
        purchase_date="2022-01-01",
        purchase_time="13:01",
        total="1.25",
    )


def test_put_then_get():
    store = InMemoryReceiptStore()
    receipt = make_receipt()
    receipt_id = store.put(receipt)
    assert store.get(receipt_id) is receipt


def test_get_unknown_returns_none():
    assert InMemoryReceiptStore().get("missing") is None


def test_put_regenerates_on_collision():
    ids = iter(["a", "a", "a", "b"])
    store = InMemoryReceiptStore(id_factory=lambda: next(ids))
    assert store.put(make_receipt("One")) == "a"
    assert store.put(make_receipt("Two")) == "b"
    assert store.get("a").retailer == "One"
    assert store.get("b").retailer == "Two"


def test_concurrent_puts_never_share_an_id():
    # 400 receipts drawn from 1000 ids forces collisions between threads.
    rng = random.Random(0)
    store = InMemoryReceiptStore(id_factory=lambda: str(rng.randrange(1000)))
    results = []
    results_lock = threading.Lock()

    def worker():
        for _ in range(50):
            receipt_id = store.put(make_receipt())
            with results_lock:
                results.append(receipt_id)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(results) == 400
    assert len(set(results)) == 400
    assert len(store) == 400


def test_receipt_store_is_abstract():
    with pytest.raises(TypeError):
        ReceiptStore()
